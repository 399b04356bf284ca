"""
Services Package

This package contains business logic services that are:
- Separate from HTTP handling (routers)
- Reusable across different parts of the application
- Easier to test in isolation

Current services:
- accounts.py: Signup, login, password rotation, token-to-user resolution
- catalog.py: Book creation, listing, detail, search and user content
- reviews.py: Review create/update/delete with ownership checks
- ratings.py: Book rating aggregation calculations
- rate_limiter.py: Rate limiting with slowapi
- security.py: Password hashing and JWT utilities
"""
