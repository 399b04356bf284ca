"""
Test Suite for the Book Review API

Test Organization:
- conftest.py: Shared fixtures (test database, client, sample data)
- test_auth.py: /api/auth endpoints and session token handling
- test_books.py: /api/books endpoints (listing, detail, search, creation)
- test_reviews.py: review creation, update and deletion
- test_ratings.py: rating aggregation and its transactional guarantees
- test_pagination.py: pagination metadata
- test_security.py: password hashing, tokens and settings validation
- test_app.py: health check, root endpoint and error envelopes

Running Tests:
    # Run all tests
    pytest

    # Run with coverage
    pytest --cov=app --cov-report=html

    # Run specific file
    pytest tests/test_reviews.py

    # Run with verbose output
    pytest -v
"""
