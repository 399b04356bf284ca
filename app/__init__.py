"""
Book Review API Application Package

All core modules, routers, and services are organized within this package.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy database connection and session management
- exceptions.py: Domain errors rendered by the handlers in main.py
- main.py: FastAPI application factory and configuration
- middleware.py: Request logging
- dependencies.py: Dependency injection functions
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Business logic (accounts, catalog, reviews, ratings)
"""

__version__ = "1.0.0"
