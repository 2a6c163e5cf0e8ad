"""
Feature modules for Tough Turtle.

Each feature is a self-contained module with:
- models.py - SQLAlchemy models
- schemas.py - Pydantic schemas
- repository.py - Data access
- service.py / tracker.py - Business logic
"""
