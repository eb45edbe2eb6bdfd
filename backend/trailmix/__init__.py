"""
TrailMix Backend: Application Package Initializer
===================================================

What: Marks the `trailmix` directory as a Python package.
Who:  Imported by uvicorn (`trailmix.main:app`), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │   Routes + auth dependency (API)    │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │        Services (Business Logic)    │  ← hashing, tokens, uploads, CRUD
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
