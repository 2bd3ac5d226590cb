"""
Pokedex API — Application Package Initializer
==============================================

What: Marks the `pokedex_api` directory as a Python package.
Why:  Enables module imports like `from pokedex_api.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend follows the same layered split as every route in it:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, parameter translation
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Validation, associations, cascades
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
