"""
user_service package

This package contains the backend logic for the user service.
It includes:

- FastAPI application (`main.py`) and routers (`routes/`)
- SQLAlchemy models, database integration and repositories (`models.py`, `db.py`, `repositories.py`)
- Password hashing, credential checking and token issuing (`auth.py`)
- Pydantic schemas and settings (`schemas.py`, `config.py`)

Used as the entry point for the user microservice in the platform.
"""
