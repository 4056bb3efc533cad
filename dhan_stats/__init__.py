"""
DhanDiary Stats Package.

FastAPI service exposing read-only admin analytics over the DhanDiary ledger
database.

Subpackages:
    - api: FastAPI route handlers
    - core: Configuration, database, errors and dependencies
    - middleware: Rate limiting, authentication, validation and CORS
    - models: Pydantic schemas and enums
    - services: Metrics services
    - sql: Aggregate SQL queries
"""

__version__ = "1.0.0"
