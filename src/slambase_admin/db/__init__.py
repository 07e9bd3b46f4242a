"""
slambase_admin.db

Persistence package (SQLAlchemy async) over the platform's Postgres.

Responsibilities:
- Provide ORM models, engine/session setup, and repositories.
"""

# Package marker.
