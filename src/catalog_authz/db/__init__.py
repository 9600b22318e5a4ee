"""
catalog_authz.db

Persistence package (SQLAlchemy async) for the trusted identity store.

Responsibilities:
- Provide ORM models, engine/session setup, and repositories.
"""

# Package marker.
