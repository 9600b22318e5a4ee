"""
catalog_authz.db.repositories

Repository layer over the ORM models.
"""

# Package marker.
