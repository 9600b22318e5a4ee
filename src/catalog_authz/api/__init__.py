"""
catalog_authz.api

HTTP host layer (FastAPI).

Responsibilities:
- App factory and lifespan wiring.
- Routers for health, authorization checks and dev token minting.
"""

# Package marker.
