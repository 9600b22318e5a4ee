"""
catalog_authz.auth

Authentication / principal-resolution package.

Responsibilities:
- Identity types (`Credential`, `Principal`).
- JWT helpers and claims-to-credential mapping for the host layer.
- Principal resolution (internal store lookup vs. external claims).
- FastAPI auth dependencies.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing here talks to the policy engine; see `catalog_authz.policy` for that.
