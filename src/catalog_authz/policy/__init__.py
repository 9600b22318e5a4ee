"""
catalog_authz.policy

Policy-engine boundary.

Responsibilities:
- Build canonical decision documents.
- Call the remote policy engine with pluggable bearer credentials.
- Enforce allow/deny decisions.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Callers should depend on `PolicyAuthorizer` (authorizer.py), not on HTTP directly.
