"""
catalog_authz.errors

Error taxonomy shared by the authorization layers.

Responsibilities:
- Separate identity failures, hierarchy bugs, policy-engine outages and denials.
- Carry enough context on denials for audit logging.
"""

from __future__ import annotations


class AuthzError(Exception):
    pass


class ConfigurationError(AuthzError):
    """
    Incompatible or incomplete settings detected at startup.
    """


class NotAuthorized(AuthzError):
    pass


class MissingPrincipalIdentity(NotAuthorized):
    """
    Credential carries neither a principal id nor a principal name.
    """


class MalformedHierarchy(AuthzError):
    pass


class TokenAcquisitionError(AuthzError):
    pass


class PolicyEngineError(AuthzError):
    """
    Infrastructure failure talking to the policy engine (never a policy outcome).
    """


class PolicyEngineUnavailable(PolicyEngineError):
    pass


class PolicyEngineMalformedResponse(PolicyEngineError):
    pass


class AuthorizationDenied(AuthzError):
    """
    Explicit `allow: false` from a successfully evaluated policy.
    """

    def __init__(self, *, principal: str, operation: str, resource: str) -> None:
        super().__init__(f"Principal '{principal}' is not authorized for op {operation} on {resource}")
        self.principal = principal
        self.operation = operation
        self.resource = resource


# --- Module Notes -----------------------------------------------------------
# The API layer maps these onto HTTP statuses in `api.routers.authorize`:
# NotAuthorized -> 401, MalformedHierarchy -> 400, AuthorizationDenied -> 403,
# PolicyEngineError -> 503.
