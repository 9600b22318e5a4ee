"""
catalog_authz.validation

Startup-time configuration invariants.

Responsibilities:
- Refuse to start when external principal mode is combined with internal-only authentication.
"""

from __future__ import annotations

from catalog_authz.errors import ConfigurationError
from catalog_authz.observability.logging import get_logger
from catalog_authz.settings import (
    DEFAULT_REALM_KEY,
    AuthenticationConfig,
    AuthenticationType,
    AuthorizationConfig,
    PrincipalMode,
)

log = get_logger(__name__)


def validate_principal_mode(
    authorization: AuthorizationConfig, authentication: AuthenticationConfig
) -> None:
    if authorization.principal_mode != PrincipalMode.external:
        return

    realm = authentication.for_realm(DEFAULT_REALM_KEY)
    if realm.type == AuthenticationType.internal:
        raise ConfigurationError(
            "Invalid configuration: authorization.principal-mode=external requires "
            "authentication.type to be 'external' or 'mixed' "
            f"(default realm has authentication.type={realm.type})."
        )
    log.info("principal_mode_validated", principal_mode="external", authentication_type=str(realm.type))
