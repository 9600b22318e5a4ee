"""
tests.test_validation

Principal mode / authentication type consistency checks.
"""

from __future__ import annotations

import pytest

from catalog_authz.errors import ConfigurationError
from catalog_authz.settings import (
    DEFAULT_REALM_KEY,
    AuthenticationConfig,
    AuthenticationType,
    AuthorizationConfig,
    PrincipalMode,
    RealmAuthenticationConfig,
)
from catalog_authz.validation import validate_principal_mode


@pytest.mark.parametrize(
    ("mode", "auth_type"),
    [
        (PrincipalMode.internal, AuthenticationType.internal),
        (PrincipalMode.internal, AuthenticationType.external),
        (PrincipalMode.internal, AuthenticationType.mixed),
        (PrincipalMode.external, AuthenticationType.external),
        (PrincipalMode.external, AuthenticationType.mixed),
    ],
)
def test_accepted_combinations(mode: PrincipalMode, auth_type: AuthenticationType) -> None:
    validate_principal_mode(
        AuthorizationConfig(principal_mode=mode), AuthenticationConfig(type=auth_type)
    )


def test_external_mode_with_internal_authentication_is_rejected() -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        validate_principal_mode(
            AuthorizationConfig(principal_mode=PrincipalMode.external),
            AuthenticationConfig(type=AuthenticationType.internal),
        )

    message = str(exc_info.value)
    assert "principal-mode=external" in message
    assert "internal" in message


def test_default_realm_override_wins() -> None:
    authentication = AuthenticationConfig(
        type=AuthenticationType.internal,
        realms={DEFAULT_REALM_KEY: RealmAuthenticationConfig(type=AuthenticationType.external)},
    )

    validate_principal_mode(AuthorizationConfig(principal_mode=PrincipalMode.external), authentication)

    rejected = AuthenticationConfig(
        type=AuthenticationType.external,
        realms={DEFAULT_REALM_KEY: RealmAuthenticationConfig(type=AuthenticationType.internal)},
    )
    with pytest.raises(ConfigurationError):
        validate_principal_mode(AuthorizationConfig(principal_mode=PrincipalMode.external), rejected)


def test_other_realms_do_not_affect_the_check() -> None:
    authentication = AuthenticationConfig(
        type=AuthenticationType.external,
        realms={"tenant-a": RealmAuthenticationConfig(type=AuthenticationType.internal)},
    )

    validate_principal_mode(AuthorizationConfig(principal_mode=PrincipalMode.external), authentication)
