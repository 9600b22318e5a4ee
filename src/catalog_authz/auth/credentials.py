"""
catalog_authz.auth.credentials

Turns host-authenticated claims into `Credential` values.

Responsibilities:
- Tag credentials with their origin according to the configured principal mode.
- Extract principal id/name/roles from JWT claims using configurable claim paths.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from catalog_authz.auth.models import Credential
from catalog_authz.settings import AuthorizationConfig, ClaimsMappingConfig, PrincipalMode


class CredentialFactory:
    def __init__(self, authorization: AuthorizationConfig) -> None:
        self._external = authorization.principal_mode == PrincipalMode.external

    def create(
        self,
        principal_id: int | None,
        principal_name: str | None,
        roles: Iterable[str] = (),
    ) -> Credential:
        return Credential(
            principal_id=principal_id,
            principal_name=principal_name,
            roles=frozenset(roles),
            external=self._external,
        )


def _claim(claims: Mapping[str, Any], path: str) -> Any:
    node: Any = claims
    for part in path.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return None
        node = node[part]
    return node


_NUMERIC_ID = re.compile(r"-?[0-9]+")


def _as_principal_id(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _NUMERIC_ID.fullmatch(value.strip()):
        return int(value.strip())
    return None


class ClaimsCredentialMapper:
    def __init__(self, *, config: ClaimsMappingConfig, factory: CredentialFactory) -> None:
        self._config = config
        self._factory = factory
        self._roles_filter = re.compile(config.roles_filter)

    def map(self, claims: Mapping[str, Any]) -> Credential:
        principal_id = _as_principal_id(_claim(claims, self._config.id_claim_path))

        name_raw = _claim(claims, self._config.name_claim_path)
        principal_name = str(name_raw) if name_raw not in (None, "") else None

        roles_raw = _claim(claims, self._config.roles_claim_path)
        if isinstance(roles_raw, str):
            roles_raw = roles_raw.split()
        roles = (
            {str(r) for r in roles_raw if self._roles_filter.fullmatch(str(r))}
            if isinstance(roles_raw, list | tuple | set)
            else set()
        )

        return self._factory.create(principal_id, principal_name, roles)
