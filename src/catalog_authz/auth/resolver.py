"""
catalog_authz.auth.resolver

Principal resolution.

Responsibilities:
- INTERNAL principal mode: resolve the credential against the trusted identity store.
- EXTERNAL principal mode: synthesize the principal from the credential's claims
  without touching the store.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from catalog_authz.auth.models import Credential, Principal
from catalog_authz.errors import MissingPrincipalIdentity, NotAuthorized
from catalog_authz.observability.logging import get_logger
from catalog_authz.settings import AuthorizationConfig, PrincipalMode

log = get_logger(__name__)

ROLE_PREFIX = "PRINCIPAL_ROLE:"
ALL_ROLES = "ALL"


class StoredPrincipal(Protocol):
    id: int
    name: str
    roles: list[str]
    properties: Mapping[str, Any]


class IdentityStore(Protocol):
    async def get_by_id(self, principal_id: int) -> StoredPrincipal | None: ...

    async def get_by_name(self, name: str) -> StoredPrincipal | None: ...


def _requested_roles(credential: Credential) -> set[str]:
    return {r.removeprefix(ROLE_PREFIX) for r in credential.roles}


def _activated_roles(requested: set[str], granted: set[str]) -> frozenset[str]:
    # No explicit request (or the ALL sentinel) activates every granted role.
    if not requested or ALL_ROLES in requested:
        return frozenset(granted)
    return frozenset(requested & granted)


class PrincipalResolver:
    def __init__(self, *, authorization: AuthorizationConfig, store: IdentityStore) -> None:
        self._mode = authorization.principal_mode
        self._store = store

    async def authenticate(self, credential: Credential) -> Principal:
        if credential.external != (self._mode == PrincipalMode.external):
            log.warning(
                "credential_origin_mismatch",
                principal_mode=str(self._mode),
                credential_external=credential.external,
            )
        if self._mode == PrincipalMode.external:
            return self._from_claims(credential)
        return await self._from_store(credential)

    def _from_claims(self, credential: Credential) -> Principal:
        if credential.principal_name:
            name = credential.principal_name
        elif credential.principal_id is not None:
            name = str(credential.principal_id)
        else:
            raise MissingPrincipalIdentity("Credential has neither principal id nor principal name")

        attributes: dict[str, str] = {}
        if credential.principal_id is not None:
            attributes["principal_id"] = str(credential.principal_id)
        if credential.principal_name:
            attributes["principal_name"] = credential.principal_name
        return Principal(name=name, roles=credential.roles, attributes=attributes)

    async def _from_store(self, credential: Credential) -> Principal:
        if not credential.has_identity:
            raise MissingPrincipalIdentity("Credential has neither principal id nor principal name")

        if credential.principal_id is not None:
            stored = await self._store.get_by_id(credential.principal_id)
        else:
            stored = await self._store.get_by_name(str(credential.principal_name))

        if stored is None:
            raise NotAuthorized("Unable to authenticate: principal not found")
        if credential.principal_name and stored.name != credential.principal_name:
            raise NotAuthorized("Unable to authenticate: principal id and name do not match")

        roles = _activated_roles(_requested_roles(credential), set(stored.roles))
        attributes = {str(k): str(v) for k, v in (stored.properties or {}).items()}
        attributes["principal_id"] = str(stored.id)
        return Principal(name=stored.name, roles=roles, attributes=attributes)


# --- Module Notes -----------------------------------------------------------
# The branch is chosen from the configured principal mode only; there is no
# fallback from one mode to the other.
