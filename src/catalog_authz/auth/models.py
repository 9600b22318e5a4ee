"""
catalog_authz.auth.models

Auth domain models.

Responsibilities:
- Define the raw identity claims (`Credential`) produced by host authentication.
- Define the resolved identity (`Principal`) that authorization decisions are made for.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True, slots=True)
class Credential:
    """
    Identity claims prior to principal resolution.
    `external` records where the claims came from; it is not part of the identity.
    """

    principal_id: int | None = None
    principal_name: str | None = None
    roles: frozenset[str] = frozenset()
    external: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "roles", frozenset(self.roles))

    @property
    def has_identity(self) -> bool:
        return self.principal_id is not None or bool(self.principal_name)


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity.
    """

    name: str
    roles: frozenset[str] = frozenset()
    attributes: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "roles", frozenset(self.roles))
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))


# --- Module Notes -----------------------------------------------------------
# Both types live for a single request; nothing caches them across requests.
