"""
catalog_authz.resources.entities

Resolved entity types consumed from the catalog resolution layer.

Responsibilities:
- Define `ResolvedEntity` (one catalog object) and `ResolvedPath` (root-to-leaf chain).
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any


class EntityType(enum.StrEnum):
    # Values are emitted verbatim in decision documents; treat as stable API contract.
    root = "ROOT"
    principal = "PRINCIPAL"
    principal_role = "PRINCIPAL_ROLE"
    catalog = "CATALOG"
    catalog_role = "CATALOG_ROLE"
    namespace = "NAMESPACE"
    table_like = "TABLE_LIKE"
    task = "TASK"
    file = "FILE"
    policy = "POLICY"


@dataclass(frozen=True, slots=True)
class ResolvedEntity:
    type: EntityType
    name: str
    id: int = 0
    catalog_id: int = 0
    parent_id: int = 0
    properties: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ResolvedPath:
    """
    Entities ordered root-first; the last element is the target entity.
    Emptiness is checked by the encoder, not here.
    """

    entities: tuple[ResolvedEntity, ...]

    @classmethod
    def of(cls, entities: Iterable[ResolvedEntity]) -> ResolvedPath:
        return cls(entities=tuple(entities))

    @property
    def leaf(self) -> ResolvedEntity:
        return self.entities[-1]

    @property
    def ancestors(self) -> tuple[ResolvedEntity, ...]:
        return self.entities[:-1]

    def __len__(self) -> int:
        return len(self.entities)

    def __iter__(self) -> Iterator[ResolvedEntity]:
        return iter(self.entities)
