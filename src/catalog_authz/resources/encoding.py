"""
catalog_authz.resources.encoding

Resource hierarchy encoder.

Responsibilities:
- Reduce a `ResolvedPath` to an `EncodedNode` whose `parents` list the ancestors root-first.
- Reject empty or broken paths with `MalformedHierarchy`.
- Render a compact resource identifier for audit logs.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypedDict

from catalog_authz.errors import MalformedHierarchy
from catalog_authz.resources.entities import ResolvedEntity, ResolvedPath


class ParentRef(TypedDict):
    type: str
    name: str


class EncodedNode(TypedDict):
    type: str
    name: str
    parents: list[ParentRef]


def _ref(entity: ResolvedEntity) -> ParentRef:
    return {"type": str(entity.type), "name": entity.name}


def _check_links(path: ResolvedPath) -> None:
    for parent, child in zip(path.entities, path.entities[1:]):
        if child.parent_id != parent.id:
            raise MalformedHierarchy(
                f"Entity {child.type}:{child.name} has parent_id={child.parent_id}, "
                f"expected {parent.id} ({parent.type}:{parent.name})"
            )


def encode_path(path: ResolvedPath) -> EncodedNode:
    if len(path) == 0:
        raise MalformedHierarchy("Resolved path is empty")
    _check_links(path)

    leaf = path.leaf
    return {
        "type": str(leaf.type),
        "name": leaf.name,
        "parents": [_ref(e) for e in path.ancestors],
    }


def encode_paths(paths: Sequence[ResolvedPath] | None) -> list[EncodedNode]:
    # None and () both serialize as an empty array.
    return [encode_path(p) for p in paths or ()]


def resource_identifier(paths: Sequence[ResolvedPath] | None) -> str:
    """
    Compact audit form, e.g. `TABLE_LIKE:prod_catalog.sales_data.customer_orders`.
    """

    parts = [
        f"{p.leaf.type}:{'.'.join(e.name for e in p)}" for p in paths or () if len(p) > 0
    ]
    return ",".join(parts) if parts else "<root>"
