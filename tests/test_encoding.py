"""
tests.test_encoding

Resource hierarchy encoder tests.
"""

from __future__ import annotations

import pytest

from catalog_authz.errors import MalformedHierarchy
from catalog_authz.resources.encoding import encode_path, encode_paths, resource_identifier
from catalog_authz.resources.entities import EntityType, ResolvedEntity, ResolvedPath


def _chain(depth: int) -> ResolvedPath:
    entities = [ResolvedEntity(type=EntityType.catalog, name="cat", id=1, parent_id=0)]
    for i in range(2, depth + 1):
        entities.append(
            ResolvedEntity(type=EntityType.namespace, name=f"ns{i}", id=i, catalog_id=1, parent_id=i - 1)
        )
    return ResolvedPath.of(entities)


def test_encodes_leaf_with_root_first_parents(table_path: ResolvedPath) -> None:
    node = encode_path(table_path)

    assert node == {
        "type": "TABLE_LIKE",
        "name": "customer_orders",
        "parents": [
            {"type": "CATALOG", "name": "prod_catalog"},
            {"type": "NAMESPACE", "name": "sales_data"},
        ],
    }


@pytest.mark.parametrize("depth", [1, 2, 3, 5, 8])
def test_parent_count_is_path_length_minus_one(depth: int) -> None:
    node = encode_path(_chain(depth))

    assert len(node["parents"]) == depth - 1
    assert [p["name"] for p in node["parents"]] == [e.name for e in _chain(depth).ancestors]


def test_single_entity_path_has_empty_parents() -> None:
    node = encode_path(_chain(1))

    assert node["parents"] == []
    assert node["type"] == "CATALOG"


def test_empty_path_is_malformed() -> None:
    with pytest.raises(MalformedHierarchy):
        encode_path(ResolvedPath.of([]))


def test_broken_parent_link_is_malformed() -> None:
    catalog = ResolvedEntity(type=EntityType.catalog, name="c", id=1)
    orphan = ResolvedEntity(type=EntityType.namespace, name="ns", id=2, parent_id=42)

    with pytest.raises(MalformedHierarchy, match="parent_id=42"):
        encode_path(ResolvedPath.of([catalog, orphan]))


def test_missing_collections_encode_as_empty_arrays() -> None:
    assert encode_paths(None) == []
    assert encode_paths(()) == []


def test_resource_identifier(table_path: ResolvedPath) -> None:
    assert resource_identifier([table_path]) == "TABLE_LIKE:prod_catalog.sales_data.customer_orders"
    assert resource_identifier([]) == "<root>"
