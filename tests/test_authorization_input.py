"""
tests.test_authorization_input

Decision document assembly tests.
"""

from __future__ import annotations

import pytest

from catalog_authz.auth.models import Principal
from catalog_authz.errors import MissingPrincipalIdentity
from catalog_authz.policy.input import build_authorization_input
from catalog_authz.policy.operations import AuthorizableOperation
from catalog_authz.resources.entities import EntityType, ResolvedEntity, ResolvedPath


def _catalog(name: str, id_: int) -> ResolvedPath:
    return ResolvedPath.of([ResolvedEntity(type=EntityType.catalog, name=name, id=id_)])


def test_document_has_fixed_layout(alice: Principal, table_path: ResolvedPath) -> None:
    doc = build_authorization_input(alice, AuthorizableOperation.load_table, [table_path])

    assert set(doc) == {"actor", "action", "resource", "context"}
    assert doc["actor"]["principal"] == "alice"
    assert sorted(doc["actor"]["roles"]) == ["analyst", "data_engineer"]
    assert doc["action"] == "LOAD_TABLE"
    assert set(doc["resource"]) == {"targets", "secondaries"}
    assert len(doc["resource"]["targets"]) == 1
    assert doc["resource"]["secondaries"] == []
    assert doc["context"] == {}


def test_empty_resource_collections_are_arrays(alice: Principal) -> None:
    doc = build_authorization_input(alice, AuthorizableOperation.list_catalogs, None, None)

    assert doc["resource"]["targets"] == []
    assert doc["resource"]["secondaries"] == []


def test_targets_and_secondaries_keep_caller_order(alice: Principal) -> None:
    targets = [_catalog("b", 2), _catalog("a", 1), _catalog("c", 3)]
    secondaries = [_catalog("z", 9), _catalog("y", 8)]

    doc = build_authorization_input(alice, "rename_table", targets, secondaries)

    assert [t["name"] for t in doc["resource"]["targets"]] == ["b", "a", "c"]
    assert [s["name"] for s in doc["resource"]["secondaries"]] == ["z", "y"]


def test_free_form_operation_is_uppercased(alice: Principal) -> None:
    doc = build_authorization_input(alice, "load_view")

    assert doc["action"] == "LOAD_VIEW"


def test_empty_operation_rejected(alice: Principal) -> None:
    with pytest.raises(ValueError):
        build_authorization_input(alice, "  ")


def test_context_is_copied(alice: Principal) -> None:
    ctx = {"realm": "prod"}
    doc = build_authorization_input(alice, "LOAD_TABLE", context=ctx)
    doc["context"]["extra"] = "x"

    assert ctx == {"realm": "prod"}


def test_principal_without_name_rejected() -> None:
    with pytest.raises(MissingPrincipalIdentity):
        build_authorization_input(Principal(name=""), "LOAD_TABLE")
