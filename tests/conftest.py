"""
tests.conftest

Shared fixtures.

Responsibilities:
- Build realistic resolved catalog paths and principals.
"""

from __future__ import annotations

import pytest

from catalog_authz.auth.models import Principal
from catalog_authz.resources.entities import EntityType, ResolvedEntity, ResolvedPath


@pytest.fixture
def table_path() -> ResolvedPath:
    catalog = ResolvedEntity(
        type=EntityType.catalog, name="prod_catalog", id=100, catalog_id=100, parent_id=0
    )
    namespace = ResolvedEntity(
        type=EntityType.namespace, name="sales_data", id=200, catalog_id=100, parent_id=100
    )
    table = ResolvedEntity(
        type=EntityType.table_like, name="customer_orders", id=300, catalog_id=100, parent_id=200
    )
    return ResolvedPath.of([catalog, namespace, table])


@pytest.fixture
def alice() -> Principal:
    return Principal(
        name="alice",
        roles=frozenset({"data_engineer", "analyst"}),
        attributes={"department": "analytics", "level": "senior"},
    )


# --- Module Notes -----------------------------------------------------------
# Fakes for the remote policy engine live in `tests/fakes.py`.
