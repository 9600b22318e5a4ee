"""
tests.test_enforcer

Enforcer and authorizer facade tests.

Responsibilities:
- allow/deny handling and denial context.
- Engine failures propagate unchanged; fail-open only when configured.
"""

from __future__ import annotations

from typing import Any

import pytest
import structlog

from catalog_authz.auth.models import Principal
from catalog_authz.errors import (
    AuthorizationDenied,
    PolicyEngineMalformedResponse,
    PolicyEngineUnavailable,
)
from catalog_authz.policy.authorizer import PolicyAuthorizer
from catalog_authz.policy.client import PolicyDecision
from catalog_authz.policy.enforcer import enforce
from catalog_authz.policy.operations import AuthorizableOperation
from catalog_authz.resources.entities import ResolvedPath


class StubClient:
    def __init__(self, outcome: bool | Exception) -> None:
        self.outcome = outcome
        self.documents: list[dict[str, Any]] = []

    async def decide(self, document: dict[str, Any]) -> PolicyDecision:
        self.documents.append(document)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return PolicyDecision(allow=self.outcome)


@pytest.mark.parametrize("operation", list(AuthorizableOperation)[:10])
def test_allow_returns_for_any_operation(
    alice: Principal, table_path: ResolvedPath, operation: AuthorizableOperation
) -> None:
    assert enforce(PolicyDecision(allow=True), alice, operation, table_path) is None


def test_deny_carries_audit_context(alice: Principal, table_path: ResolvedPath) -> None:
    with pytest.raises(AuthorizationDenied) as exc_info:
        enforce(PolicyDecision(allow=False), alice, AuthorizableOperation.drop_table_with_purge, table_path)

    denied = exc_info.value
    assert denied.principal == "alice"
    assert denied.operation == "DROP_TABLE_WITH_PURGE"
    assert denied.resource == "TABLE_LIKE:prod_catalog.sales_data.customer_orders"
    assert "DROP_TABLE_WITH_PURGE" in str(denied)


def test_deny_without_resource(alice: Principal) -> None:
    with pytest.raises(AuthorizationDenied, match="LIST_CATALOGS") as exc_info:
        enforce(PolicyDecision(allow=False), alice, "list_catalogs", None)

    assert exc_info.value.resource == "<root>"


@pytest.mark.asyncio
async def test_authorizer_allows(alice: Principal, table_path: ResolvedPath) -> None:
    client = StubClient(True)
    authorizer = PolicyAuthorizer(client=client)  # type: ignore[arg-type]

    await authorizer.authorize_or_raise(alice, "LOAD_TABLE", targets=[table_path])

    assert client.documents[0]["action"] == "LOAD_TABLE"


@pytest.mark.asyncio
async def test_authorizer_denies(alice: Principal, table_path: ResolvedPath) -> None:
    authorizer = PolicyAuthorizer(client=StubClient(False))  # type: ignore[arg-type]

    with pytest.raises(AuthorizationDenied, match="LOAD_TABLE"):
        await authorizer.authorize_or_raise(alice, "LOAD_TABLE", targets=[table_path])


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [PolicyEngineUnavailable("down"), PolicyEngineMalformedResponse("garbage")],
)
async def test_engine_errors_propagate_when_fail_closed(
    alice: Principal, table_path: ResolvedPath, error: Exception
) -> None:
    authorizer = PolicyAuthorizer(client=StubClient(error))  # type: ignore[arg-type]

    with pytest.raises(type(error)):
        await authorizer.authorize_or_raise(alice, "LOAD_TABLE", targets=[table_path])


@pytest.mark.asyncio
async def test_fail_open_allows_when_engine_unavailable(
    alice: Principal, table_path: ResolvedPath
) -> None:
    authorizer = PolicyAuthorizer(
        client=StubClient(PolicyEngineUnavailable("down")),  # type: ignore[arg-type]
        unavailable_mode="fail_open",
    )

    await authorizer.authorize_or_raise(alice, "LOAD_TABLE", targets=[table_path])


@pytest.mark.asyncio
async def test_fail_open_never_overrides_explicit_deny(
    alice: Principal, table_path: ResolvedPath
) -> None:
    authorizer = PolicyAuthorizer(
        client=StubClient(False),  # type: ignore[arg-type]
        unavailable_mode="fail_open",
    )

    with pytest.raises(AuthorizationDenied):
        await authorizer.authorize_or_raise(alice, "LOAD_TABLE", targets=[table_path])


@pytest.mark.asyncio
async def test_request_id_is_added_to_context(alice: Principal) -> None:
    client = StubClient(True)
    authorizer = PolicyAuthorizer(client=client)  # type: ignore[arg-type]

    structlog.contextvars.bind_contextvars(request_id="req-123")
    try:
        await authorizer.authorize_or_raise(alice, "LIST_CATALOGS", context={"realm": "prod"})
    finally:
        structlog.contextvars.clear_contextvars()

    assert client.documents[0]["context"] == {"realm": "prod", "request_id": "req-123"}
