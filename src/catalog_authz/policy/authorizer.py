"""
catalog_authz.policy.authorizer

Authorization facade used by request handlers.

Responsibilities:
- Assemble the decision document, ask the policy engine, enforce the answer.
- Apply the configured behaviour for engine outages (fail-closed by default).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Literal

from catalog_authz.auth.models import Principal
from catalog_authz.errors import PolicyEngineError
from catalog_authz.observability.logging import get_logger
from catalog_authz.observability.middleware import current_request_id
from catalog_authz.policy.client import PolicyDecisionClient
from catalog_authz.policy.enforcer import enforce
from catalog_authz.policy.input import build_authorization_input
from catalog_authz.policy.operations import AuthorizableOperation
from catalog_authz.resources.entities import ResolvedPath

log = get_logger(__name__)


class PolicyAuthorizer:
    def __init__(
        self,
        *,
        client: PolicyDecisionClient,
        unavailable_mode: Literal["fail_closed", "fail_open"] = "fail_closed",
    ) -> None:
        self._client = client
        self._fail_open = unavailable_mode == "fail_open"

    async def authorize_or_raise(
        self,
        principal: Principal,
        operation: AuthorizableOperation | str,
        *,
        targets: Sequence[ResolvedPath] = (),
        secondaries: Sequence[ResolvedPath] = (),
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        request_id = current_request_id()
        if request_id is not None:
            ctx.setdefault("request_id", request_id)

        document = build_authorization_input(principal, operation, targets, secondaries, ctx)
        try:
            decision = await self._client.decide(document)
        except PolicyEngineError as e:
            if not self._fail_open:
                raise
            log.warning(
                "policy_engine_fail_open",
                principal=principal.name,
                action=document["action"],
                error=str(e),
            )
            return

        enforce(decision, principal, operation, targets)


# --- Module Notes -----------------------------------------------------------
# Fail-open is an operator decision (`policy_engine.unavailable_mode`); the enforcer
# itself never turns an engine failure into an allow or a deny.
