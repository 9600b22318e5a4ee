"""
catalog_authz.policy.enforcer

Authorization enforcer.

Responsibilities:
- Return silently on `allow: true`.
- Raise `AuthorizationDenied` (with principal, operation and resource for audit) on `allow: false`.
"""

from __future__ import annotations

from collections.abc import Sequence

from catalog_authz.auth.models import Principal
from catalog_authz.errors import AuthorizationDenied
from catalog_authz.observability.logging import get_logger
from catalog_authz.policy.client import PolicyDecision
from catalog_authz.policy.operations import AuthorizableOperation, action_tag
from catalog_authz.resources.encoding import resource_identifier
from catalog_authz.resources.entities import ResolvedPath

log = get_logger(__name__)


def enforce(
    decision: PolicyDecision,
    principal: Principal,
    operation: AuthorizableOperation | str,
    resource: ResolvedPath | Sequence[ResolvedPath] | None,
) -> None:
    if decision.allow:
        return

    paths = [resource] if isinstance(resource, ResolvedPath) else list(resource or ())
    denied = AuthorizationDenied(
        principal=principal.name,
        operation=action_tag(operation),
        resource=resource_identifier(paths),
    )
    # Denials are expected outcomes: audit at info, not error.
    log.info(
        "authorization_denied",
        principal=denied.principal,
        operation=denied.operation,
        resource=denied.resource,
        decision_id=decision.decision_id,
    )
    raise denied
