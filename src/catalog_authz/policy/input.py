"""
catalog_authz.policy.input

Authorization input assembler.

Responsibilities:
- Combine principal, operation and encoded resource hierarchies into the canonical
  decision document policies are written against.
- Keep field names and array ordering stable (targets/secondaries in caller order).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, TypedDict

from catalog_authz.auth.models import Principal
from catalog_authz.errors import MissingPrincipalIdentity
from catalog_authz.policy.operations import AuthorizableOperation, action_tag
from catalog_authz.resources.encoding import EncodedNode, encode_paths
from catalog_authz.resources.entities import ResolvedPath


class Actor(TypedDict):
    principal: str
    roles: list[str]


class Resource(TypedDict):
    targets: list[EncodedNode]
    secondaries: list[EncodedNode]


class AuthorizationInput(TypedDict):
    actor: Actor
    action: str
    resource: Resource
    context: dict[str, Any]


def build_authorization_input(
    principal: Principal,
    operation: AuthorizableOperation | str,
    targets: Sequence[ResolvedPath] | None = (),
    secondaries: Sequence[ResolvedPath] | None = (),
    context: Mapping[str, Any] | None = None,
) -> AuthorizationInput:
    if not principal.name:
        raise MissingPrincipalIdentity("Principal name is required for authorization")

    return {
        "actor": {
            "principal": principal.name,
            # Sorted only for stable output; policies must not rely on role order.
            "roles": sorted(principal.roles),
        },
        "action": action_tag(operation),
        "resource": {
            "targets": encode_paths(targets),
            "secondaries": encode_paths(secondaries),
        },
        "context": dict(context or {}),
    }
