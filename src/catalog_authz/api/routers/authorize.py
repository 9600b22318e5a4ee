"""
catalog_authz.api.routers.authorize

Authorization check endpoint.

Responsibilities:
- Accept an operation plus resolved target/secondary paths from a trusted caller.
- Resolve the caller's principal, ask the policy engine, map outcomes onto HTTP statuses.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_403_FORBIDDEN,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from catalog_authz.api.deps import authorizer_from_app
from catalog_authz.auth.deps import get_principal
from catalog_authz.auth.models import Principal
from catalog_authz.errors import AuthorizationDenied, MalformedHierarchy, PolicyEngineError
from catalog_authz.policy.authorizer import PolicyAuthorizer
from catalog_authz.policy.operations import action_tag
from catalog_authz.resources.entities import EntityType, ResolvedEntity, ResolvedPath

router = APIRouter(prefix="/v1", tags=["authorization"])


class EntityIn(BaseModel):
    type: EntityType
    name: str = Field(min_length=1, max_length=256)
    id: int = 0
    catalog_id: int = 0
    parent_id: int = 0
    properties: dict[str, Any] = Field(default_factory=dict)

    def to_entity(self) -> ResolvedEntity:
        return ResolvedEntity(
            type=self.type,
            name=self.name,
            id=self.id,
            catalog_id=self.catalog_id,
            parent_id=self.parent_id,
            properties=self.properties,
        )


class AuthorizeRequest(BaseModel):
    operation: str = Field(min_length=1, max_length=128)
    # Each path is root-first: catalog -> namespace(s) -> leaf.
    targets: list[list[EntityIn]] = Field(default_factory=list)
    secondaries: list[list[EntityIn]] = Field(default_factory=list)
    context: dict[str, Any] = Field(default_factory=dict)


class AuthorizeResponse(BaseModel):
    allowed: bool
    principal: str
    action: str


def _paths(raw: list[list[EntityIn]]) -> list[ResolvedPath]:
    return [ResolvedPath.of(e.to_entity() for e in path) for path in raw]


@router.post("/authorize", response_model=AuthorizeResponse)
async def authorize(
    body: AuthorizeRequest,
    principal: Principal = Depends(get_principal),
    authorizer: PolicyAuthorizer = Depends(authorizer_from_app),
) -> AuthorizeResponse:
    try:
        action = action_tag(body.operation)
        await authorizer.authorize_or_raise(
            principal,
            action,
            targets=_paths(body.targets),
            secondaries=_paths(body.secondaries),
            context=body.context,
        )
    except (MalformedHierarchy, ValueError) as e:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except AuthorizationDenied as e:
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail=str(e)) from e
    except PolicyEngineError as e:
        # Fail closed, but keep the status distinct from a policy denial.
        raise HTTPException(
            status_code=HTTP_503_SERVICE_UNAVAILABLE, detail="Policy engine unavailable"
        ) from e

    return AuthorizeResponse(allowed=True, principal=principal.name, action=action)
