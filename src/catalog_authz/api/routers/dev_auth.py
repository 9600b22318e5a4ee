"""
catalog_authz.api.routers.dev_auth

Development-only token minting (404 in prod).

The minted JWT carries the claims the default claim mapping reads: a numeric
`sub` when `principal_id` is given (internal-mode lookups by id), otherwise
`subject`, plus `preferred_username` and `roles`.
"""

from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, model_validator
from starlette.status import HTTP_404_NOT_FOUND

from catalog_authz.api.deps import settings_dep
from catalog_authz.auth.jwt import JwtConfig, issue_token
from catalog_authz.settings import Settings

router = APIRouter(prefix="/v1/dev", tags=["dev"])


class DevTokenRequest(BaseModel):
    subject: str | None = Field(default=None, min_length=1, max_length=256)
    principal_id: int | None = Field(default=None, ge=1)
    preferred_username: str | None = Field(default=None, max_length=256)
    roles: list[str] = Field(default_factory=list)
    ttl_minutes: int = Field(default=60, ge=1, le=24 * 60)

    @model_validator(mode="after")
    def _needs_identity(self) -> DevTokenRequest:
        if self.subject is None and self.principal_id is None:
            raise ValueError("either subject or principal_id is required")
        return self

    @property
    def sub(self) -> str:
        return str(self.principal_id) if self.principal_id is not None else str(self.subject)


class DevTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.post("/token", response_model=DevTokenResponse)
async def mint_dev_token(
    body: DevTokenRequest,
    settings: Settings = Depends(settings_dep),
) -> DevTokenResponse:
    if settings.env == "prod":
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Not found")

    token = issue_token(
        cfg=JwtConfig.from_settings(settings),
        subject=body.sub,
        roles=body.roles,
        preferred_username=body.preferred_username,
        ttl=timedelta(minutes=body.ttl_minutes),
    )
    return DevTokenResponse(access_token=token)
