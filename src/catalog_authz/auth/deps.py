"""
catalog_authz.auth.deps

FastAPI dependency functions for authentication.

Responsibilities:
- Convert a bearer JWT into a `Credential` (host-side authentication).
- Resolve the `Credential` into a `Principal` according to the principal mode.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_401_UNAUTHORIZED

from catalog_authz.api.deps import db_session, settings_dep
from catalog_authz.auth.credentials import ClaimsCredentialMapper, CredentialFactory
from catalog_authz.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate
from catalog_authz.auth.models import Credential, Principal
from catalog_authz.auth.resolver import PrincipalResolver
from catalog_authz.db.repositories.principals import PrincipalRepo
from catalog_authz.errors import NotAuthorized
from catalog_authz.settings import Settings

_bearer = HTTPBearer(auto_error=False)


def get_credential(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
) -> Credential:
    if creds is None or not creds.credentials:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Missing bearer token")

    try:
        payload = decode_and_validate(cfg=JwtConfig.from_settings(settings), token=creds.credentials)
    except JwtValidationError as e:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=f"Invalid token: {e}") from e

    mapper = ClaimsCredentialMapper(
        config=settings.claims,
        factory=CredentialFactory(settings.authorization),
    )
    return mapper.map(payload)


async def get_principal(
    credential: Credential = Depends(get_credential),
    settings: Settings = Depends(settings_dep),
    session: AsyncSession = Depends(db_session),
) -> Principal:
    resolver = PrincipalResolver(
        authorization=settings.authorization,
        store=PrincipalRepo(session),
    )
    try:
        return await resolver.authenticate(credential)
    except NotAuthorized as e:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=str(e)) from e
