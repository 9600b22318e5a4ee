"""
catalog_authz.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`): identity-store connectivity plus the
  authorization wiring the process started with.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_authz.api.deps import db_session, settings_dep
from catalog_authz.settings import Settings

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> dict[str, Any]:
    await session.execute(text("SELECT 1"))
    engine = settings.policy_engine
    return {
        "status": "ready",
        "principal_mode": str(settings.authorization.principal_mode),
        "policy_engine": {
            "auth": engine.auth.type,
            "unavailable_mode": engine.unavailable_mode,
        },
    }
