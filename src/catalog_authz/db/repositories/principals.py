"""
catalog_authz.db.repositories.principals

Repository for `PrincipalEntity`.

Responsibilities:
- Create principals (bootstrap/admin tooling and tests).
- Look principals up by id or name; this is the `IdentityStore` used by the
  principal resolver in internal mode.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_authz.db.models import PrincipalEntity


class PrincipalRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        name: str,
        roles: Iterable[str] = (),
        properties: Mapping[str, Any] | None = None,
    ) -> PrincipalEntity:
        p = PrincipalEntity(
            name=name,
            roles=sorted(set(roles)),
            properties=dict(properties or {}),
        )
        self._session.add(p)
        await self._session.flush()
        return p

    async def get_by_id(self, principal_id: int) -> PrincipalEntity | None:
        return await self._session.get(PrincipalEntity, principal_id)

    async def get_by_name(self, name: str) -> PrincipalEntity | None:
        stmt = select(PrincipalEntity).where(PrincipalEntity.name == name)
        return (await self._session.execute(stmt)).scalar_one_or_none()
