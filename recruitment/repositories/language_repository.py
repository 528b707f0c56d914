"""
Repository for the language registry.
"""

from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.models.language import Language


class LanguageRepository:
    """Repository for Language operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_code(self, code: str) -> Optional[Language]:
        result = await self.db.execute(select(Language).where(Language.code == code))
        return result.scalar_one_or_none()

    async def get_default(self) -> Optional[Language]:
        result = await self.db.execute(select(Language).where(Language.is_default.is_(True)))
        return result.scalars().first()

    async def list(self, active_only: bool = True) -> list[Language]:
        """Default language first, then by code."""
        query = select(Language)
        if active_only:
            query = query.where(Language.is_active.is_(True))
        query = query.order_by(Language.is_default.desc(), Language.code.asc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_active_codes(self, codes: Iterable[str]) -> set[str]:
        """Return the subset of codes that are registered and active."""
        code_list = list(codes)
        if not code_list:
            return set()
        result = await self.db.execute(
            select(Language.code).where(
                Language.code.in_(code_list),
                Language.is_active.is_(True),
            )
        )
        return set(result.scalars().all())

    async def create(self, code: str, name: str, is_active: bool = True, is_default: bool = False) -> Language:
        language = Language(code=code, name=name, is_active=is_active, is_default=is_default)
        self.db.add(language)
        await self.db.flush()
        return language
