"""
Language registry service.

Owns the active/default state of content languages. Exactly one language is
the default at any time, and it can never be deactivated.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.core.config import settings
from recruitment.db.session import run_atomic
from recruitment.errors import InvalidArgumentError, NotFoundError
from recruitment.models.language import Language
from recruitment.repositories.language_repository import LanguageRepository

logger = logging.getLogger(__name__)


class LanguageService:
    """Service for language registry operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = LanguageRepository(db)

    async def get_languages(self, active_only: bool = True) -> list[Language]:
        return await self.repo.list(active_only=active_only)

    async def get_default_language_code(self) -> str:
        default = await self.repo.get_default()
        if default is None:
            return settings.DEFAULT_LANGUAGE_CODE
        return default.code

    async def get_language(self, code: str) -> Language:
        language = await self.repo.get_by_code(code)
        if not language:
            raise NotFoundError("Language", code)
        return language

    async def upsert_language(self, code: str, name: str) -> Language:
        """Create a language (active, not default) or rename an existing one."""
        code = code.strip().lower()
        async with run_atomic(self.db):
            language = await self.repo.get_by_code(code)
            if language is None:
                language = await self.repo.create(code=code, name=name)
                logger.info("Language registered: %s", code)
            else:
                language.name = name
        return language

    async def toggle_language_active(self, code: str) -> Language:
        language = await self.get_language(code)
        if language.is_default and language.is_active:
            raise InvalidArgumentError(
                "Cannot deactivate the default language",
                {"language_code": code},
                code="default_language_locked",
            )

        async with run_atomic(self.db):
            language.is_active = not language.is_active

        logger.info("Language %s is now %s", code, "active" if language.is_active else "inactive")
        return language

    async def set_default_language(self, code: str) -> Language:
        language = await self.get_language(code)
        if not language.is_active:
            raise InvalidArgumentError(
                "Default language must be active",
                {"language_code": code},
            )
        if language.is_default:
            return language

        previous: Optional[Language] = await self.repo.get_default()
        async with run_atomic(self.db):
            if previous is not None:
                previous.is_default = False
                # clear the old default first: at most one row may be flagged
                await self.db.flush()
            language.is_default = True

        logger.info(
            "Default language changed from %s to %s",
            previous.code if previous else None,
            code,
        )
        return language
