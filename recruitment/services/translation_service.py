"""
Translation resolver for logical-test content.

Four content kinds carry translations: test, classification, question and
proposition. For each kind the service exposes the same operations:

    get_<kind>_translation(parent_id, lang)          best-available single row
    get_<kind>_translations_batch(parent_ids, lang)  same, for many parents, in two queries
    get_<kind>_translations(parent_id)               every language of one parent
    upsert_<kind>_translations(parent_id, items)     validated, atomic
    delete_<kind>_translation(parent_id, lang)       refuses to remove the last one

Resolution order for a requested language: the language itself if it is
registered and active, otherwise the registry default. A lookup that misses
at the resolved language tries the default once more before returning None.
"""

import logging
from typing import Any, Iterable, Optional, Sequence
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.core.config import settings
from recruitment.db.session import run_atomic
from recruitment.errors import (
    InvalidArgumentError,
    InvalidLanguageCodesError,
    LastTranslationError,
    NotFoundError,
)
from recruitment.models.logical_question import LogicalQuestion, McqProposition
from recruitment.models.logical_test import LogicalTest, ScoreClassification
from recruitment.repositories.language_repository import LanguageRepository
from recruitment.repositories.translation_repository import TranslationRepository

logger = logging.getLogger(__name__)

PARENT_MODELS = {
    "test": (LogicalTest, "Logical test"),
    "classification": (ScoreClassification, "Score classification"),
    "question": (LogicalQuestion, "Logical question"),
    "proposition": (McqProposition, "MCQ proposition"),
}


def ensure_distinct_language_codes(codes: Iterable[str], details: Optional[dict] = None) -> None:
    """One translation per language within a single write."""
    seen: set[str] = set()
    duplicates: list[str] = []
    for code in codes:
        if code in seen and code not in duplicates:
            duplicates.append(code)
        seen.add(code)
    if duplicates:
        raise InvalidArgumentError(
            f"Duplicate translation language codes: {', '.join(duplicates)}",
            {"duplicate_codes": duplicates, **(details or {})},
            code="duplicate_language_code",
        )


class TranslationService:
    """Resolve, validate and persist translated content."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.languages = LanguageRepository(db)

    def _repo(self, kind: str) -> TranslationRepository:
        return TranslationRepository(self.db, kind)

    # ------------------------------------------------------------------
    # Language resolution
    # ------------------------------------------------------------------

    async def get_default_language_code(self) -> str:
        default = await self.languages.get_default()
        return default.code if default else settings.DEFAULT_LANGUAGE_CODE

    async def resolve_language_code(self, requested: Optional[str]) -> str:
        """Requested code when active, else the default. Never raises."""
        if requested:
            language = await self.languages.get_by_code(requested)
            if language is not None and language.is_active:
                return language.code
            logger.debug("Language %r unavailable, falling back to default", requested)
        return await self.get_default_language_code()

    async def validate_language_codes(self, codes: Iterable[str]) -> list[str]:
        """
        Deduplicated codes, all registered and active.

        Raises InvalidLanguageCodesError listing every offending code.
        """
        unique_codes = list(dict.fromkeys(codes))
        if not unique_codes:
            return []
        active = await self.languages.get_active_codes(unique_codes)
        invalid = [code for code in unique_codes if code not in active]
        if invalid:
            raise InvalidLanguageCodesError(invalid)
        return unique_codes

    # ------------------------------------------------------------------
    # Generic operations
    # ------------------------------------------------------------------

    async def get_translation(self, kind: str, parent_id: UUID, requested: Optional[str]) -> Optional[Any]:
        repo = self._repo(kind)
        resolved = await self.resolve_language_code(requested)
        translation = await repo.get(parent_id, resolved)
        if translation is not None:
            return translation

        default_code = await self.get_default_language_code()
        if resolved == default_code:
            return None
        return await repo.get(parent_id, default_code)

    async def get_translations_batch(
        self,
        kind: str,
        parent_ids: Sequence[UUID],
        requested: Optional[str],
    ) -> dict[UUID, Any]:
        """Best-available translation per parent, in at most two lookups."""
        ids = list(dict.fromkeys(parent_ids))
        if not ids:
            return {}

        repo = self._repo(kind)
        resolved = await self.resolve_language_code(requested)
        found = {
            getattr(row, repo.parent_attr): row
            for row in await repo.get_many(ids, resolved)
        }

        missing = [parent_id for parent_id in ids if parent_id not in found]
        if missing:
            default_code = await self.get_default_language_code()
            if default_code != resolved:
                for row in await repo.get_many(missing, default_code):
                    found[getattr(row, repo.parent_attr)] = row
        return found

    async def get_translations(self, kind: str, parent_id: UUID) -> list[Any]:
        await self._ensure_parent(kind, parent_id)
        return await self._repo(kind).list_for_parent(parent_id)

    async def upsert_translations(
        self,
        kind: str,
        parent_id: UUID,
        items: Sequence[BaseModel],
    ) -> list[Any]:
        await self._ensure_parent(kind, parent_id)
        ensure_distinct_language_codes(item.language_code for item in items)
        await self.validate_language_codes(item.language_code for item in items)

        repo = self._repo(kind)
        async with run_atomic(self.db):
            for item in items:
                fields = item.model_dump(exclude={"language_code"})
                await repo.upsert(parent_id, item.language_code, fields)

        logger.info(
            "Upserted %d %s translation(s) for %s",
            len(items),
            kind,
            parent_id,
        )
        return await repo.list_for_parent(parent_id)

    async def delete_translation(self, kind: str, parent_id: UUID, language_code: str) -> None:
        await self._ensure_parent(kind, parent_id)
        repo = self._repo(kind)
        translation = await repo.get(parent_id, language_code)
        if translation is None:
            raise NotFoundError(f"{kind.capitalize()} translation", f"{parent_id}:{language_code}")

        async with run_atomic(self.db):
            # count under the parent lock so concurrent deletes cannot both pass
            await self._lock_parent(kind, parent_id)
            await self._ensure_not_last_translation(repo, parent_id, language_code)
            await repo.delete(translation)
        logger.info("Deleted %s translation %s for %s", kind, language_code, parent_id)

    async def _ensure_not_last_translation(
        self,
        repo: TranslationRepository,
        parent_id: UUID,
        language_code: str,
    ) -> None:
        remaining = await repo.count_for_parent(parent_id)
        if remaining <= 1:
            raise LastTranslationError(parent_id, language_code)

    async def _lock_parent(self, kind: str, parent_id: UUID) -> None:
        model, _ = PARENT_MODELS[kind]
        await self.db.execute(select(model.id).where(model.id == parent_id).with_for_update())

    async def _ensure_parent(self, kind: str, parent_id: UUID) -> None:
        model, label = PARENT_MODELS[kind]
        if await self.db.get(model, parent_id) is None:
            raise NotFoundError(label, parent_id)

    # ------------------------------------------------------------------
    # Per-kind API
    # ------------------------------------------------------------------

    async def get_test_translation(self, test_id: UUID, requested: Optional[str]):
        return await self.get_translation("test", test_id, requested)

    async def get_test_translations_batch(self, test_ids: Sequence[UUID], requested: Optional[str]):
        return await self.get_translations_batch("test", test_ids, requested)

    async def get_test_translations(self, test_id: UUID):
        return await self.get_translations("test", test_id)

    async def upsert_test_translations(self, test_id: UUID, items: Sequence[BaseModel]):
        return await self.upsert_translations("test", test_id, items)

    async def delete_test_translation(self, test_id: UUID, language_code: str) -> None:
        await self.delete_translation("test", test_id, language_code)

    async def get_classification_translation(self, classification_id: UUID, requested: Optional[str]):
        return await self.get_translation("classification", classification_id, requested)

    async def get_classification_translations_batch(
        self,
        classification_ids: Sequence[UUID],
        requested: Optional[str],
    ):
        return await self.get_translations_batch("classification", classification_ids, requested)

    async def get_classification_translations(self, classification_id: UUID):
        return await self.get_translations("classification", classification_id)

    async def upsert_classification_translations(self, classification_id: UUID, items: Sequence[BaseModel]):
        return await self.upsert_translations("classification", classification_id, items)

    async def delete_classification_translation(self, classification_id: UUID, language_code: str) -> None:
        await self.delete_translation("classification", classification_id, language_code)

    async def get_question_translation(self, question_id: UUID, requested: Optional[str]):
        return await self.get_translation("question", question_id, requested)

    async def get_question_translations_batch(self, question_ids: Sequence[UUID], requested: Optional[str]):
        return await self.get_translations_batch("question", question_ids, requested)

    async def get_question_translations(self, question_id: UUID):
        return await self.get_translations("question", question_id)

    async def upsert_question_translations(self, question_id: UUID, items: Sequence[BaseModel]):
        return await self.upsert_translations("question", question_id, items)

    async def delete_question_translation(self, question_id: UUID, language_code: str) -> None:
        await self.delete_translation("question", question_id, language_code)

    async def get_proposition_translation(self, proposition_id: UUID, requested: Optional[str]):
        return await self.get_translation("proposition", proposition_id, requested)

    async def get_proposition_translations_batch(
        self,
        proposition_ids: Sequence[UUID],
        requested: Optional[str],
    ):
        return await self.get_translations_batch("proposition", proposition_ids, requested)

    async def get_proposition_translations(self, proposition_id: UUID):
        return await self.get_translations("proposition", proposition_id)

    async def upsert_proposition_translations(self, proposition_id: UUID, items: Sequence[BaseModel]):
        return await self.upsert_translations("proposition", proposition_id, items)

    async def delete_proposition_translation(self, proposition_id: UUID, language_code: str) -> None:
        await self.delete_translation("proposition", proposition_id, language_code)
