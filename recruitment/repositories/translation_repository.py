"""
Repository for the translation tables.

All four translation families (test, classification, question, proposition)
share the same shape: a parent foreign key plus ``language_code``, unique per
pair. One repository class serves them all, parameterised by the model and
the name of its parent column.
"""

from typing import Any, Iterable, Optional, Type
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.models.logical_question import (
    LogicalQuestionTranslation,
    McqPropositionTranslation,
)
from recruitment.models.logical_test import (
    LogicalTestTranslation,
    ScoreClassificationTranslation,
)


# kind -> (translation model, parent column)
TRANSLATION_KINDS: dict[str, tuple[Type[Any], str]] = {
    "test": (LogicalTestTranslation, "test_id"),
    "classification": (ScoreClassificationTranslation, "classification_id"),
    "question": (LogicalQuestionTranslation, "question_id"),
    "proposition": (McqPropositionTranslation, "proposition_id"),
}


class TranslationRepository:
    """Translation rows of one kind."""

    def __init__(self, db: AsyncSession, kind: str):
        if kind not in TRANSLATION_KINDS:
            raise ValueError(f"Unknown translation kind: {kind}")
        self.db = db
        self.kind = kind
        self.model, parent_attr = TRANSLATION_KINDS[kind]
        self.parent_attr = parent_attr
        self.parent_column = getattr(self.model, parent_attr)

    async def get(self, parent_id: UUID, language_code: str) -> Optional[Any]:
        result = await self.db.execute(
            select(self.model).where(
                self.parent_column == parent_id,
                self.model.language_code == language_code,
            )
        )
        return result.scalar_one_or_none()

    async def get_many(self, parent_ids: Iterable[UUID], language_code: str) -> list[Any]:
        """All translations at one language for a set of parents (single query)."""
        ids = list(parent_ids)
        if not ids:
            return []
        result = await self.db.execute(
            select(self.model).where(
                self.parent_column.in_(ids),
                self.model.language_code == language_code,
            )
        )
        return list(result.scalars().all())

    async def list_for_parent(self, parent_id: UUID) -> list[Any]:
        result = await self.db.execute(
            select(self.model)
            .where(self.parent_column == parent_id)
            .order_by(self.model.language_code.asc())
        )
        return list(result.scalars().all())

    async def count_for_parent(self, parent_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(self.model).where(self.parent_column == parent_id)
        )
        return int(result.scalar_one())

    async def upsert(self, parent_id: UUID, language_code: str, fields: dict) -> Any:
        """Insert or update the (parent, language) row. Does not commit."""
        existing = await self.get(parent_id, language_code)
        if existing is not None:
            for field, value in fields.items():
                setattr(existing, field, value)
            await self.db.flush()
            return existing

        row = self.model(**{self.parent_attr: parent_id, "language_code": language_code, **fields})
        self.db.add(row)
        await self.db.flush()
        return row

    async def delete(self, translation: Any) -> None:
        await self.db.delete(translation)
        await self.db.flush()
