"""
Repository for logical tests, score classifications and personality tests.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.models.enums import LogicalQuestionType, LogicalTestCode
from recruitment.models.logical_test import (
    LogicalTest,
    ScoreClassification,
    ScoreClassificationTranslation,
)
from recruitment.models.personality_test import PersonalityTest


class LogicalTestRepository:
    """Repository for LogicalTest operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, test_id: UUID) -> Optional[LogicalTest]:
        """
        Get a test with its translations and classifications.

        Always reloads the eager collections, since translation and
        classification rows are replaced behind the parent's back.
        """
        result = await self.db.execute(
            select(LogicalTest)
            .where(LogicalTest.id == test_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_code(self, code: LogicalTestCode, is_tutorial: bool) -> Optional[LogicalTest]:
        result = await self.db.execute(
            select(LogicalTest).where(
                LogicalTest.code == code,
                LogicalTest.is_tutorial.is_(is_tutorial),
            )
        )
        return result.scalar_one_or_none()

    async def list(
        self,
        code: Optional[LogicalTestCode] = None,
        question_type: Optional[LogicalQuestionType] = None,
        is_active: Optional[bool] = None,
        is_tutorial: Optional[bool] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[LogicalTest], int]:
        query = select(LogicalTest)
        if code:
            query = query.where(LogicalTest.code == code)
        if question_type:
            query = query.where(LogicalTest.question_type == question_type)
        if is_active is not None:
            query = query.where(LogicalTest.is_active.is_(is_active))
        if is_tutorial is not None:
            query = query.where(LogicalTest.is_tutorial.is_(is_tutorial))

        count_result = await self.db.execute(
            select(func.count()).select_from(query.subquery())
        )
        total = int(count_result.scalar_one())

        query = (
            query.order_by(LogicalTest.code.asc(), LogicalTest.is_tutorial.asc())
            .offset(skip)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all()), total

    async def create(self, **fields) -> LogicalTest:
        test = LogicalTest(**fields)
        self.db.add(test)
        await self.db.flush()
        return test

    async def delete(self, test: LogicalTest) -> None:
        await self.db.delete(test)
        await self.db.flush()

    async def list_classifications(self, test_id: UUID) -> list[ScoreClassification]:
        result = await self.db.execute(
            select(ScoreClassification)
            .where(ScoreClassification.test_id == test_id)
            .order_by(ScoreClassification.display_order.asc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def delete_classifications(self, test_id: UUID) -> None:
        """Remove the whole classification set of a test. Does not commit."""
        for classification in await self.list_classifications(test_id):
            # translations go with it (delete-orphan cascade)
            await self.db.delete(classification)
        # flush now so re-inserted display orders don't collide
        await self.db.flush()

    async def add_classification(
        self,
        test_id: UUID,
        translations: list[dict],
        **fields,
    ) -> ScoreClassification:
        classification = ScoreClassification(
            test_id=test_id,
            translations=[ScoreClassificationTranslation(**item) for item in translations],
            **fields,
        )
        self.db.add(classification)
        await self.db.flush()
        return classification

    async def get_first_active_personality_test(self) -> Optional[PersonalityTest]:
        result = await self.db.execute(
            select(PersonalityTest)
            .where(PersonalityTest.is_active.is_(True))
            .order_by(PersonalityTest.created_at.asc())
            .limit(1)
        )
        return result.scalars().first()

    async def get_personality_test(self, test_id: UUID) -> Optional[PersonalityTest]:
        return await self.db.get(PersonalityTest, test_id)
