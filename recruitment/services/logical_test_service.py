"""
Logical test catalogue and score classifications.

Reads are resolved to one language and memoised in the cache with a bounded
TTL; every write invalidates the per-language keys of the touched test.
"""

import logging
import math
from typing import Iterable, Optional, Sequence
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.core.config import settings
from recruitment.db.session import run_atomic
from recruitment.errors import (
    ConflictError,
    InvalidArgumentError,
    InvalidRangeError,
    InvalidReferenceError,
    NotFoundError,
)
from recruitment.models.candidature import Candidature
from recruitment.models.enums import LogicalQuestionType, LogicalTestCode
from recruitment.models.logical_question import LogicalQuestion, McqProposition
from recruitment.models.logical_test import LogicalTest, LogicalTestTranslation, ScoreClassification
from recruitment.repositories.language_repository import LanguageRepository
from recruitment.repositories.logical_test_repository import LogicalTestRepository
from recruitment.repositories.translation_repository import TranslationRepository
from recruitment.schemas.base import PaginatedResponse
from recruitment.schemas.logical_test import (
    LogicalTestCreate,
    LogicalTestRead,
    LogicalTestUpdate,
    ScoreClassificationInput,
    ScoreClassificationRead,
    TutorialTestCreate,
)
from recruitment.services import cache_service
from recruitment.services.cache_service import CacheService
from recruitment.services.translation_service import TranslationService, ensure_distinct_language_codes

logger = logging.getLogger(__name__)


def pick_translation(translations: Sequence, resolved: str, default_code: str):
    """Resolved language, then default, then whatever exists."""
    by_code = {t.language_code: t for t in translations}
    return by_code.get(resolved) or by_code.get(default_code) or (translations[0] if translations else None)


def validate_classification_ranges(items: Sequence[ScoreClassificationInput]) -> None:
    """
    Reject inverted or overlapping score bands.

    Bands are compared in display_order; each one must start strictly above
    the previous band's max_score.
    """
    for item in items:
        if item.min_score > item.max_score:
            raise InvalidRangeError(
                f"Classification at display_order {item.display_order}: "
                f"min_score ({item.min_score}) cannot be greater than max_score ({item.max_score})",
                item.display_order,
                {"min_score": item.min_score, "max_score": item.max_score},
            )

    ordered = sorted(items, key=lambda item: item.display_order)
    for prev, curr in zip(ordered, ordered[1:]):
        if curr.display_order == prev.display_order:
            raise InvalidRangeError(
                f"Duplicate display_order {curr.display_order}",
                curr.display_order,
            )
        if curr.min_score <= prev.max_score:
            raise InvalidRangeError(
                f"Score range overlap between display_order {prev.display_order} "
                f"({prev.min_score}-{prev.max_score}) and {curr.display_order} "
                f"({curr.min_score}-{curr.max_score})",
                curr.display_order,
                {
                    "previous_display_order": prev.display_order,
                    "previous_max_score": prev.max_score,
                    "min_score": curr.min_score,
                },
            )


class LogicalTestService:
    """Service for logical test CRUD and score classification sets."""

    def __init__(self, db: AsyncSession, cache: CacheService):
        self.db = db
        self.cache = cache
        self.repo = LogicalTestRepository(db)
        self.translations = TranslationService(db)
        self.test_translations = TranslationRepository(db, "test")

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    def _to_classification_read(
        self,
        classification: ScoreClassification,
        resolved: str,
        default_code: str,
    ) -> ScoreClassificationRead:
        translation = pick_translation(classification.translations, resolved, default_code)
        return ScoreClassificationRead(
            id=classification.id,
            test_id=classification.test_id,
            display_order=classification.display_order,
            min_score=classification.min_score,
            max_score=classification.max_score,
            color_code=classification.color_code,
            language_code=translation.language_code if translation else None,
            label=translation.label if translation else None,
            description=translation.description if translation else None,
        )

    def _to_read(self, test: LogicalTest, resolved: str, default_code: str) -> LogicalTestRead:
        translation = pick_translation(test.translations, resolved, default_code)
        return LogicalTestRead(
            id=test.id,
            code=test.code,
            question_type=test.question_type,
            duration_minutes=test.duration_minutes,
            total_questions=test.total_questions,
            tutorial_questions=test.tutorial_questions,
            is_tutorial=test.is_tutorial,
            tutorial_test_id=test.tutorial_test_id,
            is_active=test.is_active,
            is_optional=test.is_optional,
            version=test.version,
            metadata_json=test.metadata_json or {},
            created_at=test.created_at,
            updated_at=test.updated_at,
            language_code=translation.language_code if translation else None,
            name=translation.name if translation else None,
            description=translation.description if translation else None,
            instructions=translation.instructions if translation else None,
            available_languages=[t.language_code for t in test.translations],
            classifications=[
                self._to_classification_read(c, resolved, default_code)
                for c in test.score_classifications
            ],
        )

    async def _get_or_404(self, test_id: UUID) -> LogicalTest:
        test = await self.repo.get_by_id(test_id)
        if not test:
            raise NotFoundError("Logical test", test_id)
        return test

    async def _read(self, test_id: UUID, lang: Optional[str]) -> LogicalTestRead:
        test = await self._get_or_404(test_id)
        resolved = await self.translations.resolve_language_code(lang)
        default_code = await self.translations.get_default_language_code()
        return self._to_read(test, resolved, default_code)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_tests(
        self,
        code: Optional[LogicalTestCode] = None,
        question_type: Optional[LogicalQuestionType] = None,
        is_active: Optional[bool] = None,
        is_tutorial: Optional[bool] = None,
        page: int = 1,
        limit: int = 20,
        lang: Optional[str] = None,
    ) -> PaginatedResponse[LogicalTestRead]:
        resolved = await self.translations.resolve_language_code(lang)
        filters = {
            "code": code,
            "question_type": question_type,
            "is_active": is_active,
            "is_tutorial": is_tutorial,
            "page": page,
            "limit": limit,
            "lang": resolved,
        }
        key = cache_service.test_list_key(filters)
        cached = await self.cache.get(key)
        if cached is not None:
            return PaginatedResponse[LogicalTestRead].model_validate(cached)

        tests, total = await self.repo.list(
            code=code,
            question_type=question_type,
            is_active=is_active,
            is_tutorial=is_tutorial,
            skip=(page - 1) * limit,
            limit=limit,
        )
        default_code = await self.translations.get_default_language_code()
        response = PaginatedResponse[LogicalTestRead](
            items=[self._to_read(test, resolved, default_code) for test in tests],
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit) if limit else 0,
        )
        await self.cache.set(key, response.model_dump(mode="json"), settings.CACHE_TTL_TEST_LIST_SECONDS)
        return response

    async def get_test(self, test_id: UUID, lang: Optional[str] = None) -> LogicalTestRead:
        """Single test resolved to one language (read-through cache)."""
        resolved = await self.translations.resolve_language_code(lang)
        key = cache_service.test_key(test_id, resolved)
        cached = await self.cache.get(key)
        if cached is not None:
            return LogicalTestRead.model_validate(cached)

        read = await self._read(test_id, resolved)
        await self.cache.set(key, read.model_dump(mode="json"), settings.CACHE_TTL_TEST_SECONDS)
        return read

    async def get_classifications(self, test_id: UUID, lang: Optional[str] = None) -> list[ScoreClassificationRead]:
        resolved = await self.translations.resolve_language_code(lang)
        key = cache_service.classifications_key(test_id, resolved)
        cached = await self.cache.get(key)
        if cached is not None:
            return [ScoreClassificationRead.model_validate(item) for item in cached]

        await self._get_or_404(test_id)
        default_code = await self.translations.get_default_language_code()
        result = [
            self._to_classification_read(c, resolved, default_code)
            for c in await self.repo.list_classifications(test_id)
        ]
        await self.cache.set(
            key,
            [item.model_dump(mode="json") for item in result],
            settings.CACHE_TTL_CLASSIFICATIONS_SECONDS,
        )
        return result

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def _validate_tutorial_reference(
        self,
        tutorial_test_id: UUID,
        code: LogicalTestCode,
        test_id: Optional[UUID] = None,
    ) -> LogicalTest:
        if test_id is not None and tutorial_test_id == test_id:
            raise InvalidArgumentError(
                "A test cannot reference itself as its tutorial",
                {"test_id": str(test_id)},
                code="self_reference",
            )
        tutorial = await self.repo.get_by_id(tutorial_test_id)
        if not tutorial:
            raise InvalidReferenceError("tutorial test", tutorial_test_id, "not found")
        if not tutorial.is_tutorial:
            raise InvalidReferenceError("tutorial test", tutorial_test_id, "referenced test is not a tutorial test")
        if tutorial.code != code:
            raise InvalidReferenceError("tutorial test", tutorial_test_id, "tutorial must share the test code")
        return tutorial

    async def create_test(self, data: LogicalTestCreate, created_by: Optional[UUID] = None) -> LogicalTestRead:
        existing = await self.repo.get_by_code(data.code, data.is_tutorial)
        if existing:
            kind = "tutorial" if data.is_tutorial else "main"
            raise ConflictError(
                f'A {kind} test with code "{data.code.value}" already exists',
                {"code": data.code.value, "is_tutorial": data.is_tutorial, "existing_id": str(existing.id)},
            )
        if data.tutorial_test_id:
            await self._validate_tutorial_reference(data.tutorial_test_id, data.code)
        ensure_distinct_language_codes(t.language_code for t in data.translations)
        await self.translations.validate_language_codes(t.language_code for t in data.translations)

        async with run_atomic(self.db):
            test = await self.repo.create(
                code=data.code,
                question_type=data.question_type,
                duration_minutes=data.duration_minutes,
                total_questions=data.total_questions,
                tutorial_questions=data.tutorial_questions,
                is_tutorial=data.is_tutorial,
                tutorial_test_id=data.tutorial_test_id,
                is_optional=data.is_optional,
                metadata_json=data.metadata_json,
                created_by=created_by,
                translations=[
                    LogicalTestTranslation(**t.model_dump()) for t in data.translations
                ],
            )

        logger.info("Logical test created: %s (%s, tutorial=%s)", test.id, data.code.value, data.is_tutorial)
        await self.cache.delete_pattern(f"{cache_service.CACHE_PREFIX}:tests:list:*")
        return await self._read(test.id, data.translations[0].language_code)

    async def update_test(self, test_id: UUID, data: LogicalTestUpdate) -> LogicalTestRead:
        test = await self._get_or_404(test_id)
        update_data = data.model_dump(exclude_unset=True, exclude={"translations"})

        if update_data.get("tutorial_test_id"):
            await self._validate_tutorial_reference(update_data["tutorial_test_id"], test.code, test_id)
        if data.translations:
            ensure_distinct_language_codes(t.language_code for t in data.translations)
            await self.translations.validate_language_codes(t.language_code for t in data.translations)

        async with run_atomic(self.db):
            for field, value in update_data.items():
                setattr(test, field, value)
            for item in data.translations or []:
                await self.test_translations.upsert(
                    test_id,
                    item.language_code,
                    item.model_dump(exclude={"language_code"}),
                )

        await self.invalidate_test_cache(test_id)
        return await self._read(test_id, None)

    async def delete_test(self, test_id: UUID) -> None:
        """Hard delete, refused once the test has attempts or assignments."""
        test = await self._get_or_404(test_id)
        if test.attempt_count > 0:
            raise InvalidArgumentError(
                f"Cannot delete test {test_id}: it has {test.attempt_count} attempt(s). Deactivate it instead.",
                {"test_id": str(test_id), "attempt_count": test.attempt_count},
                code="test_in_use",
            )
        assigned = await self.db.scalar(
            select(func.count(Candidature.id)).where(
                or_(
                    Candidature.assigned_logical_test_id == test_id,
                    Candidature.assigned_optional_logical_test_id == test_id,
                )
            )
        )
        if assigned:
            raise InvalidArgumentError(
                f"Cannot delete test {test_id}: it is assigned to {assigned} candidature(s). Deactivate it instead.",
                {"test_id": str(test_id), "assigned_candidatures": assigned},
                code="test_in_use",
            )

        async with run_atomic(self.db):
            await self.repo.delete(test)

        logger.info("Logical test deleted: %s", test_id)
        await self.invalidate_test_cache(test_id)

    async def toggle_active(self, test_id: UUID) -> LogicalTestRead:
        test = await self._get_or_404(test_id)
        async with run_atomic(self.db):
            test.is_active = not test.is_active

        await self.invalidate_test_cache(test_id)
        return await self._read(test_id, None)

    async def create_tutorial_test(
        self,
        main_test_id: UUID,
        data: TutorialTestCreate,
        created_by: Optional[UUID] = None,
    ) -> LogicalTestRead:
        main = await self._get_or_404(main_test_id)
        if main.is_tutorial:
            raise InvalidArgumentError(
                "Cannot create a tutorial test from another tutorial test",
                {"test_id": str(main_test_id)},
            )
        if main.tutorial_test_id:
            raise ConflictError(
                f"Tutorial test already exists for main test {main_test_id}",
                {"test_id": str(main_test_id), "tutorial_test_id": str(main.tutorial_test_id)},
            )
        if await self.repo.get_by_code(main.code, True):
            raise ConflictError(
                f'Tutorial test already exists for code "{main.code.value}"',
                {"code": main.code.value},
            )
        ensure_distinct_language_codes(t.language_code for t in data.translations)
        await self.translations.validate_language_codes(t.language_code for t in data.translations)

        async with run_atomic(self.db):
            tutorial = await self.repo.create(
                code=main.code,
                question_type=main.question_type,
                duration_minutes=data.duration_minutes,
                total_questions=data.total_questions,
                tutorial_questions=0,
                is_tutorial=True,
                created_by=created_by,
                translations=[
                    LogicalTestTranslation(**t.model_dump()) for t in data.translations
                ],
            )
            main.tutorial_test_id = tutorial.id

        logger.info("Tutorial test %s linked to main test %s", tutorial.id, main_test_id)
        await self.invalidate_test_cache(main_test_id)
        await self.invalidate_test_cache(tutorial.id)
        return await self._read(tutorial.id, data.translations[0].language_code)

    async def upsert_classifications(
        self,
        test_id: UUID,
        items: Sequence[ScoreClassificationInput],
    ) -> list[ScoreClassificationRead]:
        """
        Replace the whole classification set of a test.

        All validation happens first; the delete and re-insert then run as
        one unit, so a rejected set leaves the stored one untouched.
        """
        await self._get_or_404(test_id)
        validate_classification_ranges(items)
        for item in items:
            ensure_distinct_language_codes(
                (t.language_code for t in item.translations),
                {"display_order": item.display_order},
            )
        await self.translations.validate_language_codes(
            t.language_code for item in items for t in item.translations
        )

        async with run_atomic(self.db):
            await self.repo.delete_classifications(test_id)
            for item in sorted(items, key=lambda i: i.display_order):
                await self.repo.add_classification(
                    test_id,
                    translations=[t.model_dump() for t in item.translations],
                    display_order=item.display_order,
                    min_score=item.min_score,
                    max_score=item.max_score,
                    color_code=item.color_code,
                )

        logger.info("Replaced classification set of test %s (%d bands)", test_id, len(items))
        await self.invalidate_test_cache(test_id)
        return await self.get_classifications(test_id, None)

    async def invalidate_test_cache(self, test_id: UUID) -> None:
        """Drop every language variant of the test's cached reads."""
        codes: Iterable[str] = [
            language.code for language in await LanguageRepository(self.db).list(active_only=False)
        ]
        keys = []
        for code in codes:
            keys.extend(
                [
                    cache_service.test_key(test_id, code),
                    cache_service.classifications_key(test_id, code),
                    cache_service.questions_key(test_id, code),
                ]
            )
        await self.cache.delete(*keys)
        await self.cache.delete_pattern(f"{cache_service.CACHE_PREFIX}:tests:list:*")

    async def invalidate_for_content(self, kind: str, parent_id: UUID) -> None:
        """Invalidate the owning test after a translation write on any content kind."""
        test_id: Optional[UUID] = None
        if kind == "test":
            test_id = parent_id
        elif kind == "classification":
            classification = await self.db.get(ScoreClassification, parent_id)
            test_id = classification.test_id if classification else None
        elif kind in ("question", "proposition"):
            question_id = parent_id
            if kind == "proposition":
                proposition = await self.db.get(McqProposition, parent_id)
                question_id = proposition.question_id if proposition else None
            question = await self.db.get(LogicalQuestion, question_id) if question_id else None
            test_id = question.test_id if question else None

        if test_id is not None:
            await self.invalidate_test_cache(test_id)
