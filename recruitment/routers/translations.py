"""
Translated content endpoints for tests, classifications, questions and propositions.
"""

from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.core.dependencies import CurrentUser, get_db, get_language
from recruitment.core.permissions import Roles, require_admin, require_roles
from recruitment.errors import NotFoundError
from recruitment.schemas.translation import (
    ClassificationTranslationInput,
    ClassificationTranslationRead,
    LanguageCodesRequest,
    PropositionTranslationInput,
    PropositionTranslationRead,
    QuestionTranslationInput,
    QuestionTranslationRead,
    TestTranslationInput,
    TestTranslationRead,
)
from recruitment.services.cache_service import CacheService, get_cache
from recruitment.services.logical_test_service import LogicalTestService
from recruitment.services.translation_service import TranslationService

router = APIRouter(prefix="/translations", tags=["Translations"])

ContentKind = Literal["test", "classification", "question", "proposition"]

READ_SCHEMAS: dict[str, type[BaseModel]] = {
    "test": TestTranslationRead,
    "classification": ClassificationTranslationRead,
    "question": QuestionTranslationRead,
    "proposition": PropositionTranslationRead,
}


async def _upsert(
    kind: str,
    parent_id: UUID,
    items: list[BaseModel],
    db: AsyncSession,
    cache: CacheService,
) -> list[BaseModel]:
    service = TranslationService(db)
    rows = await service.upsert_translations(kind, parent_id, items)
    await LogicalTestService(db, cache).invalidate_for_content(kind, parent_id)
    return [READ_SCHEMAS[kind].model_validate(row) for row in rows]


@router.post("/validate-codes")
async def validate_language_codes(
    data: LanguageCodesRequest,
    current_user: CurrentUser = Depends(require_roles(Roles.STAFF)),
    db: AsyncSession = Depends(get_db),
):
    """Echo the deduplicated codes when every one is registered and active."""
    service = TranslationService(db)
    return {"codes": await service.validate_language_codes(data.codes)}


@router.get("/{kind}/{parent_id}")
async def get_translation(
    kind: ContentKind,
    parent_id: UUID,
    lang: str = Depends(get_language),
    current_user: CurrentUser = Depends(require_roles(Roles.STAFF)),
    db: AsyncSession = Depends(get_db),
):
    """Best-available translation: requested language, then the default."""
    service = TranslationService(db)
    translation = await service.get_translation(kind, parent_id, lang)
    if translation is None:
        raise NotFoundError(f"{kind.capitalize()} translation", parent_id)
    return READ_SCHEMAS[kind].model_validate(translation)


@router.get("/{kind}/{parent_id}/all")
async def get_all_translations(
    kind: ContentKind,
    parent_id: UUID,
    current_user: CurrentUser = Depends(require_roles(Roles.STAFF)),
    db: AsyncSession = Depends(get_db),
):
    service = TranslationService(db)
    rows = await service.get_translations(kind, parent_id)
    return [READ_SCHEMAS[kind].model_validate(row) for row in rows]


@router.delete("/{kind}/{parent_id}/{language_code}", status_code=204)
async def delete_translation(
    kind: ContentKind,
    parent_id: UUID,
    language_code: str,
    current_user: CurrentUser = Depends(require_admin()),
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    service = TranslationService(db)
    await service.delete_translation(kind, parent_id, language_code)
    await LogicalTestService(db, cache).invalidate_for_content(kind, parent_id)


@router.put("/test/{test_id}", response_model=list[TestTranslationRead])
async def upsert_test_translations(
    test_id: UUID,
    items: list[TestTranslationInput],
    current_user: CurrentUser = Depends(require_admin()),
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    return await _upsert("test", test_id, items, db, cache)


@router.put("/classification/{classification_id}", response_model=list[ClassificationTranslationRead])
async def upsert_classification_translations(
    classification_id: UUID,
    items: list[ClassificationTranslationInput],
    current_user: CurrentUser = Depends(require_admin()),
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    return await _upsert("classification", classification_id, items, db, cache)


@router.put("/question/{question_id}", response_model=list[QuestionTranslationRead])
async def upsert_question_translations(
    question_id: UUID,
    items: list[QuestionTranslationInput],
    current_user: CurrentUser = Depends(require_admin()),
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    return await _upsert("question", question_id, items, db, cache)


@router.put("/proposition/{proposition_id}", response_model=list[PropositionTranslationRead])
async def upsert_proposition_translations(
    proposition_id: UUID,
    items: list[PropositionTranslationInput],
    current_user: CurrentUser = Depends(require_admin()),
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    return await _upsert("proposition", proposition_id, items, db, cache)
