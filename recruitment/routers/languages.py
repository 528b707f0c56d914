"""
Language registry endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.core.dependencies import CurrentUser, get_current_user, get_db
from recruitment.core.permissions import require_admin
from recruitment.schemas.translation import LanguageRead, LanguageUpsert
from recruitment.services.language_service import LanguageService

router = APIRouter(prefix="/languages", tags=["Languages"])


@router.get("", response_model=list[LanguageRead])
async def list_languages(
    active_only: bool = True,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    service = LanguageService(db)
    return await service.get_languages(active_only=active_only)


@router.get("/default")
async def get_default_language(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    service = LanguageService(db)
    return {"code": await service.get_default_language_code()}


@router.put("", response_model=LanguageRead)
async def upsert_language(
    data: LanguageUpsert,
    current_user: CurrentUser = Depends(require_admin()),
    db: AsyncSession = Depends(get_db),
):
    service = LanguageService(db)
    return await service.upsert_language(data.code, data.name)


@router.post("/{code}/toggle-active", response_model=LanguageRead)
async def toggle_language_active(
    code: str,
    current_user: CurrentUser = Depends(require_admin()),
    db: AsyncSession = Depends(get_db),
):
    service = LanguageService(db)
    return await service.toggle_language_active(code)


@router.post("/{code}/default", response_model=LanguageRead)
async def set_default_language(
    code: str,
    current_user: CurrentUser = Depends(require_admin()),
    db: AsyncSession = Depends(get_db),
):
    service = LanguageService(db)
    return await service.set_default_language(code)
