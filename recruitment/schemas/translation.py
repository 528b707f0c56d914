"""
Pydantic schemas for translated content and the language registry.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from recruitment.schemas.base import RecordRead
from recruitment.schemas.logical_test import (
    ClassificationTranslationInput,
    TestTranslationInput,
)


class QuestionTranslationInput(BaseModel):
    language_code: str = Field(..., min_length=2, max_length=10)
    title: Optional[str] = Field(default=None, max_length=300)
    instruction: str = Field(..., min_length=1)
    hints: List[str] = Field(default_factory=list)


class PropositionTranslationInput(BaseModel):
    language_code: str = Field(..., min_length=2, max_length=10)
    text: str = Field(..., min_length=1)


class TestTranslationRead(RecordRead):
    language_code: str
    name: str
    description: Optional[str] = None
    instructions: str


class ClassificationTranslationRead(RecordRead):
    language_code: str
    label: str
    description: Optional[str] = None


class QuestionTranslationRead(RecordRead):
    language_code: str
    title: Optional[str] = None
    instruction: str
    hints: List[str] = Field(default_factory=list)


class PropositionTranslationRead(RecordRead):
    language_code: str
    text: str


class LanguageCodesRequest(BaseModel):
    codes: List[str]


class LanguageUpsert(BaseModel):
    code: str = Field(..., min_length=2, max_length=10)
    name: str = Field(..., min_length=1, max_length=100)


class LanguageRead(BaseModel):
    code: str
    name: str
    is_active: bool
    is_default: bool

    model_config = ConfigDict(from_attributes=True)


__all__ = [
    "TestTranslationInput",
    "ClassificationTranslationInput",
    "QuestionTranslationInput",
    "PropositionTranslationInput",
    "TestTranslationRead",
    "ClassificationTranslationRead",
    "QuestionTranslationRead",
    "PropositionTranslationRead",
    "LanguageCodesRequest",
    "LanguageUpsert",
    "LanguageRead",
]
