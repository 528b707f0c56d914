"""
Pydantic schemas for logical tests and their score classifications.

Read models are resolved to one language; they are also the payloads stored
in the cache, so everything here must survive a JSON round-trip.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from recruitment.models.enums import LogicalQuestionType, LogicalTestCode


class TestTranslationInput(BaseModel):
    language_code: str = Field(..., min_length=2, max_length=10)
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    instructions: str = Field(..., min_length=1)


class LogicalTestCreate(BaseModel):
    code: LogicalTestCode
    question_type: LogicalQuestionType
    duration_minutes: int = Field(..., ge=1)
    total_questions: int = Field(default=0, ge=0)
    tutorial_questions: int = Field(default=0, ge=0)
    is_tutorial: bool = False
    tutorial_test_id: Optional[UUID] = None
    is_optional: bool = False
    metadata_json: dict = Field(default_factory=dict)
    translations: List[TestTranslationInput] = Field(..., min_length=1)


class LogicalTestUpdate(BaseModel):
    question_type: Optional[LogicalQuestionType] = None
    duration_minutes: Optional[int] = Field(default=None, ge=1)
    total_questions: Optional[int] = Field(default=None, ge=0)
    tutorial_questions: Optional[int] = Field(default=None, ge=0)
    tutorial_test_id: Optional[UUID] = None
    is_optional: Optional[bool] = None
    metadata_json: Optional[dict] = None
    translations: Optional[List[TestTranslationInput]] = None


class TutorialTestCreate(BaseModel):
    duration_minutes: int = Field(..., ge=1)
    total_questions: int = Field(default=0, ge=0)
    translations: List[TestTranslationInput] = Field(..., min_length=1)


class LogicalTestRead(BaseModel):
    id: UUID
    code: LogicalTestCode
    question_type: LogicalQuestionType
    duration_minutes: int
    total_questions: int
    tutorial_questions: int
    is_tutorial: bool
    tutorial_test_id: Optional[UUID] = None
    is_active: bool
    is_optional: bool
    version: int
    metadata_json: dict = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime

    # Resolved content; language_code is the language actually served
    language_code: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    instructions: Optional[str] = None
    available_languages: List[str] = Field(default_factory=list)
    classifications: List["ScoreClassificationRead"] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class ClassificationTranslationInput(BaseModel):
    language_code: str = Field(..., min_length=2, max_length=10)
    label: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class ScoreClassificationInput(BaseModel):
    display_order: int = Field(..., ge=1)
    min_score: int
    max_score: int
    color_code: Optional[str] = Field(default=None, max_length=20)
    translations: List[ClassificationTranslationInput] = Field(..., min_length=1)


class ScoreClassificationRead(BaseModel):
    id: UUID
    test_id: UUID
    display_order: int
    min_score: int
    max_score: int
    color_code: Optional[str] = None
    language_code: Optional[str] = None
    label: Optional[str] = None
    description: Optional[str] = None


LogicalTestRead.model_rebuild()
