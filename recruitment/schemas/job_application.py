"""
Pydantic schemas for job applications.
"""

from datetime import date, datetime
from typing import Dict, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from recruitment.models.enums import ApplicationStatus
from recruitment.schemas.base import RecordRead


class JobApplicationCreate(BaseModel):
    site_id: UUID
    department_id: UUID
    target_position: str = Field(..., min_length=1, max_length=100)
    current_position: Optional[str] = Field(default=None, max_length=100)
    education_level: Optional[str] = Field(default=None, max_length=100)
    availability: Optional[date] = None
    motivation: Optional[str] = None
    cv_url: Optional[str] = Field(default=None, max_length=500)
    additional_info: Optional[str] = None


class JobApplicationReview(BaseModel):
    decision: Literal["approved", "rejected"]
    rejection_reason: Optional[str] = None


class JobApplicationRead(RecordRead):
    candidate_id: UUID
    site_id: UUID
    department_id: UUID
    target_position: str
    current_position: Optional[str] = None
    education_level: Optional[str] = None
    availability: Optional[date] = None
    motivation: Optional[str] = None
    cv_url: Optional[str] = None
    additional_info: Optional[str] = None
    status: ApplicationStatus
    reviewed_by: Optional[UUID] = None
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None


class JobApplicationReviewResult(BaseModel):
    application: JobApplicationRead
    candidature_id: Optional[UUID] = None


class ApplicationStatistics(BaseModel):
    total: int
    by_status: Dict[str, int]
