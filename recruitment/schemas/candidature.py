"""
Pydantic schemas for candidatures, their transitions and technical interviews.
"""

from datetime import date, datetime
from typing import Dict, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from recruitment.models.enums import CandidatureStatus, DecisionType, Gender
from recruitment.schemas.base import RecordRead


class CandidatureCreate(BaseModel):
    """Spawn a candidature from an approved job application."""

    job_application_id: UUID
    dp_number: Optional[str] = Field(default=None, max_length=50)
    exam_date: Optional[datetime] = None
    assigned_psychologue_id: Optional[UUID] = None


class CandidatureManualCreate(BaseModel):
    """Existing candidate, new pre-approved application and candidature."""

    candidate_id: UUID
    site_id: UUID
    department_id: UUID
    target_position: str = Field(..., min_length=1, max_length=100)
    current_position: Optional[str] = Field(default=None, max_length=100)
    education_level: Optional[str] = Field(default=None, max_length=100)
    dp_number: Optional[str] = Field(default=None, max_length=50)
    exam_date: Optional[datetime] = None
    assigned_psychologue_id: Optional[UUID] = None
    previous_candidature_id: Optional[UUID] = None


class TechnicalInterviewCreate(BaseModel):
    interview_date: datetime
    interviewer_name: str = Field(..., min_length=1, max_length=200)
    decision: DecisionType
    notes: Optional[str] = None


class LegacyCandidateInfo(BaseModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)
    gender: Optional[Gender] = None
    date_of_birth: Optional[date] = None


class CandidatureLegacyCreate(BaseModel):
    """Walk-in candidate: account, application and candidature in one go."""

    candidate: LegacyCandidateInfo
    site_id: UUID
    department_id: UUID
    position_applied: Optional[str] = Field(default=None, max_length=100)
    dp_number: Optional[str] = Field(default=None, max_length=50)
    technical_interview: Optional[TechnicalInterviewCreate] = None
    send_credentials: Optional[bool] = None


class CandidatureUpdate(BaseModel):
    """Non-status fields. Omitted fields are left untouched."""

    dp_number: Optional[str] = Field(default=None, max_length=50)
    exam_date: Optional[datetime] = None
    assigned_psychologue_id: Optional[UUID] = None


class AssignPsychologueRequest(BaseModel):
    psychologue_id: UUID


class AssignTestsRequest(BaseModel):
    logical_test_id: UUID
    optional_logical_test_id: Optional[UUID] = None
    include_personality_test: Optional[bool] = None
    exam_date: Optional[datetime] = None
    notify_candidate: Optional[bool] = None


class DecisionRequest(BaseModel):
    decision: DecisionType
    comments: Optional[str] = None


class StatusChangeRequest(BaseModel):
    """Attempt-engine driven progress through the evaluation stages."""

    event: Literal["start", "complete", "start_review"]
    reason: Optional[str] = None


class CandidatureRead(RecordRead):
    job_application_id: UUID
    status: CandidatureStatus
    dp_number: Optional[str] = None
    exam_date: Optional[datetime] = None
    assigned_psychologue_id: Optional[UUID] = None
    assigned_by: Optional[UUID] = None
    assignment_date: Optional[datetime] = None
    assigned_logical_test_id: Optional[UUID] = None
    assigned_optional_logical_test_id: Optional[UUID] = None
    assigned_personality_test_id: Optional[UUID] = None
    decision: Optional[DecisionType] = None
    decision_date: Optional[datetime] = None
    decision_by: Optional[UUID] = None
    decision_comments: Optional[str] = None
    previous_candidature_id: Optional[UUID] = None
    is_reevaluation: bool
    version: int


class TransitionRead(BaseModel):
    id: UUID
    candidature_id: UUID
    from_status: Optional[CandidatureStatus] = None
    to_status: CandidatureStatus
    transitioned_by: UUID
    transitioned_at: datetime
    reason: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class TechnicalInterviewRead(RecordRead):
    candidature_id: UUID
    interview_date: datetime
    interviewer_name: str
    decision: DecisionType
    notes: Optional[str] = None
    conducted_by: Optional[UUID] = None


class LegacyUserSummary(BaseModel):
    id: UUID
    email: str
    first_name: str
    last_name: str

    model_config = ConfigDict(from_attributes=True)


class LegacyCandidatureResult(BaseModel):
    candidature: CandidatureRead
    user: LegacyUserSummary
    technical_interview: Optional[TechnicalInterviewRead] = None
    email_sent: bool
    # Only returned when credentials are not emailed
    temporary_password: Optional[str] = None


class AssignedTestSummary(BaseModel):
    id: UUID
    name: Optional[str] = None
    code: Optional[str] = None
    is_active: bool


class CandidatureResults(BaseModel):
    candidature_id: UUID
    status: CandidatureStatus
    logical_test: Optional[AssignedTestSummary] = None
    optional_logical_test: Optional[AssignedTestSummary] = None
    personality_test: Optional[AssignedTestSummary] = None


class DashboardRead(BaseModel):
    my_assignments: Dict[str, int]
    global_stats: Dict[str, int]
    todays_exams: int
