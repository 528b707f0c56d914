"""
Schemas package.

Import all schemas here for easy access.
"""

from recruitment.schemas.base import PaginatedResponse, RecordRead
from recruitment.schemas.job_application import (
    JobApplicationCreate,
    JobApplicationRead,
    JobApplicationReview,
    JobApplicationReviewResult,
    ApplicationStatistics,
)
from recruitment.schemas.candidature import (
    CandidatureCreate,
    CandidatureManualCreate,
    CandidatureLegacyCreate,
    CandidatureUpdate,
    CandidatureRead,
    TransitionRead,
    TechnicalInterviewCreate,
    TechnicalInterviewRead,
    AssignPsychologueRequest,
    AssignTestsRequest,
    DecisionRequest,
    StatusChangeRequest,
    DashboardRead,
)
from recruitment.schemas.logical_test import (
    LogicalTestCreate,
    LogicalTestUpdate,
    LogicalTestRead,
    TutorialTestCreate,
    ScoreClassificationInput,
    ScoreClassificationRead,
)
from recruitment.schemas.translation import (
    TestTranslationInput,
    ClassificationTranslationInput,
    QuestionTranslationInput,
    PropositionTranslationInput,
    LanguageUpsert,
    LanguageRead,
)

__all__ = [
    # Shared
    "PaginatedResponse", "RecordRead",
    # Job application
    "JobApplicationCreate", "JobApplicationRead", "JobApplicationReview",
    "JobApplicationReviewResult", "ApplicationStatistics",
    # Candidature
    "CandidatureCreate", "CandidatureManualCreate", "CandidatureLegacyCreate",
    "CandidatureUpdate", "CandidatureRead", "TransitionRead",
    "TechnicalInterviewCreate", "TechnicalInterviewRead",
    "AssignPsychologueRequest", "AssignTestsRequest", "DecisionRequest",
    "StatusChangeRequest", "DashboardRead",
    # Logical test
    "LogicalTestCreate", "LogicalTestUpdate", "LogicalTestRead", "TutorialTestCreate",
    "ScoreClassificationInput", "ScoreClassificationRead",
    # Translation
    "TestTranslationInput", "ClassificationTranslationInput",
    "QuestionTranslationInput", "PropositionTranslationInput",
    "LanguageUpsert", "LanguageRead",
]
