"""
Models package.

Import all models here so they are registered with SQLAlchemy.
This file also makes it easy to import models from one place.
"""

from recruitment.models.site import Site, Department
from recruitment.models.user import User
from recruitment.models.job_application import JobApplication
from recruitment.models.candidature import (
    Candidature,
    CandidatureStateTransition,
    TechnicalInterview,
)
from recruitment.models.language import Language
from recruitment.models.logical_test import (
    LogicalTest,
    LogicalTestTranslation,
    ScoreClassification,
    ScoreClassificationTranslation,
)
from recruitment.models.logical_question import (
    LogicalQuestion,
    LogicalQuestionTranslation,
    McqProposition,
    McqPropositionTranslation,
)
from recruitment.models.personality_test import PersonalityTest

# Export all models
__all__ = [
    "Site",
    "Department",
    "User",
    "JobApplication",
    "Candidature",
    "CandidatureStateTransition",
    "TechnicalInterview",
    "Language",
    "LogicalTest",
    "LogicalTestTranslation",
    "ScoreClassification",
    "ScoreClassificationTranslation",
    "LogicalQuestion",
    "LogicalQuestionTranslation",
    "McqProposition",
    "McqPropositionTranslation",
    "PersonalityTest",
]
