"""
Enumerations shared by models, schemas and services.

Members are ``str`` subclasses so they compare equal to their stored value
and serialize naturally to JSON.
"""

from enum import Enum

from sqlalchemy import Enum as SAEnum


class CandidatureStatus(str, Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    IN_REVIEW = "in_review"
    EVALUATED = "evaluated"
    ARCHIVED = "archived"


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class DecisionType(str, Enum):
    FAVORABLE = "favorable"
    DEFAVORABLE = "defavorable"


class UserRole(str, Enum):
    ADMIN = "admin"
    PSYCHOLOGUE = "psychologue"
    CANDIDATE = "candidate"


class UserStatus(str, Enum):
    PENDING_VERIFICATION = "pending_verification"
    PENDING_PROFILE = "pending_profile"
    ACTIVE = "active"
    SUSPENDED = "suspended"
    INACTIVE = "inactive"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"


class LogicalTestCode(str, Enum):
    D_70 = "D_70"
    D_2000 = "D_2000"
    LOGIQUE_PROPOSITIONS = "LOGIQUE_PROPOSITIONS"


class LogicalQuestionType(str, Enum):
    DOMINO = "DOMINO"
    MCQ = "MCQ"


class PropositionChoice(str, Enum):
    TRUE = "TRUE"
    FALSE = "FALSE"
    UNKNOWN = "UNKNOWN"


def enum_column(enum_cls: type[Enum], length: int = 32) -> SAEnum:
    """Portable enum column storing member values as VARCHAR."""
    return SAEnum(
        enum_cls,
        native_enum=False,
        length=length,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )
