"""
Candidature models.

A Candidature is the tracked evaluation case for one approved job
application. Its status only moves through the state machine in
``recruitment.services.candidature_state_machine`` and every status change is
recorded as a CandidatureStateTransition row.
"""

import uuid
from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy import String, Text, Boolean, Integer, DateTime, ForeignKey, Uuid, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from recruitment.models.base_model import TimestampedModel, utcnow
from recruitment.models.enums import CandidatureStatus, DecisionType, enum_column

if TYPE_CHECKING:
    from recruitment.models.job_application import JobApplication


class Candidature(TimestampedModel):
    """
    Candidature table - one evaluation case per approved job application.

    Never physically deleted; ``archived`` is the terminal status.
    """

    __tablename__ = "candidatures"

    # 1:1 with the owning job application
    job_application_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("job_applications.id"),
        nullable=False,
        unique=True,
    )

    status: Mapped[CandidatureStatus] = mapped_column(
        enum_column(CandidatureStatus),
        nullable=False,
        default=CandidatureStatus.PENDING,
    )

    # Internal reference number
    dp_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Assignment metadata
    assigned_psychologue_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=True,
        index=True,
    )
    assigned_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=True,
    )
    assignment_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    exam_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Tests attached by reference
    assigned_logical_test_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("logical_tests.id"),
        nullable=True,
    )
    assigned_optional_logical_test_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("logical_tests.id"),
        nullable=True,
    )
    assigned_personality_test_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("personality_tests.id"),
        nullable=True,
    )

    # Final decision, only set together with status=evaluated
    decision: Mapped[Optional[DecisionType]] = mapped_column(enum_column(DecisionType), nullable=True)
    decision_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    decision_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=True,
    )
    decision_comments: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Re-evaluation lineage
    previous_candidature_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("candidatures.id"),
        nullable=True,
    )
    is_reevaluation: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Optimistic lock: bumped on every flush that updates the row
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    job_application: Mapped["JobApplication"] = relationship(
        "JobApplication",
        lazy="selectin",
    )

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index("ix_candidatures_status", "status"),
        Index("ix_candidatures_exam_date", "exam_date"),
    )


class CandidatureStateTransition(TimestampedModel):
    """
    Immutable audit record of one candidature status change.

    ``from_status`` is NULL only for a creation event.
    """

    __tablename__ = "candidature_state_transitions"

    candidature_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("candidatures.id"),
        nullable=False,
        index=True,
    )
    from_status: Mapped[Optional[CandidatureStatus]] = mapped_column(
        enum_column(CandidatureStatus),
        nullable=True,
    )
    to_status: Mapped[CandidatureStatus] = mapped_column(
        enum_column(CandidatureStatus),
        nullable=False,
    )
    transitioned_by: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
    )
    transitioned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True,
    )
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class TechnicalInterview(TimestampedModel):
    """Outcome of the technical interview stage (at most one per candidature)."""

    __tablename__ = "technical_interviews"

    candidature_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("candidatures.id"),
        nullable=False,
        unique=True,
    )
    interview_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    interviewer_name: Mapped[str] = mapped_column(String(200), nullable=False)
    decision: Mapped[DecisionType] = mapped_column(enum_column(DecisionType), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    conducted_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=True,
    )
