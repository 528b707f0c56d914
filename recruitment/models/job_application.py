"""
JobApplication model.

A candidate's request for a position at a site/department. Parent of at most
one Candidature.
"""

import uuid
from datetime import date, datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy import String, Text, Date, DateTime, ForeignKey, Uuid, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from recruitment.models.base_model import TimestampedModel
from recruitment.models.enums import ApplicationStatus, enum_column

if TYPE_CHECKING:
    from recruitment.models.user import User
    from recruitment.models.site import Site, Department


class JobApplication(TimestampedModel):
    """Application submitted by (or on behalf of) a candidate."""

    __tablename__ = "job_applications"

    candidate_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    site_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("sites.id"),
        nullable=False,
    )
    department_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("departments.id"),
        nullable=False,
    )

    target_position: Mapped[str] = mapped_column(String(100), nullable=False)
    current_position: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    education_level: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    availability: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    motivation: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cv_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    additional_info: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[ApplicationStatus] = mapped_column(
        enum_column(ApplicationStatus),
        nullable=False,
        default=ApplicationStatus.PENDING,
    )

    # Reviewer metadata
    reviewed_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=True,
    )
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    candidate: Mapped["User"] = relationship(
        "User",
        foreign_keys=[candidate_id],
        lazy="selectin",
    )
    site: Mapped["Site"] = relationship("Site", lazy="selectin")
    department: Mapped["Department"] = relationship("Department", lazy="selectin")

    __table_args__ = (
        Index("ix_job_applications_status", "status"),
        Index("ix_job_applications_site_department", "site_id", "department_id"),
    )
