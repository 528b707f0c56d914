"""
User model.

Admins, psychologues and candidates share one table, told apart by role.
"""

from datetime import date
from typing import Optional

from sqlalchemy import String, Boolean, Date
from sqlalchemy.orm import Mapped, mapped_column

from recruitment.models.base_model import TimestampedModel
from recruitment.models.enums import Gender, UserRole, UserStatus, enum_column


class User(TimestampedModel):
    """A person with an account."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    gender: Mapped[Optional[Gender]] = mapped_column(enum_column(Gender), nullable=True)
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    role: Mapped[UserRole] = mapped_column(
        enum_column(UserRole),
        nullable=False,
        default=UserRole.CANDIDATE,
    )
    status: Mapped[UserStatus] = mapped_column(
        enum_column(UserStatus),
        nullable=False,
        default=UserStatus.PENDING_VERIFICATION,
    )
    is_email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
