"""
Language model.

Registry of content languages. Exactly one row carries is_default=True; the
partial unique index enforces it at the database level.
"""

from sqlalchemy import String, Boolean, Index, text
from sqlalchemy.orm import Mapped, mapped_column

from recruitment.models.base_model import TimestampedModel


class Language(TimestampedModel):
    """A language content can be translated into."""

    __tablename__ = "languages"

    code: Mapped[str] = mapped_column(String(10), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index(
            "uq_languages_single_default",
            "is_default",
            unique=True,
            postgresql_where=text("is_default"),
            sqlite_where=text("is_default = 1"),
        ),
    )
