"""
Logical test models.

LogicalTest carries the language-neutral test definition; all display text
lives in LogicalTestTranslation rows keyed by (test_id, language_code).
ScoreClassification rows partition a test's raw score range into labelled
bands, with their labels in ScoreClassificationTranslation.
"""

import uuid
from typing import Optional, List

from sqlalchemy import (
    String,
    Text,
    Boolean,
    Integer,
    ForeignKey,
    Uuid,
    JSON,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from recruitment.models.base_model import TimestampedModel
from recruitment.models.enums import LogicalTestCode, LogicalQuestionType, enum_column


class LogicalTest(TimestampedModel):
    """
    A logical-reasoning test definition.

    At most one main and one tutorial test exist per code. A main test may
    point at the tutorial test of the same code.
    """

    __tablename__ = "logical_tests"

    code: Mapped[LogicalTestCode] = mapped_column(enum_column(LogicalTestCode), nullable=False)
    question_type: Mapped[LogicalQuestionType] = mapped_column(
        enum_column(LogicalQuestionType),
        nullable=False,
    )
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    total_questions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    tutorial_questions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    is_tutorial: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tutorial_test_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("logical_tests.id", ondelete="SET NULL"),
        nullable=True,
        unique=True,
    )

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_optional: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    metadata_json: Mapped[dict] = mapped_column("metadata", JSON, nullable=False, default=dict)

    # Number of candidate attempts recorded against this test (maintained by the attempt engine)
    attempt_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid(as_uuid=True), nullable=True)

    translations: Mapped[List["LogicalTestTranslation"]] = relationship(
        "LogicalTestTranslation",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="LogicalTestTranslation.language_code",
    )
    score_classifications: Mapped[List["ScoreClassification"]] = relationship(
        "ScoreClassification",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="ScoreClassification.display_order",
    )

    __table_args__ = (
        UniqueConstraint("code", "is_tutorial", name="uq_logical_tests_code_is_tutorial"),
    )


class LogicalTestTranslation(TimestampedModel):
    """Localized name/description/instructions for a logical test."""

    __tablename__ = "logical_test_translations"

    test_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("logical_tests.id", ondelete="CASCADE"),
        nullable=False,
    )
    language_code: Mapped[str] = mapped_column(
        String(10),
        ForeignKey("languages.code"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    instructions: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        UniqueConstraint("test_id", "language_code", name="uq_logical_test_translations_parent_lang"),
    )


class ScoreClassification(TimestampedModel):
    """Inclusive score band [min_score, max_score] of a logical test."""

    __tablename__ = "score_classifications"

    test_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("logical_tests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    display_order: Mapped[int] = mapped_column(Integer, nullable=False)
    min_score: Mapped[int] = mapped_column(Integer, nullable=False)
    max_score: Mapped[int] = mapped_column(Integer, nullable=False)
    color_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    translations: Mapped[List["ScoreClassificationTranslation"]] = relationship(
        "ScoreClassificationTranslation",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="ScoreClassificationTranslation.language_code",
    )

    __table_args__ = (
        UniqueConstraint("test_id", "display_order", name="uq_score_classifications_test_order"),
    )


class ScoreClassificationTranslation(TimestampedModel):
    """Localized label/description of a score band."""

    __tablename__ = "score_classification_translations"

    classification_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("score_classifications.id", ondelete="CASCADE"),
        nullable=False,
    )
    language_code: Mapped[str] = mapped_column(
        String(10),
        ForeignKey("languages.code"),
        nullable=False,
    )
    label: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "classification_id",
            "language_code",
            name="uq_score_classification_translations_parent_lang",
        ),
    )
