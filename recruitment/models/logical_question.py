"""
Logical question and MCQ proposition models, with their translations.
"""

import uuid
from typing import Optional

from sqlalchemy import String, Text, Integer, ForeignKey, Uuid, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from recruitment.models.base_model import TimestampedModel
from recruitment.models.enums import LogicalQuestionType, PropositionChoice, enum_column


class LogicalQuestion(TimestampedModel):
    """One question of a logical test (a domino grid or an MCQ statement)."""

    __tablename__ = "logical_questions"

    test_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("logical_tests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    question_number: Mapped[int] = mapped_column(Integer, nullable=False)
    question_type: Mapped[LogicalQuestionType] = mapped_column(
        enum_column(LogicalQuestionType),
        nullable=False,
    )
    # Language-neutral payload (domino layout, expected answer, ...)
    content_json: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    __table_args__ = (
        UniqueConstraint("test_id", "question_number", name="uq_logical_questions_test_number"),
    )


class LogicalQuestionTranslation(TimestampedModel):
    __tablename__ = "logical_question_translations"

    question_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("logical_questions.id", ondelete="CASCADE"),
        nullable=False,
    )
    language_code: Mapped[str] = mapped_column(
        String(10),
        ForeignKey("languages.code"),
        nullable=False,
    )
    title: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    instruction: Mapped[str] = mapped_column(Text, nullable=False)
    hints: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    __table_args__ = (
        UniqueConstraint("question_id", "language_code", name="uq_logical_question_translations_parent_lang"),
    )


class McqProposition(TimestampedModel):
    """A statement the candidate classifies as TRUE / FALSE / UNKNOWN."""

    __tablename__ = "mcq_propositions"

    question_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("logical_questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    display_order: Mapped[int] = mapped_column(Integer, nullable=False)
    correct_choice: Mapped[PropositionChoice] = mapped_column(
        enum_column(PropositionChoice),
        nullable=False,
    )


class McqPropositionTranslation(TimestampedModel):
    __tablename__ = "mcq_proposition_translations"

    proposition_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("mcq_propositions.id", ondelete="CASCADE"),
        nullable=False,
    )
    language_code: Mapped[str] = mapped_column(
        String(10),
        ForeignKey("languages.code"),
        nullable=False,
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        UniqueConstraint("proposition_id", "language_code", name="uq_mcq_proposition_translations_parent_lang"),
    )
