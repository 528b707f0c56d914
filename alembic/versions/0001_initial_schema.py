"""Initial recruitment schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18
"""
import uuid
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _base_columns() -> list:
    return [
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _lang_column() -> sa.Column:
    return sa.Column("language_code", sa.String(length=10), sa.ForeignKey("languages.code"), nullable=False)


def upgrade() -> None:
    op.create_table(
        "sites",
        *_base_columns(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("code", sa.String(length=20), nullable=False, unique=True),
        sa.Column("country", sa.String(length=100), nullable=False),
        sa.Column("timezone", sa.String(length=50), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
    )
    op.create_table(
        "departments",
        *_base_columns(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("code", sa.String(length=20), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
    )
    op.create_table(
        "users",
        *_base_columns(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=True),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("gender", sa.String(length=32), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("role", sa.String(length=32), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("is_email_verified", sa.Boolean(), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "languages",
        *_base_columns(),
        sa.Column("code", sa.String(length=10), nullable=False, unique=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False),
    )
    op.create_index(
        "uq_languages_single_default",
        "languages",
        ["is_default"],
        unique=True,
        postgresql_where=sa.text("is_default"),
        sqlite_where=sa.text("is_default = 1"),
    )

    op.create_table(
        "logical_tests",
        *_base_columns(),
        sa.Column("code", sa.String(length=32), nullable=False),
        sa.Column("question_type", sa.String(length=32), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("total_questions", sa.Integer(), nullable=False),
        sa.Column("tutorial_questions", sa.Integer(), nullable=False),
        sa.Column("is_tutorial", sa.Boolean(), nullable=False),
        sa.Column(
            "tutorial_test_id",
            sa.Uuid(),
            sa.ForeignKey("logical_tests.id", ondelete="SET NULL"),
            nullable=True,
            unique=True,
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_optional", sa.Boolean(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=False),
        sa.Column("attempt_count", sa.Integer(), nullable=False),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        sa.UniqueConstraint("code", "is_tutorial", name="uq_logical_tests_code_is_tutorial"),
    )
    op.create_table(
        "logical_test_translations",
        *_base_columns(),
        sa.Column("test_id", sa.Uuid(), sa.ForeignKey("logical_tests.id", ondelete="CASCADE"), nullable=False),
        _lang_column(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("instructions", sa.Text(), nullable=False),
        sa.UniqueConstraint("test_id", "language_code", name="uq_logical_test_translations_parent_lang"),
    )
    op.create_table(
        "score_classifications",
        *_base_columns(),
        sa.Column("test_id", sa.Uuid(), sa.ForeignKey("logical_tests.id", ondelete="CASCADE"), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False),
        sa.Column("min_score", sa.Integer(), nullable=False),
        sa.Column("max_score", sa.Integer(), nullable=False),
        sa.Column("color_code", sa.String(length=20), nullable=True),
        sa.UniqueConstraint("test_id", "display_order", name="uq_score_classifications_test_order"),
    )
    op.create_index("ix_score_classifications_test_id", "score_classifications", ["test_id"])
    op.create_table(
        "score_classification_translations",
        *_base_columns(),
        sa.Column(
            "classification_id",
            sa.Uuid(),
            sa.ForeignKey("score_classifications.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _lang_column(),
        sa.Column("label", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.UniqueConstraint(
            "classification_id",
            "language_code",
            name="uq_score_classification_translations_parent_lang",
        ),
    )

    op.create_table(
        "logical_questions",
        *_base_columns(),
        sa.Column("test_id", sa.Uuid(), sa.ForeignKey("logical_tests.id", ondelete="CASCADE"), nullable=False),
        sa.Column("question_number", sa.Integer(), nullable=False),
        sa.Column("question_type", sa.String(length=32), nullable=False),
        sa.Column("content_json", sa.JSON(), nullable=False),
        sa.UniqueConstraint("test_id", "question_number", name="uq_logical_questions_test_number"),
    )
    op.create_index("ix_logical_questions_test_id", "logical_questions", ["test_id"])
    op.create_table(
        "logical_question_translations",
        *_base_columns(),
        sa.Column(
            "question_id",
            sa.Uuid(),
            sa.ForeignKey("logical_questions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _lang_column(),
        sa.Column("title", sa.String(length=300), nullable=True),
        sa.Column("instruction", sa.Text(), nullable=False),
        sa.Column("hints", sa.JSON(), nullable=False),
        sa.UniqueConstraint("question_id", "language_code", name="uq_logical_question_translations_parent_lang"),
    )
    op.create_table(
        "mcq_propositions",
        *_base_columns(),
        sa.Column(
            "question_id",
            sa.Uuid(),
            sa.ForeignKey("logical_questions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("display_order", sa.Integer(), nullable=False),
        sa.Column("correct_choice", sa.String(length=32), nullable=False),
    )
    op.create_index("ix_mcq_propositions_question_id", "mcq_propositions", ["question_id"])
    op.create_table(
        "mcq_proposition_translations",
        *_base_columns(),
        sa.Column(
            "proposition_id",
            sa.Uuid(),
            sa.ForeignKey("mcq_propositions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _lang_column(),
        sa.Column("text", sa.Text(), nullable=False),
        sa.UniqueConstraint("proposition_id", "language_code", name="uq_mcq_proposition_translations_parent_lang"),
    )

    op.create_table(
        "personality_tests",
        *_base_columns(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("total_questions", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_by", sa.Uuid(), nullable=True),
    )

    op.create_table(
        "job_applications",
        *_base_columns(),
        sa.Column("candidate_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("site_id", sa.Uuid(), sa.ForeignKey("sites.id"), nullable=False),
        sa.Column("department_id", sa.Uuid(), sa.ForeignKey("departments.id"), nullable=False),
        sa.Column("target_position", sa.String(length=100), nullable=False),
        sa.Column("current_position", sa.String(length=100), nullable=True),
        sa.Column("education_level", sa.String(length=100), nullable=True),
        sa.Column("availability", sa.Date(), nullable=True),
        sa.Column("motivation", sa.Text(), nullable=True),
        sa.Column("cv_url", sa.String(length=500), nullable=True),
        sa.Column("additional_info", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("reviewed_by", sa.Uuid(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
    )
    op.create_index("ix_job_applications_candidate_id", "job_applications", ["candidate_id"])
    op.create_index("ix_job_applications_status", "job_applications", ["status"])
    op.create_index("ix_job_applications_site_department", "job_applications", ["site_id", "department_id"])

    op.create_table(
        "candidatures",
        *_base_columns(),
        sa.Column("job_application_id", sa.Uuid(), sa.ForeignKey("job_applications.id"), nullable=False, unique=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("dp_number", sa.String(length=50), nullable=True),
        sa.Column("assigned_psychologue_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("assigned_by", sa.Uuid(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("assignment_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("exam_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("assigned_logical_test_id", sa.Uuid(), sa.ForeignKey("logical_tests.id"), nullable=True),
        sa.Column("assigned_optional_logical_test_id", sa.Uuid(), sa.ForeignKey("logical_tests.id"), nullable=True),
        sa.Column("assigned_personality_test_id", sa.Uuid(), sa.ForeignKey("personality_tests.id"), nullable=True),
        sa.Column("decision", sa.String(length=32), nullable=True),
        sa.Column("decision_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("decision_by", sa.Uuid(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("decision_comments", sa.Text(), nullable=True),
        sa.Column("previous_candidature_id", sa.Uuid(), sa.ForeignKey("candidatures.id"), nullable=True),
        sa.Column("is_reevaluation", sa.Boolean(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
    )
    op.create_index("ix_candidatures_assigned_psychologue_id", "candidatures", ["assigned_psychologue_id"])
    op.create_index("ix_candidatures_status", "candidatures", ["status"])
    op.create_index("ix_candidatures_exam_date", "candidatures", ["exam_date"])

    op.create_table(
        "candidature_state_transitions",
        *_base_columns(),
        sa.Column("candidature_id", sa.Uuid(), sa.ForeignKey("candidatures.id"), nullable=False),
        sa.Column("from_status", sa.String(length=32), nullable=True),
        sa.Column("to_status", sa.String(length=32), nullable=False),
        sa.Column("transitioned_by", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("transitioned_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
    )
    op.create_index(
        "ix_candidature_state_transitions_candidature_id",
        "candidature_state_transitions",
        ["candidature_id"],
    )
    op.create_index(
        "ix_candidature_state_transitions_transitioned_at",
        "candidature_state_transitions",
        ["transitioned_at"],
    )

    op.create_table(
        "technical_interviews",
        *_base_columns(),
        sa.Column("candidature_id", sa.Uuid(), sa.ForeignKey("candidatures.id"), nullable=False, unique=True),
        sa.Column("interview_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("interviewer_name", sa.String(length=200), nullable=False),
        sa.Column("decision", sa.String(length=32), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("conducted_by", sa.Uuid(), sa.ForeignKey("users.id"), nullable=True),
    )

    # Seed the default content language
    languages = sa.table(
        "languages",
        sa.column("id", sa.Uuid()),
        sa.column("code", sa.String()),
        sa.column("name", sa.String()),
        sa.column("is_active", sa.Boolean()),
        sa.column("is_default", sa.Boolean()),
    )
    op.bulk_insert(
        languages,
        [
            {
                "id": uuid.UUID("6f1f7f63-9d0b-4c7e-8a51-2f0c3d4e5a01"),
                "code": "fr",
                "name": "Français",
                "is_active": True,
                "is_default": True,
            },
            {
                "id": uuid.UUID("6f1f7f63-9d0b-4c7e-8a51-2f0c3d4e5a02"),
                "code": "en",
                "name": "English",
                "is_active": True,
                "is_default": False,
            },
        ],
    )


def downgrade() -> None:
    op.drop_table("technical_interviews")
    op.drop_table("candidature_state_transitions")
    op.drop_table("candidatures")
    op.drop_table("job_applications")
    op.drop_table("personality_tests")
    op.drop_table("mcq_proposition_translations")
    op.drop_table("mcq_propositions")
    op.drop_table("logical_question_translations")
    op.drop_table("logical_questions")
    op.drop_table("score_classification_translations")
    op.drop_table("score_classifications")
    op.drop_table("logical_test_translations")
    op.drop_table("logical_tests")
    op.drop_index("uq_languages_single_default", table_name="languages")
    op.drop_table("languages")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    op.drop_table("departments")
    op.drop_table("sites")
