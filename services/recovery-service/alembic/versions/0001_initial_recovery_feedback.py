"""initial recovery feedback

Revision ID: 0001_initial_recovery_feedback
Revises:
Create Date: 2025-11-24

"""
import sqlalchemy as sa
from alembic import op

revision = "0001_initial_recovery_feedback"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "recovery_feedback",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("body_part", sa.String(length=128), nullable=False),
        sa.Column("feeling", sa.String(length=16), nullable=False),
        sa.Column("intensity", sa.Float(), nullable=True),
        sa.Column("note", sa.String(length=300), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_recovery_feedback_id", "recovery_feedback", ["id"])
    op.create_index("ix_recovery_feedback_user_id", "recovery_feedback", ["user_id"])
    op.create_index("ix_recovery_feedback_user_created", "recovery_feedback", ["user_id", "created_at"])
    op.create_index("ix_recovery_feedback_user_part", "recovery_feedback", ["user_id", "body_part"])


def downgrade():
    op.drop_index("ix_recovery_feedback_user_part", table_name="recovery_feedback")
    op.drop_index("ix_recovery_feedback_user_created", table_name="recovery_feedback")
    op.drop_index("ix_recovery_feedback_user_id", table_name="recovery_feedback")
    op.drop_index("ix_recovery_feedback_id", table_name="recovery_feedback")
    op.drop_table("recovery_feedback")
