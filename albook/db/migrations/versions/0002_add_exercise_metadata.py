"""Add review count, link, tags and last review timestamp

Revision ID: 0002_add_exercise_metadata
Revises: 0001_create_exercises
Create Date: 2025-01-11 18:30:00.000000

Each column is added only if absent: older databases picked some of them up
through ad hoc ALTER statements.
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0002_add_exercise_metadata"
down_revision = "0001_create_exercises"
branch_labels = None
depends_on = None


def _new_columns() -> list[sa.Column]:
    return [
        sa.Column("review_count", sa.Integer(), server_default=sa.text("0"), nullable=True),
        sa.Column("link", sa.Text(), nullable=True),
        sa.Column("tags", sa.Text(), nullable=True),
        sa.Column("last_reviewed_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    existing = {column["name"] for column in inspector.get_columns("exercises")}

    for column in _new_columns():
        if column.name not in existing:
            op.add_column("exercises", column)

    bind.execute(sa.text("UPDATE exercises SET review_count = 0 WHERE review_count IS NULL"))
    bind.execute(sa.text("UPDATE exercises SET review_stage = 0 WHERE review_stage IS NULL"))

    indexes = {index["name"] for index in inspector.get_indexes("exercises")}
    if "ix_exercises_next_review_date" not in indexes:
        op.create_index(
            "ix_exercises_next_review_date", "exercises", ["next_review_date"], unique=False
        )


def downgrade() -> None:
    op.drop_index("ix_exercises_next_review_date", table_name="exercises")
    with op.batch_alter_table("exercises") as batch:
        batch.drop_column("last_reviewed_at")
        batch.drop_column("tags")
        batch.drop_column("link")
        batch.drop_column("review_count")
