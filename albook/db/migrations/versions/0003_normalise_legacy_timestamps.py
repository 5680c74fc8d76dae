"""Rewrite legacy timestamps as naive UTC

Revision ID: 0003_normalise_legacy_timestamps
Revises: 0002_add_exercise_metadata
Create Date: 2025-01-18 09:15:00.000000

The pre-alembic server stored local wall time with an offset suffix
(``2024-01-06 10:00:00.123456789+08:00``). View filters compare the stored
text directly, so such values must be converted to the naive UTC format
SQLAlchemy writes (``2024-01-06 02:00:00.123000``). Values already in that
format are left untouched.
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0003_normalise_legacy_timestamps"
down_revision = "0002_add_exercise_metadata"
branch_labels = None
depends_on = None

TIMESTAMP_COLUMNS = ("resolve_date", "next_review_date", "last_reviewed_at", "created_at")


def _normalise(column: str) -> sa.TextClause:
    # strftime applies the offset; %f keeps milliseconds, padded to microseconds
    converted = f"strftime('%Y-%m-%d %H:%M:%f', {column}) || '000'"
    return sa.text(
        f"UPDATE exercises SET {column} = {converted} "
        f"WHERE typeof({column}) = 'text' "
        f"AND ({column} LIKE '%T%' OR {column} LIKE '%Z' OR substr({column}, -6, 1) IN ('+', '-')) "
        f"AND strftime('%Y-%m-%d %H:%M:%f', {column}) IS NOT NULL"
    )


def upgrade() -> None:
    bind = op.get_bind()
    if bind.dialect.name != "sqlite":
        return
    existing = {column["name"] for column in sa.inspect(bind).get_columns("exercises")}
    for column in TIMESTAMP_COLUMNS:
        if column in existing:
            bind.execute(_normalise(column))


def downgrade() -> None:
    # Original offsets are not recoverable; UTC values remain valid for 0002.
    pass
