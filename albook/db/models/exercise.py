"""Exercise database model."""
from sqlalchemy import Column, Integer, Text
from sqlalchemy.sql import func

from albook.db.base import Base
from albook.db.types import UTCDateTime


class Exercise(Base):
    """A solved problem scheduled for spaced-repetition review."""

    __tablename__ = "exercises"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)

    source = Column(Text)
    source_id = Column(Text)
    title = Column(Text, nullable=False)
    link = Column(Text)
    tags = Column(Text)
    answer = Column(Text)

    resolve_date = Column(UTCDateTime, nullable=False)

    # Scheduling state, written only by the review transition
    next_review_date = Column(UTCDateTime, nullable=False, index=True)
    review_stage = Column(Integer, nullable=False, default=0, server_default="0")
    review_count = Column(Integer, nullable=False, default=0, server_default="0")
    last_reviewed_at = Column(UTCDateTime, nullable=True)

    created_at = Column(UTCDateTime, nullable=False, server_default=func.now())

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Exercise id={self.id!r} title={self.title!r} stage={self.review_stage!r}>"
