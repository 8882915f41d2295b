"""Feedback model for public submissions."""

import uuid
from typing import Optional

from sqlalchemy import String, Text, Integer, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from feedback_collector.models.base import Base


class Feedback(Base):
    """A single submission: optional identity, category, message and rating.
    
    Rows are written once and never updated.
    """
    
    __tablename__ = "feedback"
    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_feedback_rating_range"),
    )
    
    name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    # Type name as typed by the submitter
    type: Mapped[str] = mapped_column(String(100), index=True)
    # No FK: deleting a type leaves its feedback in place
    feedback_type_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        index=True,
    )
    message: Mapped[str] = mapped_column(Text)
    rating: Mapped[int] = mapped_column(Integer, index=True)
    
    def __repr__(self) -> str:
        return f"<Feedback {self.type} {self.rating}/5 ({self.created_at})>"
