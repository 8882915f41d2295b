"""Feedback type (admin-defined category) model."""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import String, Text, Boolean, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from feedback_collector.models.base import Base

if TYPE_CHECKING:
    from feedback_collector.models.user import User


DEFAULT_COLOR = "#3B82F6"
DEFAULT_ICON = "FileText"


def type_name_key(name: str) -> str:
    """Case-insensitive comparison key for type names (Unicode casefold)."""
    return name.strip().casefold()


class FeedbackType(Base):
    """A category that public submissions are filed under.
    
    Names share one namespace across all admins: uniqueness is global and
    case-insensitive even though every type has exactly one owner.
    """
    
    __tablename__ = "feedback_types"

    name: Mapped[str] = mapped_column(String(100), index=True)
    # Kept in sync with `name`; carries the global uniqueness constraint
    name_key: Mapped[str] = mapped_column(String(200), unique=True)
    description: Mapped[str] = mapped_column(Text, default="")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    color: Mapped[str] = mapped_column(String(20), default=DEFAULT_COLOR)
    icon: Mapped[str] = mapped_column(String(50), default=DEFAULT_ICON)
    
    # Owner; never reassigned after creation
    created_by: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    
    creator: Mapped["User"] = relationship("User", back_populates="feedback_types")
    
    @validates("name")
    def _sync_name_key(self, key: str, value: str) -> str:
        self.name_key = type_name_key(value)
        return value
    
    def __repr__(self) -> str:
        state = "active" if self.is_active else "inactive"
        return f"<FeedbackType {self.name} ({state})>"

