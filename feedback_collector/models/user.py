"""User model (dashboard accounts)."""

import enum
from typing import TYPE_CHECKING, List

from sqlalchemy import String, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from feedback_collector.models.base import Base

if TYPE_CHECKING:
    from feedback_collector.models.feedback_type import FeedbackType


class UserRole(str, enum.Enum):
    """Capability level of an account."""
    ADMIN = "admin"
    USER = "user"


class User(Base):
    """An account that can sign in to the dashboard."""
    
    __tablename__ = "users"
    
    username: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    email: Mapped[str] = mapped_column(String(200), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(256))
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole),
        default=UserRole.USER,
    )
    
    feedback_types: Mapped[List["FeedbackType"]] = relationship(
        "FeedbackType",
        back_populates="creator",
    )
    
    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
    
    def __repr__(self) -> str:
        return f"<User {self.username} ({self.role.value})>"
