"""Feedback Collector database models."""

from feedback_collector.models.base import Base
from feedback_collector.models.user import User, UserRole
from feedback_collector.models.feedback_type import FeedbackType, DEFAULT_COLOR, DEFAULT_ICON, type_name_key
from feedback_collector.models.feedback import Feedback

__all__ = [
    "Base",
    "User",
    "UserRole",
    "FeedbackType",
    "DEFAULT_COLOR",
    "DEFAULT_ICON",
    "type_name_key",
    "Feedback",
]
