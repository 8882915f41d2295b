"""Feedback Collector API routes."""

from feedback_collector.api.admin import AdminController
from feedback_collector.api.auth import AuthController
from feedback_collector.api.feedback import FeedbackController
from feedback_collector.api.feedback_types import FeedbackTypeController
from feedback_collector.api.health import health

__all__ = ["AdminController", "AuthController", "FeedbackController", "FeedbackTypeController", "health"]
