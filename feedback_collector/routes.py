from feedback_collector.api import (
    AdminController,
    AuthController,
    FeedbackController,
    FeedbackTypeController,
    health,
)

ROUTES = [
    FeedbackController,
    FeedbackTypeController,
    AdminController,
    AuthController,
    health,
]
