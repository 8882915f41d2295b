"""Feedback API endpoints: public intake plus the admin list and statistics."""

import logging
from typing import Any, Dict, Optional

from litestar import Controller, get, post
from litestar.params import Parameter
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from feedback_collector.api.dependencies import ADMIN_DEPENDENCIES
from feedback_collector.api.schemas import FeedbackItem, FeedbackListResponse, Pagination, StatsResponse
from feedback_collector.exceptions import InvalidFeedbackTypeError
from feedback_collector.models import Feedback, FeedbackType, User, type_name_key
from feedback_collector.scoping import FeedbackFilters, OwnerScope
from feedback_collector.validation import FEEDBACK_SUBMISSION, run_chain

logger = logging.getLogger("FeedbackCollector.feedback")


class SubmitFeedbackResponse(BaseModel):
    """Response after submitting feedback."""
    message: str
    feedback: FeedbackItem


def _optional_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


async def find_active_type(session: AsyncSession, name: str) -> Optional[FeedbackType]:
    """Exact, case-insensitive name match among active types."""
    stmt = select(FeedbackType).where(
        FeedbackType.name_key == type_name_key(name),
        FeedbackType.is_active.is_(True),
    )
    return (await session.execute(stmt)).scalar_one_or_none()


# --- Controller ---

class FeedbackController(Controller):
    """Feedback submission (public) and browsing (admin)."""
    
    path = "/api/feedback"
    tags = ["feedback"]
    
    @post("/")
    async def submit_feedback(
        self,
        data: Dict[str, Any],
        session: AsyncSession,
    ) -> SubmitFeedbackResponse:
        """Submit feedback for an active type. No authentication."""
        run_chain(data, FEEDBACK_SUBMISSION)
        
        type_name = _optional_text(data["type"])
        feedback_type = await find_active_type(session, type_name)
        if feedback_type is None:
            logger.warning(f"Feedback rejected for unknown or inactive type '{type_name}'")
            raise InvalidFeedbackTypeError()
        
        feedback = Feedback(
            name=_optional_text(data.get("name")) or None,
            email=_optional_text(data.get("email")).lower() or None,
            type=type_name,
            feedback_type_id=feedback_type.id,
            message=_optional_text(data["message"]),
            rating=int(data["rating"]),
        )
        session.add(feedback)
        await session.commit()
        
        logger.info(f"Feedback saved for type '{feedback_type.name}' (rating {feedback.rating})")
        
        return SubmitFeedbackResponse(
            message="Feedback submitted successfully",
            feedback=FeedbackItem.from_model(feedback, feedback_type),
        )
    
    @get("/", dependencies=ADMIN_DEPENDENCIES)
    async def list_feedback(
        self,
        admin: User,
        filters: FeedbackFilters,
        session: AsyncSession,
        page: int = Parameter(query="page", default=1, ge=1),
        limit: int = Parameter(query="limit", default=10, ge=1, le=100),
    ) -> FeedbackListResponse:
        """List feedback filed under the caller's active types, newest first."""
        scope = await OwnerScope.resolve(session, admin.id)
        result = await scope.page(session, filters, page=page, limit=limit)
        types = scope.types_by_id
        
        return FeedbackListResponse(
            feedbacks=[FeedbackItem.from_model(f, types.get(f.feedback_type_id)) for f in result.items],
            pagination=Pagination.from_page(result),
        )
    
    @get("/stats", dependencies=ADMIN_DEPENDENCIES)
    async def get_stats(
        self,
        admin: User,
        filters: FeedbackFilters,
        session: AsyncSession,
    ) -> StatsResponse:
        """Totals, mean rating, last six months by month, and counts per type."""
        scope = await OwnerScope.resolve(session, admin.id)
        stats = await scope.stats(session, filters)
        return StatsResponse.from_stats(stats)
