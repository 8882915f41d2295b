"""Response schemas shared across controllers.

Field names are the camelCase keys of the JSON wire format.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from feedback_collector.models import Feedback, FeedbackType, User
from feedback_collector.scoping import FeedbackStats, Page


class FeedbackTypeSummary(BaseModel):
    """Display fields of the type a feedback record is filed under."""
    id: uuid.UUID
    name: str
    color: str
    icon: str


class FeedbackItem(BaseModel):
    """A feedback record."""
    id: uuid.UUID
    name: Optional[str]
    email: Optional[str]
    type: str
    feedbackTypeId: uuid.UUID
    feedbackType: Optional[FeedbackTypeSummary] = None
    message: str
    rating: int
    createdAt: datetime
    updatedAt: datetime
    
    @classmethod
    def from_model(cls, feedback: Feedback, feedback_type: Optional[FeedbackType] = None) -> "FeedbackItem":
        summary = None
        if feedback_type is not None:
            summary = FeedbackTypeSummary(
                id=feedback_type.id,
                name=feedback_type.name,
                color=feedback_type.color,
                icon=feedback_type.icon,
            )
        return cls(
            id=feedback.id,
            name=feedback.name,
            email=feedback.email,
            type=feedback.type,
            feedbackTypeId=feedback.feedback_type_id,
            feedbackType=summary,
            message=feedback.message,
            rating=feedback.rating,
            createdAt=feedback.created_at,
            updatedAt=feedback.updated_at,
        )


class Pagination(BaseModel):
    current: int
    total: int
    count: int
    limit: int
    hasNext: bool
    hasPrev: bool
    
    @classmethod
    def from_page(cls, page: Page) -> "Pagination":
        return cls(
            current=page.current,
            total=page.total_pages,
            count=page.count,
            limit=page.limit,
            hasNext=page.has_next,
            hasPrev=page.has_prev,
        )


class FeedbackListResponse(BaseModel):
    feedbacks: List[FeedbackItem]
    pagination: Pagination


class MonthlyCount(BaseModel):
    year: int
    month: int
    count: int


class TypeCount(BaseModel):
    id: uuid.UUID
    name: str
    color: str
    count: int


class StatsResponse(BaseModel):
    """Aggregates over the caller's feedback."""
    totalFeedback: int
    averageRating: float
    monthlyFeedback: List[MonthlyCount]
    typeDistribution: List[TypeCount]
    
    @classmethod
    def from_stats(cls, stats: FeedbackStats) -> "StatsResponse":
        return cls(
            totalFeedback=stats.total,
            averageRating=stats.average_rating,
            monthlyFeedback=[MonthlyCount(year=m.year, month=m.month, count=m.count) for m in stats.monthly],
            typeDistribution=[TypeCount(id=t.id, name=t.name, color=t.color, count=t.count) for t in stats.by_type],
        )


class FeedbackTypeItem(BaseModel):
    """A feedback type as shown in listings and management screens."""
    id: uuid.UUID
    name: str
    description: str
    isActive: bool
    color: str
    icon: str
    createdBy: uuid.UUID
    createdByUsername: Optional[str] = None
    createdAt: datetime
    updatedAt: datetime
    
    @classmethod
    def from_model(cls, feedback_type: FeedbackType, creator_username: Optional[str] = None) -> "FeedbackTypeItem":
        return cls(
            id=feedback_type.id,
            name=feedback_type.name,
            description=feedback_type.description or "",
            isActive=feedback_type.is_active,
            color=feedback_type.color,
            icon=feedback_type.icon,
            createdBy=feedback_type.created_by,
            createdByUsername=creator_username,
            createdAt=feedback_type.created_at,
            updatedAt=feedback_type.updated_at,
        )


class UserItem(BaseModel):
    id: uuid.UUID
    username: str
    email: str
    role: str
    createdAt: datetime
    
    @classmethod
    def from_model(cls, user: User) -> "UserItem":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            role=user.role.value,
            createdAt=user.created_at,
        )


class MessageResponse(BaseModel):
    message: str
