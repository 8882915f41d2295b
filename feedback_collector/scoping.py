"""Ownership-scoped access to feedback.

Every admin read, aggregate, export and delete goes through ``OwnerScope``.
A scope is resolved per request in two phases:

1. collect the ids of the *active* feedback types created by the admin;
2. turn those ids (optionally narrowed by a type-name filter) plus the
   rating and free-text filters into one SQL predicate.

Count, page, export and statistics queries all take their ``WHERE`` clause
from ``OwnerScope.predicate`` so totals and pages cannot disagree, and a
record whose type belongs to another admin is never reachable.
"""

import calendar
import logging
import math
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from sqlalchemy import select, func, desc, delete, or_, and_, extract, false
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from feedback_collector.models import Feedback, FeedbackType

logger = logging.getLogger("FeedbackCollector.scope")

LIKE_ESCAPE = "\\"


def like_pattern(term: str) -> str:
    """Literal substring pattern for LIKE/ILIKE."""
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


@dataclass(frozen=True)
class FeedbackFilters:
    """Optional narrowing applied on top of the ownership scope."""
    type_name: Optional[str] = None
    rating: Optional[int] = None
    search: Optional[str] = None

    @classmethod
    def build(
        cls,
        type_name: Optional[str] = None,
        rating: Optional[int] = None,
        search: Optional[str] = None,
    ) -> "FeedbackFilters":
        """Blank strings count as absent."""
        return cls(
            type_name=(type_name or "").strip() or None,
            rating=rating,
            search=(search or "").strip() or None,
        )


@dataclass(frozen=True)
class Page:
    items: List[Feedback]
    current: int
    limit: int
    count: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.count / self.limit) if self.count else 0

    @property
    def has_next(self) -> bool:
        return self.current * self.limit < self.count

    @property
    def has_prev(self) -> bool:
        return self.current > 1


@dataclass(frozen=True)
class MonthBucket:
    year: int
    month: int
    count: int


@dataclass(frozen=True)
class TypeBucket:
    id: uuid.UUID
    name: str
    color: str
    count: int


@dataclass(frozen=True)
class FeedbackStats:
    total: int
    average_rating: float
    monthly: List[MonthBucket]
    by_type: List[TypeBucket]

    @classmethod
    def empty(cls) -> "FeedbackStats":
        return cls(total=0, average_rating=0, monthly=[], by_type=[])


def months_ago(moment: datetime, months: int) -> datetime:
    """Same calendar day ``months`` back, clamped to the month's length."""
    total = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(total, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def round_half_up(value: float, digits: int = 1) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


class OwnerScope:
    """The feedback one admin may observe, count, export or delete."""

    def __init__(self, admin_id: uuid.UUID, types: Sequence[FeedbackType]) -> None:
        self.admin_id = admin_id
        self.types = list(types)

    @classmethod
    async def resolve(cls, session: AsyncSession, admin_id: uuid.UUID) -> "OwnerScope":
        """Load the admin's active types. Never cached between requests."""
        stmt = (
            select(FeedbackType)
            .where(FeedbackType.created_by == admin_id, FeedbackType.is_active.is_(True))
            .order_by(FeedbackType.name)
        )
        types = (await session.execute(stmt)).scalars().all()
        logger.debug(f"Resolved {len(types)} active type(s) for admin {admin_id}")
        return cls(admin_id, types)

    @property
    def is_empty(self) -> bool:
        return not self.types

    @property
    def type_ids(self) -> List[uuid.UUID]:
        return [t.id for t in self.types]

    @property
    def types_by_id(self) -> Dict[uuid.UUID, FeedbackType]:
        return {t.id: t for t in self.types}

    def narrowed_type_ids(self, type_name: Optional[str]) -> List[uuid.UUID]:
        """Ids of owned types whose name contains ``type_name`` (case-insensitive).

        The result replaces the full id set rather than intersecting it.
        """
        if not type_name:
            return self.type_ids
        needle = type_name.casefold()
        return [t.id for t in self.types if needle in t.name.casefold()]

    def predicate(self, filters: Optional[FeedbackFilters] = None) -> ColumnElement[bool]:
        """The single WHERE clause shared by every scoped query."""
        filters = filters or FeedbackFilters()
        if self.is_empty:
            return false()

        clauses = [Feedback.feedback_type_id.in_(self.narrowed_type_ids(filters.type_name))]
        if filters.rating is not None:
            clauses.append(Feedback.rating == filters.rating)
        if filters.search:
            pattern = like_pattern(filters.search)
            clauses.append(
                or_(
                    Feedback.name.ilike(pattern, escape=LIKE_ESCAPE),
                    Feedback.email.ilike(pattern, escape=LIKE_ESCAPE),
                    Feedback.message.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
        return and_(*clauses)

    # --- Queries ---

    async def count(self, session: AsyncSession, filters: Optional[FeedbackFilters] = None) -> int:
        if self.is_empty:
            return 0
        stmt = select(func.count(Feedback.id)).where(self.predicate(filters))
        return (await session.execute(stmt)).scalar() or 0

    async def page(
        self,
        session: AsyncSession,
        filters: Optional[FeedbackFilters] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page:
        if self.is_empty:
            return Page(items=[], current=page, limit=limit, count=0)
        count = await self.count(session, filters)
        stmt = (
            select(Feedback)
            .where(self.predicate(filters))
            .order_by(desc(Feedback.created_at), desc(Feedback.id))
            .offset((page - 1) * limit)
            .limit(limit)
        )
        items = list((await session.execute(stmt)).scalars().all())
        return Page(items=items, current=page, limit=limit, count=count)

    async def all(self, session: AsyncSession, filters: Optional[FeedbackFilters] = None) -> List[Feedback]:
        """Every matching record, newest first (used by exports)."""
        if self.is_empty:
            return []
        stmt = (
            select(Feedback)
            .where(self.predicate(filters))
            .order_by(desc(Feedback.created_at), desc(Feedback.id))
        )
        return list((await session.execute(stmt)).scalars().all())

    async def stats(
        self,
        session: AsyncSession,
        filters: Optional[FeedbackFilters] = None,
        now: Optional[datetime] = None,
    ) -> FeedbackStats:
        if self.is_empty:
            return FeedbackStats.empty()
        where = self.predicate(filters)

        total = (await session.execute(select(func.count(Feedback.id)).where(where))).scalar() or 0
        average = (await session.execute(select(func.avg(Feedback.rating)).where(where))).scalar()

        cutoff = months_ago(now or datetime.now(timezone.utc), 6)
        year = extract("year", Feedback.created_at)
        month = extract("month", Feedback.created_at)
        monthly_stmt = (
            select(year, month, func.count(Feedback.id))
            .where(where, Feedback.created_at >= cutoff)
            .group_by(year, month)
            .order_by(year, month)
        )
        monthly = [
            MonthBucket(year=int(y), month=int(m), count=c)
            for y, m, c in (await session.execute(monthly_stmt)).all()
        ]

        # Scope types are already loaded, so distribution only needs counts
        dist_stmt = (
            select(Feedback.feedback_type_id, func.count(Feedback.id))
            .where(where)
            .group_by(Feedback.feedback_type_id)
        )
        types = self.types_by_id
        by_type = []
        for type_id, count in (await session.execute(dist_stmt)).all():
            feedback_type = types[type_id]
            by_type.append(
                TypeBucket(id=type_id, name=feedback_type.name, color=feedback_type.color, count=count)
            )
        by_type.sort(key=lambda bucket: (-bucket.count, bucket.name.lower()))

        return FeedbackStats(
            total=total,
            average_rating=round_half_up(float(average)) if average is not None else 0,
            monthly=monthly,
            by_type=by_type,
        )

    async def delete(self, session: AsyncSession, feedback_id: uuid.UUID) -> bool:
        """Delete one record if it is in scope; ``False`` for missing or foreign ids alike."""
        if self.is_empty:
            return False
        stmt = (
            delete(Feedback)
            .where(Feedback.id == feedback_id, self.predicate())
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return bool(result.rowcount)
