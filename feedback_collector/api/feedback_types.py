"""Feedback type endpoints: public listing and owner-only management."""

import logging
import uuid
from typing import Any, Dict, List, Optional

from litestar import Controller, get, post, put, patch, delete
from litestar.di import Provide
from litestar.status_codes import HTTP_200_OK
from pydantic import BaseModel
from sqlalchemy import select, desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from feedback_collector.api.schemas import FeedbackTypeItem, MessageResponse
from feedback_collector.auth.guards import require_admin
from feedback_collector.exceptions import ConflictError, NotFoundOrForbidden
from feedback_collector.models import FeedbackType, User, DEFAULT_COLOR, DEFAULT_ICON, type_name_key
from feedback_collector.scoping import LIKE_ESCAPE, like_pattern
from feedback_collector.validation import FEEDBACK_TYPE_FORM, run_chain

logger = logging.getLogger("FeedbackCollector.types")

DUPLICATE_NAME = "Feedback type with this name already exists"


class FeedbackTypeEnvelope(BaseModel):
    """Response after creating, updating or toggling a type."""
    message: str
    feedbackType: FeedbackTypeItem


# --- Helper Functions ---

def _text(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    return str(value).strip() if value is not None else ""


async def name_taken(session: AsyncSession, name: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
    """Whether any type, whoever owns it, already uses ``name`` (case-insensitive)."""
    stmt = select(FeedbackType.id).where(FeedbackType.name_key == type_name_key(name))
    if exclude_id is not None:
        stmt = stmt.where(FeedbackType.id != exclude_id)
    return (await session.execute(stmt.limit(1))).first() is not None


async def get_owned_type(session: AsyncSession, type_id: uuid.UUID, admin: User) -> FeedbackType:
    """Fetch a type created by ``admin``; anything else is reported as not found."""
    stmt = select(FeedbackType).where(
        FeedbackType.id == type_id,
        FeedbackType.created_by == admin.id,
    )
    feedback_type = (await session.execute(stmt)).scalar_one_or_none()
    if feedback_type is None:
        raise NotFoundOrForbidden("Feedback type not found")
    return feedback_type


def apply_form(feedback_type: FeedbackType, data: Dict[str, Any]) -> None:
    """Copy form fields onto the type; omitted display fields reset to defaults."""
    feedback_type.name = _text(data, "name")
    feedback_type.description = _text(data, "description")
    feedback_type.color = _text(data, "color") or DEFAULT_COLOR
    feedback_type.icon = _text(data, "icon") or DEFAULT_ICON


async def commit_unique(session: AsyncSession) -> None:
    """Commit, turning a lost race on the unique name index into a conflict."""
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ConflictError(DUPLICATE_NAME)


# --- Controller ---

class FeedbackTypeController(Controller):
    """Feedback type catalogue."""

    path = "/api/feedback-types"
    tags = ["feedback-types"]

    @get("/")
    async def list_active_types(
        self,
        session: AsyncSession,
        search: Optional[str] = None,
    ) -> List[FeedbackTypeItem]:
        """Active types for the public form, by name."""
        stmt = (
            select(FeedbackType)
            .where(FeedbackType.is_active.is_(True))
            .options(selectinload(FeedbackType.creator))
            .order_by(FeedbackType.name)
        )
        if search and search.strip():
            stmt = stmt.where(FeedbackType.name.ilike(like_pattern(search.strip()), escape=LIKE_ESCAPE))

        types = (await session.execute(stmt)).scalars().all()
        return [FeedbackTypeItem.from_model(t, t.creator.username) for t in types]

    @get("/admin", dependencies={"admin": Provide(require_admin)})
    async def list_owned_types(
        self,
        admin: User,
        session: AsyncSession,
        search: Optional[str] = None,
    ) -> List[FeedbackTypeItem]:
        """Every type the caller created, active or not, newest first."""
        stmt = (
            select(FeedbackType)
            .where(FeedbackType.created_by == admin.id)
            .order_by(desc(FeedbackType.created_at))
        )
        if search and search.strip():
            stmt = stmt.where(FeedbackType.name.ilike(like_pattern(search.strip()), escape=LIKE_ESCAPE))

        types = (await session.execute(stmt)).scalars().all()
        return [FeedbackTypeItem.from_model(t, admin.username) for t in types]

    @post("/", dependencies={"admin": Provide(require_admin)})
    async def create_type(
        self,
        data: Dict[str, Any],
        admin: User,
        session: AsyncSession,
    ) -> FeedbackTypeEnvelope:
        """Create a type owned by the caller. Names are unique across all admins."""
        run_chain(data, FEEDBACK_TYPE_FORM)

        name = _text(data, "name")
        if await name_taken(session, name):
            logger.warning(f"Duplicate feedback type name '{name}' rejected for {admin.username}")
            raise ConflictError(DUPLICATE_NAME)

        feedback_type = FeedbackType(created_by=admin.id, is_active=True)
        apply_form(feedback_type, data)
        session.add(feedback_type)
        await commit_unique(session)

        logger.info(f"Feedback type '{feedback_type.name}' created by {admin.username}")
        return FeedbackTypeEnvelope(
            message="Feedback type created successfully",
            feedbackType=FeedbackTypeItem.from_model(feedback_type, admin.username),
        )

    @put("/{type_id:uuid}", dependencies={"admin": Provide(require_admin)})
    async def update_type(
        self,
        type_id: uuid.UUID,
        data: Dict[str, Any],
        admin: User,
        session: AsyncSession,
    ) -> FeedbackTypeEnvelope:
        """Replace name, description, color and icon of one of the caller's types."""
        run_chain(data, FEEDBACK_TYPE_FORM)
        feedback_type = await get_owned_type(session, type_id, admin)

        name = _text(data, "name")
        if await name_taken(session, name, exclude_id=feedback_type.id):
            logger.warning(f"Rename of {type_id} to '{name}' rejected: name in use")
            raise ConflictError(DUPLICATE_NAME)

        apply_form(feedback_type, data)
        await commit_unique(session)

        logger.info(f"Feedback type {type_id} updated by {admin.username}")
        return FeedbackTypeEnvelope(
            message="Feedback type updated successfully",
            feedbackType=FeedbackTypeItem.from_model(feedback_type, admin.username),
        )

    @delete("/{type_id:uuid}", status_code=HTTP_200_OK, dependencies={"admin": Provide(require_admin)})
    async def delete_type(
        self,
        type_id: uuid.UUID,
        admin: User,
        session: AsyncSession,
    ) -> MessageResponse:
        """Remove one of the caller's types. Its feedback rows are left in place."""
        feedback_type = await get_owned_type(session, type_id, admin)
        await session.delete(feedback_type)
        await session.commit()

        logger.info(f"Feedback type {type_id} deleted by {admin.username}")
        return MessageResponse(message="Feedback type deleted successfully")

    @patch("/{type_id:uuid}/toggle", dependencies={"admin": Provide(require_admin)})
    async def toggle_type(
        self,
        type_id: uuid.UUID,
        admin: User,
        session: AsyncSession,
    ) -> FeedbackTypeEnvelope:
        """Flip ``isActive``. Existing feedback is untouched."""
        feedback_type = await get_owned_type(session, type_id, admin)
        feedback_type.is_active = not feedback_type.is_active
        await session.commit()

        state = "activated" if feedback_type.is_active else "deactivated"
        logger.info(f"Feedback type {type_id} {state} by {admin.username}")
        return FeedbackTypeEnvelope(
            message=f"Feedback type {state} successfully",
            feedbackType=FeedbackTypeItem.from_model(feedback_type, admin.username),
        )
