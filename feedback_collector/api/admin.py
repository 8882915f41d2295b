"""Admin API endpoints: feedback deletion and exports."""

import logging
import uuid

from litestar import Controller, delete, get
from litestar.response import Response
from litestar.status_codes import HTTP_200_OK
from sqlalchemy.ext.asyncio import AsyncSession

from feedback_collector.api.dependencies import ADMIN_DEPENDENCIES
from feedback_collector.api.schemas import MessageResponse
from feedback_collector.exceptions import NotFoundOrForbidden
from feedback_collector.exports import (
    CSV_FILENAME,
    PDF_FILENAME,
    build_rows,
    render_csv,
    render_pdf,
)
from feedback_collector.models import User
from feedback_collector.scoping import FeedbackFilters, OwnerScope

logger = logging.getLogger("FeedbackCollector.admin")


def attachment(body: bytes, media_type: str, filename: str) -> Response[bytes]:
    return Response(
        content=body,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


# --- Controller ---

class AdminController(Controller):
    """Admin-only operations on the caller's feedback."""
    
    path = "/api/admin"
    tags = ["admin"]
    dependencies = ADMIN_DEPENDENCIES
    
    @delete("/feedback/{feedback_id:uuid}", status_code=HTTP_200_OK)
    async def delete_feedback(
        self,
        feedback_id: uuid.UUID,
        admin: User,
        session: AsyncSession,
    ) -> MessageResponse:
        """Delete a feedback record filed under one of the caller's types."""
        scope = await OwnerScope.resolve(session, admin.id)
        deleted = await scope.delete(session, feedback_id)
        if not deleted:
            logger.warning(f"Delete refused for feedback {feedback_id} (admin {admin.username})")
            raise NotFoundOrForbidden("Feedback not found")
        
        await session.commit()
        logger.info(f"Feedback {feedback_id} deleted by {admin.username}")
        return MessageResponse(message="Feedback deleted successfully")
    
    @get("/export/csv")
    async def export_csv(
        self,
        admin: User,
        filters: FeedbackFilters,
        session: AsyncSession,
    ) -> Response[bytes]:
        """Download the filtered feedback as CSV."""
        scope = await OwnerScope.resolve(session, admin.id)
        rows = build_rows(await scope.all(session, filters), scope.types_by_id)
        logger.info(f"CSV export of {len(rows)} record(s) for {admin.username}")
        return attachment(render_csv(rows), "text/csv", CSV_FILENAME)
    
    @get("/export/pdf")
    async def export_pdf(
        self,
        admin: User,
        filters: FeedbackFilters,
        session: AsyncSession,
    ) -> Response[bytes]:
        """Download the filtered feedback as a PDF report."""
        scope = await OwnerScope.resolve(session, admin.id)
        rows = build_rows(await scope.all(session, filters), scope.types_by_id)
        logger.info(f"PDF export of {len(rows)} record(s) for {admin.username}")
        return attachment(render_pdf(rows), "application/pdf", PDF_FILENAME)
