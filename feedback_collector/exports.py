# ===========================================================
# CSV / PDF renderers for feedback exports
# ===========================================================
# Both renderers take already-scoped rows and return the file
# body as bytes; they never query the database themselves.
# ===========================================================

import csv
import io
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Mapping, Optional, Sequence
import uuid

from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from feedback_collector.models import Feedback, FeedbackType

CSV_HEADER = ["Name", "Email", "Type", "Message", "Rating", "Submitted At"]
CSV_FILENAME = "feedback-export.csv"
PDF_FILENAME = "feedback-export.pdf"


@dataclass(frozen=True)
class ExportRow:
    """One feedback record flattened for export."""
    name: str
    email: str
    type: str
    message: str
    rating: int
    submitted_at: datetime

    @classmethod
    def from_feedback(cls, feedback: Feedback, feedback_type: Optional[FeedbackType] = None) -> "ExportRow":
        return cls(
            name=feedback.name or "Anonymous",
            email=feedback.email or "No email",
            # Prefer the current type name over the submitted label
            type=feedback_type.name if feedback_type else feedback.type,
            message=feedback.message,
            rating=feedback.rating,
            submitted_at=feedback.created_at,
        )


def build_rows(
    feedbacks: Iterable[Feedback],
    types_by_id: Mapping[uuid.UUID, FeedbackType],
) -> List[ExportRow]:
    return [ExportRow.from_feedback(f, types_by_id.get(f.feedback_type_id)) for f in feedbacks]


def _iso(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat()


def render_csv(rows: Sequence[ExportRow]) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_HEADER)
    for row in rows:
        writer.writerow([row.name, row.email, row.type, row.message, row.rating, _iso(row.submitted_at)])
    return buffer.getvalue().encode("utf-8")


def render_pdf(rows: Sequence[ExportRow], generated_at: Optional[datetime] = None) -> bytes:
    """
    Printable report: title, generation date, then one numbered block per row.

    Args:
        rows: Flattened feedback records
        generated_at: Timestamp printed under the title (defaults to now)

    Returns:
        PDF file body
    """
    generated_at = generated_at or datetime.now(timezone.utc)
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.setTitle("Feedback Report")
    width, height = A4
    left, bottom, line_height = 50, 60, 14
    text_width = width - 2 * left

    # ---------------- HEADER ----------------
    pdf.setFont("Helvetica-Bold", 20)
    pdf.drawCentredString(width / 2, height - 60, "Feedback Report")
    pdf.setFont("Helvetica", 12)
    pdf.drawCentredString(width / 2, height - 80, f"Generated on: {generated_at.strftime('%Y-%m-%d')}")
    y = height - 120

    def ensure_room(lines: int = 1) -> None:
        nonlocal y
        if y - lines * line_height < bottom:
            pdf.showPage()
            y = height - 60

    # ---------------- ENTRIES ----------------
    for index, row in enumerate(rows, start=1):
        ensure_room(7)
        pdf.setFont("Helvetica-Bold", 14)
        pdf.drawString(left, y, f"Feedback #{index}")
        y -= line_height + 4

        pdf.setFont("Helvetica", 10)
        for label in (
            f"Name: {row.name}",
            f"Email: {row.email}",
            f"Type: {row.type}",
            f"Rating: {row.rating}/5",
            f"Submitted: {row.submitted_at.strftime('%Y-%m-%d')}",
            "Message:",
        ):
            ensure_room()
            pdf.drawString(left, y, label)
            y -= line_height

        for line in simpleSplit(row.message, "Helvetica", 10, text_width - 20):
            ensure_room()
            pdf.drawString(left + 20, y, line)
            y -= line_height
        y -= line_height * 2

    pdf.save()
    return buffer.getvalue()
