"""Tests for the CSV and PDF renderers."""

import csv
import io
import uuid
from datetime import datetime, timezone

from feedback_collector.exports import CSV_HEADER, ExportRow, build_rows, render_csv, render_pdf
from feedback_collector.models import Feedback, FeedbackType

SUBMITTED = datetime(2024, 3, 5, 10, 30, tzinfo=timezone.utc)


def make_feedback(type_id, **fields):
    values = {
        "id": uuid.uuid4(),
        "name": None,
        "email": None,
        "type": "product",
        "feedback_type_id": type_id,
        "message": "Works as advertised",
        "rating": 4,
        "created_at": SUBMITTED,
        "updated_at": SUBMITTED,
    }
    values.update(fields)
    return Feedback(**values)


def test_rows_fill_placeholders_and_prefer_current_type_name():
    product = FeedbackType(id=uuid.uuid4(), name="Product", color="#3B82F6", icon="Package")
    orphan_id = uuid.uuid4()
    rows = build_rows(
        [make_feedback(product.id), make_feedback(orphan_id, name="Jane", email="jane@acme.io")],
        {product.id: product},
    )
    assert (rows[0].name, rows[0].email, rows[0].type) == ("Anonymous", "No email", "Product")
    assert (rows[1].name, rows[1].email, rows[1].type) == ("Jane", "jane@acme.io", "product")


def test_csv_quotes_and_timestamps():
    row = ExportRow("Jane", "jane@acme.io", "Product", 'Said "hi", then left\nbye', 5, SUBMITTED)
    parsed = list(csv.reader(io.StringIO(render_csv([row]).decode("utf-8"))))
    assert parsed[0] == CSV_HEADER
    assert parsed[1] == ["Jane", "jane@acme.io", "Product", 'Said "hi", then left\nbye', "5", "2024-03-05T10:30:00+00:00"]


def test_csv_treats_naive_timestamps_as_utc():
    row = ExportRow("A", "B", "C", "message body", 1, datetime(2024, 3, 5, 10, 30))
    parsed = list(csv.reader(io.StringIO(render_csv([row]).decode("utf-8"))))
    assert parsed[1][5] == "2024-03-05T10:30:00+00:00"


def test_pdf_grows_with_rows():
    rows = [ExportRow("Jane", "jane@acme.io", "Product", "word " * 200, 3, SUBMITTED) for _ in range(30)]
    single = render_pdf(rows[:1], generated_at=SUBMITTED)
    body = render_pdf(rows, generated_at=SUBMITTED)
    assert body.startswith(b"%PDF")
    assert len(body) > len(single)


def test_empty_pdf_is_still_a_document():
    assert render_pdf([]).startswith(b"%PDF")
