import csv
import io
import uuid

import pytest

from feedback_collector.models import Feedback


@pytest.mark.asyncio
async def test_admin_deletes_own_feedback(client, make_admin, make_type, submit, db_session):
    headers = await make_admin("alice")
    await make_type(headers, "Product")
    feedback_id = (await submit("Product")).json()["feedback"]["id"]

    resp = await client.delete(f"/api/admin/feedback/{feedback_id}", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Feedback deleted successfully"}
    assert await db_session.get(Feedback, uuid.UUID(feedback_id)) is None

    # Second attempt: gone
    resp = await client.delete(f"/api/admin/feedback/{feedback_id}", headers=headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_deleting_another_admins_feedback_looks_like_not_found(client, make_admin, make_type, submit, db_session):
    alice = await make_admin("alice")
    bob = await make_admin("bob")
    await make_type(alice, "Product")
    await make_type(bob, "Support")
    feedback_id = (await submit("Product")).json()["feedback"]["id"]

    foreign = await client.delete(f"/api/admin/feedback/{feedback_id}", headers=bob)
    missing = await client.delete(f"/api/admin/feedback/{uuid.uuid4()}", headers=bob)
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json()

    assert await db_session.get(Feedback, uuid.UUID(feedback_id)) is not None


@pytest.mark.asyncio
async def test_admin_without_types_cannot_delete(client, make_admin, make_type, submit):
    alice = await make_admin("alice")
    carol = await make_admin("carol")
    await make_type(alice, "Product")
    feedback_id = (await submit("Product")).json()["feedback"]["id"]

    resp = await client.delete(f"/api/admin/feedback/{feedback_id}", headers=carol)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_admin_endpoints_require_token(client):
    assert (await client.delete(f"/api/admin/feedback/{uuid.uuid4()}")).status_code == 401
    assert (await client.get("/api/admin/export/csv")).status_code == 401
    assert (await client.get("/api/admin/export/pdf")).status_code == 401


@pytest.mark.asyncio
async def test_csv_export_is_scoped_and_filtered(client, make_admin, make_type, submit):
    alice = await make_admin("alice")
    bob = await make_admin("bob")
    await make_type(alice, "Product")
    await make_type(bob, "Support")
    await submit("product", message="Alice, anonymous, with comma", rating=2)
    await submit("Product", message="Alice named feedback", rating=5, name="Jane", email="jane@acme.io")
    await submit("Support", message="Bob's support feedback", rating=5)

    resp = await client.get("/api/admin/export/csv", headers=alice)
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert resp.headers["content-disposition"] == "attachment; filename=feedback-export.csv"

    rows = list(csv.reader(io.StringIO(resp.text)))
    assert rows[0] == ["Name", "Email", "Type", "Message", "Rating", "Submitted At"]
    assert [r[3] for r in rows[1:]] == ["Alice named feedback", "Alice, anonymous, with comma"]
    assert rows[1][:3] == ["Jane", "jane@acme.io", "Product"]
    assert rows[2][:3] == ["Anonymous", "No email", "Product"]

    filtered = await client.get("/api/admin/export/csv", params={"rating": 2}, headers=alice)
    rows = list(csv.reader(io.StringIO(filtered.text)))
    assert [r[3] for r in rows[1:]] == ["Alice, anonymous, with comma"]


@pytest.mark.asyncio
async def test_export_without_types_is_empty_not_an_error(client, make_admin):
    headers = await make_admin("alice")

    resp = await client.get("/api/admin/export/csv", headers=headers)
    assert resp.status_code == 200
    assert list(csv.reader(io.StringIO(resp.text))) == [
        ["Name", "Email", "Type", "Message", "Rating", "Submitted At"]
    ]

    resp = await client.get("/api/admin/export/pdf", headers=headers)
    assert resp.status_code == 200
    assert resp.content.startswith(b"%PDF")


@pytest.mark.asyncio
async def test_pdf_export_is_an_attachment(client, make_admin, make_type, submit):
    headers = await make_admin("alice")
    await make_type(headers, "Product")
    await submit("Product", message="A fairly long message " * 20)

    resp = await client.get("/api/admin/export/pdf", params={"search": "fairly"}, headers=headers)
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert resp.headers["content-disposition"] == "attachment; filename=feedback-export.pdf"
    assert resp.content.startswith(b"%PDF")
