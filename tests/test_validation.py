"""Tests for the validator chains."""

import pytest

from feedback_collector.exceptions import FieldValidationError
from feedback_collector.validation import (
    FEEDBACK_SUBMISSION,
    FEEDBACK_TYPE_FORM,
    FieldError,
    email,
    int_range,
    one_of_present,
    optional_email,
    optional_hex_color,
    run_chain,
)


def errors_for(payload, chain=FEEDBACK_SUBMISSION):
    with pytest.raises(FieldValidationError) as info:
        run_chain(payload, chain)
    return info.value.errors


def test_valid_submission_passes():
    run_chain({"type": "Product", "message": "This is long enough", "rating": 5}, FEEDBACK_SUBMISSION)
    run_chain({"type": "Product", "message": "This is long enough", "rating": "3", "name": "", "email": None}, FEEDBACK_SUBMISSION)


def test_missing_everything_reports_each_required_field():
    fields = [e.field for e in errors_for({})]
    assert fields == ["type", "message", "rating"]


def test_errors_carry_messages():
    errors = errors_for({"type": "Product", "message": "short", "rating": 1})
    assert errors == [FieldError("message", "Message must be at least 10 characters")]
    assert errors[0].to_dict() == {"field": "message", "message": "Message must be at least 10 characters"}


def test_message_length_ignores_surrounding_whitespace():
    fields = [e.field for e in errors_for({"type": "Product", "message": "   short    ", "rating": 1})]
    assert fields == ["message"]


@pytest.mark.parametrize("rating", [0, 6, 2.5, "five", True, None])
def test_rating_outside_one_to_five_is_rejected(rating):
    check = int_range("rating", 1, 5, "bad")
    assert check({"rating": rating}) == FieldError("rating", "bad")


@pytest.mark.parametrize("rating", [1, 5, "4", " 2 "])
def test_rating_inside_range_passes(rating):
    assert int_range("rating", 1, 5, "bad")({"rating": rating}) is None


def test_optional_email():
    check = optional_email("email", "bad email")
    assert check({}) is None
    assert check({"email": "  "}) is None
    assert check({"email": "jane@acme.io"}) is None
    assert check({"email": "jane@"}) == FieldError("email", "bad email")


@pytest.mark.parametrize("address", ["qa@example.test", "a@b.co", "jane.doe+tag@sub.acme.io"])
def test_email_is_a_shape_check(address):
    assert email("email", "bad")({"email": address}) is None


@pytest.mark.parametrize("address", ["a@b", "no-at-sign.io", "two@@acme.io", "spa ce@acme.io"])
def test_email_rejects_malformed_addresses(address):
    assert email("email", "bad")({"email": address}) == FieldError("email", "bad")


def test_optional_hex_color():
    check = optional_hex_color("color", "bad color")
    for value in ("#3B82F6", "3b82f6", "#fff", "#ffff", "#11223344", ""):
        assert check({"color": value}) is None
    for value in ("blue", "#12345", "#ggg"):
        assert check({"color": value}) == FieldError("color", "bad color")


def test_one_of_present_names_the_first_field():
    check = one_of_present(("email", "username"), "need one")
    assert check({"username": "alice"}) is None
    assert check({"email": "", "username": " "}) == FieldError("email", "need one")


def test_type_form_chain():
    fields = [e.field for e in errors_for({"name": " a ", "color": "red"}, FEEDBACK_TYPE_FORM)]
    assert fields == ["name", "color"]


def test_non_object_payload_is_rejected():
    errors = errors_for(["not", "an", "object"])
    assert [e.field for e in errors] == ["body"]
