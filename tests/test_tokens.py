"""Tests for token issuing and password hashing."""

import uuid

import pytest

from feedback_collector.auth.passwords import hash_password, verify_password
from feedback_collector.auth.tokens import InvalidTokenError, TokenService
from feedback_collector.models import User, UserRole


@pytest.fixture()
def admin():
    return User(id=uuid.uuid4(), username="alice", email="alice@acme.io", password_hash="", role=UserRole.ADMIN)


def test_token_round_trip_claims(admin):
    service = TokenService("secret", expires_hours=2)
    claims = service.verify(service.issue(admin, now=1_700_000_000), now=1_700_000_100)
    assert claims["sub"] == str(admin.id)
    assert claims["role"] == "admin"
    assert claims["exp"] - claims["iat"] == 7200


def test_expired_token_is_rejected(admin):
    service = TokenService("secret", expires_hours=1)
    token = service.issue(admin, now=1_700_000_000)
    with pytest.raises(InvalidTokenError):
        service.verify(token, now=1_700_000_000 + 3601)


def test_token_signed_with_other_secret_is_rejected(admin):
    token = TokenService("one").issue(admin)
    with pytest.raises(InvalidTokenError):
        TokenService("two").verify(token)


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_token_is_rejected(token):
    with pytest.raises(InvalidTokenError):
        TokenService("secret").verify(token)


def test_password_hash_verifies():
    encoded = hash_password("secret123")
    assert encoded.startswith("$argon2id$")
    assert verify_password("secret123", encoded)
    assert not verify_password("secret124", encoded)


def test_password_hashes_are_salted():
    assert hash_password("same") != hash_password("same")


@pytest.mark.parametrize("encoded", ["", "plain", "md5$1$salt$abc", "pbkdf2_sha256$260000$salt$abc"])
def test_unrecognised_hashes_never_verify(encoded):
    assert not verify_password("anything", encoded)
