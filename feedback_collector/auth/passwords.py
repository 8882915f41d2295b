"""Password hashing (argon2 through pwdlib)."""

from pwdlib import PasswordHash
from pwdlib.exceptions import UnknownHashError

password_hash = PasswordHash.recommended()


def hash_password(password: str) -> str:
    return password_hash.hash(password)


def verify_password(password: str, encoded: str) -> bool:
    """Check ``password`` against a stored hash; unrecognised hashes never match."""
    try:
        return password_hash.verify(password, encoded)
    except UnknownHashError:
        return False
