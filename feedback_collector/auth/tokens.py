"""HS256 bearer tokens."""

import logging
import time
from typing import Optional

from authlib.jose import JsonWebToken, JoseError

from feedback_collector.models import User

logger = logging.getLogger("FeedbackCollector.auth")

ALGORITHM = "HS256"


class InvalidTokenError(Exception):
    """Token is malformed, badly signed, expired or missing claims."""


class TokenService:
    """Issues and verifies signed access tokens for dashboard users."""
    
    def __init__(self, secret: str, expires_hours: int = 24) -> None:
        self._secret = secret
        self._lifetime = int(expires_hours * 3600)
        self._jwt = JsonWebToken([ALGORITHM])
    
    def issue(self, user: User, now: Optional[int] = None) -> str:
        issued_at = int(now if now is not None else time.time())
        payload = {
            "sub": str(user.id),
            "role": user.role.value,
            "iat": issued_at,
            "exp": issued_at + self._lifetime,
        }
        token = self._jwt.encode({"alg": ALGORITHM}, payload, self._secret)
        return token.decode("ascii")
    
    def verify(self, token: str, now: Optional[int] = None) -> dict:
        """Return the token claims or raise ``InvalidTokenError``."""
        try:
            claims = self._jwt.decode(
                token,
                self._secret,
                claims_options={
                    "sub": {"essential": True},
                    "exp": {"essential": True},
                },
            )
            claims.validate(now=now)
        except (JoseError, ValueError) as e:
            logger.debug(f"Rejected token: {type(e).__name__}: {e}")
            raise InvalidTokenError(str(e)) from e
        return dict(claims)
