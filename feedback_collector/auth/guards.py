"""Admin authentication dependency."""

import logging
import uuid

from litestar import Request
from litestar.exceptions import NotAuthorizedException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from feedback_collector.auth.tokens import InvalidTokenError
from feedback_collector.context import AppContext
from feedback_collector.models import User
from feedback_collector.utils.logging import debug_log

logger = logging.getLogger("FeedbackCollector.auth")


def bearer_token(request: Request) -> str:
    """Extract the credential from ``Authorization: Bearer <token>``."""
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise NotAuthorizedException("Not authenticated")
    return token.strip()


async def require_admin(request: Request, session: AsyncSession, ctx: AppContext) -> User:
    """Resolve the bearer credential to an admin user or fail with 401.
    
    The user is also stored on ``request.state.admin``.
    """
    path = request.url.path
    token = bearer_token(request)
    
    try:
        claims = ctx.tokens.verify(token)
        user_id = uuid.UUID(str(claims["sub"]))
    except (InvalidTokenError, ValueError):
        logger.warning(f"Admin access attempted with invalid token: {path}")
        raise NotAuthorizedException("Invalid or expired token")
    
    user = (await session.execute(select(User).where(User.id == user_id))).scalar_one_or_none()
    if user is None or not user.is_admin:
        logger.warning(f"Admin access denied for user {user_id}: {path}")
        raise NotAuthorizedException("Not authorized")
    
    request.state.admin = user
    debug_log(f"Admin access granted for: {user.username}")
    return user
