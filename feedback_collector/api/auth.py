"""Authentication endpoints: admin registration, login and identity."""

import logging
import secrets
from typing import Any, Dict

from litestar import Controller, get, post
from litestar.di import Provide
from litestar.exceptions import NotAuthorizedException, PermissionDeniedException
from litestar.status_codes import HTTP_200_OK
from pydantic import BaseModel
from sqlalchemy import select, or_, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from feedback_collector.api.schemas import UserItem
from feedback_collector.auth.guards import require_admin
from feedback_collector.auth.passwords import hash_password, verify_password
from feedback_collector.context import AppContext
from feedback_collector.exceptions import ConflictError
from feedback_collector.models import User, UserRole
from feedback_collector.validation import LOGIN, REGISTRATION, run_chain

logger = logging.getLogger("FeedbackCollector.auth")

DUPLICATE_USER = "User with this email or username already exists"
BAD_CREDENTIALS = "Invalid credentials"


class AuthResponse(BaseModel):
    """Token issued after registration or login."""
    message: str
    token: str
    user: UserItem


def _text(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    return str(value).strip() if value is not None else ""


# --- Controller ---

class AuthController(Controller):
    """Dashboard account endpoints."""
    
    path = "/api/auth"
    tags = ["auth"]
    
    @post("/register")
    async def register(
        self,
        data: Dict[str, Any],
        ctx: AppContext,
        session: AsyncSession,
    ) -> AuthResponse:
        """Create an admin account. Requires the invitation code."""
        settings = ctx.settings
        if not settings.admin_registration_enabled:
            logger.warning("Registration attempted while disabled")
            raise PermissionDeniedException("Admin registration is disabled")
        
        run_chain(data, REGISTRATION)
        
        admin_code = _text(data, "adminCode")
        if not secrets.compare_digest(admin_code.encode(), settings.admin_invitation_code.encode()):
            logger.warning("Registration attempted with an invalid invitation code")
            raise PermissionDeniedException("Invalid admin invitation code")
        
        username = _text(data, "username")
        email = _text(data, "email").lower()
        if not settings.email_domain_allowed(email):
            domain = email.rsplit("@", 1)[-1]
            logger.warning(f"Registration refused for email domain '{domain}'")
            raise PermissionDeniedException(f"Email domain '{domain}' is not allowed")
        
        existing = await session.execute(
            select(User.id).where(or_(func.lower(User.username) == username.lower(), User.email == email))
        )
        if existing.first() is not None:
            raise ConflictError(DUPLICATE_USER)
        
        user = User(
            username=username,
            email=email,
            password_hash=hash_password(str(data["password"])),
            role=UserRole.ADMIN,
        )
        session.add(user)
        try:
            await session.commit()
        except IntegrityError:
            await session.rollback()
            raise ConflictError(DUPLICATE_USER)
        
        logger.info(f"Admin registered: {username}")
        return AuthResponse(
            message="Admin registered successfully",
            token=ctx.tokens.issue(user),
            user=UserItem.from_model(user),
        )
    
    @post("/login", status_code=HTTP_200_OK)
    async def login(
        self,
        data: Dict[str, Any],
        ctx: AppContext,
        session: AsyncSession,
    ) -> AuthResponse:
        """Exchange email (or username) and password for a bearer token."""
        run_chain(data, LOGIN)
        
        email = _text(data, "email").lower()
        if email:
            stmt = select(User).where(User.email == email)
        else:
            stmt = select(User).where(func.lower(User.username) == _text(data, "username").lower())
        user = (await session.execute(stmt)).scalar_one_or_none()
        
        if user is None or not verify_password(str(data["password"]), user.password_hash):
            logger.warning(f"Failed login for '{email or _text(data, 'username')}'")
            raise NotAuthorizedException(BAD_CREDENTIALS)
        
        logger.info(f"User logged in: {user.username}")
        return AuthResponse(
            message="Login successful",
            token=ctx.tokens.issue(user),
            user=UserItem.from_model(user),
        )
    
    @get("/me", dependencies={"admin": Provide(require_admin)})
    async def me(self, admin: User) -> UserItem:
        """The identity behind the bearer token."""
        return UserItem.from_model(admin)
