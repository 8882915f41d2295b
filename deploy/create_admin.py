#!/usr/bin/env python3
"""
Bootstrap the first admin account.

Later admins register through /api/auth/register with the invitation code.
"""
import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from feedback_collector.auth.passwords import hash_password
from feedback_collector.config import Settings
from feedback_collector.models import User, UserRole


class AdminSetupError(Exception):
    """The admin account cannot be created."""


class AdminsExist(Exception):
    """An admin already exists; registration should be used instead."""


async def create_admin_user(
    session: AsyncSession,
    settings: Settings,
    username: str,
    email: str,
    password: str,
) -> User:
    """Create the first admin or raise explaining why not."""
    admin_count = (
        await session.execute(select(func.count(User.id)).where(User.role == UserRole.ADMIN))
    ).scalar() or 0
    if admin_count > 0:
        raise AdminsExist("Admin users already exist")
    
    email = email.strip().lower()
    if "@" not in email:
        raise AdminSetupError(f"Invalid email address '{email}'")
    if not settings.email_domain_allowed(email):
        domain = email.rsplit("@", 1)[-1]
        allowed = ", ".join(settings.allowed_email_domains)
        raise AdminSetupError(f"Email domain '{domain}' not allowed. Allowed domains: {allowed}")
    
    existing = await session.execute(
        select(User.id).where(or_(User.email == email, User.username == username))
    )
    if existing.first() is not None:
        raise AdminSetupError("User with this email or username already exists")
    
    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        role=UserRole.ADMIN,
    )
    session.add(user)
    await session.commit()
    return user


async def main(username: str, email: str, password: str) -> int:
    settings = Settings.from_env()
    engine = create_async_engine(settings.database_url, echo=False)
    async_session = async_sessionmaker(engine, expire_on_commit=False)
    
    try:
        async with async_session() as session:
            try:
                user = await create_admin_user(session, settings, username, email, password)
            except AdminsExist:
                print("⚠️  Admin users already exist. Use the registration form with the admin code instead.")
                print(f"Admin invitation code: {settings.admin_invitation_code}")
                return 0
            except AdminSetupError as e:
                print(f"❌ {e}")
                return 1
        
        print("✅ Admin user created successfully!")
        print(f"Username: {user.username}")
        print(f"Email: {user.email}")
        print("Role: admin")
        print("\n🔐 Security Recommendations:")
        print("1. Change the default password immediately")
        print("2. Set JWT_SECRET in your environment")
        print("3. Set ADMIN_REGISTRATION_ENABLED=false to prevent unauthorized registrations")
        print("4. Configure ALLOWED_EMAIL_DOMAINS for additional security")
        return 0
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the first Feedback Collector admin")
    parser.add_argument("username", nargs="?", default="admin")
    parser.add_argument("email", nargs="?", default="admin@company.com")
    parser.add_argument("password", nargs="?", default="admin123456")
    args = parser.parse_args()
    
    sys.exit(asyncio.run(main(args.username, args.email, args.password)))
