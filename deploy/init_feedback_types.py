#!/usr/bin/env python3
"""Seed the default feedback types, owned by the first admin."""
import asyncio
import sys
from pathlib import Path
from typing import List

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from feedback_collector.config import Settings
from feedback_collector.models import FeedbackType, User, UserRole, type_name_key

DEFAULT_TYPES = [
    {
        "name": "Product",
        "description": "Feedback about our products and services",
        "color": "#3B82F6",
        "icon": "Package",
    },
    {
        "name": "Event",
        "description": "Feedback about events and activities",
        "color": "#10B981",
        "icon": "Calendar",
    },
    {
        "name": "Website",
        "description": "Feedback about website functionality and design",
        "color": "#F59E0B",
        "icon": "Globe",
    },
    {
        "name": "Support",
        "description": "Feedback about customer support experience",
        "color": "#EF4444",
        "icon": "Headphones",
    },
    {
        "name": "Feature Request",
        "description": "Suggestions for new features or improvements",
        "color": "#8B5CF6",
        "icon": "Lightbulb",
    },
]


async def seed_feedback_types(session: AsyncSession) -> List[str]:
    """Create missing default types; returns the names that were created."""
    admin = (
        await session.execute(
            select(User).where(User.role == UserRole.ADMIN).order_by(User.created_at).limit(1)
        )
    ).scalar_one_or_none()
    if admin is None:
        raise LookupError("No admin user found. Please create an admin user first.")
    
    created = []
    for type_data in DEFAULT_TYPES:
        exists = await session.execute(
            select(FeedbackType.id).where(FeedbackType.name_key == type_name_key(type_data["name"]))
        )
        if exists.first() is not None:
            print(f"⏭️  Feedback type already exists: {type_data['name']}")
            continue
        session.add(FeedbackType(created_by=admin.id, **type_data))
        created.append(type_data["name"])
        print(f"✅ Created feedback type: {type_data['name']}")
    
    await session.commit()
    return created


async def main() -> int:
    settings = Settings.from_env()
    engine = create_async_engine(settings.database_url, echo=False)
    async_session = async_sessionmaker(engine, expire_on_commit=False)
    
    try:
        async with async_session() as session:
            try:
                await seed_feedback_types(session)
            except LookupError as e:
                print(f"❌ {e}")
                return 1
            
            print("\n📋 Current feedback types:")
            types = (await session.execute(select(FeedbackType).order_by(FeedbackType.name))).scalars().all()
            for t in types:
                print(f"  - {t.name} ({'Active' if t.is_active else 'Inactive'})")
        return 0
    finally:
        await engine.dispose()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
