#!/usr/bin/env python3
"""
Seed database with a demo business for development.
"""

import asyncio
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cleanops.config.database import create_engine
from cleanops.config.logging import configure_logging, get_logger
from cleanops.domain.entities.property import Property
from cleanops.domain.entities.user import User
from cleanops.domain.value_objects.pay_type import PayType
from cleanops.domain.value_objects.user_role import UserRole
from cleanops.infrastructure.database.models import UserModel
from cleanops.infrastructure.database.repositories import (
    PropertyRepository,
    UserRepository,
)

logger = get_logger(__name__)


async def seed_database():
    """Seed one business with a manager, two cleaners and three properties."""
    engine = create_engine()
    session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    try:
        async with session_factory() as session:
            existing = await session.execute(select(func.count()).select_from(UserModel))
            if existing.scalar() > 0:
                logger.info("Database already has data, skipping seed")
                return

            business_id = uuid4()
            users = UserRepository(session)
            properties = PropertyRepository(session)

            manager = await users.create(
                User(
                    business_id=business_id,
                    role=UserRole.MANAGER,
                    email="manager@sparkle.example",
                    first_name="Maria",
                    last_name="Lopez",
                )
            )
            cleaners = [
                await users.create(
                    User(
                        business_id=business_id,
                        role=UserRole.CLEANER,
                        email="jo@sparkle.example",
                        first_name="Jo",
                        pay_type=PayType.PER_JOB,
                    )
                ),
                await users.create(
                    User(
                        business_id=business_id,
                        role=UserRole.CLEANER,
                        email="sam@sparkle.example",
                        first_name="Sam",
                        pay_type=PayType.HOURLY,
                    )
                ),
            ]

            for name, address, lat, lng in [
                ("Harbor View Loft", "12 Pier Rd", 40.7128, -74.0061),
                ("Maple Street House", "408 Maple St", 40.7306, -73.9866),
                ("Lakeside Cabin", "Lot 7, Lakeside", None, None),
            ]:
                await properties.create(
                    Property(
                        business_id=business_id,
                        name=name,
                        address=address,
                        latitude=lat,
                        longitude=lng,
                    )
                )

            await session.commit()

            logger.info(
                "Database seeded",
                business_id=str(business_id),
                manager_id=str(manager.id),
                cleaner_ids=[str(cleaner.id) for cleaner in cleaners],
            )
    finally:
        await engine.dispose()


if __name__ == "__main__":
    configure_logging()
    asyncio.run(seed_database())
