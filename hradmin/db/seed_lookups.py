"""
Seed the lookup tables the request forms pick from.

This script:
1. Creates any missing tables from the ORM metadata
2. Inserts or refreshes the default offset types and schedule types

Safe to re-run. Usage: python -m hradmin.db.seed_lookups
"""
import asyncio
import logging
from typing import List, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

import hradmin.core.models  # noqa: F401  registers every table on Base.metadata
from hradmin.core.logging_config import configure_logging
from hradmin.core.models import OffsetType, ScheduleType
from hradmin.db.session import AsyncSessionLocal, Base, engine

log = logging.getLogger(__name__)

# (name, description)
OFFSET_TYPES: List[Tuple[str, str]] = [
    ("Regular Day Offset", "Time off in lieu of working on a regular day"),
    ("Rest Day/Weekend Offset", "Time off in lieu of working on a rest day or weekend"),
    ("Holiday Offset", "Time off in lieu of working on a holiday"),
    ("Special Event Offset", "Time off in lieu of working for a special company event"),
]

SCHEDULE_TYPES: List[Tuple[str, str]] = [
    ("Regular Shift", "Standard 8-hour work shift"),
    ("Night Shift", "Evening/night work hours"),
    ("Flexible Hours", "Adjustable working hours"),
    ("Compressed Workweek", "Work full weekly hours in fewer days"),
    ("Split Shift", "Work hours divided into two or more segments"),
    ("Rotating Shift", "Periodic changes in work hours"),
    ("On-Call", "Available to work when needed"),
    ("Custom Schedule", "Personalized work schedule arrangement"),
]


async def ensure_tables(db_engine: AsyncEngine) -> None:
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def _upsert_by_name(db: AsyncSession, model, rows: List[Tuple[str, str]]) -> Tuple[int, int]:
    created = updated = 0
    for name, description in rows:
        result = await db.execute(select(model).where(model.name == name))
        existing = result.scalar_one_or_none()
        if existing:
            existing.description = description
            existing.is_active = True
            updated += 1
        else:
            db.add(model(name=name, description=description, is_active=True))
            created += 1
    return created, updated


async def seed_lookups(db: AsyncSession) -> None:
    offset_created, offset_updated = await _upsert_by_name(db, OffsetType, OFFSET_TYPES)
    schedule_created, schedule_updated = await _upsert_by_name(db, ScheduleType, SCHEDULE_TYPES)
    await db.commit()
    log.info("[seed.offset_types] created=%s updated=%s", offset_created, offset_updated)
    log.info("[seed.schedule_types] created=%s updated=%s", schedule_created, schedule_updated)


async def main() -> None:
    configure_logging()
    await ensure_tables(engine)
    async with AsyncSessionLocal() as db:
        try:
            await seed_lookups(db)
        except Exception:
            log.exception("[seed] failed")
            await db.rollback()
            raise


if __name__ == "__main__":
    asyncio.run(main())
