#!/usr/bin/env python3
"""Seed the remote store with a demo crew and starter routines.

Usage:
    uv run python scripts/seed_demo_data.py

Rows whose id already exists are left alone, so the script can be rerun.
"""

import asyncio
import logging
import sys

from src.core import db_client
from src.core.config import constants
from src.domain.member import Member
from src.domain.routine import Routine
from src.domain.rows import member_to_row, routine_to_row
from src.domain.task import Priority


logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


DEMO_MEMBERS = [
    Member(
        id="1",
        name="Alice Green",
        role=constants.ROLE_HEAD_GARDENER,
        phone_number="9999",
        is_admin=True,
        avatar=constants.AVATAR_URL_TEMPLATE.format(seed="alice"),
    ),
    Member(
        id="2",
        name="Bob Soil",
        role="Landscaper",
        phone_number="0812345678",
        avatar=constants.AVATAR_URL_TEMPLATE.format(seed="bob"),
    ),
    Member(
        id="3",
        name="Charlie Leaf",
        role="Botanist",
        phone_number="0898765432",
        avatar=constants.AVATAR_URL_TEMPLATE.format(seed="charlie"),
    ),
]

DEMO_ROUTINES = [
    Routine(
        id="r1",
        title="Morning Watering",
        description="Water the rose garden and front lawn.",
        default_priority=Priority.URGENT,
    ),
    Routine(
        id="r2",
        title="Weekly Pruning",
        description="Trim hedges and remove dead leaves.",
        default_priority=Priority.NORMAL,
    ),
    Routine(
        id="r3",
        title="Soil Check",
        description="Measure pH levels in vegetable patch.",
        default_priority=Priority.MEDIUM,
    ),
    Routine(
        id="r4",
        title="Compost Turning",
        description="Aerate the compost pile.",
        default_priority=Priority.NORMAL,
    ),
]


async def seed_members() -> int:
    existing = {row["id"] for row in await db_client.list_records(collection="members")}
    created = 0
    for member in DEMO_MEMBERS:
        if member.id in existing:
            logger.info(f"Member {member.name} already present, skipping")
            continue
        await db_client.create_record(collection="members", data=member_to_row(member).model_dump(mode="json"))
        created += 1
    return created


async def seed_routines() -> int:
    existing = {row["id"] for row in await db_client.list_records(collection="routines")}
    created = 0
    for routine in DEMO_ROUTINES:
        if routine.id in existing:
            logger.info(f"Routine {routine.title} already present, skipping")
            continue
        await db_client.create_record(collection="routines", data=routine_to_row(routine).model_dump(mode="json"))
        created += 1
    return created


async def main() -> None:
    """Main entry point."""
    try:
        members = await seed_members()
        routines = await seed_routines()
    except db_client.DatabaseError as e:
        logger.error(f"Seeding failed: {e}")
        sys.exit(1)
    finally:
        await db_client.close_client()

    logger.info(f"Seeded {members} members and {routines} routines")


if __name__ == "__main__":
    asyncio.run(main())
