#!/usr/bin/env python3
"""Seed the database with dummy readings for development."""

import argparse
import asyncio
from datetime import timedelta

from plantmon.lib.db import close_db, get_db, init_db, insert_readings
from plantmon.lib.mock import MockSensor
from plantmon.lib.utils import utcnow


async def seed_data(
    hours: int = 24, clear: bool = False, with_water: bool = False
) -> None:
    """Insert dummy sensor readings for the past N hours."""
    await init_db()

    interval = timedelta(minutes=5)
    num_records = (hours * 60) // 5

    print(f"Generating {num_records} readings...")
    readings = MockSensor(with_water=with_water).readings(
        num_records, interval, utcnow()
    )

    if clear:
        print("Clearing existing data...")
        async with get_db() as db, db.transaction():
            await db.execute("DELETE FROM alerts")
            await db.execute("DELETE FROM readings")

    print("Inserting readings...")
    await insert_readings(readings)

    await close_db()
    print("Done!")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Seed database with dummy data"
    )
    parser.add_argument(
        "-hours",
        type=int,
        default=24,
        help="Hours of data to generate (default: 24, max: 168 for 7 days)",
    )
    parser.add_argument(
        "-clear",
        action="store_true",
        help="Clear existing data before seeding",
    )
    parser.add_argument(
        "-water",
        action="store_true",
        help="Include water reservoir levels",
    )
    args = parser.parse_args()

    asyncio.run(
        seed_data(
            hours=min(args.hours, 168), clear=args.clear, with_water=args.water
        )
    )
