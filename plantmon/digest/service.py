"""Daily digest report.

One run summarizes the trailing window of readings (24 hours by default):
statistics with trends, window-level health advisories and, when a weather
source is available, weather advisories. The composed report is delivered
through the configured notifier.
"""

import asyncio
import json
import sys
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

import aiosqlite

from plantmon.lib.config import get_settings
from plantmon.lib.db import close_db, get_readings_since, init_db
from plantmon.lib.exceptions import DatabaseError
from plantmon.lib.health import assess_health
from plantmon.lib.notifications import AbstractNotifier, get_notifier
from plantmon.lib.report import compose_report
from plantmon.lib.stats import WindowStats, compute_statistics
from plantmon.lib.utils import utcnow
from plantmon.lib.weather import WeatherAdvisory, WeatherSource, fetch_advisory
from plantmon.logging import configure, get_logger

logger = get_logger("digest.service")

_DB_ERRORS = (DatabaseError, aiosqlite.Error, OSError)


@dataclass(slots=True)
class DigestRunResult:
    """Summary of one digest run."""

    stats: WindowStats | None = None
    health_alerts: tuple[str, ...] = ()
    weather: WeatherAdvisory | None = None
    report: str | None = None
    delivered: bool = False
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


async def run_daily_report(
    *,
    weather_source: WeatherSource | None = None,
    notifier: AbstractNotifier | None = None,
    now: datetime | None = None,
) -> DigestRunResult:
    """Build and deliver the digest for the configured window.

    Expects the database to be initialized (see init_db()).
    """
    settings = get_settings()
    digest = settings.digest
    notifier = notifier or get_notifier()
    now = now or utcnow()

    readings = await get_readings_since(now - digest.window)
    if not readings:
        logger.info("No data available for report")
        return DigestRunResult(message="No data available for report")

    stats = compute_statistics(readings)
    health_alerts = assess_health(stats, settings.thresholds)
    weather = await fetch_advisory(weather_source)

    report = compose_report(
        stats,
        health_alerts,
        weather,
        city=digest.weather_city,
        report_date=now.date(),
        window_hours=digest.window_hours,
    )
    delivered = await notifier.send_report(report)
    logger.info(
        "Digest built from %d readings, %d health alerts, delivered=%s",
        stats.reading_count,
        len(health_alerts),
        delivered,
    )
    return DigestRunResult(
        stats=stats,
        health_alerts=tuple(health_alerts),
        weather=weather,
        report=report,
        delivered=delivered,
        message="Daily report sent" if delivered else "Daily report not sent",
    )


async def run(weather_source: WeatherSource | None = None) -> DigestRunResult:
    """Open the database, run one digest, and close it again."""
    await init_db()
    try:
        return await run_daily_report(weather_source=weather_source)
    finally:
        await close_db()


def main() -> None:
    """Run one digest and print its summary as JSON."""
    configure()
    try:
        result = asyncio.run(run())
    except _DB_ERRORS:
        logger.exception("Failed to fetch readings")
        sys.exit(1)
    print(json.dumps(result.to_dict(), default=str, indent=2))
