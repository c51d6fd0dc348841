"""Real-time alert check.

One run evaluates the latest stored reading:
- Compares it against the threshold table
- Suppresses alert types still inside their cooldown window
- Records newly triggered alerts in the alert history
- Sends one notification covering all triggered alerts

Storage and delivery failures are collected on the run result rather than
aborting the run, so a partial success is visible to the caller.
"""

import asyncio
import json
import sys
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta
from typing import Any

import aiosqlite

from plantmon.lib.alerts import check_cooldowns, evaluate_reading
from plantmon.lib.config import ThresholdSettings, get_settings
from plantmon.lib.db import (
    alert_triggered_since,
    close_db,
    get_latest_reading,
    init_db,
    record_alert,
)
from plantmon.lib.exceptions import DatabaseError
from plantmon.lib.notifications import AbstractNotifier, get_notifier
from plantmon.lib.reading import Reading
from plantmon.lib.utils import utcnow
from plantmon.logging import configure, get_logger

logger = get_logger("realtime.service")

_DB_ERRORS = (DatabaseError, aiosqlite.Error, OSError)


@dataclass(slots=True)
class AlertRunResult:
    """Summary of one real-time alert run."""

    reading: Reading | None = None
    alerts_detected: int = 0
    alerts_triggered: int = 0
    alerts_on_cooldown: int = 0
    logged_alerts: list[str] = field(default_factory=list)
    notification_sent: bool = False
    errors: list[str] = field(default_factory=list)
    message: str | None = None
    thresholds: ThresholdSettings | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.thresholds is not None:
            data["thresholds"] = self.thresholds.model_dump()
        return data


async def run_alert_check(
    *,
    thresholds: ThresholdSettings | None = None,
    cooldown: timedelta | None = None,
    notifier: AbstractNotifier | None = None,
    now: datetime | None = None,
) -> AlertRunResult:
    """Evaluate the latest reading and trigger alerts not on cooldown.

    Expects the database to be initialized (see init_db()). Defaults are
    taken from settings.
    """
    settings = get_settings()
    thresholds = thresholds or settings.thresholds
    cooldown = cooldown if cooldown is not None else settings.alerts.cooldown
    notifier = notifier or get_notifier()
    now = now or utcnow()

    result = AlertRunResult(thresholds=thresholds)

    reading = await get_latest_reading()
    if reading is None:
        logger.info("No sensor data available")
        result.message = "No sensor data available"
        return result
    result.reading = reading

    candidates = evaluate_reading(reading, thresholds)
    checks = await check_cooldowns(
        candidates, alert_triggered_since, cooldown, now
    )
    active = [check.alert for check in checks if not check.on_cooldown]
    result.alerts_detected = len(candidates)
    result.alerts_triggered = len(active)
    result.alerts_on_cooldown = len(candidates) - len(active)
    result.errors.extend(
        f"cooldown lookup failed for {check.alert.type}: {check.error}"
        for check in checks
        if check.error is not None
    )

    for alert in active:
        try:
            await record_alert(alert, reading.id, now)
        except _DB_ERRORS as e:
            logger.error("Failed to record %s alert: %s", alert.type, e)
            result.errors.append(f"failed to record {alert.type}: {e}")
        else:
            result.logged_alerts.append(str(alert.type))

    if active:
        result.notification_sent = await notifier.send_alerts(
            active, reading, now
        )

    logger.info(
        "Alert check done: detected=%d triggered=%d on_cooldown=%d "
        "notification_sent=%s",
        result.alerts_detected,
        result.alerts_triggered,
        result.alerts_on_cooldown,
        result.notification_sent,
    )
    return result


async def run() -> AlertRunResult:
    """Open the database, run one alert check, and close it again."""
    await init_db()
    try:
        return await run_alert_check()
    finally:
        await close_db()


def main() -> None:
    """Run one alert check and print its summary as JSON."""
    configure()
    try:
        result = asyncio.run(run())
    except _DB_ERRORS:
        logger.exception("Failed to fetch readings")
        sys.exit(1)
    print(json.dumps(result.to_dict(), default=str, indent=2))
