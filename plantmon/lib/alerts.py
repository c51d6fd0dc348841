"""Real-time threshold alerts and cooldown suppression.

A reading is evaluated against the threshold table to produce candidate
alerts, at most one per metric. Candidates are then filtered against the
alert history: an alert type that already fired within the cooldown window is
suppressed to prevent notification spam.

The history itself lives in the storage collaborator and is reached through
a single lookup function, so the filter can run against an in-memory fake in
tests and against SQLite in production.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TypeAlias

from plantmon.lib.config import AlertType, Severity, ThresholdSettings
from plantmon.lib.config.constants import (
    SOIL_CRITICAL_DELTA,
    TEMP_CRITICAL_HIGH,
    TEMP_CRITICAL_LOW,
)
from plantmon.lib.reading import Reading
from plantmon.logging import get_logger

logger = get_logger("lib.alerts")

_MESSAGES: dict[AlertType, str] = {
    AlertType.SOIL_DRY: "🚨 Soil too dry - water your plant immediately!",
    AlertType.SOIL_WET: "💦 Soil too wet - reduce watering to prevent root rot.",
    AlertType.TEMP_HIGH: "🔥 High temperature - ensure ventilation and shade!",
    AlertType.TEMP_LOW: "❄️ Low temperature - protect plant from cold!",
    AlertType.LIGHT_LOW: "🌑 Low light - consider moving plant to brighter spot.",
    AlertType.HUMIDITY_HIGH: "🌫️ High humidity - watch for fungal diseases!",
    AlertType.HUMIDITY_LOW: "🏜️ Low humidity - consider misting your plant.",
}


@dataclass(frozen=True, slots=True)
class Alert:
    """A candidate alert produced by comparing one reading to a bound."""

    type: AlertType
    severity: Severity
    message: str
    value: float
    threshold: float


def _make_alert(
    alert_type: AlertType, severity: Severity, value: float, threshold: float
) -> Alert:
    return Alert(
        type=alert_type,
        severity=severity,
        message=_MESSAGES[alert_type],
        value=value,
        threshold=threshold,
    )


def _check_soil(soil: float, thresholds: ThresholdSettings) -> Alert | None:
    if soil < thresholds.soil_dry:
        severity = (
            Severity.CRITICAL
            if soil < thresholds.soil_dry - SOIL_CRITICAL_DELTA
            else Severity.WARNING
        )
        return _make_alert(
            AlertType.SOIL_DRY, severity, soil, thresholds.soil_dry
        )
    if soil > thresholds.soil_wet:
        return _make_alert(
            AlertType.SOIL_WET, Severity.WARNING, soil, thresholds.soil_wet
        )
    return None


def _check_temp(temp: float, thresholds: ThresholdSettings) -> Alert | None:
    if temp > thresholds.temp_high:
        severity = (
            Severity.CRITICAL if temp > TEMP_CRITICAL_HIGH else Severity.WARNING
        )
        return _make_alert(
            AlertType.TEMP_HIGH, severity, temp, thresholds.temp_high
        )
    if temp < thresholds.temp_low:
        severity = (
            Severity.CRITICAL if temp < TEMP_CRITICAL_LOW else Severity.WARNING
        )
        return _make_alert(
            AlertType.TEMP_LOW, severity, temp, thresholds.temp_low
        )
    return None


def _check_light(light: float, thresholds: ThresholdSettings) -> Alert | None:
    if light < thresholds.light_low:
        return _make_alert(
            AlertType.LIGHT_LOW, Severity.INFO, light, thresholds.light_low
        )
    return None


def _check_humidity(
    humidity: float, thresholds: ThresholdSettings
) -> Alert | None:
    if humidity > thresholds.humidity_high:
        return _make_alert(
            AlertType.HUMIDITY_HIGH,
            Severity.WARNING,
            humidity,
            thresholds.humidity_high,
        )
    if humidity < thresholds.humidity_low:
        return _make_alert(
            AlertType.HUMIDITY_LOW,
            Severity.INFO,
            humidity,
            thresholds.humidity_low,
        )
    return None


def evaluate_reading(
    reading: Reading, thresholds: ThresholdSettings
) -> list[Alert]:
    """Compare a reading against the threshold table.

    Returns between zero and four alerts, at most one per metric, always in
    soil, temp, light, humidity order.
    """
    checks = (
        _check_soil(reading.soil, thresholds),
        _check_temp(reading.temp, thresholds),
        _check_light(reading.light, thresholds),
        _check_humidity(reading.humidity, thresholds),
    )
    return [alert for alert in checks if alert is not None]


RecentlyTriggered: TypeAlias = Callable[
    [AlertType, datetime], bool | Awaitable[bool]
]
"""History lookup: did an alert of this type fire at or after ``since``?"""


@dataclass(frozen=True, slots=True)
class CooldownCheck:
    """Outcome of the history lookup for one candidate alert."""

    alert: Alert
    on_cooldown: bool
    error: Exception | None = None


async def _lookup(
    alert: Alert, recently_triggered: RecentlyTriggered, since: datetime
) -> CooldownCheck:
    """Query the history for one alert type.

    A failed lookup is reported on the check and the alert is let through.
    """
    try:
        result = recently_triggered(alert.type, since)
        if inspect.isawaitable(result):
            result = await result
    except Exception as e:
        logger.warning(
            "Cooldown lookup failed for %s, allowing alert: %s", alert.type, e
        )
        return CooldownCheck(alert=alert, on_cooldown=False, error=e)
    return CooldownCheck(alert=alert, on_cooldown=bool(result))


async def check_cooldowns(
    candidates: Sequence[Alert],
    recently_triggered: RecentlyTriggered,
    cooldown: timedelta,
    now: datetime,
) -> list[CooldownCheck]:
    """Look up the cooldown state of every candidate.

    Lookups only depend on their own alert type, so they are issued
    concurrently. Results keep the order of ``candidates``.
    """
    since = now - cooldown
    return list(
        await asyncio.gather(
            *(_lookup(alert, recently_triggered, since) for alert in candidates)
        )
    )


async def filter_on_cooldown(
    candidates: Sequence[Alert],
    recently_triggered: RecentlyTriggered,
    cooldown: timedelta,
    now: datetime,
) -> list[Alert]:
    """Drop candidates whose type already fired within the cooldown window.

    Args:
        candidates: Alerts from evaluate_reading().
        recently_triggered: History lookup, sync or async.
        cooldown: Minimum time between two alerts of the same type.
        now: Evaluation time; the window starts at ``now - cooldown``.

    Returns:
        The candidates that are not on cooldown, in input order.
    """
    checks = await check_cooldowns(candidates, recently_triggered, cooldown, now)
    for check in checks:
        if check.on_cooldown:
            logger.info("Alert %s is on cooldown, suppressing", check.alert.type)
    return [check.alert for check in checks if not check.on_cooldown]
