"""Tests for the real-time alert check pipeline."""

import json
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import aiosqlite
import pytest

from plantmon.lib.alerts import Alert
from plantmon.lib.config import AlertType, Severity
from plantmon.lib.db import get_alerts_since, insert_reading, record_alert
from plantmon.realtime import service
from plantmon.realtime.service import run_alert_check

COOLDOWN = timedelta(minutes=30)


@pytest.fixture
def notifier():
    mock = MagicMock()
    mock.send_alerts = AsyncMock(return_value=True)
    return mock


@pytest.mark.usefixtures("db")
class TestRunAlertCheck:
    """Tests for run_alert_check."""

    async def test_no_data(self, notifier, frozen_time):
        result = await run_alert_check(notifier=notifier, now=frozen_time)

        assert result.message == "No sensor data available"
        assert result.reading is None
        assert result.alerts_detected == 0
        notifier.send_alerts.assert_not_called()

    async def test_healthy_reading(self, notifier, make_reading, frozen_time):
        await insert_reading(make_reading())

        result = await run_alert_check(notifier=notifier, now=frozen_time)

        assert result.reading is not None
        assert result.alerts_detected == 0
        assert result.notification_sent is False
        notifier.send_alerts.assert_not_called()

    async def test_triggers_records_and_notifies(
        self, notifier, make_reading, frozen_time
    ):
        reading_id = await insert_reading(make_reading(soil=1500, temp=42))

        result = await run_alert_check(notifier=notifier, now=frozen_time)

        assert result.alerts_detected == 2
        assert result.alerts_triggered == 2
        assert result.alerts_on_cooldown == 0
        assert result.logged_alerts == ["soil_dry", "temp_high"]
        assert result.notification_sent is True
        assert result.errors == []

        alerts, reading, sent_at = notifier.send_alerts.call_args.args
        assert [a.type for a in alerts] == [
            AlertType.SOIL_DRY,
            AlertType.TEMP_HIGH,
        ]
        assert reading.id == reading_id
        assert sent_at == frozen_time

        rows = await get_alerts_since(frozen_time)
        assert [row["reading_id"] for row in rows] == [reading_id, reading_id]

    async def test_cooldown_suppresses_recent_type(
        self, notifier, make_reading, frozen_time
    ):
        await insert_reading(make_reading(soil=1500, temp=42))
        await record_alert(
            Alert(
                type=AlertType.SOIL_DRY,
                severity=Severity.CRITICAL,
                message="earlier",
                value=1500,
                threshold=1800,
            ),
            None,
            frozen_time - timedelta(minutes=10),
        )

        result = await run_alert_check(
            notifier=notifier, cooldown=COOLDOWN, now=frozen_time
        )

        assert result.alerts_detected == 2
        assert result.alerts_triggered == 1
        assert result.alerts_on_cooldown == 1
        assert result.logged_alerts == ["temp_high"]

    async def test_second_run_is_suppressed(
        self, notifier, make_reading, frozen_time
    ):
        await insert_reading(make_reading(humidity=95))

        first = await run_alert_check(notifier=notifier, now=frozen_time)
        second = await run_alert_check(
            notifier=notifier, now=frozen_time + timedelta(minutes=5)
        )
        later = await run_alert_check(
            notifier=notifier, now=frozen_time + timedelta(minutes=31)
        )

        assert first.alerts_triggered == 1
        assert second.alerts_triggered == 0
        assert second.alerts_on_cooldown == 1
        assert later.alerts_triggered == 1
        assert notifier.send_alerts.call_count == 2

    async def test_all_on_cooldown_sends_nothing(
        self, notifier, make_reading, frozen_time
    ):
        await insert_reading(make_reading(light=100))
        await run_alert_check(notifier=notifier, now=frozen_time)
        notifier.send_alerts.reset_mock()

        result = await run_alert_check(notifier=notifier, now=frozen_time)

        assert result.alerts_triggered == 0
        assert result.notification_sent is False
        notifier.send_alerts.assert_not_called()

    async def test_record_failure_is_reported(
        self, notifier, make_reading, frozen_time
    ):
        await insert_reading(make_reading(temp=5))

        with patch.object(
            service,
            "record_alert",
            AsyncMock(side_effect=aiosqlite.OperationalError("disk I/O error")),
        ):
            result = await run_alert_check(notifier=notifier, now=frozen_time)

        assert result.alerts_triggered == 1
        assert result.logged_alerts == []
        assert len(result.errors) == 1
        assert "disk I/O error" in result.errors[0]
        assert result.notification_sent is True

    async def test_failed_cooldown_lookup_lets_alert_through(
        self, notifier, make_reading, frozen_time
    ):
        await insert_reading(make_reading(soil=2700))

        with patch.object(
            service,
            "alert_triggered_since",
            AsyncMock(side_effect=aiosqlite.OperationalError("locked")),
        ):
            result = await run_alert_check(notifier=notifier, now=frozen_time)

        assert result.alerts_triggered == 1
        assert result.logged_alerts == ["soil_wet"]
        assert "cooldown lookup failed" in result.errors[0]

    async def test_undelivered_notification(
        self, notifier, make_reading, frozen_time
    ):
        notifier.send_alerts.return_value = False
        await insert_reading(make_reading(soil=1700))

        result = await run_alert_check(notifier=notifier, now=frozen_time)

        assert result.alerts_triggered == 1
        assert result.notification_sent is False

    async def test_uses_latest_reading_only(
        self, notifier, make_reading, frozen_time
    ):
        await insert_reading(
            make_reading(soil=1000, timestamp=frozen_time - timedelta(minutes=5))
        )
        await insert_reading(make_reading(timestamp=frozen_time))

        result = await run_alert_check(notifier=notifier, now=frozen_time)

        assert result.alerts_detected == 0

    async def test_result_serializes(self, notifier, make_reading, frozen_time):
        await insert_reading(make_reading(soil=1500))

        result = await run_alert_check(notifier=notifier, now=frozen_time)
        data = json.loads(json.dumps(result.to_dict(), default=str))

        assert data["alerts_triggered"] == 1
        assert data["thresholds"]["soil_dry"] == 1800
        assert data["reading"]["soil"] == 1500
