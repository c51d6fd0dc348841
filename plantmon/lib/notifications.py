"""Notification delivery for triggered alerts and daily reports.

Provides an abstract notification interface with pluggable backends. Supports
a Slack incoming webhook and a generic JSON webhook (e.g. an email relay), or
both simultaneously.
"""

import asyncio
import json
import urllib.request
from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from typing_extensions import override

from plantmon.lib.alerts import Alert
from plantmon.lib.config import NotificationBackend, Severity, get_settings
from plantmon.lib.exceptions import NotificationError
from plantmon.lib.reading import Reading
from plantmon.lib.retry import with_retry
from plantmon.lib.utils import utcnow
from plantmon.logging import get_logger

logger = get_logger("lib.notifications")

SEVERITY_MARKERS: dict[Severity, str] = {
    Severity.CRITICAL: "🚨",
    Severity.WARNING: "⚠️",
    Severity.INFO: "ℹ️",
}


def _num(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def format_alert_message(
    alerts: Sequence[Alert], reading: Reading, sent_at: datetime
) -> str:
    """Format triggered alerts and the reading behind them as one message."""
    alert_lines = "\n\n".join(
        f"{SEVERITY_MARKERS[a.severity]} *{a.type}*: {a.message}\n"
        f"   └ Value: {_num(a.value)} (threshold: {_num(a.threshold)})"
        for a in alerts
    )
    return (
        f"🌱 *Plant Alert*\n\n{alert_lines}\n\n"
        "📊 *Current Readings:*\n"
        f"• Soil: {_num(reading.soil)}\n"
        f"• Temp: {_num(reading.temp)}°C\n"
        f"• Light: {_num(reading.light)}\n"
        f"• Humidity: {_num(reading.humidity)}%\n\n"
        f"🕐 {sent_at:%Y-%m-%d %H:%M:%S}"
    )


class AbstractNotifier(ABC):
    """Abstract base class for notification backends."""

    @abstractmethod
    async def send_text(self, text: str) -> bool:
        """Deliver a preformatted message. Returns True if delivered."""

    async def send_alerts(
        self,
        alerts: Sequence[Alert],
        reading: Reading,
        sent_at: datetime | None = None,
    ) -> bool:
        """Send one message covering all triggered alerts of a reading."""
        return await self.send_text(
            format_alert_message(alerts, reading, sent_at or utcnow())
        )

    async def send_report(self, report: str) -> bool:
        """Send a composed daily report."""
        return await self.send_text(report)


class _JsonWebhookNotifier(AbstractNotifier):
    """Base for backends that POST a JSON payload to a webhook URL."""

    name = "Webhook"

    @abstractmethod
    def _url(self) -> str:
        """Webhook URL from settings."""

    def _build_payload(self, text: str) -> dict[str, Any]:
        return {"text": text}

    @override
    async def send_text(self, text: str) -> bool:
        """POST the message with retry logic."""
        data = json.dumps(self._build_payload(text)).encode("utf-8")
        cfg = get_settings().notifications
        url = self._url()
        timeout = cfg.timeout_sec

        def do_send() -> None:
            req = urllib.request.Request(
                url,
                data=data,
                headers={"Content-Type": "application/json"},
                method="POST",
            )
            with urllib.request.urlopen(req, timeout=timeout) as resp:
                if resp.status >= 300:
                    raise NotificationError(
                        f"{self.name} returned status {resp.status}"
                    )
            logger.info("Sent %s notification", self.name)

        return await with_retry(
            do_send, cfg.retry_policy, name=self.name, logger=logger
        )


class SlackNotifier(_JsonWebhookNotifier):
    """Slack incoming-webhook backend."""

    name = "Slack"

    @override
    def _url(self) -> str:
        return get_settings().notifications.slack.webhook_url

    @override
    def _build_payload(self, text: str) -> dict[str, Any]:
        return {
            "text": text,
            "blocks": [
                {"type": "section", "text": {"type": "mrkdwn", "text": text}}
            ],
        }


class WebhookNotifier(_JsonWebhookNotifier):
    """Generic JSON webhook backend posting ``{"text": ...}``."""

    name = "Webhook"

    @override
    def _url(self) -> str:
        return get_settings().notifications.webhook.url


class CompositeNotifier(AbstractNotifier):
    """Sends notifications to multiple backends."""

    def __init__(self, notifiers: list[AbstractNotifier]):
        self._notifiers = notifiers

    @override
    async def send_text(self, text: str) -> bool:
        """Send to all backends concurrently; True if any delivered."""
        results = await asyncio.gather(
            *(notifier.send_text(text) for notifier in self._notifiers),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                logger.error("Notification backend raised: %s", result)
        return any(result is True for result in results)


class NoOpNotifier(AbstractNotifier):
    """No-op notifier that logs but doesn't send notifications."""

    @override
    async def send_text(self, text: str) -> bool:
        logger.info("Notifications disabled, skipping delivery")
        return False


_BACKEND_MAP: dict[NotificationBackend, type[AbstractNotifier]] = {
    NotificationBackend.SLACK: SlackNotifier,
    NotificationBackend.WEBHOOK: WebhookNotifier,
}


def get_notifier() -> AbstractNotifier:
    """Factory function to get the configured notifier."""
    cfg = get_settings().notifications
    if not cfg.enabled:
        return NoOpNotifier()

    notifiers: list[AbstractNotifier] = []
    for backend_str in cfg.backends:
        try:
            backend = NotificationBackend(backend_str)
            notifiers.append(_BACKEND_MAP[backend]())
        except (ValueError, KeyError):
            logger.warning("Unknown notification backend: %s", backend_str)

    if not notifiers:
        return NoOpNotifier()
    if len(notifiers) == 1:
        return notifiers[0]
    return CompositeNotifier(notifiers)
