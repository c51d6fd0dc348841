"""Centralized configuration for the plant monitor.

This package provides:
- Enums for alert types, severities, trends and notification backends
- Fixed alerting constants
- Pydantic settings models loaded from the environment
"""

from .enums import (
    AlertType,
    NotificationBackend,
    Severity,
    Trend,
)
from .settings import (
    AlertSettings,
    DigestSettings,
    NotificationSettings,
    Settings,
    SlackSettings,
    ThresholdSettings,
    WebhookSettings,
    get_settings,
)

__all__ = [
    # Enums
    "AlertType",
    "NotificationBackend",
    "Severity",
    "Trend",
    # Settings models
    "AlertSettings",
    "DigestSettings",
    "NotificationSettings",
    "Settings",
    "SlackSettings",
    "ThresholdSettings",
    "WebhookSettings",
    # Functions
    "get_settings",
]
