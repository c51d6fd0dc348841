"""Settings models and configuration loading for the plant monitor."""

from datetime import timedelta
from functools import cached_property, lru_cache
from typing import Annotated, Any, Self

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    HttpUrl,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from plantmon.lib.config.constants import DEFAULT_COOLDOWN_MINUTES
from plantmon.lib.config.enums import NotificationBackend
from plantmon.lib.retry import RetryPolicy


_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _parse_bool(v: Any) -> bool:
    """Accept 1/true/yes/on (any case) as True for env flags."""
    if isinstance(v, str):
        return v.strip().lower() in _TRUTHY
    return bool(v)


def _split_backends(value: str) -> list[str]:
    return [part.strip().lower() for part in value.split(",") if part.strip()]


_BoolFromStr = Annotated[bool, BeforeValidator(_parse_bool)]


def _validate_http_url_or_empty(v: str) -> str:
    """Validate HTTP URL format, allowing empty string."""
    if not v:
        return v
    HttpUrl(v)
    return v


_HttpUrlOrEmpty = Annotated[str, AfterValidator(_validate_http_url_or_empty)]


class ThresholdSettings(BaseModel):
    """Per-metric alert bounds.

    Raw soil values are ADC counts (higher means wetter), light is raw sensor
    units, temperature is Celsius and humidity is percent. ``light_high`` is
    only used as a hint by the window health assessment; the real-time path
    has no high-light alert.
    """

    model_config = ConfigDict(frozen=True)

    soil_dry: int = 1800
    soil_wet: int = 2600
    temp_high: int = 35
    temp_low: int = 15
    light_low: int = 500
    light_high: int = 1600
    humidity_high: int = 85
    humidity_low: int = 35


class AlertSettings(BaseModel):
    """Real-time alert behavior settings."""

    model_config = ConfigDict(frozen=True)

    cooldown_minutes: int = DEFAULT_COOLDOWN_MINUTES

    @property
    def cooldown(self) -> timedelta:
        return timedelta(minutes=self.cooldown_minutes)


class DigestSettings(BaseModel):
    """Daily digest report settings."""

    model_config = ConfigDict(frozen=True)

    window_hours: int = 24
    weather_city: str = "Chennai"

    @property
    def window(self) -> timedelta:
        return timedelta(hours=self.window_hours)


class SlackSettings(BaseModel):
    """Slack notification settings."""

    model_config = ConfigDict(frozen=True)

    webhook_url: _HttpUrlOrEmpty = ""


class WebhookSettings(BaseModel):
    """Generic JSON webhook settings (e.g. an email relay)."""

    model_config = ConfigDict(frozen=True)

    url: _HttpUrlOrEmpty = ""


class NotificationSettings(BaseModel):
    """Notification service settings."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    backends: list[NotificationBackend] = []
    slack: SlackSettings = SlackSettings()
    webhook: WebhookSettings = WebhookSettings()
    max_retries: int = 3
    initial_backoff_sec: int = 2
    timeout_sec: int = 30

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            attempts=self.max_retries,
            initial_backoff_sec=self.initial_backoff_sec,
        )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    db_path: str = "plantmon.sqlite3"
    db_timeout_sec: float = 30.0

    # Thresholds
    soil_dry: int = Field(default=1800, ge=0)
    soil_wet: int = Field(default=2600, ge=0)
    temp_high: int = Field(default=35, ge=-40, le=80)
    temp_low: int = Field(default=15, ge=-40, le=80)
    light_low: int = Field(default=500, ge=0)
    light_high: int = Field(default=1600, ge=0)
    humidity_high: int = Field(default=85, ge=0, le=100)
    humidity_low: int = Field(default=35, ge=0, le=100)

    # Alerts
    alert_cooldown_minutes: int = Field(
        default=DEFAULT_COOLDOWN_MINUTES, ge=0
    )

    # Digest
    report_window_hours: int = Field(default=24, ge=1, le=168)
    weather_city: str = "Chennai"

    # Notifications
    enable_notification_service: _BoolFromStr = False
    notification_backends: str = "slack"
    slack_webhook_url: _HttpUrlOrEmpty = ""
    email_webhook_url: _HttpUrlOrEmpty = ""
    notification_max_retries: int = Field(default=3, ge=1)
    notification_initial_backoff_sec: int = Field(default=2, ge=0)
    notification_timeout_sec: int = Field(default=30, ge=1)

    @cached_property
    def thresholds(self) -> ThresholdSettings:
        """Get threshold settings as nested object."""
        return ThresholdSettings(
            soil_dry=self.soil_dry,
            soil_wet=self.soil_wet,
            temp_high=self.temp_high,
            temp_low=self.temp_low,
            light_low=self.light_low,
            light_high=self.light_high,
            humidity_high=self.humidity_high,
            humidity_low=self.humidity_low,
        )

    @cached_property
    def alerts(self) -> AlertSettings:
        """Get alert behavior settings."""
        return AlertSettings(cooldown_minutes=self.alert_cooldown_minutes)

    @cached_property
    def digest(self) -> DigestSettings:
        """Get daily digest settings."""
        return DigestSettings(
            window_hours=self.report_window_hours,
            weather_city=self.weather_city,
        )

    @cached_property
    def notifications(self) -> NotificationSettings:
        """Get notification settings as nested object."""
        backends = [
            NotificationBackend(b)
            for b in _split_backends(self.notification_backends)
        ]
        return NotificationSettings(
            enabled=self.enable_notification_service,
            backends=backends,
            slack=SlackSettings(webhook_url=self.slack_webhook_url),
            webhook=WebhookSettings(url=self.email_webhook_url),
            max_retries=self.notification_max_retries,
            initial_backoff_sec=self.notification_initial_backoff_sec,
            timeout_sec=self.notification_timeout_sec,
        )

    @model_validator(mode="after")
    def validate_settings(self) -> Self:
        """Validate cross-field configuration constraints."""
        errors: list[str] = []

        for low_name, low, high_name, high in (
            ("SOIL_DRY", self.soil_dry, "SOIL_WET", self.soil_wet),
            ("TEMP_LOW", self.temp_low, "TEMP_HIGH", self.temp_high),
            ("LIGHT_LOW", self.light_low, "LIGHT_HIGH", self.light_high),
            (
                "HUMIDITY_LOW",
                self.humidity_low,
                "HUMIDITY_HIGH",
                self.humidity_high,
            ),
        ):
            if low >= high:
                errors.append(
                    f"{low_name} ({low}) must be less than {high_name} ({high})"
                )

        backends = _split_backends(self.notification_backends)
        known = {str(b) for b in NotificationBackend}
        unknown = [b for b in backends if b not in known]
        if unknown:
            errors.append(
                f"Unknown NOTIFICATION_BACKENDS: {', '.join(unknown)}"
            )

        if self.enable_notification_service:
            required_urls = (
                (
                    NotificationBackend.SLACK,
                    self.slack_webhook_url,
                    "SLACK_WEBHOOK_URL",
                ),
                (
                    NotificationBackend.WEBHOOK,
                    self.email_webhook_url,
                    "EMAIL_WEBHOOK_URL",
                ),
            )
            for backend, url, env_name in required_urls:
                if backend in backends and not url:
                    errors.append(
                        f"{backend.capitalize()} enabled but {env_name} "
                        "is not set"
                    )

        if errors:
            raise ValueError(
                "Configuration validation failed:\n  - "
                + "\n  - ".join(errors)
            )

        return self


# Settings override for testing - allows injecting custom Settings without
# modifying environment variables or clearing the lru_cache.
_settings_override: Settings | None = None


@lru_cache(maxsize=1)
def _load_settings() -> Settings:
    """Load settings from environment (cached)."""
    return Settings()


def get_settings() -> Settings:
    """Get the global settings instance.

    Returns the test override if set, otherwise loads from environment
    variables (cached after first load). For testing, use set_settings()
    from plantmon.lib.config.testing to override.
    """
    if _settings_override is not None:
        return _settings_override
    return _load_settings()
