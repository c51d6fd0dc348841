"""Weather advisories for the daily report.

Weather data is supplied by an injected WeatherSource. A missing source or a
failing one simply means the report has no weather section.
"""

from dataclasses import dataclass
from typing import Protocol

from plantmon.lib.config.constants import (
    WEATHER_COLD,
    WEATHER_DRY_AIR,
    WEATHER_EXTREME_HEAT,
    WEATHER_FROST,
    WEATHER_HOT,
    WEATHER_STRONG_WIND,
    WEATHER_VERY_HUMID,
)
from plantmon.logging import get_logger

logger = get_logger("lib.weather")


@dataclass(frozen=True, slots=True)
class WeatherAdvisory:
    condition: str
    temp: float
    humidity: float
    wind_speed: float
    rain_expected: bool
    alerts: tuple[str, ...] = ()


class WeatherSource(Protocol):
    async def fetch(self) -> WeatherAdvisory | None: ...


def _temperature_alert(temp: float) -> str | None:
    if temp > WEATHER_EXTREME_HEAT:
        return "🔥 EXTREME HEAT - Keep plants shaded & hydrated!"
    if temp > WEATHER_HOT:
        return "🌡️ Hot weather - increase watering frequency."
    if temp < WEATHER_FROST:
        return "❄️ FROST WARNING - Move plants indoors!"
    if temp < WEATHER_COLD:
        return "🥶 Cold weather - protect sensitive plants."
    return None


def _humidity_alert(humidity: float) -> str | None:
    if humidity > WEATHER_VERY_HUMID:
        return "💨 Very high humidity - watch for fungal diseases."
    if humidity < WEATHER_DRY_AIR:
        return "🏜️ Dry air - mist your plants."
    return None


def _wind_alert(wind_speed: float) -> str | None:
    if wind_speed > WEATHER_STRONG_WIND:
        return "🌬️ Strong winds - secure or shelter plants."
    return None


def _condition_alert(condition: str, rain_expected: bool) -> str | None:
    if condition == "thunderstorm":
        return "⛈️ THUNDERSTORM - Bring potted plants inside!"
    if rain_expected:
        return "🌧️ Rain expected - skip watering today."
    if condition == "snow":
        return "🌨️ SNOW WARNING - Protect all outdoor plants!"
    return None


def build_weather_advisory(
    *,
    condition: str,
    description: str,
    temp: float,
    humidity: float,
    wind_speed: float,
    rain: bool = False,
) -> WeatherAdvisory:
    """Turn raw conditions into an advisory with plant-care alerts.

    Args:
        condition: Short condition keyword (e.g. "rain", "snow", "clear").
        description: Human description shown in the report.
        temp: Temperature in Celsius.
        humidity: Relative humidity in percent.
        wind_speed: Wind speed in m/s.
        rain: True when a rain volume was reported.
    """
    condition = condition.lower()
    rain_expected = rain or condition == "rain"
    alerts = [
        _temperature_alert(temp),
        _humidity_alert(humidity),
        _wind_alert(wind_speed),
        _condition_alert(condition, rain_expected),
    ]
    return WeatherAdvisory(
        condition=description or "Unknown",
        temp=temp,
        humidity=humidity,
        wind_speed=wind_speed,
        rain_expected=rain_expected,
        alerts=tuple(a for a in alerts if a is not None),
    )


async def fetch_advisory(
    source: WeatherSource | None,
) -> WeatherAdvisory | None:
    """Fetch an advisory, degrading to None on any failure."""
    if source is None:
        return None
    try:
        return await source.fetch()
    except Exception as e:
        logger.warning("Weather fetch failed, omitting weather section: %s", e)
        return None
