"""Window-level health assessment.

Coarser counterpart of the real-time alerts: works on the statistics of a
whole window instead of a single reading. Within each metric only the first
matching rule fires.
"""

from plantmon.lib.config import ThresholdSettings, Trend
from plantmon.lib.config.constants import (
    HEALTH_HUMIDITY_DRY_AIR,
    HEALTH_TEMP_COLD,
    HEALTH_TEMP_SPIKE,
    HEALTH_TEMP_STRESS_AVG,
    HEALTH_WATER_LOW,
)
from plantmon.lib.stats import Statistics, WindowStats

SOIL_DRY = "🚨 Soil consistently dry - increase watering frequency!"
SOIL_WET = "⚠️ Soil too wet - reduce watering to prevent root rot."
SOIL_DECLINING = "📉 Soil moisture declining - consider watering soon."
TEMP_SPIKES = "🔥 Temperature spikes detected - ensure shade/ventilation."
TEMP_COLD = "❄️ Cold periods detected - protect from temperature drops."
TEMP_RISING = "📈 Temperature trending upward - monitor for heat stress."
LIGHT_LOW = "🌑 Insufficient light exposure - move to brighter location."
LIGHT_HIGH = "☀️ High light intensity - ensure no direct harsh sunlight."
HUMIDITY_HIGH = "🌫️ High humidity - watch for fungal diseases."
HUMIDITY_LOW = "🏜️ Low humidity - consider misting or humidifier."
WATER_LOW = "💧 Water reservoir low - refill soon!"


def _assess_soil(soil: Statistics, thresholds: ThresholdSettings) -> str | None:
    if soil.avg < thresholds.soil_dry:
        return SOIL_DRY
    if soil.avg > thresholds.soil_wet:
        return SOIL_WET
    if soil.trend == Trend.FALLING:
        return SOIL_DECLINING
    return None


def _assess_temp(temp: Statistics) -> str | None:
    if temp.max > HEALTH_TEMP_SPIKE:
        return TEMP_SPIKES
    if temp.min < HEALTH_TEMP_COLD:
        return TEMP_COLD
    if temp.trend == Trend.RISING and temp.avg > HEALTH_TEMP_STRESS_AVG:
        return TEMP_RISING
    return None


def _assess_light(
    light: Statistics, thresholds: ThresholdSettings
) -> str | None:
    if light.avg < thresholds.light_low:
        return LIGHT_LOW
    if light.avg > thresholds.light_high:
        return LIGHT_HIGH
    return None


def _assess_humidity(
    humidity: Statistics, thresholds: ThresholdSettings
) -> str | None:
    if humidity.avg > thresholds.humidity_high:
        return HUMIDITY_HIGH
    if humidity.avg < HEALTH_HUMIDITY_DRY_AIR:
        return HUMIDITY_LOW
    return None


def _assess_water(water: Statistics | None) -> str | None:
    if water is not None and water.avg < HEALTH_WATER_LOW:
        return WATER_LOW
    return None


def assess_health(
    stats: WindowStats, thresholds: ThresholdSettings
) -> list[str]:
    """Derive advisories from window statistics.

    Output follows the fixed soil, temp, light, humidity, water order. An
    empty list means every metric is nominal.
    """
    advisories = (
        _assess_soil(stats.soil, thresholds),
        _assess_temp(stats.temp),
        _assess_light(stats.light, thresholds),
        _assess_humidity(stats.humidity, thresholds),
        _assess_water(stats.water),
    )
    return [advisory for advisory in advisories if advisory is not None]
