"""Daily digest formatting.

The section order (header, statistics, health assessment, weather) and the
line order inside the statistics block are relied upon by the consumers that
display the digest, so keep them stable.
"""

from datetime import date

from plantmon.lib.config import Trend
from plantmon.lib.stats import WindowStats
from plantmon.lib.weather import WeatherAdvisory

ALL_CLEAR = "✅ All readings within healthy ranges!"
RAIN_TIP = "💡 *Tip:* Rain expected - no need to water today!"

_TREND_INDICATORS: dict[Trend, str] = {
    Trend.RISING: "📈",
    Trend.FALLING: "📉",
    Trend.STABLE: "➡️",
}


def format_trend(trend: Trend) -> str:
    return _TREND_INDICATORS[trend]


def _raw(value: float) -> str:
    """Format a raw sensor count without a spurious trailing '.0'."""
    return str(int(value)) if float(value).is_integer() else str(value)


def format_report_date(day: date) -> str:
    """Long-form date, e.g. 'Saturday, June 15, 2024'."""
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


def _format_statistics(stats: WindowStats, window_hours: int) -> list[str]:
    temp, soil, light, humidity = (
        stats.temp,
        stats.soil,
        stats.light,
        stats.humidity,
    )
    lines = [
        f"📊 *{window_hours}-Hour Statistics* ({stats.reading_count} readings)",
        f"├─ 🌡️ Temp: {temp.avg:.1f}°C ({temp.min:.1f}-{temp.max:.1f}) "
        f"{format_trend(temp.trend)}",
        f"├─ 💧 Soil: {soil.avg:.0f} ({_raw(soil.min)}-{_raw(soil.max)}) "
        f"{format_trend(soil.trend)}",
        f"├─ 💡 Light: {light.avg:.0f} ({_raw(light.min)}-{_raw(light.max)}) "
        f"{format_trend(light.trend)}",
        f"└─ 💨 Humidity: {humidity.avg:.1f}% "
        f"({humidity.min:.1f}-{humidity.max:.1f}) "
        f"{format_trend(humidity.trend)}",
    ]
    if stats.water is not None:
        lines.append(f"   🚰 Water: {stats.water.avg:.0f}%")
    return lines


def _format_weather(weather: WeatherAdvisory, city: str) -> str:
    condition = weather.condition[:1].upper() + weather.condition[1:]
    section = (
        f"🌦️ *Weather ({city})*\n"
        f"{condition} | {weather.temp:.1f}°C | 💧{_raw(weather.humidity)}%"
    )
    if weather.alerts:
        section += "\n\n⚠️ *Weather Alerts*\n"
        section += "\n".join(f"• {a}" for a in weather.alerts)
    if weather.rain_expected:
        section += f"\n\n{RAIN_TIP}"
    return section


def compose_report(
    stats: WindowStats,
    health_alerts: list[str],
    weather: WeatherAdvisory | None,
    *,
    city: str,
    report_date: date,
    window_hours: int = 24,
) -> str:
    """Assemble the digest text.

    Args:
        stats: Window statistics from compute_statistics().
        health_alerts: Advisories from assess_health(); empty renders the
            all-clear line.
        weather: Optional advisory; None omits the weather section.
        city: Location shown in the weather section header.
        report_date: Date shown in the report header.
        window_hours: Window length shown in the statistics header.
    """
    report = (
        f"🌱 *Daily Plant Report*\n📅 {format_report_date(report_date)}\n\n"
    )
    report += "\n".join(_format_statistics(stats, window_hours)) + "\n"

    report += "\n🏥 *Health Assessment*\n"
    if health_alerts:
        report += "\n".join(f"• {a}" for a in health_alerts)
    else:
        report += ALL_CLEAR

    if weather is not None:
        report += "\n\n" + _format_weather(weather, city)

    return report
