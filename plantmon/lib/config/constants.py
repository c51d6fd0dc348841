"""Fixed constants shared by the alert, statistics and health modules."""

# Severity escalation for real-time alerts
SOIL_CRITICAL_DELTA = 200  # critical when soil < soil_dry - delta
TEMP_CRITICAL_HIGH = 40  # Celsius
TEMP_CRITICAL_LOW = 10  # Celsius

# Minimum time between two triggered alerts of the same type
DEFAULT_COOLDOWN_MINUTES = 30

# Trend is rising/falling when the half-window difference exceeds this
# fraction of the overall average
TREND_RATIO = 0.05

# Window-level health assessment
HEALTH_TEMP_SPIKE = 38  # Celsius, compared against the window max
HEALTH_TEMP_COLD = 15  # Celsius, compared against the window min
HEALTH_TEMP_STRESS_AVG = 30  # Celsius, with a rising trend
HEALTH_HUMIDITY_DRY_AIR = 40  # %
HEALTH_WATER_LOW = 30  # % reservoir level

# Weather advisory cut-offs
WEATHER_EXTREME_HEAT = 40
WEATHER_HOT = 35
WEATHER_FROST = 5
WEATHER_COLD = 10
WEATHER_VERY_HUMID = 90
WEATHER_DRY_AIR = 30
WEATHER_STRONG_WIND = 15  # m/s
