"""Mock sensor data for development.

Generates plausible readings with a bounded random walk so a local database
can be filled without hardware (see scripts/seed_data.py).
"""

import random
from datetime import datetime, timedelta

from plantmon.lib.reading import Reading


def random_walk(
    current: float, drift: float, min_val: float, max_val: float
) -> float:
    """Generate next value using random walk with bounds."""
    change = random.gauss(0, drift)
    new_val = current + change
    return max(min_val, min(max_val, new_val))


class MockSensor:
    """Mock sensor producing drifting soil/light/temp/humidity values.

    Walk parameters:
    - Soil: drift=25, bounds 1400-2900 (ADC counts)
    - Light: drift=40, bounds 0-2000
    - Temperature: drift=0.15, bounds 10-40
    - Humidity: drift=0.3, bounds 25-95
    - Water: drift=0.5, bounds 0-100 (only when with_water=True)
    """

    def __init__(self, *, with_water: bool = False) -> None:
        self._soil = random.uniform(1900.0, 2400.0)
        self._light = random.uniform(600.0, 1200.0)
        self._temp = random.uniform(20.0, 26.0)
        self._humidity = random.uniform(45.0, 65.0)
        self._water = random.uniform(40.0, 90.0) if with_water else None

    def read(self, timestamp: datetime) -> Reading:
        """Advance every walk one step and return the new reading."""
        self._soil = random_walk(self._soil, 25, 1400.0, 2900.0)
        self._light = random_walk(self._light, 40, 0.0, 2000.0)
        self._temp = random_walk(self._temp, 0.15, 10.0, 40.0)
        self._humidity = random_walk(self._humidity, 0.3, 25.0, 95.0)
        if self._water is not None:
            self._water = random_walk(self._water, 0.5, 0.0, 100.0)
        return Reading(
            soil=round(self._soil),
            light=round(self._light),
            temp=round(self._temp, 1),
            humidity=round(self._humidity, 1),
            water=round(self._water, 1) if self._water is not None else None,
            timestamp=timestamp,
        )

    def readings(
        self, num_records: int, interval: timedelta, end: datetime
    ) -> list[Reading]:
        """Generate ``num_records`` readings spaced ``interval`` apart up to ``end``."""
        return [
            self.read(end - interval * (num_records - 1 - i))
            for i in range(num_records)
        ]
