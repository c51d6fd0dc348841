"""Async storage for readings and alert history.

This package provides async database operations using aiosqlite. See
connection.py for how connections are shared within a run.
"""

from plantmon.lib.db.connection import Database as Database
from plantmon.lib.db.connection import close_db as close_db
from plantmon.lib.db.connection import get_db as get_db
from plantmon.lib.db.connection import init_db as init_db
from plantmon.lib.db.queries import alert_triggered_since as alert_triggered_since
from plantmon.lib.db.queries import get_alerts_since as get_alerts_since
from plantmon.lib.db.queries import get_latest_reading as get_latest_reading
from plantmon.lib.db.queries import get_readings_since as get_readings_since
from plantmon.lib.db.queries import insert_reading as insert_reading
from plantmon.lib.db.queries import insert_readings as insert_readings
from plantmon.lib.db.queries import record_alert as record_alert
from plantmon.lib.db.types import AlertRow as AlertRow
from plantmon.lib.db.types import ReadingRow as ReadingRow
from plantmon.lib.db.types import SQLParams as SQLParams
