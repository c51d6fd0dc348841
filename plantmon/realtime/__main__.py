"""Real-time alert check entrypoint.

Evaluates the latest stored reading, records alerts that are not on
cooldown and notifies the configured backends.

Usage: python -m plantmon.realtime
"""

from plantmon.realtime.service import main

if __name__ == "__main__":
    main()
