"""Daily digest entrypoint.

Summarizes the trailing window of readings and delivers the report to the
configured notification backends.

Usage: python -m plantmon.digest
"""

from plantmon.digest.service import main

if __name__ == "__main__":
    main()
