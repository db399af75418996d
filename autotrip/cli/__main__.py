"""
autotrip CLI entry point.

Usage:
    python -m autotrip.cli evaluate make=Toyota model=Prius year=2010
    python -m autotrip.cli explain country=US
    python -m autotrip.cli committees
"""

import sys
from .main import main

if __name__ == "__main__":
    sys.exit(main())
