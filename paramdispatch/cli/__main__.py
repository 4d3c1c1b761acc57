"""
paramdispatch CLI entry point.

Usage:
    python -m paramdispatch.cli names
    python -m paramdispatch.cli apply -p maxSteps=100 --strict
"""

import sys
from .main import main

if __name__ == "__main__":
    sys.exit(main())
