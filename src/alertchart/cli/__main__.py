"""Entry point for ``python -m alertchart.cli``."""

import sys

from .chart_dataset import main

if __name__ == "__main__":
    sys.exit(main())
