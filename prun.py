#!/usr/bin/env python3
"""perfresults CLI entrypoint -- run without pip install.

Usage:
    python prun.py gatling2csv results/PERF_SCALE_12345
    python prun.py --help
"""

import sys
from pathlib import Path

# Add src/ to import path so the perfresults package is importable
sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from perfresults.cli import app

if __name__ == "__main__":
    app()
