#!/usr/bin/env python3
"""
Listing ingestion CLI tool.

Usage:
    python scripts/ingest.py --source apartments
    python scripts/ingest.py --mode bulk
    python scripts/ingest.py --history

See ``rentals.cli`` for all options.
"""

import sys
from pathlib import Path

# Add backend to path
backend_path = Path(__file__).parent.parent
sys.path.insert(0, str(backend_path))

from rentals.cli import main


if __name__ == "__main__":
    sys.exit(main())
