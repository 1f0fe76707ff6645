#!/usr/bin/env python3
"""StatCan Trends table pipeline runner.

Usage:
    python scripts/run_statcan_pipeline.py scripts/user_config.py
    python scripts/run_statcan_pipeline.py scripts/user_config.py --dataset grain_exports
    python scripts/run_statcan_pipeline.py scripts/user_config.py --download --no-plots

Note: User config in scripts/user_config.py, expert defaults in
src/statcan_trends/schemas/param.py
"""

import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root / "src"))

from statcan_trends.cli import main


if __name__ == "__main__":
    sys.exit(main())
