"""Shared pytest configuration: path setup for src imports."""

import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parent.parent

# Allow ``from market_factory import ...`` without installing the package
sys.path.insert(0, str(_ROOT / "src"))
