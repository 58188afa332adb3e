"""
Pytest Configuration
====================

Loaded automatically by pytest.

- src/ goes on sys.path, so polytope_core imports without installation
- the shared default constructor is made memory-only
  (POLYTOPE_CORE_CACHE_DIR=""), so the suite never writes into the
  user's cache directory

Usage:
    cd src
    pytest tests/ -v -m "not slow"
"""

import os
import sys
from pathlib import Path

SRC_ROOT = Path(__file__).parent

os.environ.setdefault("POLYTOPE_CORE_CACHE_DIR", "")

if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))
