"""Pytest configuration.

The repository uses a flat `src/` layout; this conftest puts the repository root on `sys.path` so
tests can import from the `src.*` namespace without installing the package.
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))
