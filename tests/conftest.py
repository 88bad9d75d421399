"""Pytest configuration shared across the test suite."""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Ensure the project root is on sys.path so ``import carbonmix`` works when
# running the test suite without installing the package.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def now():
    """A fixed reference time for deterministic axes."""
    return datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
