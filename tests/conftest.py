"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local lspinspector package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of lspinspector modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("lspinspector"):
        del sys.modules[module_name]

from _support import T0, FixedClock, RecordingSink  # noqa: E402


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(T0)


@pytest.fixture
def queued_at() -> Callable[[float], datetime]:
    """Instant a request was queued, given milliseconds before T0."""

    def _queued(ms_before: float) -> datetime:
        return T0 - timedelta(milliseconds=ms_before)

    return _queued
