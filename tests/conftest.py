"""
Shared test fixtures for the kitchen design engine tests.
"""
import sys
from pathlib import Path

import pytest

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from builder import build_design
from templates import LAYOUT_OPTIONS

FIXED_CREATED_AT = "2024-01-01T00:00:00+00:00"


@pytest.fixture
def back_kitchen():
    """BACK_KITCHEN baseline with the default DFKW door and CDZM top."""
    return build_design("BACK_KITCHEN", "DFKW", "CDZM", created_at=FIXED_CREATED_AT)


@pytest.fixture(params=LAYOUT_OPTIONS)
def baseline_design(request):
    """Baseline design for every registered layout."""
    return build_design(request.param, created_at=FIXED_CREATED_AT)


@pytest.fixture
def runs_dir(tmp_path: Path) -> Path:
    path = tmp_path / "runs"
    path.mkdir()
    return path
