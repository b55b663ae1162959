from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path for package imports like `processes.*`
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

DEFAULT_SIZES = [250, 500, 1000, 2000, 5000]


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def default_sizes() -> list[int]:
    return list(DEFAULT_SIZES)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    # Settings read these; keep the host environment out of tests.
    for name in ("PACKS_CONFIG", "HOST", "PORT", "PACK_SIZES", "MAX_TABLE_ENTRIES", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
