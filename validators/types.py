"""Shared bounds for order quantities and pack sizes."""

from __future__ import annotations

# Order quantities and pack sizes must fit a signed 32-bit integer.
MAX_INT32 = 2**31 - 1

# Server-wide pack sizes used when nothing else is configured.
DEFAULT_PACK_SIZES: tuple[int, ...] = (250, 500, 1000, 2000, 5000)
