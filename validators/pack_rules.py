"""Core validation rules for order quantities and pack sizes."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from processes.optimizer.types import InvalidItemsOrdered, InvalidPackSizes

from .types import MAX_INT32


def _is_int(value: Any) -> bool:
    # bool is an int subclass but never a quantity
    return isinstance(value, int) and not isinstance(value, bool)


def validate_items_ordered(items_ordered: Any) -> int:
    """Return ``items_ordered`` if it is a positive int within the int32 range."""
    if not _is_int(items_ordered):
        raise InvalidItemsOrdered(
            f"items_ordered must be an integer: {items_ordered!r}",
            details={"value": items_ordered},
        )
    if items_ordered <= 0:
        raise InvalidItemsOrdered(
            f"items_ordered must be greater than zero: {items_ordered}",
            details={"value": items_ordered},
        )
    if items_ordered > MAX_INT32:
        raise InvalidItemsOrdered(
            f"items_ordered {items_ordered} exceeds int32 max value {MAX_INT32}",
            details={"value": items_ordered},
        )
    return int(items_ordered)


def normalize_pack_sizes(pack_sizes: Iterable[Any]) -> list[int]:
    """Validate pack sizes, drop duplicates and sort them largest first.

    Pure function; the input is never modified.

    Args:
        pack_sizes: Candidate pack sizes in any order, duplicates allowed.

    Returns:
        The distinct pack sizes in strictly descending order.

    Raises:
        InvalidPackSizes: If the input is empty or any value is not a
            positive int within the int32 range. The message names the
            offending value.
    """
    sizes = list(pack_sizes)
    if not sizes:
        raise InvalidPackSizes("pack_sizes must contain at least one positive integer")

    seen: set[int] = set()
    normalized: list[int] = []
    for size in sizes:
        if not _is_int(size):
            raise InvalidPackSizes(
                f"pack_sizes must contain only integers: {size!r}",
                details={"value": size},
            )
        if size <= 0:
            raise InvalidPackSizes(
                f"pack_sizes must contain only positive integers: {size}",
                details={"value": size},
            )
        if size > MAX_INT32:
            raise InvalidPackSizes(
                f"pack_sizes value {size} exceeds int32 max value {MAX_INT32}",
                details={"value": size},
            )
        if size in seen:
            continue
        seen.add(size)
        normalized.append(int(size))

    if not normalized:  # pragma: no cover - every empty case is rejected above
        raise InvalidPackSizes("pack_sizes must contain at least one positive integer")

    normalized.sort(reverse=True)
    return normalized
