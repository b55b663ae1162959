"""Order quantity and pack size validation module."""

from .pack_rules import normalize_pack_sizes, validate_items_ordered
from .types import DEFAULT_PACK_SIZES, MAX_INT32

__all__ = [
    "normalize_pack_sizes",
    "validate_items_ordered",
    "DEFAULT_PACK_SIZES",
    "MAX_INT32",
]
