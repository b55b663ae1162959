from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCodes(str, Enum):
    INVALID_ITEMS_ORDERED = "INVALID_ITEMS_ORDERED"
    INVALID_PACK_SIZES = "INVALID_PACK_SIZES"
    OPTIMIZATION_TOO_LARGE = "OPTIMIZATION_TOO_LARGE"
    NO_PACKING_PLAN = "NO_PACKING_PLAN"
    RECONSTRUCT_FAILED = "RECONSTRUCT_FAILED"


class OptimizerError(Exception):
    def __init__(
        self,
        code: ErrorCodes,
        message: str,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.user_message = user_message or message
        self.details = details or {}


class InvalidItemsOrdered(OptimizerError, ValueError):
    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCodes.INVALID_ITEMS_ORDERED, message, details=details)


class InvalidPackSizes(OptimizerError, ValueError):
    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCodes.INVALID_PACK_SIZES, message, details=details)


class OptimizationTooLarge(OptimizerError, ValueError):
    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCodes.OPTIMIZATION_TOO_LARGE, message, details=details)


class PlanConsistencyError(OptimizerError, RuntimeError):
    """Raised when the packing table cannot produce a plan for valid input.

    Indicates a defect in table construction, never a bad request.
    """


# Input errors the API reports as client errors.
CLIENT_ERRORS: tuple[type[OptimizerError], ...] = (
    InvalidItemsOrdered,
    InvalidPackSizes,
    OptimizationTooLarge,
)


@dataclass(frozen=True)
class PackBreakdown:
    size: int
    count: int

    def to_dict(self) -> dict[str, int]:
        return {"size": self.size, "count": self.count}


@dataclass(frozen=True)
class Plan:
    items_ordered: int
    total_items: int
    total_packs: int
    # descending by size, zero counts omitted
    packs: tuple[PackBreakdown, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "items_ordered": self.items_ordered,
            "total_items": self.total_items,
            "total_packs": self.total_packs,
            "packs": [p.to_dict() for p in self.packs],
        }
