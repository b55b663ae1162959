"""Pack fulfillment engine.

Finds the whole-pack combination that ships at least the ordered quantity with
the least overfill and, for that total, the fewest packs. The search is a
bounded coin-change table over every total up to
``items_ordered + largest_pack - 1``; no larger total can be optimal because
the largest pack alone already reaches a total within that range.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Iterable, Sequence
from typing import Any

from processes.optimizer.types import (
    ErrorCodes,
    OptimizationTooLarge,
    PackBreakdown,
    Plan,
    PlanConsistencyError,
)
from validators import normalize_pack_sizes, validate_items_ordered

logger = logging.getLogger("processes.optimizer")

# Upper bound on table entries per call; larger requests fail fast.
MAX_TABLE_ENTRIES = 2_000_000

# Backtracking pointer value for totals without a predecessor yet.
_UNSET = -1


class PackingTable:
    """DP state for a single optimization call.

    ``min_packs[t]`` holds the fewest packs that sum to exactly ``t`` or
    ``unreachable_packs`` when no combination does. ``prev_total`` and
    ``prev_pack`` record the predecessor total and the pack added to reach
    ``t`` from it.
    """

    def __init__(
        self,
        items_ordered: int,
        sorted_pack_sizes: Sequence[int],
        max_table_entries: int = MAX_TABLE_ENTRIES,
    ) -> None:
        # sorted descending: first is largest, last is smallest
        largest = sorted_pack_sizes[0]
        smallest = sorted_pack_sizes[-1]

        fulfillment_limit = items_ordered + largest - 1
        if fulfillment_limit <= 0:
            raise OptimizationTooLarge(
                "optimization range is too large: invalid fulfillment range",
                details={"fulfillment_limit": fulfillment_limit},
            )
        if fulfillment_limit + 1 > max_table_entries:
            raise OptimizationTooLarge(
                f"optimization range is too large: requires {fulfillment_limit + 1} "
                f"table entries (max {max_table_entries})",
                details={"required": fulfillment_limit + 1, "max": max_table_entries},
            )

        self.items_ordered = items_ordered
        self.sorted_pack_sizes = list(sorted_pack_sizes)
        self.fulfillment_limit = fulfillment_limit
        # Filling the limit with the smallest pack is the worst case.
        self.unreachable_packs = fulfillment_limit // smallest + 1

        size = fulfillment_limit + 1
        self.min_packs = [self.unreachable_packs] * size
        self.prev_total = [_UNSET] * size
        self.prev_pack = [_UNSET] * size

        self.min_packs[0] = 0
        self.prev_total[0] = 0
        self.prev_pack[0] = 0

    def __len__(self) -> int:
        return len(self.min_packs)

    def is_reachable(self, total: int) -> bool:
        return self.min_packs[total] != self.unreachable_packs

    def fill(self) -> None:
        """Populate ``min_packs`` and the backtracking pointers.

        Pack sizes are tried largest first and an entry changes only on a
        strict improvement, so among pack sizes giving the same minimal count
        the largest one is kept.
        """
        min_packs = self.min_packs
        prev_total = self.prev_total
        prev_pack = self.prev_pack
        unreachable = self.unreachable_packs
        sizes = self.sorted_pack_sizes

        for total in range(1, len(min_packs)):
            best = min_packs[total]
            for pack_size in sizes:
                predecessor = total - pack_size
                if predecessor < 0:
                    continue
                packs = min_packs[predecessor]
                if packs == unreachable:
                    continue
                candidate = packs + 1
                if candidate < best:
                    best = candidate
                    min_packs[total] = candidate
                    prev_total[total] = predecessor
                    prev_pack[total] = pack_size

    def choose_fulfillment_total(self) -> int:
        """Return the smallest reachable total that is at least ``items_ordered``."""
        for total in range(self.items_ordered, len(self.min_packs)):
            if self.is_reachable(total):
                return total
        raise PlanConsistencyError(
            ErrorCodes.NO_PACKING_PLAN,
            "no valid packing combination found",
            details={
                "items_ordered": self.items_ordered,
                "fulfillment_limit": self.fulfillment_limit,
            },
        )

    def build_breakdown(self, chosen_total: int) -> tuple[PackBreakdown, ...]:
        """Walk the pointers back from ``chosen_total`` and count packs by size."""
        counts: dict[int, int] = {}
        total = chosen_total
        while total > 0:
            pack_size = self.prev_pack[total]
            if pack_size <= 0:
                raise PlanConsistencyError(
                    ErrorCodes.RECONSTRUCT_FAILED,
                    "unable to reconstruct packing combination",
                    details={"total": total, "pack_size": pack_size},
                )
            counts[pack_size] = counts.get(pack_size, 0) + 1
            total = self.prev_total[total]

        return tuple(
            PackBreakdown(size=size, count=counts[size])
            for size in self.sorted_pack_sizes
            if counts.get(size, 0) > 0
        )


def optimize(
    items_ordered: Any,
    pack_sizes: Iterable[Any],
    *,
    max_table_entries: int = MAX_TABLE_ENTRIES,
) -> Plan:
    """Compute the fulfillment plan for ``items_ordered``.

    The plan ships at least ``items_ordered`` items with the least overfill
    and, for that total, the minimum number of packs.

    Raises:
        InvalidItemsOrdered: ``items_ordered`` is not a positive int32.
        InvalidPackSizes: ``pack_sizes`` fails normalization.
        OptimizationTooLarge: the table would exceed ``max_table_entries``.
        PlanConsistencyError: the table could not produce a plan.
    """
    t0 = time.time()
    items_ordered = validate_items_ordered(items_ordered)
    normalized = normalize_pack_sizes(pack_sizes)

    table = PackingTable(items_ordered, normalized, max_table_entries)
    logger.debug(
        json.dumps(
            {
                "event": "optimize_table",
                "items_ordered": items_ordered,
                "pack_sizes": normalized,
                "entries": len(table),
            }
        )
    )
    table.fill()

    chosen_total = table.choose_fulfillment_total()
    packs = table.build_breakdown(chosen_total)
    plan = Plan(
        items_ordered=items_ordered,
        total_items=chosen_total,
        total_packs=table.min_packs[chosen_total],
        packs=packs,
    )
    dt = time.time() - t0
    logger.info(
        json.dumps(
            {
                "event": "optimize_done",
                "items_ordered": items_ordered,
                "total_items": plan.total_items,
                "total_packs": plan.total_packs,
                "dt_s": round(dt, 6),
            }
        )
    )
    return plan
