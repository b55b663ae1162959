from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pandas as pd

from pipeline.io.files import write_csv, write_json, write_parquet
from pipeline.io.validate import load_schema, schema_path, validate_obj
from processes.optimizer.engine import optimize
from processes.optimizer.types import OptimizerError, Plan
from processes.settings import load_settings
from validators import normalize_pack_sizes

OUTPUT_FORMATS = ("json", "csv", "parquet")


def _coerce_quantity(val: Any) -> Any:
    # CSV readers hand back numpy scalars and floats for integer columns with gaps
    if hasattr(val, "item"):
        val = val.item()
    if isinstance(val, float) and val.is_integer():
        return int(val)
    return val


def load_orders(path: Path) -> list[tuple[str | None, Any]]:
    """Read ``(order_id, items_ordered)`` pairs from a CSV file.

    ``items_ordered`` is required; ``order_id`` is optional.
    """
    df = pd.read_csv(path, dtype={"order_id": str})
    required = ["items_ordered"]
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns in orders: {missing}")
    has_id = "order_id" in df.columns
    orders: list[tuple[str | None, Any]] = []
    for row in df.to_dict(orient="records"):
        order_id = str(row["order_id"]) if has_id and pd.notna(row["order_id"]) else None
        orders.append((order_id, _coerce_quantity(row["items_ordered"])))
    return orders


def _plan_record(plan: Plan, order_id: str | None) -> dict[str, Any]:
    record = plan.to_dict()
    if order_id is not None:
        record = {"order_id": order_id, **record}
    return record


def _to_frame(records: Sequence[dict[str, Any]]) -> pd.DataFrame:
    rows = []
    for r in records:
        row = dict(r)
        row["packs"] = json.dumps(r["packs"], separators=(",", ":"))
        rows.append(row)
    return pd.DataFrame(rows)


def run_adapter(
    *,
    items_ordered: int | None = None,
    orders_path: Path | None = None,
    pack_sizes: Sequence[int] | None = None,
    config_path: Path | None = None,
    config_kv: Sequence[str] | None = None,
    out_path: Path | None = None,
    fmt: str = "json",
    schemas_root: Path | None = None,
) -> dict[str, Any]:
    """Optimize one order or a CSV batch and optionally write the plans.

    Every plan is computed and validated against ``plan.schema.yaml`` before
    anything is written, so a bad order leaves no partial output behind.
    """
    if (items_ordered is None) == (orders_path is None):
        raise ValueError("Provide exactly one of items_ordered or orders_path")
    if fmt not in OUTPUT_FORMATS:
        raise ValueError(f"Unsupported format '{fmt}'. Expected one of {OUTPUT_FORMATS}")

    settings = load_settings(config_path, config_kv)
    sizes = normalize_pack_sizes(pack_sizes or settings.pack_sizes)

    if orders_path is not None:
        orders = load_orders(orders_path)
    else:
        orders = [(None, items_ordered)]

    plans = [
        (order_id, optimize(qty, sizes, max_table_entries=settings.max_table_entries))
        for order_id, qty in orders
    ]
    records = [_plan_record(plan, order_id) for order_id, plan in plans]

    # Validate before any write (fail fast)
    plan_schema = load_schema(schema_path("plan", schemas_root))
    for record in records:
        validate_obj(plan_schema, record)

    if out_path is not None:
        if fmt == "json":
            write_json(records, out_path)
        elif fmt == "csv":
            write_csv(_to_frame(records), out_path)
        else:
            write_parquet(_to_frame(records), out_path)

    return {
        "count": len(records),
        "pack_sizes": sizes,
        "max_table_entries": settings.max_table_entries,
        "out_path": str(out_path) if out_path is not None else None,
        "plans": records,
    }


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="python -m processes.optimizer")
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("--items-ordered", type=int, help="Single order quantity")
    src.add_argument("--orders", type=Path, help="CSV with an items_ordered column")
    p.add_argument("--pack-sizes", type=int, nargs="+", help="Override configured pack sizes")
    p.add_argument("--config", type=Path)
    p.add_argument("--config-kv", nargs="*", help="Inline overrides key=value")
    p.add_argument("--out", type=Path, help="Output path; prints JSON to stdout when omitted")
    p.add_argument("--format", choices=OUTPUT_FORMATS, default="json")
    p.add_argument(
        "--schemas-root",
        type=Path,
        help="Override schemas root (defaults to repo-relative pipeline/schemas)",
    )
    p.add_argument("--verbose", action="store_true")
    return p


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        result = run_adapter(
            items_ordered=args.items_ordered,
            orders_path=args.orders,
            pack_sizes=args.pack_sizes,
            config_path=args.config,
            config_kv=args.config_kv,
            out_path=args.out,
            fmt=str(args.format),
            schemas_root=args.schemas_root,
        )
    except OptimizerError as e:
        print(f"[optimizer] error: {e.user_message}", file=sys.stderr)
        return 2

    if args.out is None:
        plans = result["plans"]
        print(json.dumps(plans[0] if args.items_ordered is not None else plans, indent=2))
    if args.verbose:
        print(f"[optimizer] pack sizes: {result['pack_sizes']}", file=sys.stderr)
        print(f"[optimizer] plans computed: {result['count']}", file=sys.stderr)
        if result["out_path"]:
            print(f"[optimizer] written: {result['out_path']}", file=sys.stderr)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
