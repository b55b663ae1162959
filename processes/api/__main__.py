from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

import uvicorn

from processes.api.app import create_app
from processes.settings import load_settings


def main(argv: Sequence[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="python -m processes.api")
    p.add_argument("--config", type=Path, help="YAML or JSON settings file")
    p.add_argument("--config-kv", nargs="*", help="Inline overrides key=value")
    ns = p.parse_args(argv)

    settings = load_settings(ns.config, ns.config_kv)
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    app = create_app(settings=settings)
    # uvicorn handles SIGINT/SIGTERM and drains in-flight requests
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    raise SystemExit(main())
