from __future__ import annotations

import json
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from validators import DEFAULT_PACK_SIZES, normalize_pack_sizes

DEFAULT_MAX_TABLE_ENTRIES = 2_000_000

# Environment variable -> settings key
ENV_KEYS = {
    "HOST": "host",
    "PORT": "port",
    "PACK_SIZES": "pack_sizes",
    "MAX_TABLE_ENTRIES": "max_table_entries",
    "LOG_LEVEL": "log_level",
}


@dataclass
class Settings:
    host: str = "0.0.0.0"
    port: int = 8080
    pack_sizes: tuple[int, ...] = field(
        default_factory=lambda: tuple(normalize_pack_sizes(DEFAULT_PACK_SIZES))
    )
    max_table_entries: int = DEFAULT_MAX_TABLE_ENTRIES
    log_level: str = "INFO"

    def to_dict(self) -> dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "pack_sizes": list(self.pack_sizes),
            "max_table_entries": self.max_table_entries,
            "log_level": self.log_level,
        }


def _coerce_scalar(val: str) -> int | float | bool | str:
    lower = val.lower()
    if lower in ("true", "false"):
        return lower == "true"
    try:
        if "." in val:
            return float(val)
        return int(val)
    except ValueError:
        return val


def load_config(
    config_path: Path | None, inline_kv: Sequence[str] | None = None
) -> dict[str, Any]:
    cfg: dict[str, Any] = {}
    if config_path:
        text = config_path.read_text(encoding="utf-8")
        if config_path.suffix.lower() in (".yaml", ".yml"):
            import yaml  # lazy

            cfg = dict(yaml.safe_load(text) or {})
        else:
            cfg = dict(json.loads(text))
    if inline_kv:
        for item in inline_kv:
            if "=" not in item:
                continue
            k, v = item.split("=", 1)
            cfg[k.strip()] = _coerce_scalar(v.strip())
    return cfg


def parse_pack_sizes(raw: Any) -> list[int]:
    """Accept a list of ints or a comma separated string like ``"250,500"``."""
    if isinstance(raw, int) and not isinstance(raw, bool):
        return normalize_pack_sizes([raw])
    if isinstance(raw, str):
        parts = [p.strip() for p in raw.split(",") if p.strip()]
        values: list[Any] = []
        for p in parts:
            try:
                values.append(int(p))
            except ValueError:
                values.append(p)
        return normalize_pack_sizes(values)
    return normalize_pack_sizes(raw or [])


def _as_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{key} must be an integer, got {value!r}") from e


def settings_from_mapping(cfg: Mapping[str, Any], base: Settings | None = None) -> Settings:
    """Overlay known keys of ``cfg`` on ``base``. Unknown keys are ignored."""
    s = base or Settings()
    if "host" in cfg:
        s.host = str(cfg["host"])
    if "port" in cfg:
        s.port = _as_int("port", cfg["port"])
    if "pack_sizes" in cfg:
        s.pack_sizes = tuple(parse_pack_sizes(cfg["pack_sizes"]))
    if "max_table_entries" in cfg:
        s.max_table_entries = _as_int("max_table_entries", cfg["max_table_entries"])
        if s.max_table_entries <= 0:
            raise ValueError("max_table_entries must be greater than zero")
    if "log_level" in cfg:
        s.log_level = str(cfg["log_level"]).upper()
    return s


def load_settings(
    config_path: Path | None = None,
    config_kv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Resolve settings from defaults, a config file, inline overrides and env.

    Later layers win: defaults < file (``config_path`` or ``PACKS_CONFIG``)
    < ``config_kv`` < environment variables listed in ``ENV_KEYS``.
    """
    env = os.environ if environ is None else environ
    if config_path is None and env.get("PACKS_CONFIG"):
        config_path = Path(env["PACKS_CONFIG"])

    settings = settings_from_mapping(load_config(config_path, config_kv))

    env_cfg = {key: env[name] for name, key in ENV_KEYS.items() if env.get(name)}
    return settings_from_mapping(env_cfg, settings)
