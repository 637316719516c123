"""
Load sandbox settings from an optional YAML file merged over defaults.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

log = logging.getLogger(__name__)

ENV_VAR = "COLOR_SANDBOX_CONFIG"


def _defaults() -> dict[str, Any]:
    return {
        "picker_size": [256, 256],
        "wheel_size": 325,
        "nearby": {"min_tile": 40, "rows": 4, "width": 400},
        "resize_debounce": 0.2,
        "quiz": {
            "retries": {
                "code-to-swatch": 1,
                "swatch-to-code": 0,
                "channel-isolation": 2,
            },
        },
        "streak_path": None,
        "seed": None,
    }


def _merge(base: dict[str, Any], over: dict[str, Any]) -> dict[str, Any]:
    out = dict(base)
    for key, value in over.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


@dataclass
class SandboxConfig:
    picker_width: int = 256
    picker_height: int = 256
    wheel_size: int = 325
    nearby_min_tile: int = 40
    nearby_rows: int = 4
    nearby_width: float = 400
    resize_debounce: float = 0.2
    quiz_retries: dict[str, int] = field(
        default_factory=lambda: dict(_defaults()["quiz"]["retries"])
    )
    streak_path: Path | None = None
    seed: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SandboxConfig":
        merged = _merge(_defaults(), data or {})
        width, height = merged["picker_size"]
        nearby = merged["nearby"]
        streak_path = merged.get("streak_path")
        return cls(
            picker_width=int(width),
            picker_height=int(height),
            wheel_size=int(merged["wheel_size"]),
            nearby_min_tile=int(nearby["min_tile"]),
            nearby_rows=int(nearby["rows"]),
            nearby_width=float(nearby["width"]),
            resize_debounce=float(merged["resize_debounce"]),
            quiz_retries={str(k): int(v) for k, v in merged["quiz"]["retries"].items()},
            streak_path=Path(streak_path) if streak_path else None,
            seed=None if merged.get("seed") is None else int(merged["seed"]),
        )


def load_config(config_path: Path | str | None = None) -> SandboxConfig:
    """Settings from YAML; path falls back to $COLOR_SANDBOX_CONFIG, then defaults."""
    if config_path is None:
        config_path = os.environ.get(ENV_VAR)
    if not config_path:
        return SandboxConfig.from_dict({})
    path = Path(config_path)
    if not path.exists():
        log.info("config %s not found, using defaults", path)
        return SandboxConfig.from_dict({})
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return SandboxConfig.from_dict(data)


__all__ = ["SandboxConfig", "load_config"]
