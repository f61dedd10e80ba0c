"""Runtime configuration for the sketchpad.

Settings come from a JSON object in the file named by ``path`` or by the
``SKETCHPAD_CONFIG`` environment variable. Each field is read independently;
anything missing or malformed keeps its default.
"""
from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from sketchpad.logger import get_logger

logger = get_logger(__name__)

CONFIG_ENV_VAR = "SKETCHPAD_CONFIG"


@dataclass
class SketchpadConfig:
    canvas_width: int = 960
    canvas_height: int = 640
    background: str = "#ffffff"
    default_color: str = "#000000"
    default_line_width: int = 1
    paste_offset: Tuple[float, float] = (10.0, 10.0)
    max_history: Optional[int] = None
    debug: bool = False


def _positive_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    ivalue = int(value)
    return ivalue if ivalue >= 1 else None


def _color(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _offset(value: Any) -> Optional[Tuple[float, float]]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        return None
    try:
        dx, dy = float(value[0]), float(value[1])
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(dx) and math.isfinite(dy)):
        return None
    return (dx, dy)


def _flag(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None


_PARSERS = {
    "canvas_width": _positive_int,
    "canvas_height": _positive_int,
    "background": _color,
    "default_color": _color,
    "default_line_width": _positive_int,
    "paste_offset": _offset,
    "max_history": _positive_int,
    "debug": _flag,
}


def config_from_dict(data: Dict[str, Any]) -> SketchpadConfig:
    config = SketchpadConfig()
    for f in fields(SketchpadConfig):
        if f.name not in data:
            continue
        parsed = _PARSERS[f.name](data[f.name])
        if parsed is None:
            logger.warning("Ignoring invalid %s: %r", f.name, data[f.name])
            continue
        setattr(config, f.name, parsed)
    return config


def load_config(path: str | Path | None = None) -> SketchpadConfig:
    if path is None:
        path = os.getenv(CONFIG_ENV_VAR)
    if not path:
        return SketchpadConfig()
    config_path = Path(path)
    if not config_path.exists():
        return SketchpadConfig()
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Could not read config %s: %s", config_path, exc)
        return SketchpadConfig()
    if not isinstance(data, dict):
        logger.warning("Config %s is not a JSON object", config_path)
        return SketchpadConfig()
    return config_from_dict(data)


__all__ = ["CONFIG_ENV_VAR", "SketchpadConfig", "config_from_dict", "load_config"]
