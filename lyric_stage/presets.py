"""YAML presets for viewpoints and CLI defaults."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Tuple

import yaml

from .camera import Viewpoint
from .config import DEFAULT_VIEWPOINTS


def _vec(entry: Dict[str, Any], key: str, size: int, name: str) -> Tuple[float, ...]:
    raw = entry.get(key)
    if raw is None:
        if key == "text":
            return (0.0,) * size
        raise ValueError(f"viewpoint {name!r}: missing '{key}'")
    try:
        vals = tuple(float(v) for v in raw)
    except (TypeError, ValueError) as e:
        raise ValueError(f"viewpoint {name!r}: '{key}' must be numbers") from e
    if len(vals) != size:
        raise ValueError(f"viewpoint {name!r}: '{key}' needs {size} values")
    return vals


def viewpoints_from_config(entries: Iterable[Dict[str, Any]] | None = None) -> Tuple[Viewpoint, ...]:
    """Build viewpoints from plain dicts (``DEFAULT_VIEWPOINTS`` when omitted)."""
    out: List[Viewpoint] = []
    for i, entry in enumerate(DEFAULT_VIEWPOINTS if entries is None else entries):
        name = str(entry.get("name") or f"viewpoint_{i}")
        out.append(
            Viewpoint(
                name=name,
                position=_vec(entry, "position", 3, name),
                orientation=_vec(entry, "orientation", 2, name),
                text_anchor=_vec(entry, "text", 3, name),
                shows_lyrics=bool(entry.get("shows_lyrics", False)),
                shows_floating=bool(entry.get("shows_floating", False)),
            )
        )
    if not out:
        raise ValueError("viewpoint list is empty")
    return tuple(out)


def load_presets(paths: Iterable[str]) -> Dict[str, Any]:
    """Merge YAML presets in order; later files override earlier keys."""
    merged: Dict[str, Any] = {}
    for path in paths:
        with open(path, "r", encoding="utf8") as fh:
            data = yaml.safe_load(fh) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path}: preset must be a mapping")
        merged.update(data)
    return merged
