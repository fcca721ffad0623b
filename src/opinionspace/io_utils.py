"""Utilities for reading and writing simulation snapshots and projections."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import orjson


def _coerce_path(path: str | Path) -> Path:
    """Convert input to a Path."""
    if isinstance(path, Path):
        return path
    return Path(path)


def read_json(path: str | Path) -> Any:
    """Read a single JSON document."""
    resolved_path = _coerce_path(path)
    return orjson.loads(resolved_path.read_bytes())


def write_json(path: str | Path, payload: Any, *, indent: bool = True) -> None:
    """Write a JSON document, creating parent directories as needed."""
    resolved_path = _coerce_path(path)
    resolved_path.parent.mkdir(parents=True, exist_ok=True)
    option = orjson.OPT_INDENT_2 if indent else 0
    resolved_path.write_bytes(orjson.dumps(payload, option=option))


def write_jsonl(path: str | Path, rows: Iterable[Mapping[str, Any]]) -> None:
    """Write an iterable of mappings to JSON Lines format."""
    resolved_path = _coerce_path(path)
    resolved_path.parent.mkdir(parents=True, exist_ok=True)

    with resolved_path.open("wb") as handle:
        for row in rows:
            handle.write(orjson.dumps(dict(row)))
            handle.write(b"\n")


def read_jsonl(path: str | Path) -> list[dict[str, Any]]:
    """Read a JSON Lines file into a list of dictionaries."""
    resolved_path = _coerce_path(path)
    with resolved_path.open("rb") as handle:
        return [orjson.loads(line) for line in handle if line.strip()]


class SimulationNotFoundError(LookupError):
    """Raised when a requested simulation id is absent from a snapshot file."""


def find_simulation(rows: Iterable[Mapping[str, Any]], simulation_id: str) -> dict[str, Any]:
    """Return the first snapshot row whose ``id`` matches."""
    for row in rows:
        if row.get("id") == simulation_id:
            return dict(row)
    raise SimulationNotFoundError(f"Simulation '{simulation_id}' not found")
