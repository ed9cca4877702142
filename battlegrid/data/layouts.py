"""Static practice layouts and JSON layout loading."""

from __future__ import annotations

import json
from pathlib import Path

from battlegrid.core.layout import ShipLayout

DEFAULT_LAYOUT: tuple[ShipLayout, ...] = (
    ShipLayout(ship="carrier", positions=((1, 1), (1, 2), (1, 3), (1, 4), (1, 5))),
    ShipLayout(ship="battleship", positions=((3, 8), (4, 8), (5, 8), (6, 8))),
    ShipLayout(ship="cruiser", positions=((5, 2), (6, 2), (7, 2))),
    ShipLayout(ship="submarine", positions=((8, 5), (8, 6), (8, 7))),
    ShipLayout(ship="destroyer", positions=((3, 4), (4, 4))),
)


def layout_to_payload(layout: tuple[ShipLayout, ...]) -> dict[str, object]:
    """Convert a layout to a JSON-serializable payload."""
    return {
        "version": 1,
        "layout": [
            {"ship": entry.ship, "positions": [list(position) for position in entry.positions]}
            for entry in layout
        ],
    }


def payload_to_layout(payload: object) -> list[object]:
    """Extract raw layout entries from a loaded payload.

    Entries are returned as loaded; `validate_ship_layout` reports what is wrong
    with them. Only the envelope is checked here.
    """
    if not isinstance(payload, dict):
        raise ValueError("Layout payload must be an object.")
    raw_version = payload.get("version", 1)
    if not isinstance(raw_version, (int, str)):
        raise ValueError("Layout version must be int-compatible.")
    try:
        version = int(raw_version)
    except ValueError as exc:
        raise ValueError("Layout version must be int-compatible.") from exc
    if version != 1:
        raise ValueError("Unsupported layout version.")
    entries = payload.get("layout")
    if not isinstance(entries, list):
        raise ValueError("Layout entries must be a list.")
    return entries


def load_layout_file(path: str | Path) -> list[object]:
    """Read a practice layout from a JSON file."""
    layout_path = Path(path)
    try:
        with layout_path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Layout file '{layout_path}' is not valid JSON.") from exc
    return payload_to_layout(payload)
