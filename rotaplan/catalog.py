"""
Station catalog and group color palette.

The catalog order is the rotation order: groups walk it front to back and
wrap around to the first station after the last one.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence

from rotaplan.model import Station


PHARMACY_STATIONS: tuple[Station, ...] = (
    Station("ART", 2, "Antiretroviral Therapy"),
    Station("MCH", 1, "Maternal and Child Health"),
    Station("Emergency", 1, "Emergency Services"),
    Station("Chronic", 2, "Chronic Disease Management"),
    Station("OPD", 2, "Outpatient Department"),
    Station("Inpatient", 1, "Inpatient Services"),
    Station("Compounding", 1, "Medication Compounding"),
)

GROUP_COLORS: tuple[str, ...] = (
    "#FF6B6B",
    "#4ECDC4",
    "#45B7D1",
    "#96CEB4",
    "#FFEEAD",
    "#D4A5A5",
    "#9B59B6",
    "#3498DB",
)


def cycle_length(catalog: Sequence[Station]) -> int:
    """
    Total days one group needs to visit every station once.
    """
    return sum(s.days for s in catalog)


def find_station(catalog: Sequence[Station], name: str) -> int:
    """
    Return the catalog index of the station called `name`, or -1.
    """
    for i, s in enumerate(catalog):
        if s.name == name:
            return i
    return -1


def load_catalog(path: str | Path) -> tuple[Station, ...]:
    """
    Load a catalog from a JSON file containing a list of
    {"name": ..., "days": ..., "description": ...} objects.

    Raises OSError / ValueError / KeyError for unreadable or malformed files;
    the caller decides how to report them.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"Catalog file must contain a JSON list: {path}")
    return tuple(Station.from_dict(item) for item in data)
