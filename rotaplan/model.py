"""
Central data model definitions used across the project.

This module defines the canonical structure of stations, users, groups and
schedule entries so that:
- the engine, the storage layer and the UI share the same field names
- dates are always datetime.date objects in memory and ISO strings on disk
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Union


@dataclass(frozen=True)
class Station:
    """
    One post in the rotation catalog, e.g. a department needing 2 days of presence.
    """

    name: str
    days: int
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "days": self.days, "description": self.description}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Station":
        return cls(
            name=str(data["name"]),
            days=int(data["days"]),
            description=str(data.get("description") or ""),
        )


@dataclass
class User:
    id: str
    name: str
    is_admin: bool = False
    group_id: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "is_admin": self.is_admin, "group_id": self.group_id}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        group_id = data.get("group_id")
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            is_admin=bool(data.get("is_admin", False)),
            group_id=str(group_id) if group_id else None,
        )


@dataclass
class Group:
    """
    A rotating work group.

    Members are not stored here: a user belongs to a group when its
    group_id points at it (see RotationStore.members).
    """

    id: str
    name: str
    color: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "color": self.color}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Group":
        return cls(id=str(data["id"]), name=str(data["name"]), color=str(data.get("color") or ""))


@dataclass
class ScheduleEntry:
    """
    Represents one dated station assignment in the generated schedule.

    occupant starts out as the group name and may later be replaced by a
    manual override; group_id always keeps the generating group.
    """

    id: str
    station: str
    occupant: str
    group_id: str
    date: date
    description: str
    day_in_station: int
    editing: bool = False

    def to_dict(self) -> dict[str, Any]:
        # editing is UI state only, never persisted
        return {
            "id": self.id,
            "station": self.station,
            "occupant": self.occupant,
            "group_id": self.group_id,
            "date": self.date.isoformat(),
            "description": self.description,
            "day_in_station": self.day_in_station,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScheduleEntry":
        return cls(
            id=str(data["id"]),
            station=str(data["station"]),
            occupant=str(data["occupant"]),
            group_id=str(data["group_id"]),
            date=date.fromisoformat(str(data["date"])),
            description=str(data.get("description") or ""),
            day_in_station=int(data.get("day_in_station", 1)),
        )


@dataclass
class CurrentAssignment:
    """
    Where a group stands in the rotation on a given day.

    day_number is fractional when the group's phase offset is fractional
    (group count does not divide the cycle length).
    """

    group_id: str
    station: str
    date: date
    day_number: Union[int, float]
