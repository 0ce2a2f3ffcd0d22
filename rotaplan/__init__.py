"""
rotaplan: group rotation planner.

Groups of users rotate through an ordered catalog of stations, each needing
a fixed number of consecutive days. The package generates the dated
schedule and tells, for any day, where each group currently is.
"""

from rotaplan.catalog import PHARMACY_STATIONS, cycle_length
from rotaplan.cycle import current_assignments, next_station
from rotaplan.errors import DuplicateNameError, EmptyGroupSetError, RotationError
from rotaplan.generate import DAY_CAP, generate_schedule
from rotaplan.model import CurrentAssignment, Group, ScheduleEntry, Station, User
from rotaplan.override import override_occupant
from rotaplan.store import RotationStore

__all__ = [
    "DAY_CAP",
    "PHARMACY_STATIONS",
    "CurrentAssignment",
    "DuplicateNameError",
    "EmptyGroupSetError",
    "Group",
    "RotationError",
    "RotationStore",
    "ScheduleEntry",
    "Station",
    "User",
    "current_assignments",
    "cycle_length",
    "generate_schedule",
    "next_station",
    "override_occupant",
]
