"""
In-memory entity store for one rotation.

RotationStore owns the users, groups, generated schedule and start date.
It is an ordinary object handed to whoever needs it (CLI, interactive mode,
storage, tests), so several independent rotations can coexist.

Lookups by unknown id never raise: removals and assignments just do
nothing and return None.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional, Sequence

from rotaplan.catalog import GROUP_COLORS
from rotaplan.cycle import current_assignments as _current_assignments
from rotaplan.cycle import next_station as _next_station
from rotaplan.errors import DuplicateNameError
from rotaplan.generate import DAY_CAP, generate_schedule as _generate_schedule
from rotaplan.model import CurrentAssignment, Group, ScheduleEntry, Station, User
from rotaplan.override import override_occupant as _override_occupant
from rotaplan.override import toggle_editing as _toggle_editing


def first_user_is_admin(user_count: int) -> bool:
    """
    Admin policy for new users: only the very first user becomes an
    administrator automatically.
    """
    return user_count == 0


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class RotationStore:
    users: list[User] = field(default_factory=list)
    groups: list[Group] = field(default_factory=list)
    schedule: list[ScheduleEntry] = field(default_factory=list)
    start_date: date = field(default_factory=date.today)
    palette: Sequence[str] = GROUP_COLORS
    new_id: Callable[[], str] = _new_id

    # -- users ---------------------------------------------------------------

    def get_user(self, user_id: str) -> Optional[User]:
        return next((u for u in self.users if u.id == user_id), None)

    def find_user(self, name: str) -> Optional[User]:
        name = name.strip()
        return next((u for u in self.users if u.name == name), None)

    def add_user(self, name: str) -> User:
        """
        Create a user. Names are unique (exact match after stripping).
        """
        name = name.strip()
        if not name:
            raise ValueError("Please provide a user name.")
        if self.find_user(name) is not None:
            raise DuplicateNameError("user", name)

        user = User(id=self.new_id(), name=name, is_admin=first_user_is_admin(len(self.users)))
        self.users.append(user)
        return user

    def remove_user(self, user_id: str) -> Optional[User]:
        user = self.get_user(user_id)
        if user is not None:
            self.users.remove(user)
        return user

    def toggle_administrator(self, user_id: str) -> Optional[User]:
        user = self.get_user(user_id)
        if user is not None:
            user.is_admin = not user.is_admin
        return user

    # -- groups --------------------------------------------------------------

    def get_group(self, group_id: str) -> Optional[Group]:
        return next((g for g in self.groups if g.id == group_id), None)

    def find_group(self, name: str) -> Optional[Group]:
        key = name.strip().lower()
        return next((g for g in self.groups if g.name.lower() == key), None)

    def add_group(self, name: str) -> Group:
        """
        Create a group. Names are unique ignoring case; the color is taken
        round-robin from the palette by creation index.
        """
        name = name.strip()
        if not name:
            raise ValueError("Please enter a group name.")
        if self.find_group(name) is not None:
            raise DuplicateNameError("group", name)

        color = self.palette[len(self.groups) % len(self.palette)]
        group = Group(id=self.new_id(), name=name, color=color)
        self.groups.append(group)
        return group

    def remove_group(self, group_id: str) -> Optional[Group]:
        """
        Remove a group and detach its members. Schedule entries keep the
        removed group's id.
        """
        group = self.get_group(group_id)
        if group is None:
            return None
        self.groups.remove(group)
        for u in self.users:
            if u.group_id == group_id:
                u.group_id = None
        return group

    def assign_user_to_group(self, user_id: str, group_id: str) -> Optional[User]:
        user = self.get_user(user_id)
        if user is None or self.get_group(group_id) is None:
            return None
        user.group_id = group_id
        return user

    def unassign_user(self, user_id: str) -> Optional[User]:
        user = self.get_user(user_id)
        if user is not None:
            user.group_id = None
        return user

    def members(self, group_id: str) -> list[User]:
        return [u for u in self.users if u.group_id == group_id]

    def unassigned_users(self) -> list[User]:
        return [u for u in self.users if u.group_id is None]

    # -- schedule ------------------------------------------------------------

    def set_start_date(self, start: date) -> None:
        self.start_date = start

    def generate_schedule(self, catalog: Sequence[Station], day_cap: Optional[int] = DAY_CAP) -> list[ScheduleEntry]:
        """
        Replace the schedule with a freshly generated one.
        On EmptyGroupSetError the previous schedule is kept.
        """
        entries = _generate_schedule(self.groups, catalog, self.start_date, day_cap=day_cap, new_id=self.new_id)
        self.schedule = entries
        return entries

    def current_assignments(self, catalog: Sequence[Station], now: date) -> list[CurrentAssignment]:
        # Always derived from the current groups and start date, never cached.
        return _current_assignments(self.groups, catalog, self.start_date, now)

    def next_station(self, catalog: Sequence[Station], group_id: str, now: date) -> Station:
        return _next_station(self.current_assignments(catalog, now), catalog, group_id)

    def get_entry(self, entry_id: str) -> Optional[ScheduleEntry]:
        return next((e for e in self.schedule if e.id == entry_id), None)

    def override_occupant(self, entry_id: str, label: str) -> Optional[ScheduleEntry]:
        self.schedule = _override_occupant(self.schedule, entry_id, label)
        return self.get_entry(entry_id)

    def toggle_editing(self, entry_id: str) -> Optional[ScheduleEntry]:
        self.schedule = _toggle_editing(self.schedule, entry_id)
        return self.get_entry(entry_id)

    def clear(self) -> None:
        self.users = []
        self.groups = []
        self.schedule = []
        self.start_date = date.today()
