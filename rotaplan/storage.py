"""
Persistent storage for the rotation state.

The state lives in a small key-value store whose values are JSON strings:

    rotaplan-users       list of users
    rotaplan-groups      list of groups
    rotaplan-schedule    list of schedule entries
    rotaplan-start-date  "YYYY-MM-DD"

By default the key-value store is a single JSON file:

    rotaplan/data/state.json

Nothing in here is allowed to break the in-memory store: every failure is
logged and turned into a notice string for the user, and the engine keeps
working in memory-only mode.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Optional

from rotaplan.model import Group, ScheduleEntry, User
from rotaplan.store import RotationStore

logger = logging.getLogger(__name__)

USERS_KEY = "rotaplan-users"
GROUPS_KEY = "rotaplan-groups"
SCHEDULE_KEY = "rotaplan-schedule"
START_DATE_KEY = "rotaplan-start-date"
ALL_KEYS = (USERS_KEY, GROUPS_KEY, SCHEDULE_KEY, START_DATE_KEY)

_PROBE_KEY = "__test__"


def _default_state_path() -> Path:
    """
    Return the default path of state.json inside the package.

    Using a function instead of a constant makes testing easier,
    because tests can override the path.
    """
    base_dir = Path(__file__).resolve().parent
    return base_dir / "data" / "state.json"


class MemoryKeyValueStore:
    """
    Dict-backed key-value store. Nothing survives the process.
    """

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def is_available(self) -> bool:
        return True


class JsonFileKeyValueStore:
    """
    Key-value store persisted as one JSON object in a file.

    get() treats a missing file as empty. set()/remove() rewrite the whole
    file and raise OSError when it cannot be written.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else _default_state_path()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"State file is not a JSON object: {self.path}")
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def is_available(self) -> bool:
        """
        Probe: can we write and remove a key right now?
        """
        try:
            self.set(_PROBE_KEY, _PROBE_KEY)
            self.remove(_PROBE_KEY)
            return True
        except (OSError, ValueError, UnicodeDecodeError) as e:
            logger.warning("State file %s is not usable: %s", self.path, e)
            return False


def _load_list(kv, key: str, factory) -> list:
    raw = kv.get(key)
    if not raw:
        return []
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError(f"{key}: expected a list")
    return [factory(item) for item in data]


def load_store(kv, store: RotationStore | None = None) -> tuple[RotationStore, list[str]]:
    """
    Fill a RotationStore from the key-value store.

    Each key is loaded independently; a broken key is logged, reported in
    the returned notices and left at its default. Never raises.
    """
    store = store if store is not None else RotationStore()
    notices: list[str] = []

    if not kv.is_available():
        notices.append("Storage is not available. Your data will not be saved between sessions.")
        return store, notices

    loaders = (
        (USERS_KEY, "users", User.from_dict),
        (GROUPS_KEY, "groups", Group.from_dict),
        (SCHEDULE_KEY, "schedule", ScheduleEntry.from_dict),
    )
    for key, attr, factory in loaders:
        try:
            setattr(store, attr, _load_list(kv, key, factory))
        except (OSError, ValueError, KeyError, TypeError, UnicodeDecodeError) as e:
            logger.error("Failed to load %s: %s", key, e)
            notices.append(f"Failed to load saved {attr}")

    try:
        raw = kv.get(START_DATE_KEY)
        if raw:
            store.start_date = date.fromisoformat(raw.strip())
    except (OSError, ValueError, UnicodeDecodeError) as e:
        logger.error("Failed to load %s: %s", START_DATE_KEY, e)
        notices.append("Failed to load saved start date")

    return store, notices


def save_store(store: RotationStore, kv) -> list[str]:
    """
    Write the whole store. Returns notices for every key that failed.
    """
    payloads = (
        (USERS_KEY, "user data", json.dumps([u.to_dict() for u in store.users], ensure_ascii=False)),
        (GROUPS_KEY, "group data", json.dumps([g.to_dict() for g in store.groups], ensure_ascii=False)),
        (SCHEDULE_KEY, "schedule data", json.dumps([e.to_dict() for e in store.schedule], ensure_ascii=False)),
        (START_DATE_KEY, "start date", store.start_date.isoformat()),
    )
    notices: list[str] = []
    for key, label, value in payloads:
        try:
            kv.set(key, value)
        except (OSError, ValueError, UnicodeDecodeError) as e:
            logger.error("Failed to save %s: %s", key, e)
            notices.append(f"Failed to save {label}")
    return notices


def clear_saved(kv) -> list[str]:
    """
    Remove every rotation key from the key-value store.
    """
    try:
        for key in ALL_KEYS:
            kv.remove(key)
    except (OSError, ValueError, UnicodeDecodeError) as e:
        logger.error("Failed to clear saved data: %s", e)
        return ["Failed to clear data"]
    return []
