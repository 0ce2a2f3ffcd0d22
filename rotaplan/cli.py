"""
CLI (Command Line Interface).

This module provides terminal commands for managing a rotation, e.g.:

    rotaplan user-add <name>
    rotaplan group-add <name>
    rotaplan assign <user> <group>
    rotaplan start-date 2024-01-01
    rotaplan generate
    rotaplan status
    rotaplan export <file.ics>
    rotaplan interactive

Note:
- The interactive UI lives in rotaplan/interactive.py
- This CLI is intentionally simple and prints plain text (no rich formatting)
- State is kept in rotaplan/data/state.json unless --state is given
"""

from __future__ import annotations

import argparse
import logging
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

from rotaplan.catalog import PHARMACY_STATIONS, load_catalog
from rotaplan.conflicts import find_schedule_collisions, find_station_collisions
from rotaplan.errors import RotationError
from rotaplan.export_ics import export_schedule_to_ics, filter_by_occupants
from rotaplan.model import ScheduleEntry, Station
from rotaplan.storage import JsonFileKeyValueStore, clear_saved, load_store, save_store
from rotaplan.store import RotationStore

logger = logging.getLogger(__name__)


def parse_date(text: str) -> date:
    """
    Parse 'YYYY-MM-DD'. Raises ValueError for anything else.
    """
    return date.fromisoformat(text.strip())


def format_day_number(n: float) -> str:
    return str(n) if isinstance(n, int) else f"{n:.2f}"


def find_entry(schedule: Sequence[ScheduleEntry], prefix: str) -> Optional[ScheduleEntry]:
    """
    Find an entry by full id or by a unique id prefix (as printed by `schedule`).
    """
    prefix = prefix.strip().lower()
    if not prefix:
        return None
    matches = [e for e in schedule if e.id.lower().startswith(prefix)]
    exact = [e for e in matches if e.id.lower() == prefix]
    if exact:
        return exact[0]
    return matches[0] if len(matches) == 1 else None


def _today(args: argparse.Namespace) -> date:
    raw = getattr(args, "today", None)
    return parse_date(raw) if raw else date.today()


def _cmd_users(args: argparse.Namespace, store: RotationStore, catalog: Sequence[Station]) -> int:
    if not store.users:
        print("No users.")
        return 0
    for u in store.users:
        group = store.get_group(u.group_id) if u.group_id else None
        admin = " (admin)" if u.is_admin else ""
        print(f"{u.name}{admin} | group: {group.name if group else '-'}")
    return 0


def _cmd_user_add(args: argparse.Namespace, store: RotationStore, catalog: Sequence[Station]) -> int:
    user = store.add_user(args.name)
    print(f"Added {user.name} to the rotation" + (" (admin)" if user.is_admin else ""))
    return 0


def _cmd_user_remove(args: argparse.Namespace, store: RotationStore, catalog: Sequence[Station]) -> int:
    user = store.find_user(args.name)
    if user is None:
        print(f"Unknown user: {args.name}")
        return 1
    store.remove_user(user.id)
    print(f"Removed {user.name} from the rotation")
    return 0


def _cmd_admin(args: argparse.Namespace, store: RotationStore, catalog: Sequence[Station]) -> int:
    user = store.find_user(args.name)
    if user is None:
        print(f"Unknown user: {args.name}")
        return 1
    store.toggle_administrator(user.id)
    print(f"{user.name} is {'now' if user.is_admin else 'no longer'} an administrator")
    return 0


def _cmd_groups(args: argparse.Namespace, store: RotationStore, catalog: Sequence[Station]) -> int:
    if not store.groups:
        print("No groups.")
        return 0
    for g in store.groups:
        names = ", ".join(u.name for u in store.members(g.id)) or "(no members)"
        print(f"{g.name} [{g.color}] | {names}")
    unassigned = store.unassigned_users()
    if unassigned:
        print(f"Unassigned: {', '.join(u.name for u in unassigned)}")
    return 0


def _cmd_group_add(args: argparse.Namespace, store: RotationStore, catalog: Sequence[Station]) -> int:
    group = store.add_group(args.name)
    print(f"Group added: {group.name} ({group.color})")
    return 0


def _cmd_group_remove(args: argparse.Namespace, store: RotationStore, catalog: Sequence[Station]) -> int:
    group = store.find_group(args.name)
    if group is None:
        print(f"Unknown group: {args.name}")
        return 1
    store.remove_group(group.id)
    print(f"Group removed: {group.name}")
    return 0


def _cmd_assign(args: argparse.Namespace, store: RotationStore, catalog: Sequence[Station]) -> int:
    user = store.find_user(args.user)
    group = store.find_group(args.group)
    if user is None or group is None:
        print(f"Unknown {'user' if user is None else 'group'}: {args.user if user is None else args.group}")
        return 1
    store.assign_user_to_group(user.id, group.id)
    print(f"{user.name} added to group {group.name}")
    return 0


def _cmd_unassign(args: argparse.Namespace, store: RotationStore, catalog: Sequence[Station]) -> int:
    user = store.find_user(args.user)
    if user is None:
        print(f"Unknown user: {args.user}")
        return 1
    store.unassign_user(user.id)
    print(f"{user.name} removed from group")
    return 0


def _cmd_start_date(args: argparse.Namespace, store: RotationStore, catalog: Sequence[Station]) -> int:
    if args.date:
        store.set_start_date(parse_date(args.date))
    print(f"Start date: {store.start_date.isoformat()}")
    return 0


def _cmd_generate(args: argparse.Namespace, store: RotationStore, catalog: Sequence[Station]) -> int:
    if args.full_cycle:
        entries = store.generate_schedule(catalog, day_cap=None)
    else:
        entries = store.generate_schedule(catalog)
    print(f"Schedule generated successfully ({len(entries)} entries for {len(store.groups)} groups)")
    return 0


def _cmd_schedule(args: argparse.Namespace, store: RotationStore, catalog: Sequence[Station]) -> int:
    entries = store.schedule
    if args.occupant:
        entries = filter_by_occupants(entries, args.occupant)
    if not entries:
        print("No schedule entries.")
        return 0
    for e in entries:
        print(f"{e.id[:8]} | {e.date.isoformat()} | {e.station} | {e.occupant} | {e.description}")
    return 0


def _cmd_status(args: argparse.Namespace, store: RotationStore, catalog: Sequence[Station]) -> int:
    today = _today(args)
    assignments = store.current_assignments(catalog, today)
    if not assignments:
        print("No groups.")
        return 0

    print(f"Rotation status for {today.isoformat()} (start {store.start_date.isoformat()}):")
    for a in assignments:
        group = store.get_group(a.group_id)
        nxt = store.next_station(catalog, a.group_id, today)
        print(
            f"- {group.name if group else a.group_id}: {a.station} "
            f"(day {format_day_number(a.day_number)}) -> next: {nxt.name}"
        )
    return 0


def _cmd_override(args: argparse.Namespace, store: RotationStore, catalog: Sequence[Station]) -> int:
    entry = find_entry(store.schedule, args.entry_id)
    if entry is None:
        print(f"No unique schedule entry matches: {args.entry_id}")
        return 1
    label = (args.label or "").strip()
    if not label:
        print("Please provide the new occupant.")
        return 1
    store.override_occupant(entry.id, label)
    print("Assignment updated")
    return 0


def _cmd_collisions(args: argparse.Namespace, store: RotationStore, catalog: Sequence[Station]) -> int:
    today = _today(args)
    names = {g.id: g.name for g in store.groups}

    live = find_station_collisions(store.current_assignments(catalog, today))
    planned = find_schedule_collisions(store.schedule)
    if not live and not planned:
        print("No collisions found.")
        return 0

    for a, b in live:
        print(f"- today {a.station}: {names.get(a.group_id, a.group_id)} <-> {names.get(b.group_id, b.group_id)}")
    for a, b in planned:
        print(f"- {a.date.isoformat()} {a.station}: {a.occupant} <-> {b.occupant}")
    return 0


def _cmd_export(args: argparse.Namespace, store: RotationStore, catalog: Sequence[Station]) -> int:
    out_path = (args.out or "").strip()
    if not out_path:
        print("Please provide output .ics path.")
        return 1

    entries = filter_by_occupants(store.schedule, args.occupant) if args.occupant else store.schedule
    if not entries:
        print("No schedule entries to export.")
        return 0

    try:
        n = export_schedule_to_ics(entries, out_path)
    except OSError as e:
        logger.error("Export to %s failed: %s", out_path, e)
        print(f"Failed to export schedule: {e}")
        return 1
    print(f"Exported {n} entries to: {out_path}")
    return 0


def _cmd_clear(args: argparse.Namespace, store: RotationStore, catalog: Sequence[Station]) -> int:
    store.clear()
    print("All data cleared successfully")
    return 0


# Commands that change the store and must be saved afterwards.
# start-date only writes when a date is given, see _changes_state.
MUTATING = {
    "user-add",
    "user-remove",
    "admin",
    "group-add",
    "group-remove",
    "assign",
    "unassign",
    "generate",
    "override",
}

HANDLERS = {
    "users": _cmd_users,
    "user-add": _cmd_user_add,
    "user-remove": _cmd_user_remove,
    "admin": _cmd_admin,
    "groups": _cmd_groups,
    "group-add": _cmd_group_add,
    "group-remove": _cmd_group_remove,
    "assign": _cmd_assign,
    "unassign": _cmd_unassign,
    "start-date": _cmd_start_date,
    "generate": _cmd_generate,
    "schedule": _cmd_schedule,
    "status": _cmd_status,
    "override": _cmd_override,
    "collisions": _cmd_collisions,
    "export": _cmd_export,
}


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="rotaplan", description="Group rotation planner")
    parser.add_argument("--state", type=str, default=None, help="State file (default: rotaplan/data/state.json)")
    parser.add_argument("--catalog", type=str, default=None, help="Station catalog JSON file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show info log messages")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("users", help="List users")
    p = sub.add_parser("user-add", help="Add a user")
    p.add_argument("name", type=str)
    p = sub.add_parser("user-remove", help="Remove a user")
    p.add_argument("name", type=str)
    p = sub.add_parser("admin", help="Toggle administrator rights of a user")
    p.add_argument("name", type=str)

    sub.add_parser("groups", help="List groups and their members")
    p = sub.add_parser("group-add", help="Add a group")
    p.add_argument("name", type=str)
    p = sub.add_parser("group-remove", help="Remove a group (members become unassigned)")
    p.add_argument("name", type=str)
    p = sub.add_parser("assign", help="Put a user into a group")
    p.add_argument("user", type=str)
    p.add_argument("group", type=str)
    p = sub.add_parser("unassign", help="Take a user out of its group")
    p.add_argument("user", type=str)

    p = sub.add_parser("start-date", help="Show or set the rotation start date")
    p.add_argument("date", type=str, nargs="?", default=None, help="YYYY-MM-DD")

    p = sub.add_parser("generate", help="Generate the schedule (replaces the current one)")
    p.add_argument("--full-cycle", action="store_true", help="Cap each group at the catalog cycle instead of 10 days")

    p = sub.add_parser("schedule", help="Show the generated schedule")
    p.add_argument("--occupant", action="append", default=[], help="Only show this occupant (repeatable)")

    p = sub.add_parser("status", help="Show each group's current and next station")
    p.add_argument("--today", type=str, default=None, help="Use this date instead of today (YYYY-MM-DD)")

    p = sub.add_parser("override", help="Replace the occupant of one schedule entry")
    p.add_argument("entry_id", type=str, help="Entry id or unique prefix (see `schedule`)")
    p.add_argument("label", type=str, help="New occupant")

    p = sub.add_parser("collisions", help="Show groups sharing a station")
    p.add_argument("--today", type=str, default=None, help="Use this date instead of today (YYYY-MM-DD)")

    p = sub.add_parser("export", help="Export the schedule to .ics")
    p.add_argument("out", type=str, help="Output file path (e.g. rotation.ics)")
    p.add_argument("--occupant", action="append", default=[], help="Only export this occupant (repeatable)")

    sub.add_parser("clear", help="Delete all users, groups and the schedule")
    sub.add_parser("interactive", help="Interactive menu mode")

    return parser


def _load_catalog(path: Optional[str]) -> Optional[tuple[Station, ...]]:
    if not path:
        return PHARMACY_STATIONS
    try:
        catalog = load_catalog(path)
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.error("Cannot load catalog %s: %s", path, e)
        return None
    return catalog if catalog else None


def _changes_state(args: argparse.Namespace) -> bool:
    if args.command == "start-date":
        return bool(args.date)
    return args.command in MUTATING


def _report(notices: list[str]) -> None:
    for n in notices:
        print(f"Warning: {n}")


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    catalog = _load_catalog(args.catalog)
    if catalog is None:
        print(f"Invalid station catalog: {args.catalog}")
        raise SystemExit(1)

    kv = JsonFileKeyValueStore(Path(args.state) if args.state else None)
    store, notices = load_store(kv)
    _report(notices)

    if args.command == "interactive":
        from rotaplan.interactive import run_interactive

        run_interactive(store, catalog, kv)
        raise SystemExit(0)

    if args.command == "clear":
        _cmd_clear(args, store, catalog)
        _report(clear_saved(kv))
        raise SystemExit(0)

    handler = HANDLERS.get(args.command)
    if handler is None:
        raise SystemExit(2)

    try:
        code = handler(args, store, catalog)
    except RotationError as e:
        print(str(e))
        raise SystemExit(1)
    except ValueError as e:
        # blank names, malformed dates
        print(f"Invalid input: {e}")
        raise SystemExit(1)

    if code == 0 and _changes_state(args):
        logger.info("Saving state to %s", kv.path)
        _report(save_store(store, kv))

    raise SystemExit(code)
