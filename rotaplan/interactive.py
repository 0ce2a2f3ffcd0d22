from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from rotaplan.cli import format_day_number, parse_date
from rotaplan.conflicts import find_station_collisions
from rotaplan.errors import RotationError
from rotaplan.export_ics import export_schedule_to_ics, filter_by_occupants
from rotaplan.model import Station
from rotaplan.storage import clear_saved, save_store
from rotaplan.store import RotationStore

logger = logging.getLogger(__name__)
console = Console()


def _println(msg: str = "") -> None:
    console.print(msg)


def _prompt(msg: str) -> str:
    # prompts are plain text; brackets like [y/N] must stay visible
    return console.input(escape(msg))


def _save(store: RotationStore, kv) -> None:
    for notice in save_store(store, kv):
        _println(f"[red]{escape(notice)}[/]")


def run_interactive(store: RotationStore, catalog: Sequence[Station], kv) -> None:
    """
    Interactive menu loop. Every change is saved right away.
    """
    if not kv.is_available():
        _println("[red]Storage is not available. Your data will not be saved between sessions.[/]")

    while True:
        _print_header(store)

        choice = _prompt(
            "\n[1] Add user\n"
            "[2] Remove user / toggle admin\n"
            "[3] Manage groups\n"
            "[4] Set start date\n"
            "[5] Generate schedule\n"
            "[6] View schedule\n"
            "[7] Today's rotation\n"
            "[8] Edit an assignment\n"
            "[9] Export .ics\n"
            "[C] Clear all data\n"
            "[0] Exit\n"
            "Select: "
        ).strip().lower()

        if choice == "0":
            _println("Bye.")
            return

        if choice == "1":
            _flow_add_user(store, kv)
        elif choice == "2":
            _flow_users(store, kv)
        elif choice == "3":
            _flow_groups(store, kv)
        elif choice == "4":
            _flow_start_date(store, kv)
        elif choice == "5":
            _flow_generate(store, catalog, kv)
        elif choice == "6":
            _flow_view_schedule(store)
        elif choice == "7":
            _flow_today(store, catalog)
        elif choice == "8":
            _flow_override(store, kv)
        elif choice == "9":
            _flow_export(store)
        elif choice == "c":
            _flow_clear(store, kv)
        else:
            _println("Invalid choice.")


def _print_header(store: RotationStore) -> None:
    _println("\n=== rotaplan (interactive) ===")
    _println(
        f"Users: {len(store.users)} | Groups: {len(store.groups)} | "
        f"Schedule entries: {len(store.schedule)} | Start: {store.start_date.isoformat()}"
    )


def _pick(prompt: str, count: int) -> int | None:
    """
    Ask for a 1-based number; returns a 0-based index or None.
    """
    raw = _prompt(prompt).strip()
    if not raw:
        return None
    if not raw.isdigit():
        _println("Not a number.")
        return None
    i = int(raw)
    if not (1 <= i <= count):
        _println("Out of range.")
        return None
    return i - 1


def _flow_add_user(store: RotationStore, kv) -> None:
    while True:
        name = _prompt("User name [blank = back]: ").strip()
        if not name:
            return
        try:
            user = store.add_user(name)
        except RotationError as e:
            _println(f"[red]{escape(str(e))}[/]")
            continue
        _save(store, kv)
        _println(f"Added [bold cyan]{escape(user.name)}[/] to the rotation" + (" (admin)" if user.is_admin else ""))


def _users_table(store: RotationStore) -> None:
    table = Table(title="Users", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Admin")
    table.add_column("Group")
    for i, u in enumerate(store.users, start=1):
        group = store.get_group(u.group_id) if u.group_id else None
        group_label = f"[{group.color}]{escape(group.name)}[/]" if group else ""
        table.add_row(str(i), escape(u.name), "yes" if u.is_admin else "", group_label)
    console.print(table)


def _flow_users(store: RotationStore, kv) -> None:
    if not store.users:
        _println("No users.")
        return

    _users_table(store)
    idx = _pick("Pick a user [blank = back]: ", len(store.users))
    if idx is None:
        return
    user = store.users[idx]

    action = _prompt("[r] remove  [a] toggle admin  [blank = back]: ").strip().lower()
    if action == "r":
        store.remove_user(user.id)
        _save(store, kv)
        _println(f"Removed {escape(user.name)} from the rotation")
    elif action == "a":
        store.toggle_administrator(user.id)
        _save(store, kv)
        _println(f"{escape(user.name)} admin: {'yes' if user.is_admin else 'no'}")


def _groups_table(store: RotationStore) -> None:
    table = Table(title="Groups", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Group")
    table.add_column("Members")
    for i, g in enumerate(store.groups, start=1):
        members = ", ".join(escape(u.name) for u in store.members(g.id))
        table.add_row(str(i), f"[{g.color}]{escape(g.name)}[/]", members)
    console.print(table)


def _flow_groups(store: RotationStore, kv) -> None:
    while True:
        if store.groups:
            _groups_table(store)
        else:
            _println("No groups yet.")

        action = _prompt("[a] add group  [r] remove group  [m] assign member  [u] unassign member  [blank = back]: ")
        action = action.strip().lower()
        if not action:
            return

        if action == "a":
            name = _prompt("Group name: ").strip()
            try:
                group = store.add_group(name)
            except (RotationError, ValueError) as e:
                _println(f"[red]{escape(str(e))}[/]")
                continue
            _save(store, kv)
            _println(f"Group added: [{group.color}]{escape(group.name)}[/]")
        elif action == "r":
            idx = _pick("Group number: ", len(store.groups))
            if idx is None:
                continue
            group = store.groups[idx]
            store.remove_group(group.id)
            _save(store, kv)
            _println(f"Group removed: {escape(group.name)}")
        elif action == "m":
            if not store.users or not store.groups:
                _println("Need at least one user and one group.")
                continue
            _users_table(store)
            u_idx = _pick("User number: ", len(store.users))
            if u_idx is None:
                continue
            g_idx = _pick("Group number: ", len(store.groups))
            if g_idx is None:
                continue
            user, group = store.users[u_idx], store.groups[g_idx]
            store.assign_user_to_group(user.id, group.id)
            _save(store, kv)
            _println(f"{escape(user.name)} added to group {escape(group.name)}")
        elif action == "u":
            _users_table(store)
            u_idx = _pick("User number: ", len(store.users))
            if u_idx is None:
                continue
            user = store.users[u_idx]
            store.unassign_user(user.id)
            _save(store, kv)
            _println(f"{escape(user.name)} removed from group")
        else:
            _println("Invalid choice.")


def _flow_start_date(store: RotationStore, kv) -> None:
    raw = _prompt(f"Start date YYYY-MM-DD [{store.start_date.isoformat()}]: ").strip()
    if not raw:
        return
    try:
        store.set_start_date(parse_date(raw))
    except ValueError:
        _println("Invalid date.")
        return
    _save(store, kv)
    _println(f"Start date: {store.start_date.isoformat()}")


def _flow_generate(store: RotationStore, catalog: Sequence[Station], kv) -> None:
    if store.schedule:
        again = _prompt("This replaces the current schedule (manual edits are lost). Continue? [y/N]: ")
        if again.strip().lower() != "y":
            return
    try:
        entries = store.generate_schedule(catalog)
    except RotationError as e:
        _println(f"[red]{escape(str(e))}[/]")
        return
    _save(store, kv)
    _println(f"Schedule generated successfully ({len(entries)} entries)")


def _schedule_table(store: RotationStore) -> None:
    colors = {g.id: g.color for g in store.groups}
    table = Table(title="Schedule", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Day")
    table.add_column("Group")
    table.add_column("Unit")
    table.add_column("Description")
    for i, e in enumerate(store.schedule, start=1):
        color = colors.get(e.group_id)
        who = f"[{color}]{escape(e.occupant)}[/]" if color else escape(e.occupant)
        table.add_row(str(i), e.date.isoformat(), who, escape(e.station), escape(e.description))
    console.print(table)


def _flow_view_schedule(store: RotationStore) -> None:
    if not store.schedule:
        _println("No schedule yet. Use [5] to generate one.")
        return
    _schedule_table(store)


def _flow_today(store: RotationStore, catalog: Sequence[Station]) -> None:
    today = date.today()
    assignments = store.current_assignments(catalog, today)
    if not assignments:
        _println("No groups.")
        return

    table = Table(title=f"Rotation for {today.isoformat()}", box=box.SIMPLE)
    table.add_column("Group")
    table.add_column("Current")
    table.add_column("Day", justify="right")
    table.add_column("Next")
    for a in assignments:
        group = store.get_group(a.group_id)
        nxt = store.next_station(catalog, a.group_id, today)
        label = f"[{group.color}]{escape(group.name)}[/]" if group else escape(a.group_id)
        table.add_row(label, escape(a.station), format_day_number(a.day_number), escape(nxt.name))
    console.print(table)

    collisions = find_station_collisions(assignments)
    if collisions:
        _println(f"[yellow]{len(collisions)} station collision(s) today.[/]")


def _flow_override(store: RotationStore, kv) -> None:
    if not store.schedule:
        _println("No schedule yet.")
        return
    _schedule_table(store)
    idx = _pick("Entry number [blank = back]: ", len(store.schedule))
    if idx is None:
        return
    entry = store.schedule[idx]
    store.toggle_editing(entry.id)

    label = _prompt(f"New occupant [{entry.occupant}]: ").strip()
    if not label:
        store.toggle_editing(entry.id)
        return
    store.override_occupant(entry.id, label)
    _save(store, kv)
    _println("Assignment updated")


def _flow_export(store: RotationStore) -> None:
    if not store.schedule:
        _println("No schedule yet.")
        return

    occupants = sorted({e.occupant for e in store.schedule})
    _println("Occupants: " + escape(", ".join(occupants)))
    picked = _prompt("Export which (comma separated) [blank = all]: ").strip()
    entries = filter_by_occupants(store.schedule, picked.split(",")) if picked else store.schedule
    if not entries:
        _println("Nothing matches.")
        return

    downloads = Path.home() / "Downloads"
    default_name = f"rotation-{date.today().isoformat()}.ics"
    out_in = _prompt(f"Please enter desired file name, default is [{default_name}]: ").strip()
    out_path = downloads / (out_in or default_name)
    if out_path.suffix.lower() != ".ics":
        out_path = out_path.with_suffix(".ics")

    try:
        n = export_schedule_to_ics(entries, out_path)
    except OSError as e:
        logger.error("Export to %s failed: %s", out_path, e)
        _println(f"[red]Failed to export schedule: {escape(str(e))}[/]")
        return
    _println(f"\nExported {n} entries.")
    _println(f"Saved to: {escape(str(out_path.resolve()))}")


def _flow_clear(store: RotationStore, kv) -> None:
    sure = _prompt("Delete all users, groups and the schedule? [y/N]: ").strip().lower()
    if sure != "y":
        return
    store.clear()
    notices = clear_saved(kv)
    for n in notices:
        _println(f"[red]{escape(n)}[/]")
    if not notices:
        _println("All data cleared successfully")
