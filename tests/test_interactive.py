"""
Tests for the interactive menu rendering.

User-supplied names must show up verbatim, even when they look like rich
markup, and key hints such as [y/N] must stay visible in prompts.
"""

import io
import unittest
from datetime import date
from unittest import mock

from rich.console import Console

import rotaplan.interactive as interactive
from rotaplan.catalog import PHARMACY_STATIONS
from rotaplan.storage import MemoryKeyValueStore
from rotaplan.store import RotationStore


class TestInteractiveRendering(unittest.TestCase):
    def setUp(self) -> None:
        self.out = io.StringIO()
        console = Console(file=self.out, width=200, force_terminal=False, color_system=None)
        patcher = mock.patch.object(interactive, "console", console)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_markup_like_names_are_shown_verbatim(self) -> None:
        store = RotationStore(start_date=date(2024, 1, 1))
        group = store.add_group("[team]")
        user = store.add_user("[/admins]")
        store.assign_user_to_group(user.id, group.id)
        store.generate_schedule(PHARMACY_STATIONS)

        interactive._users_table(store)
        interactive._groups_table(store)
        interactive._schedule_table(store)

        text = self.out.getvalue()
        self.assertIn("[/admins]", text)
        self.assertIn("[team]", text)

    def test_prompt_keeps_bracketed_key_hints(self) -> None:
        typed: list[str] = []

        def fake_input(*args: str) -> str:
            typed.extend(args)
            return "n"

        with mock.patch("builtins.input", side_effect=fake_input):
            answer = interactive._prompt("[r] remove  [a] toggle admin  [blank = back]: ")

        self.assertEqual(answer, "n")
        shown = self.out.getvalue() + "".join(typed)
        self.assertIn("[r] remove", shown)
        self.assertIn("[a] toggle admin", shown)
        self.assertIn("[blank = back]", shown)

    def test_failed_export_stays_in_menu(self) -> None:
        store = RotationStore(start_date=date(2024, 1, 1))
        store.add_group("A")
        store.generate_schedule(PHARMACY_STATIONS)

        answers = iter(["", "out.ics"])
        with mock.patch.object(interactive, "_prompt", side_effect=lambda msg: next(answers)), mock.patch.object(
            interactive, "export_schedule_to_ics", side_effect=PermissionError("denied")
        ):
            interactive._flow_export(store)

        self.assertIn("Failed to export schedule: denied", self.out.getvalue())

    def test_add_user_with_markup_name(self) -> None:
        store = RotationStore()
        answers = iter(["[/admins]", ""])
        with mock.patch.object(interactive, "_prompt", side_effect=lambda msg: next(answers)):
            interactive._flow_add_user(store, MemoryKeyValueStore())

        self.assertEqual(store.users[0].name, "[/admins]")
        self.assertIn("Added [/admins] to the rotation", self.out.getvalue())


if __name__ == "__main__":
    unittest.main()
