"""
Tests for CLI entry points.

Every test uses a temporary --state file so the real state.json is never
touched.
"""

import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

from rotaplan.cli import find_entry, main
from rotaplan.storage import SCHEDULE_KEY, START_DATE_KEY, JsonFileKeyValueStore, load_store


class TestCLI(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.state = str(Path(self._tmp.name) / "state.json")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def run_cli(self, *argv: str) -> tuple[int, str]:
        buf = io.StringIO()
        with redirect_stdout(buf):
            with self.assertRaises(SystemExit) as ctx:
                main(["--state", self.state, *argv])
        return ctx.exception.code, buf.getvalue()

    def test_user_add_requires_name(self) -> None:
        code, out = self.run_cli("user-add", "  ")
        self.assertNotEqual(code, 0)

    def test_full_workflow(self) -> None:
        self.assertEqual(self.run_cli("group-add", "A")[0], 0)
        self.assertEqual(self.run_cli("group-add", "B")[0], 0)
        self.assertEqual(self.run_cli("user-add", "Alice")[0], 0)
        self.assertEqual(self.run_cli("assign", "Alice", "a")[0], 0)
        self.assertEqual(self.run_cli("start-date", "2024-01-01")[0], 0)

        code, out = self.run_cli("generate")
        self.assertEqual(code, 0)
        self.assertIn("20 entries", out)

        code, out = self.run_cli("status", "--today", "2024-01-01")
        self.assertEqual(code, 0)
        self.assertIn("- A: ART (day 1) -> next: MCH", out)
        self.assertIn("- B: Chronic (day 2) -> next: OPD", out)

        code, out = self.run_cli("groups")
        self.assertIn("A [#FF6B6B] | Alice", out)

        store, _ = load_store(JsonFileKeyValueStore(self.state))
        self.assertEqual(len(store.schedule), 20)
        self.assertEqual(store.members(store.groups[0].id)[0].name, "Alice")

    def test_duplicate_group_fails(self) -> None:
        self.run_cli("group-add", "Night")
        code, out = self.run_cli("group-add", "NIGHT")
        self.assertEqual(code, 1)
        self.assertIn("already exists", out)

    def test_generate_without_groups_keeps_schedule(self) -> None:
        self.run_cli("group-add", "A")
        self.run_cli("generate")
        before = json.loads(Path(self.state).read_text(encoding="utf-8"))[SCHEDULE_KEY]

        self.run_cli("group-remove", "A")
        code, out = self.run_cli("generate")
        self.assertEqual(code, 1)
        self.assertIn("create groups", out)

        after = json.loads(Path(self.state).read_text(encoding="utf-8"))[SCHEDULE_KEY]
        self.assertEqual(before, after)

    def test_override_by_prefix(self) -> None:
        self.run_cli("group-add", "A")
        self.run_cli("generate")
        store, _ = load_store(JsonFileKeyValueStore(self.state))
        entry = store.schedule[3]

        code, _ = self.run_cli("override", entry.id, "Bob")
        self.assertEqual(code, 0)

        store, _ = load_store(JsonFileKeyValueStore(self.state))
        self.assertEqual(store.schedule[3].occupant, "Bob")
        self.assertEqual(store.schedule[3].group_id, entry.group_id)

        code, out = self.run_cli("schedule", "--occupant", "Bob")
        self.assertEqual(out.count("\n"), 1)

    def test_bad_date(self) -> None:
        code, out = self.run_cli("start-date", "01/02/2024")
        self.assertEqual(code, 1)

    def test_export(self) -> None:
        self.run_cli("group-add", "A")
        self.run_cli("generate")
        out_path = Path(self._tmp.name) / "rota.ics"
        code, out = self.run_cli("export", str(out_path))
        self.assertEqual(code, 0)
        self.assertIn("Exported 10 entries", out)
        self.assertTrue(out_path.exists())

    def test_export_failure_exits_with_error(self) -> None:
        self.run_cli("group-add", "A")
        self.run_cli("generate")
        blocker = Path(self._tmp.name) / "file"
        blocker.write_text("not a directory", encoding="utf-8")

        code, out = self.run_cli("export", str(blocker / "out.ics"))
        self.assertEqual(code, 1)
        self.assertIn("Failed to export schedule", out)

    def test_start_date_without_argument_does_not_save(self) -> None:
        Path(self.state).write_text("{}", encoding="utf-8")
        code, out = self.run_cli("start-date")
        self.assertEqual(code, 0)
        data = json.loads(Path(self.state).read_text(encoding="utf-8"))
        self.assertNotIn(START_DATE_KEY, data)

        self.run_cli("start-date", "2024-02-01")
        data = json.loads(Path(self.state).read_text(encoding="utf-8"))
        self.assertEqual(data[START_DATE_KEY], "2024-02-01")

    def test_clear(self) -> None:
        self.run_cli("user-add", "Alice")
        code, _ = self.run_cli("clear")
        self.assertEqual(code, 0)
        store, _ = load_store(JsonFileKeyValueStore(self.state))
        self.assertEqual(store.users, [])

    def test_find_entry_needs_unique_prefix(self) -> None:
        class E:
            def __init__(self, id: str) -> None:
                self.id = id

        entries = [E("abc123"), E("abd456")]
        self.assertIsNone(find_entry(entries, "ab"))
        self.assertIs(find_entry(entries, "abd"), entries[1])
        self.assertIsNone(find_entry(entries, ""))


if __name__ == "__main__":
    unittest.main()
