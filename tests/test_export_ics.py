import tempfile
import unittest
from datetime import date
from pathlib import Path

from rotaplan.catalog import PHARMACY_STATIONS
from rotaplan.export_ics import export_schedule_to_ics, filter_by_occupants
from rotaplan.store import RotationStore


def _store() -> RotationStore:
    store = RotationStore(start_date=date(2024, 1, 1))
    store.add_group("A")
    store.add_group("B")
    store.generate_schedule(PHARMACY_STATIONS)
    return store


class TestExportICS(unittest.TestCase):
    def test_export_creates_all_day_events(self) -> None:
        store = _store()
        with tempfile.TemporaryDirectory() as d:
            out = Path(d) / "out.ics"
            n = export_schedule_to_ics(store.schedule, out)
            self.assertEqual(n, 20)
            text = out.read_text(encoding="utf-8")

        self.assertIn("BEGIN:VCALENDAR", text)
        self.assertEqual(text.count("BEGIN:VEVENT"), 20)
        self.assertIn("DTSTART;VALUE=DATE:20240101", text)
        self.assertIn("DTEND;VALUE=DATE:20240102", text)
        self.assertIn("SUMMARY:A @ ART", text)
        self.assertIn("DESCRIPTION:A at ART - Antiretroviral Therapy (Day 1)", text)
        self.assertTrue(text.endswith("END:VCALENDAR\r\n"))

    def test_filter_by_occupants_uses_overridden_label(self) -> None:
        store = _store()
        store.override_occupant(store.schedule[12].id, "Alice")

        only_b = filter_by_occupants(store.schedule, ["B"])
        self.assertEqual(len(only_b), 9)
        alice = filter_by_occupants(store.schedule, [" Alice ", ""])
        self.assertEqual([e.date for e in alice], [date(2024, 1, 13)])

    def test_special_characters_are_escaped(self) -> None:
        store = RotationStore(start_date=date(2024, 1, 1))
        store.add_group("Team; North, East")
        store.generate_schedule(PHARMACY_STATIONS[:1])
        with tempfile.TemporaryDirectory() as d:
            out = Path(d) / "out.ics"
            export_schedule_to_ics(store.schedule, out)
            text = out.read_text(encoding="utf-8")
        self.assertIn("SUMMARY:Team\\; North\\, East @ ART", text)


if __name__ == "__main__":
    unittest.main()
