import json
import tempfile
import unittest
from pathlib import Path

from database.preferences import PreferenceStore
from models.enums import Theme
from ui.themes import get_theme, toggle_theme


class TestPreferenceStore(unittest.TestCase):
    def test_theme_defaults_to_light_and_persists(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "nested" / "prefs.json"
            store = PreferenceStore(path)
            self.assertEqual(store.get_theme("u1"), Theme.LIGHT)

            store.set_theme("u1", Theme.DARK)

            self.assertEqual(PreferenceStore(path).get_theme("u1"), Theme.DARK)
            self.assertEqual(store.get_theme("u2"), Theme.LIGHT)
            data = json.loads(path.read_text(encoding="utf-8"))
            self.assertEqual(data, {"u1": {"theme": "dark"}})

    def test_corrupt_file_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "prefs.json"
            path.write_text("{not json", encoding="utf-8")
            store = PreferenceStore(path)

            with self.assertLogs("database.preferences", level="WARNING"):
                self.assertEqual(store.get_theme("u1"), Theme.LIGHT)

    def test_unknown_theme_value_falls_back(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            store = PreferenceStore(Path(td) / "prefs.json")
            store.set("u1", "theme", "sepia")
            self.assertEqual(store.get_theme("u1"), Theme.LIGHT)


class TestThemes(unittest.TestCase):
    def test_toggle(self) -> None:
        self.assertEqual(toggle_theme(Theme.LIGHT), Theme.DARK)
        self.assertEqual(toggle_theme(Theme.DARK), Theme.LIGHT)

    def test_palette_lookup(self) -> None:
        self.assertEqual(get_theme("dark")["name"], "Dark")
        self.assertEqual(get_theme("sepia")["name"], "Light")


if __name__ == "__main__":
    unittest.main(verbosity=2)
