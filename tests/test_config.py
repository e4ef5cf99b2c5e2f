from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from prcomments.runtime import config
from prcomments.ui_theme import PLAIN_THEME


class ConfigBehaviorTests(unittest.TestCase):
    def test_theme_name_round_trips_through_config_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "nested" / "config.json"
            with mock.patch("prcomments.runtime.config.CONFIG_PATH", config_path):
                config.save_theme_name("Ocean")

                self.assertEqual(config.load_theme_name(), "ocean")
                self.assertEqual(json.loads(config_path.read_text(encoding="utf-8")), {"theme": "ocean"})

    def test_missing_or_malformed_config_falls_back_to_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("prcomments.runtime.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {})

                config_path.write_text("{not json", encoding="utf-8")
                self.assertEqual(config.load_config(), {})

                config_path.write_text("[1, 2]", encoding="utf-8")
                self.assertEqual(config.load_config(), {})
                self.assertEqual(config.load_max_workers(), 4)
                self.assertFalse(config.load_filter_on_search())

    def test_saving_preserves_other_keys(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(json.dumps({"max_workers": 2}), encoding="utf-8")
            with mock.patch("prcomments.runtime.config.CONFIG_PATH", config_path):
                config.save_theme_name("default")

                self.assertEqual(config.load_config(), {"max_workers": 2, "theme": "default"})

    def test_session_config_applies_stored_preferences(self) -> None:
        stored = {
            "keymap": {"quit": ["x"], "bogus_action": ["z"], "copy": 5},
            "max_workers": 50,
            "filter_on_search": True,
        }
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(json.dumps(stored), encoding="utf-8")
            with mock.patch("prcomments.runtime.config.CONFIG_PATH", config_path), mock.patch.dict(
                "os.environ", {"NO_COLOR": ""}
            ):
                session = config.load_session_config()

        self.assertEqual(session.keymap.quit, ("x",))
        self.assertEqual(session.keymap.copy, ("y", "c"))
        self.assertEqual(session.max_workers, 16)
        self.assertTrue(session.filter_on_search)

    def test_no_color_selects_plain_theme(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("prcomments.runtime.config.CONFIG_PATH", config_path):
                self.assertIs(config.load_session_config(no_color=True).theme, PLAIN_THEME)
                with mock.patch.dict("os.environ", {"NO_COLOR": "1"}):
                    self.assertIs(config.load_session_config().theme, PLAIN_THEME)

    def test_no_color_requested_reads_environment(self) -> None:
        self.assertTrue(config.no_color_requested({"NO_COLOR": "1"}))
        self.assertFalse(config.no_color_requested({"NO_COLOR": " "}))
        self.assertFalse(config.no_color_requested({}))


if __name__ == "__main__":
    unittest.main()
