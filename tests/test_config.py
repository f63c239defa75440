"""Tests for runtime config persistence and sanitization."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from tuiloop.runtime import config


class ConfigBehaviorTests(unittest.TestCase):
    def test_missing_file_yields_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("tuiloop.runtime.config.CONFIG_PATH", Path(tmp) / "missing.json"):
                self.assertEqual(config.load_config(), {})
                self.assertEqual(config.load_runtime_config(), config.RuntimeConfig())

    def test_round_trip_preserves_values(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "nested" / "config.json"
            expected = config.RuntimeConfig(
                tick_interval_seconds=0.5,
                message_capacity=10,
                input_poll_seconds=0.05,
                mouse_reporting=False,
            )
            with mock.patch("tuiloop.runtime.config.CONFIG_PATH", config_path):
                config.save_runtime_config(expected)
                self.assertEqual(config.load_runtime_config(), expected)

    def test_null_tick_interval_disables_ticks(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(json.dumps({"tick_interval_seconds": None}), encoding="utf-8")
            with mock.patch("tuiloop.runtime.config.CONFIG_PATH", config_path):
                self.assertIsNone(config.load_runtime_config().tick_interval_seconds)

    def test_invalid_fields_fall_back_individually(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(
                json.dumps(
                    {
                        "tick_interval_seconds": -1,
                        "message_capacity": True,
                        "input_poll_seconds": "fast",
                        "mouse_reporting": False,
                        "unrelated": [1, 2],
                    }
                ),
                encoding="utf-8",
            )
            with mock.patch("tuiloop.runtime.config.CONFIG_PATH", config_path):
                loaded = config.load_runtime_config()

        self.assertEqual(loaded.tick_interval_seconds, 0.25)
        self.assertEqual(loaded.message_capacity, 100)
        self.assertEqual(loaded.input_poll_seconds, 0.1)
        self.assertFalse(loaded.mouse_reporting)

    def test_malformed_or_non_object_json_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("tuiloop.runtime.config.CONFIG_PATH", config_path):
                config_path.write_text("{not json", encoding="utf-8")
                self.assertEqual(config.load_config(), {})
                config_path.write_text("[1, 2]", encoding="utf-8")
                self.assertEqual(config.load_config(), {})

    def test_save_keeps_unrelated_keys(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")
            with mock.patch("tuiloop.runtime.config.CONFIG_PATH", config_path):
                config.save_runtime_config(config.RuntimeConfig())
                saved = config.load_config()

        self.assertEqual(saved["theme"], "dark")
        self.assertEqual(saved["message_capacity"], 100)

    def test_save_ignores_unwritable_location(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "file"
            blocker.write_text("", encoding="utf-8")
            with mock.patch("tuiloop.runtime.config.CONFIG_PATH", blocker / "config.json"):
                config.save_config({"a": 1})


if __name__ == "__main__":
    unittest.main()
