import os
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest import mock

from inkwell import paths
from inkwell.config import DEFAULT_CONFIG, load_config, normalize_config
from inkwell.utils import escape_like, format_display, parse_timestamp, split_tags


class ConfigTests(unittest.TestCase):
    def test_defaults_without_environment(self):
        self.assertEqual(load_config({}), DEFAULT_CONFIG)

    def test_environment_overrides(self):
        config = load_config(
            {
                "INKWELL_DEV": "yes",
                "INKWELL_PORT": "9000",
                "INKWELL_SEED_PRESETS": "0",
                "INKWELL_LOG_LEVEL": "debug",
                "INKWELL_DB_PATH": " /tmp/x.db ",
            }
        )

        self.assertTrue(config["dev_mode"])
        self.assertEqual(config["port"], 9000)
        self.assertFalse(config["seed_presets"])
        self.assertEqual(config["log_level"], "DEBUG")
        self.assertEqual(config["db_path"], "/tmp/x.db")

    def test_invalid_values_fall_back(self):
        config = normalize_config({"port": "abc", "suggestion_limit": 0, "log_level": "loud"})

        self.assertEqual(config["port"], DEFAULT_CONFIG["port"])
        self.assertEqual(config["suggestion_limit"], 1)
        self.assertEqual(config["log_level"], "INFO")


class PathsTests(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)

    def test_explicit_db_path_wins(self):
        target = str(Path(self.temp_dir.name) / "custom.db")

        self.assertEqual(paths.get_db_path(normalize_config({"db_path": target})), target)

    def test_dev_mode_keeps_database_beside_program(self):
        root = os.path.dirname(os.path.dirname(os.path.abspath(paths.__file__)))

        db_path = paths.get_db_path(normalize_config({"dev_mode": True}))

        self.assertEqual(db_path, os.path.join(root, "inkwell.db"))

    def test_production_uses_per_user_data_dir(self):
        with mock.patch.object(paths.sys, "platform", "linux"):
            with mock.patch.dict(os.environ, {"XDG_DATA_HOME": self.temp_dir.name}):
                db_path = paths.get_db_path(normalize_config({}))

        self.assertEqual(db_path, os.path.join(self.temp_dir.name, "inkwell", "inkwell.db"))
        self.assertTrue(os.path.isdir(os.path.dirname(db_path)))


class TimestampTests(unittest.TestCase):
    def test_display_format_pads_time_but_not_date(self):
        self.assertEqual(format_display(datetime(2024, 1, 5, 9, 3, 4)), "2024/1/5 09:03:04")

    def test_parse_accepts_display_iso_and_sqlite_forms(self):
        expected = datetime(2024, 1, 5, 9, 3, 4)

        self.assertEqual(parse_timestamp("2024/1/5 09:03:04"), expected)
        self.assertEqual(parse_timestamp("2024-01-05T09:03:04.000"), expected)
        self.assertEqual(parse_timestamp("2024-01-05 09:03:04"), expected)
        self.assertEqual(parse_timestamp("2024/1/5"), datetime(2024, 1, 5))

    def test_aware_values_are_converted_to_local_time(self):
        utc = datetime(2024, 1, 5, 9, 3, 4, tzinfo=timezone.utc)

        self.assertEqual(parse_timestamp("2024-01-05T09:03:04Z"), utc.astimezone().replace(tzinfo=None))

    def test_parse_rejects_garbage(self):
        self.assertIsNone(parse_timestamp(""))
        self.assertIsNone(parse_timestamp(None))
        self.assertIsNone(parse_timestamp("yesterday"))

    def test_display_round_trip_is_lossless_to_the_second(self):
        now = datetime.now().replace(microsecond=0)

        self.assertLess(abs(parse_timestamp(format_display(now)) - now), timedelta(seconds=1))


class TagHelperTests(unittest.TestCase):
    def test_split_tags(self):
        self.assertEqual(split_tags("a, b，c,,  "), ["a", "b", "c"])
        self.assertEqual(split_tags(["a ", "", None]), ["a"])
        self.assertEqual(split_tags(None), [])

    def test_escape_like(self):
        self.assertEqual(escape_like("a%b_c\\"), "a\\%b\\_c\\\\")


if __name__ == "__main__":
    unittest.main()
