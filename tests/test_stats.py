import tempfile
import unittest
from pathlib import Path

from inkwell.constants import NO_TAG
from inkwell.db import QuoteStore
from inkwell.search import tag_stats


class TagStatsTests(unittest.TestCase):
    def test_untagged_bucket_is_always_first(self):
        result = tag_stats(["a,b", "a", ""])

        self.assertEqual(
            result,
            [
                {"name": NO_TAG, "count": 1},
                {"name": "a", "count": 2},
                {"name": "b", "count": 1},
            ],
        )

    def test_full_width_commas_and_whitespace_are_normalised(self):
        result = tag_stats(["x， y ", " y,x", None, "   "])

        self.assertEqual(result[0], {"name": NO_TAG, "count": 2})
        self.assertEqual(sorted((r["name"], r["count"]) for r in result[1:]), [("x", 2), ("y", 2)])

    def test_counting_is_case_sensitive_and_ties_keep_first_seen_order(self):
        result = tag_stats(["Moon,moon", "star"])

        self.assertEqual([r["name"] for r in result], ["Moon", "moon", "star"])

    def test_no_untagged_bucket_when_everything_is_tagged(self):
        self.assertEqual(tag_stats(["a"]), [{"name": "a", "count": 1}])


class CategoryStatsTests(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.store = QuoteStore(db_path=str(Path(self.temp_dir.name) / "inkwell.db"), seed_presets=False)
        self.store.import_bulk(
            [
                {"content": "1", "author": "李白", "tags": "a,b"},
                {"content": "2", "author": "李白", "tags": "a"},
                {"content": "3", "author": "杜甫", "tags": ""},
                {"content": "4", "author": ""},
            ]
        )

    def tearDown(self):
        self.store.close()
        self.temp_dir.cleanup()

    def test_tag_mode(self):
        result = self.store.get_category_stats("tags")

        self.assertEqual(
            result,
            [
                {"name": NO_TAG, "count": 2},
                {"name": "a", "count": 2},
                {"name": "b", "count": 1},
            ],
        )

    def test_column_mode_skips_empty_values(self):
        result = self.store.get_category_stats("author")

        self.assertEqual(result, [{"name": "李白", "count": 2}, {"name": "杜甫", "count": 1}])

    def test_unknown_field_is_rejected(self):
        with self.assertRaises(ValueError):
            self.store.get_category_stats("content")
        with self.assertRaises(ValueError):
            self.store.get_category_stats("author FROM quotes --")


if __name__ == "__main__":
    unittest.main()
