"""Named request/response operations consumed by the presentation shell.

Each operation returns the requested data or an outcome record
``{"success": bool, "message": str}``.
"""

import csv
import logging
import sqlite3

logger = logging.getLogger("Inkwell")

from .config import load_config
from .constants import EXPORT_FILENAME
from .csv_io import read_import_file, write_export_file


def _outcome(success, message):
    return {"success": success, "message": message}


class StaticDialogs:
    """File dialogs answered by fixed paths; None means cancelled."""

    def __init__(self, save_path=None, open_path=None):
        self.save_path = save_path
        self.open_path = open_path

    def ask_save_path(self, default_name):
        return self.save_path

    def ask_open_path(self):
        return self.open_path


class QuoteBridge:
    def __init__(self, store, dialogs=None, config=None):
        self.store = store
        self.dialogs = dialogs or StaticDialogs()
        self.config = config or load_config()
        self._handlers = {
            "get-quotes": self.get_quotes,
            "add-quote": self.add_quote,
            "update-quote": self.update_quote,
            "delete-quote": self.delete_quote,
            "get-random-quote": self.get_random_quote,
            "get-suggestions": self.get_suggestions,
            "check-duplicate": self.check_duplicate,
            "advanced-search": self.advanced_search,
            "get-category-stats": self.get_category_stats,
            "export-data": self.export_data,
            "import-data": self.import_data,
            "clear-all-data": self.clear_all_data,
        }

    @property
    def operations(self):
        return tuple(self._handlers)

    def handler(self, name):
        handler = self._handlers.get(name)
        if handler is None:
            raise KeyError(f"unknown operation: {name}")
        return handler

    def invoke(self, name, *args):
        return self.handler(name)(*args)

    def _guard(self, func, *args):
        try:
            return func(*args)
        except KeyError:
            return _outcome(False, "未找到记录")
        except ValueError as exc:
            return _outcome(False, str(exc))
        except sqlite3.Error as exc:
            logger.exception("%s failed", getattr(func, "__name__", func))
            return _outcome(False, f"操作失败：{exc}")

    # ── quotes ──

    def get_quotes(self):
        return self._guard(self.store.get_quotes)

    def add_quote(self, data):
        return self._guard(self.store.add_quote, data or {})

    def update_quote(self, data):
        data = data or {}
        if not isinstance(data, dict):
            return _outcome(False, "数据格式错误")
        if data.get("id") in (None, ""):
            return _outcome(False, "缺少 id")
        return self._guard(self.store.update_quote, data["id"], data)

    def delete_quote(self, quote_id):
        return self._guard(self.store.delete_quote, quote_id)

    def get_random_quote(self, exclude_id=None):
        return self._guard(self.store.get_random_quote, exclude_id)

    # ── search ──

    def get_suggestions(self, field, keyword):
        return self._guard(
            self.store.get_suggestions, field, keyword, self.config["suggestion_limit"]
        )

    def check_duplicate(self, content):
        found = self._guard(self.store.check_content_exists, content)
        if isinstance(found, dict):
            return found
        return found is not None

    def advanced_search(self, params):
        return self._guard(self.store.advanced_search, params)

    def get_category_stats(self, field):
        return self._guard(self.store.get_category_stats, field)

    # ── data management ──

    def export_data(self, path=None):
        quotes = self._guard(self.store.get_quotes)
        if isinstance(quotes, dict):
            return quotes
        if not quotes:
            return _outcome(False, "库中没有数据可导出")
        if path is None:
            path = self.dialogs.ask_save_path(EXPORT_FILENAME)
        if not path:
            return _outcome(False, "取消导出")
        try:
            count = write_export_file(path, quotes)
        except (OSError, csv.Error) as exc:
            logger.exception("Export to %s failed", path)
            return _outcome(False, f"导出失败：{exc}")
        return _outcome(True, f"成功导出 {count} 条数据")

    def import_data(self, path=None):
        if path is None:
            path = self.dialogs.ask_open_path()
        if not path:
            return _outcome(False, "取消导入")
        try:
            records = read_import_file(path)
            count = self.store.import_bulk(records)
        except ValueError as exc:
            return _outcome(False, f"导入失败：{exc}")
        except (OSError, csv.Error, sqlite3.Error) as exc:
            logger.exception("Import from %s failed", path)
            return _outcome(False, f"导入失败：{exc}")
        return _outcome(True, f"成功导入 {count} 条数据！")

    def clear_all_data(self):
        result = self._guard(self.store.clear_all_quotes)
        if isinstance(result, dict):
            return result
        return {"success": True}
