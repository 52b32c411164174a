import logging
import os
import sqlite3
import threading

logger = logging.getLogger("Inkwell")

from .config import load_config
from .constants import PRESET_QUOTES, QUOTE_FIELDS, SCHEMA_VERSION, STAT_FIELDS, SUGGESTION_FIELDS
from .paths import get_db_path
from .schema import OPTIONAL_COLUMNS, SCHEMA_SQL
from .search import build_where, parse_search_params, tag_stats, validate_field
from .utils import like_pattern, normalize_text, now_display, timestamp_sort_key

_INSERT_SQL = f"""
INSERT INTO quotes({','.join(QUOTE_FIELDS)},created_at)
VALUES({','.join('?' * (len(QUOTE_FIELDS) + 1))})
"""


class QuoteStore:
    """Quote records in a single SQLite file.

    One connection is opened in ``__init__`` and kept for the life of the
    store; ``close()`` releases it.
    """

    _instance = None
    _lock = threading.Lock()

    @classmethod
    def get(cls):
        with cls._lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    def __init__(self, db_path=None, seed_presets=None):
        config = load_config()
        self.db_path = db_path or get_db_path(config)
        if seed_presets is None:
            seed_presets = config["seed_presets"]
        os.makedirs(os.path.dirname(os.path.abspath(self.db_path)), exist_ok=True)
        logger.info("Database path: %s", self.db_path)
        self._conn = self._connect()
        self._init_db(seed_presets)

    def _connect(self):
        conn = sqlite3.connect(self.db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA busy_timeout = 5000")
        return conn

    def _init_db(self, seed_presets):
        conn = self._conn
        conn.executescript(SCHEMA_SQL)
        with conn:
            self._migrate_db(conn)
            conn.execute(
                "INSERT OR REPLACE INTO meta(key,value) VALUES('schema_version', ?)",
                (SCHEMA_VERSION,),
            )
        if seed_presets and self.count_quotes() == 0:
            self.import_bulk([dict(q, created_at=now_display()) for q in PRESET_QUOTES])
            logger.info("Seeded %d preset quote(s)", len(PRESET_QUOTES))

    def _migrate_db(self, conn):
        cols = {row["name"] for row in conn.execute("PRAGMA table_info(quotes)").fetchall()}
        for name, decl in OPTIONAL_COLUMNS:
            if name not in cols:
                conn.execute(f"ALTER TABLE quotes ADD COLUMN {name} {decl}")

    def close(self):
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    @staticmethod
    def _require_content(payload):
        if not isinstance(payload, dict):
            raise ValueError("数据格式错误")
        content = payload.get("content")
        if content is None or not str(content).strip():
            raise ValueError("缺少正文")
        return content

    @staticmethod
    def _field_values(payload):
        values = []
        for name in QUOTE_FIELDS:
            value = payload.get(name)
            values.append("" if value is None else value)
        return values

    @staticmethod
    def _row_to_quote(row):
        return {key: row[key] for key in row.keys()}

    # ── CRUD ──

    def add_quote(self, payload):
        payload = payload or {}
        self._require_content(payload)
        created_at = now_display()
        with self._conn:
            cur = self._conn.execute(_INSERT_SQL, self._field_values(payload) + [created_at])
        return self.get_quote(cur.lastrowid)

    def get_quote(self, quote_id):
        row = self._conn.execute("SELECT * FROM quotes WHERE id = ?", (quote_id,)).fetchone()
        if not row:
            raise KeyError("quote not found")
        return self._row_to_quote(row)

    def update_quote(self, quote_id, payload):
        payload = payload or {}
        self._require_content(payload)
        assignments = ", ".join(f"{name}=?" for name in QUOTE_FIELDS)
        with self._conn:
            cur = self._conn.execute(
                f"UPDATE quotes SET {assignments} WHERE id=?",
                self._field_values(payload) + [quote_id],
            )
        if cur.rowcount == 0:
            raise KeyError("quote not found")
        return self.get_quote(quote_id)

    def delete_quote(self, quote_id):
        with self._conn:
            cur = self._conn.execute("DELETE FROM quotes WHERE id = ?", (quote_id,))
        if cur.rowcount == 0:
            raise KeyError("quote not found")
        return {"id": quote_id, "changes": cur.rowcount}

    def count_quotes(self):
        row = self._conn.execute("SELECT COUNT(*) AS c FROM quotes").fetchone()
        return int(row["c"])

    @staticmethod
    def _sort_newest_first(rows):
        quotes = [QuoteStore._row_to_quote(r) for r in rows]
        # created_at is "YYYY/M/D ..." which does not sort as a string.
        quotes.sort(key=lambda q: (timestamp_sort_key(q["created_at"]), q["id"]), reverse=True)
        return quotes

    def get_quotes(self):
        rows = self._conn.execute("SELECT * FROM quotes").fetchall()
        return self._sort_newest_first(rows)

    def get_random_quote(self, exclude_id=None):
        row = None
        if exclude_id and self.count_quotes() > 1:
            row = self._conn.execute(
                "SELECT * FROM quotes WHERE id != ? ORDER BY RANDOM() LIMIT 1",
                (exclude_id,),
            ).fetchone()
        if row is None:
            row = self._conn.execute("SELECT * FROM quotes ORDER BY RANDOM() LIMIT 1").fetchone()
        return self._row_to_quote(row) if row else None

    def check_content_exists(self, content):
        row = self._conn.execute("SELECT id FROM quotes WHERE content = ?", (content,)).fetchone()
        return row["id"] if row else None

    def import_bulk(self, records):
        """Insert all records in one transaction; any failure inserts none."""
        records = list(records or [])
        rows = []
        for index, record in enumerate(records):
            try:
                self._require_content(record)
            except ValueError as exc:
                raise ValueError(f"第 {index + 1} 行{exc}") from None
            created_at = normalize_text(record.get("created_at")) or now_display()
            rows.append(self._field_values(record) + [created_at])
        with self._conn:
            self._conn.executemany(_INSERT_SQL, rows)
        logger.info("Bulk inserted %d quote(s)", len(rows))
        return len(rows)

    def clear_all_quotes(self):
        with self._conn:
            self._conn.execute("DELETE FROM quotes")
            self._conn.execute("DELETE FROM sqlite_sequence WHERE name = 'quotes'")
        logger.info("Cleared all quotes")

    # ── search & stats ──

    def get_suggestions(self, field, keyword, limit=10):
        keyword = normalize_text(keyword)
        if not keyword:
            return []
        field = validate_field(field, SUGGESTION_FIELDS)
        rows = self._conn.execute(
            f"SELECT DISTINCT {field} AS value FROM quotes WHERE {field} LIKE ? ESCAPE '\\' LIMIT ?",
            (like_pattern(keyword), int(limit)),
        ).fetchall()
        return [{"value": r["value"]} for r in rows]

    def advanced_search(self, params):
        query = parse_search_params(params)
        where, values = build_where(query)
        logger.debug("advanced_search input: %r -> %r", params, query)
        sql = "SELECT * FROM quotes"
        if where:
            sql += " WHERE " + " AND ".join(where)
        rows = self._conn.execute(sql, values).fetchall()
        logger.debug("advanced_search rows=%d", len(rows))
        return self._sort_newest_first(rows)

    def get_category_stats(self, field):
        field = validate_field(field, STAT_FIELDS)
        if field == "tags":
            rows = self._conn.execute("SELECT tags FROM quotes").fetchall()
            return tag_stats(r["tags"] for r in rows)
        rows = self._conn.execute(
            f"""
            SELECT {field} AS name, COUNT(*) AS count
            FROM quotes
            WHERE {field} IS NOT NULL AND {field} != ''
            GROUP BY {field}
            ORDER BY count DESC
            """
        ).fetchall()
        return [{"name": r["name"], "count": int(r["count"])} for r in rows]

