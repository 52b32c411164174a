SCHEMA_SQL = r"""
PRAGMA journal_mode = WAL;

CREATE TABLE IF NOT EXISTS meta (
  key TEXT PRIMARY KEY,
  value TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS quotes (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  content TEXT NOT NULL,
  author TEXT,
  source TEXT,
  type TEXT,
  nationality TEXT,
  dynasty TEXT,
  translation TEXT,
  tags TEXT,
  note TEXT,
  created_at TEXT
);
"""

# Columns added after the first release; older databases get them on open.
OPTIONAL_COLUMNS = (
    ("translation", "TEXT"),
    ("note", "TEXT"),
)
