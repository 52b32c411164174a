APP_NAME = "Inkwell"
SCHEMA_VERSION = "1"

DB_FILENAME = "inkwell.db"
EXPORT_FILENAME = "inkwell_backup.csv"

# Tag value meaning "records without any tag" in filters and stats.
NO_TAG = "无标签"

# Every column that may be interpolated into SQL comes from one of these.
QUOTE_FIELDS = (
    "content",
    "author",
    "source",
    "type",
    "nationality",
    "dynasty",
    "translation",
    "tags",
    "note",
)
FULLTEXT_FIELDS = ("content", "author", "source", "type", "dynasty", "nationality", "tags", "note")
SINGLE_FIELDS = FULLTEXT_FIELDS + ("translation",)
CUSTOM_FIELDS = ("content", "author", "type", "source", "dynasty", "nationality")
SUGGESTION_FIELDS = ("author", "source", "type", "dynasty", "nationality", "tags")
STAT_FIELDS = ("tags", "author", "source", "type", "dynasty", "nationality")

EXPORT_COLUMNS = (
    ("content", "Content"),
    ("author", "Author"),
    ("type", "Type"),
    ("source", "Source"),
    ("dynasty", "Dynasty"),
    ("nationality", "Nationality"),
    ("tags", "Tags"),
    ("note", "Note"),
    ("translation", "Translation"),
    ("created_at", "CreatedAt"),
)

PRESET_QUOTES = (
    {
        "content": "Nobody grows old merely by a number of years.\nWe grow old by deserting our ideals.",
        "author": "塞缪尔·厄尔曼",
        "source": "青春",
        "dynasty": "",
        "nationality": "美国",
        "type": "散文",
        "tags": "青春,年岁,理想",
        "note": "我很喜欢这句话，也送给使用这个软件的你",
        "translation": "年岁增长，并非衰老，理想丢弃，方坠暮年。",
    },
)
