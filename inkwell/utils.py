import re
from datetime import datetime

_tag_sep_re = re.compile(r"[,，]")

_DATE_FORMATS = (
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%Y.%m.%d %H:%M:%S",
    "%Y.%m.%d",
)


def format_display(dt):
    # YYYY/M/D HH:MM:SS, month and day are not zero-padded.
    return f"{dt.year}/{dt.month}/{dt.day} {dt.strftime('%H:%M:%S')}"


def now_display():
    return format_display(datetime.now())


def parse_timestamp(value):
    """Parse a stored or imported timestamp into a naive local datetime.

    Returns None when the value is empty or not a recognised date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        s = str(value).strip()
        if not s:
            return None
        dt = None
        iso = s[:-1] + "+00:00" if s[-1] in "Zz" else s
        try:
            dt = datetime.fromisoformat(iso)
        except ValueError:
            for fmt in _DATE_FORMATS:
                try:
                    dt = datetime.strptime(s, fmt)
                    break
                except ValueError:
                    continue
        if dt is None:
            return None
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def timestamp_sort_key(value):
    return parse_timestamp(value) or datetime.min


def split_tags(tags):
    """Split a tag string on ASCII or full-width commas; lists are taken as-is.

    Entries are trimmed and blanks dropped. Duplicates are kept.
    """
    if tags is None:
        return []
    if isinstance(tags, (list, tuple)):
        parts = [str(t) for t in tags if t is not None]
    else:
        parts = _tag_sep_re.split(str(tags))
    out = []
    for t in parts:
        t = t.strip()
        if t:
            out.append(t)
    return out


def normalize_text(s):
    if s is None:
        return ""
    return str(s).strip()


def escape_like(s):
    return s.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def like_pattern(s):
    return f"%{escape_like(s)}%"
