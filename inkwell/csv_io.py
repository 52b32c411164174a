"""CSV export/import of quotes.

Exports use fixed, capitalised headers and a UTF-8 BOM so spreadsheet tools
detect the encoding. Imports match headers case-insensitively and normalise
``CreatedAt`` into the display format.
"""

import csv
import io
import logging

logger = logging.getLogger("Inkwell")

from .constants import EXPORT_COLUMNS, QUOTE_FIELDS
from .utils import format_display, now_display, parse_timestamp

BOM = "\ufeff"


def export_csv_text(quotes):
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow([header for _key, header in EXPORT_COLUMNS])
    for quote in quotes:
        row = []
        for key, _header in EXPORT_COLUMNS:
            value = quote.get(key)
            row.append("" if value is None else value)
        writer.writerow(row)
    return buf.getvalue()


def write_export_file(path, quotes):
    text = export_csv_text(quotes)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(BOM + text)
    logger.info("Exported %d quote(s) to %s", len(quotes), path)
    return len(quotes)


def _read_rows(text):
    if text.startswith(BOM):
        text = text[len(BOM):]
    header = None
    rows = []
    for cells in csv.reader(io.StringIO(text), strict=False):
        if not any(cell.strip() for cell in cells):
            continue
        if header is None:
            header = [cell.strip().lower() for cell in cells]
            continue
        rows.append(dict(zip(header, (cell.strip() for cell in cells))))
    return header, rows


def _sanitize_row(row):
    record = {"content": row.get("content")}
    for name in QUOTE_FIELDS:
        if name != "content":
            record[name] = row.get(name) or ""
    created = parse_timestamp(row.get("createdat"))
    record["created_at"] = format_display(created) if created else now_display()
    return record


def parse_import_text(text):
    """Parse CSV text into records ready for ``QuoteStore.import_bulk``.

    Raises ValueError when the file has no data rows or no content column.
    """
    header, rows = _read_rows(text or "")
    if not header or not rows:
        raise ValueError("文件中没有有效数据")
    if "content" not in header:
        raise ValueError("找不到 'Content' 列，请检查表头拼写。")
    return [_sanitize_row(row) for row in rows]


def read_import_file(path):
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        text = f.read()
    records = parse_import_text(text)
    logger.debug("Parsed %d record(s) from %s", len(records), path)
    return records
