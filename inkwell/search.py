"""Advanced search: turn the shell's loose params object into SQL filters.

The params object mixes several modes in one dict::

    {"searchTags": "a,b", "keyword": "moon", "mode": "fulltext"}
    {"keyword": "Li", "mode": "single", "field": "author"}
    {"mode": "custom", "author": "Li", "dynasty": "Tang"}

``parse_search_params`` resolves it into a ``SearchQuery`` holding at most
one tag filter and one keyword variant. ``build_where`` renders that query
as WHERE clauses with positional parameters. Column names only ever come
from the allow-lists in ``constants``.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from .constants import CUSTOM_FIELDS, FULLTEXT_FIELDS, NO_TAG, SINGLE_FIELDS
from .utils import like_pattern, normalize_text, split_tags


@dataclass(frozen=True)
class TagFilter:
    tags: Tuple[str, ...]


@dataclass(frozen=True)
class FulltextQuery:
    keyword: str


@dataclass(frozen=True)
class FieldQuery:
    field: str
    keyword: str


@dataclass(frozen=True)
class CustomQuery:
    # (column, keyword) pairs, already restricted to CUSTOM_FIELDS.
    filters: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)


KeywordQuery = Union[FulltextQuery, FieldQuery, CustomQuery]


@dataclass(frozen=True)
class SearchQuery:
    tag_filter: Optional[TagFilter] = None
    keyword: Optional[KeywordQuery] = None


def validate_field(name, allowed):
    name = normalize_text(name)
    if name not in allowed:
        raise ValueError(f"unsupported field: {name!r}")
    return name


def parse_search_params(params) -> SearchQuery:
    params = params or {}
    if not isinstance(params, dict):
        raise ValueError("search params must be an object")

    tag_filter = None
    raw_tags = params.get("searchTags")
    if isinstance(raw_tags, (list, tuple, str)):
        tags = split_tags(raw_tags)
        if tags:
            tag_filter = TagFilter(tuple(tags))

    mode = normalize_text(params.get("mode"))
    keyword = normalize_text(params.get("keyword"))
    query = None
    if mode == "custom":
        filters = []
        for name in CUSTOM_FIELDS:
            value = normalize_text(params.get(name))
            if value:
                filters.append((name, value))
        if filters:
            query = CustomQuery(tuple(filters))
    elif keyword:
        if mode == "fulltext":
            query = FulltextQuery(keyword)
        elif mode == "single" and params.get("field"):
            query = FieldQuery(validate_field(params["field"], SINGLE_FIELDS), keyword)

    return SearchQuery(tag_filter=tag_filter, keyword=query)


def _tag_clauses(tag_filter):
    where, values = [], []
    for tag in tag_filter.tags:
        if tag == NO_TAG:
            where.append("(tags IS NULL OR tags = '')")
        else:
            where.append("tags LIKE ? ESCAPE '\\'")
            values.append(like_pattern(tag))
    return where, values


def _keyword_clauses(query):
    if isinstance(query, FulltextQuery):
        pattern = like_pattern(query.keyword)
        ors = " OR ".join(f"{name} LIKE ? ESCAPE '\\'" for name in FULLTEXT_FIELDS)
        return [f"({ors})"], [pattern] * len(FULLTEXT_FIELDS)
    if isinstance(query, FieldQuery):
        name = validate_field(query.field, SINGLE_FIELDS)
        return [f"{name} LIKE ? ESCAPE '\\'"], [like_pattern(query.keyword)]
    if isinstance(query, CustomQuery):
        where, values = [], []
        for name, value in query.filters:
            name = validate_field(name, CUSTOM_FIELDS)
            where.append(f"{name} LIKE ? ESCAPE '\\'")
            values.append(like_pattern(value))
        return where, values
    raise TypeError(f"unknown keyword query: {query!r}")


def build_where(query: SearchQuery):
    """Return (clauses, values); clauses are ANDed by the caller."""
    where, values = [], []
    if query.tag_filter is not None:
        w, v = _tag_clauses(query.tag_filter)
        where += w
        values += v
    if query.keyword is not None:
        w, v = _keyword_clauses(query.keyword)
        where += w
        values += v
    return where, values


def count_tags(tag_values):
    """Count tag frequency over raw tag strings.

    Returns (counts, untagged) where counts keeps first-seen order.
    """
    counts = {}
    untagged = 0
    for raw in tag_values:
        if raw is None or not str(raw).strip():
            untagged += 1
            continue
        for tag in split_tags(raw):
            counts[tag] = counts.get(tag, 0) + 1
    return counts, untagged


def tag_stats(tag_values):
    counts, untagged = count_tags(tag_values)
    result = [{"name": name, "count": count} for name, count in counts.items()]
    result.sort(key=lambda item: item["count"], reverse=True)
    if untagged > 0:
        result.insert(0, {"name": NO_TAG, "count": untagged})
    return result
