"""
summary.py

Computes summary statistics over exported Knowledge Base articles:
total count, tallies per article type, language and publish status,
visibility flag counts, and the range of creation dates.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from dateutil.parser import isoparse

from kb_export.csv_converter import stringify
from kb_export.utils import utc_timestamp

# Summary key -> article field
CATEGORY_FIELDS = {
    "articleTypes": "articleType",
    "languages": "language",
    "publishStatuses": "publishStatus",
}

VISIBILITY_FIELDS = {
    "visibleInPkb": "isVisibleInPkb",
    "visibleInCsp": "isVisibleInCsp",
    "visibleInPrm": "isVisibleInPrm",
}

DATE_FIELD = "createdDate"

# Bucket keys for a field that is absent vs. explicitly null
UNDEFINED_KEY = "undefined"
NULL_KEY = "null"


def category_key(article: Dict[str, Any], field: str) -> str:
    if field not in article:
        return UNDEFINED_KEY
    value = article[field]
    if value is None:
        return NULL_KEY
    return stringify(value)


def parse_date(value: Any) -> Optional[datetime]:
    """
    Parses an ISO-8601 date or timestamp, e.g. 2023-01-01 or
    2023-01-15T10:30:00.000+0000. Values without an offset are read as UTC.
    Returns None for anything that does not parse.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = isoparse(value.strip())
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def generate_summary(articles: List[Dict[str, Any]], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Builds the summary dict for a list of articles in a single pass.

    Args:
        articles: Article dicts as exported from Salesforce.
        now: Export time to record; defaults to the current UTC time.

    Returns:
        dict: exportDate, totalArticles, articleTypes, languages,
        publishStatuses, visibilityStats and dateRange.
    """
    summary = {
        "exportDate": utc_timestamp(now),
        "totalArticles": len(articles),
        "articleTypes": {},
        "languages": {},
        "publishStatuses": {},
        "visibilityStats": {key: 0 for key in VISIBILITY_FIELDS},
        "dateRange": {
            "earliest": None,
            "latest": None,
        },
    }

    earliest = latest = None
    for article in articles:
        for summary_key, field in CATEGORY_FIELDS.items():
            bucket = summary[summary_key]
            key = category_key(article, field)
            bucket[key] = bucket.get(key, 0) + 1

        for stat_key, field in VISIBILITY_FIELDS.items():
            if article.get(field):
                summary["visibilityStats"][stat_key] += 1

        created = parse_date(article.get(DATE_FIELD))
        if created is None:
            continue
        # Strict comparisons: ties keep the first value seen
        if earliest is None or created < earliest:
            earliest = created
            summary["dateRange"]["earliest"] = article[DATE_FIELD]
        if latest is None or created > latest:
            latest = created
            summary["dateRange"]["latest"] = article[DATE_FIELD]

    return summary
