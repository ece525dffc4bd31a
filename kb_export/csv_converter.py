"""
csv_converter.py

Renders exported Knowledge Base articles as comma-separated text.

- The header is taken from the first article's keys, in their original order.
- Every article produces one row with those columns; missing fields and
  nulls become empty cells, fields the first article lacks are dropped.
- Cells containing a comma, a double quote or a line break are quoted,
  with embedded quotes doubled.

Usage:
    - articles_to_csv(articles): Convert a list of article dicts to CSV text.
"""

import math
from typing import Any, Dict, List, Optional

DELIMITER = ","
QUOTE = '"'
SPECIAL_CHARS = (DELIMITER, QUOTE, "\n", "\r")


def stringify(value: Any) -> str:
    """
    Generic text form of a scalar, as the values read in JSON: booleans as
    true/false, whole floats without the trailing .0 (2.0 -> 2), NaN and
    Infinity spelled out, everything else via str().
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        # Beyond 1e21 whole floats keep exponent form (1e+21)
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
    return str(value)


def escape_csv_value(value: Any) -> str:
    """
    Converts a single field value to a CSV cell.

    Args:
        value: Any scalar. None renders as an empty cell.

    Returns:
        str: The cell text, quoted when it contains a special character.
    """
    if value is None:
        return ""
    text = stringify(value)
    if any(ch in text for ch in SPECIAL_CHARS):
        return QUOTE + text.replace(QUOTE, QUOTE * 2) + QUOTE
    return text


def articles_to_csv(articles: Optional[List[Dict[str, Any]]]) -> str:
    """
    Converts a list of article dicts to CSV text.

    Returns an empty string for an empty list. Otherwise the header line is
    followed by one line per article, joined with newlines and without a
    trailing newline.
    """
    if not articles:
        return ""

    headers = list(articles[0].keys())
    lines = [DELIMITER.join(escape_csv_value(h) for h in headers)]
    for article in articles:
        lines.append(DELIMITER.join(escape_csv_value(article.get(h)) for h in headers))
    return "\n".join(lines)
