"""
export_log.py

Append-only operation log written next to the exported data
(export_log.txt). One line per operation:

    [2024-03-01T09:15:00.000Z] GENERATE_CSV: SUCCESS - 42 articles converted

Writing is best effort: a failed append is reported on the diagnostic
logger and never interrupts the export.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from kb_export.utils import utc_timestamp

logger = logging.getLogger("kb-export.export_log")


def format_log_entry(operation: str, status: str, details: str = "", timestamp: Optional[str] = None) -> str:
    """Formats one log line, newline included. timestamp defaults to now (UTC)."""
    if timestamp is None:
        timestamp = utc_timestamp()
    suffix = f" - {details}" if details else ""
    return f"[{timestamp}] {operation}: {status}{suffix}\n"


def append_log(log_file: Union[str, Path], operation: str, status: str, details: str = "") -> bool:
    """
    Appends one entry to the export log.
    Returns True when the line was written, False when the append failed.
    """
    entry = format_log_entry(operation, status, details)
    try:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(entry)
        return True
    except OSError as e:
        logger.error(f"Failed to write to log file {log_file}: {e}")
        return False
