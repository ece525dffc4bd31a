"""
utils.py

This module provides utility functions for the kb-export project, including:

- Environment variable loading with defaults for every file location
- Centralized logging setup (console and file)
- UTC timestamp formatting shared by the summary and the export log

All functions are designed to be imported and used by other modules in the project.
"""

import os
import sys
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

PROJECT_ROOT = Path(__file__).parent.parent

# --- Environment Variable Loader ---

OPTIONAL_ENV_VARS = {
    "LOG_LEVEL": "INFO",
    "KB_DATA_DIR": str(PROJECT_ROOT / "data" / "knowledge_base"),
    "KB_APP_LOG": "logs/kb_export.log",
}

# File names resolved against KB_DATA_DIR when not set explicitly
DATA_FILE_ENV_VARS = {
    "KB_ARTICLES_JSON": "articles.json",
    "KB_ARTICLES_CSV": "articles.csv",
    "KB_SUMMARY_JSON": "articles_summary.json",
    "KB_EXPORT_LOG": "export_log.txt",
}


def load_env(dotenv_path: Optional[str] = None) -> Dict[str, str]:
    """
    Loads environment variables from a .env file and fills in defaults.
    Returns a dictionary of config values.
    """
    if dotenv_path is None:
        dotenv_path = str(PROJECT_ROOT / ".env")
    load_dotenv(dotenv_path)

    config = {}
    for var, default in OPTIONAL_ENV_VARS.items():
        value = os.getenv(var)
        config[var] = value if value and value.strip() else default

    data_dir = Path(config["KB_DATA_DIR"])
    for var, filename in DATA_FILE_ENV_VARS.items():
        value = os.getenv(var)
        config[var] = value if value and value.strip() else str(data_dir / filename)
    return config

# --- Logging Setup ---

def setup_logging(log_level: str = "INFO", log_file: Optional[str] = "logs/kb_export.log") -> logging.Logger:
    """
    Sets up logging to both console and a rotating file.
    Pass log_file=None for console-only logging.
    Returns a logger instance.
    """
    logger = logging.getLogger("kb-export")
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    logger.propagate = False  # Prevent double logging

    # Remove any existing handlers
    if logger.hasHandlers():
        logger.handlers.clear()

    # Console diagnostics on stderr, stdout carries the summary block
    console_handler = RichHandler(
        console=Console(file=sys.stderr),
        rich_tracebacks=True,
        show_time=True,
        show_level=True,
        show_path=False,
    )
    logger.addHandler(console_handler)

    if log_file is None:
        return logger

    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    # Rotating file handler, opened on first record
    file_handler = RotatingFileHandler(
        log_file, maxBytes=1_000_000, backupCount=3, encoding="utf-8", delay=True
    )
    file_formatter = logging.Formatter(
        "[%(asctime)s] %(levelname)s %(name)s: %(message)s", "%Y-%m-%d %H:%M:%S"
    )
    file_handler.setFormatter(file_formatter)
    logger.addHandler(file_handler)

    return logger

# --- Timestamps ---

def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """
    Returns an ISO-8601 UTC timestamp with millisecond precision and a Z suffix,
    e.g. 2024-03-01T09:15:00.000Z.
    """
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
