"""
main.py

Converts a Salesforce Knowledge Base export into CSV and summary files:
- Reads the JSON array saved as data/knowledge_base/articles.json.
- Writes articles.csv with one row per article.
- Writes articles_summary.json with counts per type, language, status,
  visibility and the creation date range.
- Appends one line per step to export_log.txt.

The JSON comes from running the Apex exporter in the org and pasting the
debug log output into articles.json; that part is manual.

Usage:
    kb-export [--input PATH] [--csv PATH] [--summary PATH] [--log PATH]
    python -m kb_export

Exit status is 0 on success and 1 when the input is missing, cannot be
parsed, or an output cannot be written.
"""

import argparse
import json
import logging
import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from kb_export.csv_converter import articles_to_csv
from kb_export.export_log import append_log
from kb_export.summary import generate_summary
from kb_export.utils import load_env, setup_logging

logger = logging.getLogger("kb-export.main")

PathLike = Union[str, Path]

# Valid pairs are already combined by json.load, so any surrogate left is unpaired
LONE_SURROGATE_RE = re.compile("[\ud800-\udfff]")
REPLACEMENT_CHAR = "\ufffd"


class ExportError(RuntimeError):
    """A load-bearing step of the export failed."""

    def __init__(self, step: str, message: str):
        super().__init__(message)
        self.step = step


class MissingInputError(ExportError):
    pass


class MalformedInputError(ExportError):
    pass


class OutputWriteError(ExportError):
    pass


def read_articles(articles_json: Path) -> List[Dict[str, Any]]:
    """Loads the exported articles, which must be a JSON array of objects."""
    try:
        with open(articles_json, "r", encoding="utf-8") as f:
            articles = json.load(f)
    except ValueError as e:
        raise MalformedInputError("READ_ARTICLES", f"{articles_json} is not valid JSON: {e}") from e
    except OSError as e:
        raise ExportError("READ_ARTICLES", f"Could not read {articles_json}: {e}") from e

    if not isinstance(articles, list):
        raise MalformedInputError(
            "READ_ARTICLES", f"{articles_json} must contain a JSON array, got {type(articles).__name__}"
        )
    for i, article in enumerate(articles):
        if not isinstance(article, dict):
            raise MalformedInputError(
                "READ_ARTICLES", f"Article #{i} in {articles_json} is not an object: {article!r}"
            )
    return articles


def replace_lone_surrogates(text: str) -> str:
    """
    json.load keeps unpaired \\ud800-\\udfff escapes as lone surrogates, which
    UTF-8 cannot encode. Each one becomes U+FFFD.
    """
    return LONE_SURROGATE_RE.sub(REPLACEMENT_CHAR, text)


def write_output(path: Path, content: str, step: str):
    content = replace_lone_surrogates(content)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    except OSError as e:
        raise OutputWriteError(step, f"Could not write {path}: {e}") from e


def print_summary(summary: Dict[str, Any]):
    date_range = summary["dateRange"]
    print("\n=== EXPORT SUMMARY ===", flush=True)
    print(f"Total Articles: {summary['totalArticles']}")
    print(f"Article Types: {len(summary['articleTypes'])}")
    print(f"Languages: {len(summary['languages'])}")
    print(f"Date Range: {date_range['earliest']} to {date_range['latest']}")
    print("=====================\n", flush=True)


def export_knowledge_data(
    articles_json: PathLike,
    articles_csv: PathLike,
    summary_json: PathLike,
    log_file: PathLike,
) -> Dict[str, Any]:
    """
    Runs the export: read, CSV, summary. Returns the summary dict.

    Raises:
        MissingInputError: articles_json does not exist. Nothing is written.
        MalformedInputError: articles_json is not a JSON array of objects.
        OutputWriteError: the CSV or summary file could not be written.
            Outputs written before the failure are kept.
    """
    articles_json = Path(articles_json)
    articles_csv = Path(articles_csv)
    summary_json = Path(summary_json)

    if not articles_json.exists():
        raise MissingInputError(
            "READ_ARTICLES",
            f"{articles_json} not found. Run the Apex exporter first and save its output there.",
        )

    try:
        logger.info(f"Reading articles from {articles_json}")
        articles = read_articles(articles_json)
        append_log(log_file, "READ_ARTICLES", "SUCCESS", f"{len(articles)} articles loaded")

        logger.info("Generating CSV format...")
        write_output(articles_csv, articles_to_csv(articles), "GENERATE_CSV")
        logger.info(f"CSV saved to: {articles_csv}")
        append_log(log_file, "GENERATE_CSV", "SUCCESS", f"{len(articles)} articles converted")

        logger.info("Generating summary statistics...")
        summary = generate_summary(articles)
        write_output(
            summary_json,
            json.dumps(summary, indent=2, ensure_ascii=False),
            "GENERATE_SUMMARY",
        )
        logger.info(f"Summary saved to: {summary_json}")
        append_log(log_file, "GENERATE_SUMMARY", "SUCCESS", f"{summary['totalArticles']} articles analyzed")
    except ExportError as e:
        append_log(log_file, "EXPORT_ERROR", "FAILED", str(e))
        raise

    print_summary(summary)
    append_log(log_file, "EXPORT_COMPLETE", "SUCCESS", "All formats generated")
    return summary


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        prog="kb-export",
        description="Convert an exported Knowledge Base articles.json into CSV and summary files.",
    )
    ap.add_argument("--input", help="Exported articles JSON (default: $KB_ARTICLES_JSON)")
    ap.add_argument("--csv", help="CSV output path (default: $KB_ARTICLES_CSV)")
    ap.add_argument("--summary", help="Summary JSON output path (default: $KB_SUMMARY_JSON)")
    ap.add_argument("--log", help="Export log path (default: $KB_EXPORT_LOG)")
    ap.add_argument("--log-level", help="Diagnostic log level (default: $LOG_LEVEL)")
    return ap.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    config = load_env()

    articles_json = args.input or config["KB_ARTICLES_JSON"]
    articles_csv = args.csv or config["KB_ARTICLES_CSV"]
    summary_json = args.summary or config["KB_SUMMARY_JSON"]
    log_file = args.log or config["KB_EXPORT_LOG"]

    # Missing input: console diagnostics only, no log file
    app_log = config["KB_APP_LOG"] if Path(articles_json).exists() else None
    setup_logging(args.log_level or config["LOG_LEVEL"], app_log)

    logger.info("Starting Knowledge Base data export...")
    try:
        export_knowledge_data(articles_json, articles_csv, summary_json, log_file)
    except ExportError as e:
        logger.error(f"Export failed at {e.step}: {e}")
        return 1

    logger.info("Knowledge Base data export completed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
