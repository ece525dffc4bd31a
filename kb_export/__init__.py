"""
This package contains all modules for the kb-export project.

Modules include:
- csv_converter: Renders exported articles as CSV text.
- summary: Computes counts per type, language, status and visibility plus the creation date range.
- export_log: Appends operation lines to the export log.
- utils: Provides utility functions for environment variables, logging and timestamps.
- main: Orchestrates the export and provides the kb-export command.
"""
