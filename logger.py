"""
logger.py
---------
Logging for the report engine, separate from the report text itself.

What gets logged:
    * DEBUG   – per-table counts as each table report is built, and every
                unexpected condition as it is recorded in the state.
    * INFO    – snapshot loads and finished reports (tables, conditions,
                output file).
    * WARNING – internal inconsistencies found while reporting: a table
                with no mapping or schema, row counts that don't add up.

Records go to stderr (and to LOG_FILE when set), never to the report
sink, so the report stays byte-identical whatever the log level.  All
modules log under the "convreport" hierarchy via ``get_logger(__name__)``.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path

from config import CONFIG, get_log_level

_ROOT_LOGGER_NAME = "convreport"
_CONSOLE_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"
_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

_configured = False


def _configure_root_logger() -> None:
    """One-time setup of the root 'convreport' logger and its handlers."""
    global _configured
    if _configured:
        return
    _configured = True

    root = logging.getLogger(_ROOT_LOGGER_NAME)
    root.setLevel(get_log_level())

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(get_log_level())
    console_handler.setFormatter(
        logging.Formatter(fmt=_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )
    root.addHandler(console_handler)

    if CONFIG.report.log_file:
        log_path = Path(CONFIG.report.log_file)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(
                logging.Formatter(fmt=_FILE_FORMAT, datefmt=_DATE_FORMAT)
            )
            root.addHandler(file_handler)
        except OSError as exc:
            root.warning("Could not create log file '%s': %s", log_path, exc)


_configure_root_logger()


def get_logger(name: str) -> logging.Logger:
    """
    Return the ``convreport.<name>`` logger, e.g. ``convreport.core.report``.

    Example::

        log = get_logger(__name__)
        log.warning("Table %s: bad table mapping or Spanner schema.", src_table)
    """
    return logging.getLogger(f"{_ROOT_LOGGER_NAME}.{name}")
