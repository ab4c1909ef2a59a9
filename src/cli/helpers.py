"""
CLI helper utilities.

This module provides shared utilities for CLI commands including:
- Logging setup, with fallback locations for the log file
- The per-ontology statement log
- Batch manifest loading
"""

import json
import logging
import os
import sys
import tempfile
from contextlib import contextmanager
from dataclasses import replace
from logging import Handler
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterator, List, Optional, Tuple

from constants import FileExtensions, LoggingConfig
from core.transaction import statement_logger
from importer import ImportConfig

logger = logging.getLogger(__name__)

_MANAGED_HANDLERS: List[Handler] = []


class ManifestError(Exception):
    """Raised when a batch manifest cannot be read or is malformed."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path
        super().__init__(message)


def _create_file_handler(path: str) -> Handler:
    return RotatingFileHandler(
        path,
        maxBytes=LoggingConfig.MAX_LOG_FILE_MB * 1024 * 1024,
        backupCount=LoggingConfig.LOG_BACKUP_COUNT,
        encoding='utf-8',
    )


def _clear_managed_handlers() -> None:
    root_logger = logging.getLogger()
    for handler in _MANAGED_HANDLERS:
        root_logger.removeHandler(handler)
        handler.close()
    _MANAGED_HANDLERS.clear()


def setup_logging(level: str = LoggingConfig.DEFAULT_LOG_LEVEL, log_file: Optional[str] = None) -> Optional[str]:
    """
    Setup logging configuration with fallback locations.

    If the requested log file cannot be created, the system temp directory
    and then the user's home directory are tried before falling back to
    console-only logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path. If None, logs to console only.

    Returns:
        The actual log file path used, or None if logging to console only.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(fmt=LoggingConfig.LOG_FORMAT, datefmt=LoggingConfig.DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    handlers: List[Handler] = [console_handler]
    actual_log_file = None

    if log_file:
        log_filename = os.path.basename(log_file) or "owl2graph.log"
        fallback_locations = [
            log_file,
            os.path.join(tempfile.gettempdir(), log_filename),
            os.path.join(Path.home(), log_filename),
        ]
        for fallback_path in fallback_locations:
            try:
                log_dir = os.path.dirname(fallback_path)
                if log_dir and not os.path.exists(log_dir):
                    os.makedirs(log_dir, exist_ok=True)
                file_handler = _create_file_handler(fallback_path)
            except OSError as exc:
                print(f"  Could not create log at {fallback_path}: {exc}", file=sys.stderr)
                continue
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)
            actual_log_file = fallback_path
            if fallback_path != log_file:
                print(f"Note: Using fallback log file: {fallback_path}", file=sys.stderr)
            break
        else:
            print("Warning: Could not write log file to any location; logging to console only", file=sys.stderr)

    _clear_managed_handlers()
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in handlers:
        root_logger.addHandler(handler)
        _MANAGED_HANDLERS.append(handler)

    if actual_log_file:
        logger.info(f"Logging to: {actual_log_file}")
    return actual_log_file


@contextmanager
def statement_log(acronym: str, enabled: bool = True, directory: Optional[str] = None) -> Iterator[Optional[str]]:
    """
    Write every statement of one import to ``Cypher log for <ACRONYM>.log``.

    The handler is attached for the duration of the block and always
    removed and closed afterwards.

    Yields:
        Path of the statement log, or None if disabled
    """
    if not enabled:
        yield None
        return

    path = os.path.join(directory or os.getcwd(), LoggingConfig.STATEMENT_LOG_TEMPLATE.format(acronym=acronym))
    handler = _create_file_handler(path)
    handler.setFormatter(logging.Formatter('%(message)s'))
    previous_level = statement_logger.level
    previous_propagate = statement_logger.propagate
    statement_logger.setLevel(logging.INFO)
    statement_logger.propagate = False
    statement_logger.addHandler(handler)
    logger.info(f"Writing statements to: {path}")
    try:
        yield path
    finally:
        statement_logger.removeHandler(handler)
        statement_logger.setLevel(previous_level)
        statement_logger.propagate = previous_propagate
        handler.close()


def _read_json(path: str) -> Any:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except FileNotFoundError:
        raise ManifestError(f"Batch manifest not found: {path}", path)
    except json.JSONDecodeError as e:
        raise ManifestError(
            f"Invalid JSON in batch manifest {path} at line {e.lineno}, column {e.colno}: {e.msg}", path
        )
    except UnicodeDecodeError as e:
        raise ManifestError(f"File encoding error in {path}: {e}", path)
    except PermissionError:
        raise ManifestError(f"Permission denied reading {path}", path)


def load_batch_manifest(path: str, **overrides) -> Tuple[Optional[str], List[ImportConfig]]:
    """
    Load a batch manifest.

    The manifest is ``{"server": URL?, "ontologies": [{"o", "n", "a", "i"?, "eqp"?}]}``
    or just the array of ontology entries, in which case no server is set.
    Ontology paths are resolved relative to the manifest's directory.

    Args:
        path: Path to the JSON manifest
        **overrides: ImportConfig fields applied to every entry

    Returns:
        Tuple of (server URL or None, import configurations)

    Raises:
        ManifestError: If the manifest is missing or malformed
    """
    if Path(path).suffix.lower() not in FileExtensions.MANIFEST_EXTENSIONS:
        logger.warning(f"Batch manifest {path} does not have a .json extension")

    data = _read_json(path)
    if isinstance(data, list):
        data = {'ontologies': data}
    if not isinstance(data, dict):
        raise ManifestError(
            f"Batch manifest must contain a JSON object or array, got {type(data).__name__}", path
        )

    entries = data.get('ontologies')
    if not isinstance(entries, list) or not entries:
        raise ManifestError("Batch manifest needs a non-empty 'ontologies' list", path)

    server = data.get('server')
    if server is not None and not isinstance(server, str):
        raise ManifestError("'server' must be a URL string", path)

    base_dir = Path(path).resolve().parent
    configs = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ManifestError(f"Ontology entry {index} must be a JSON object", path)
        try:
            config = ImportConfig.from_dict(entry, **overrides)
        except (TypeError, ValueError) as e:
            raise ManifestError(f"Ontology entry {index}: {e}", path)
        configs.append(replace(config, path=str(base_dir / config.path)))

    logger.info(f"Loaded {len(configs)} ontologies from batch manifest {path}")
    return server, configs


def print_header(title: str, width: int = 60) -> None:
    """Print a formatted header with the given title."""
    print("\n" + "=" * width)
    print(title)
    print("=" * width)


def print_footer(width: int = 60) -> None:
    print("=" * width + "\n")
