"""
Input validation for ontology documents.

Source files are validated before any parsing happens so that a bad path is
reported as a source error and never reaches the graph store.
"""

import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class InputValidator:
    """Validate user supplied file paths."""

    @staticmethod
    def _check_symlink(path_obj: Path) -> None:
        """Warn about symlinked inputs; they are followed but reported."""
        try:
            if path_obj.is_symlink():
                logger.warning(f"Input path is a symlink: {path_obj} -> {path_obj.resolve()}")
        except OSError:
            logger.debug(f"Cannot verify symlink status for: {path_obj}")

    @classmethod
    def validate_file_path(
        cls,
        path: Any,
        check_readable: bool = True,
    ) -> Path:
        """
        Validate that ``path`` names an existing, readable file.

        Args:
            path: Path to validate (non-empty string or Path)
            check_readable: Whether to verify the file is readable

        Returns:
            Validated Path object (resolved to absolute path)

        Raises:
            TypeError: If path is not a string or Path
            ValueError: If path is empty or not a file
            FileNotFoundError: If the file doesn't exist
            PermissionError: If the file is not readable
        """
        if isinstance(path, Path):
            path = str(path)
        if not isinstance(path, str):
            raise TypeError(f"File path must be string, got {type(path).__name__}")

        if not path.strip():
            raise ValueError("File path cannot be empty")

        path_obj = Path(path.strip())
        cls._check_symlink(path_obj)
        path_obj = path_obj.resolve()

        if not path_obj.exists():
            raise FileNotFoundError(f"File not found: {path_obj}")

        if not path_obj.is_file():
            raise ValueError(f"Path is not a file: {path_obj}")

        if check_readable and not os.access(path_obj, os.R_OK):
            raise PermissionError(f"File is not readable: {path_obj}")

        return path_obj
