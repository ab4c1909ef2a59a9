"""
Memory pre-flight checks for ontology parsing.

rdflib keeps the whole document (and its import closure) in memory, so large
OWL files are checked against available system memory before parsing starts.
"""

import logging
from typing import Tuple

import psutil

from constants import MemoryLimits

logger = logging.getLogger(__name__)


class MemoryManager:
    """Estimate whether an ontology document can be parsed safely."""

    @staticmethod
    def get_available_memory_mb() -> float:
        """Available system memory in MB."""
        return psutil.virtual_memory().available / (1024 * 1024)

    @staticmethod
    def get_memory_usage_mb() -> float:
        """Resident memory of the current process in MB."""
        return psutil.Process().memory_info().rss / (1024 * 1024)

    @classmethod
    def check_memory_available(cls, file_size_mb: float, force: bool = False) -> Tuple[bool, str]:
        """
        Check if enough memory is available to parse a file.

        Args:
            file_size_mb: Size of the file in MB.
            force: If True, only warn instead of refusing.

        Returns:
            Tuple of (can_proceed, message)
        """
        estimated_usage_mb = file_size_mb * MemoryLimits.MEMORY_MULTIPLIER

        if not force and file_size_mb > MemoryLimits.MAX_SAFE_FILE_MB:
            return False, (
                f"File size ({file_size_mb:.1f}MB) exceeds safe limit ({MemoryLimits.MAX_SAFE_FILE_MB}MB). "
                f"Estimated memory required: ~{estimated_usage_mb:.0f}MB. "
                f"Use --force-memory to parse it anyway."
            )

        available_mb = cls.get_available_memory_mb()
        if available_mb < MemoryLimits.MIN_AVAILABLE_MEMORY_MB and not force:
            return False, (
                f"Insufficient free memory. Available: {available_mb:.0f}MB, "
                f"minimum required: {MemoryLimits.MIN_AVAILABLE_MEMORY_MB}MB."
            )

        safe_threshold_mb = available_mb * MemoryLimits.LOAD_FACTOR
        if estimated_usage_mb > safe_threshold_mb:
            message = (
                f"Ontology may be too large for available memory. "
                f"File size: {file_size_mb:.1f}MB, estimated parsing memory: ~{estimated_usage_mb:.0f}MB, "
                f"safe threshold: {safe_threshold_mb:.0f}MB."
            )
            if force:
                return True, f"WARNING: {message} Proceeding due to --force-memory."
            return False, message

        return True, (
            f"Memory OK: file {file_size_mb:.1f}MB, "
            f"estimated usage ~{estimated_usage_mb:.0f}MB of {available_mb:.0f}MB available"
        )

    @classmethod
    def log_memory_status(cls, context: str = "") -> None:
        """Log current memory status at DEBUG level."""
        prefix = f"[{context}] " if context else ""
        logger.debug(
            f"{prefix}Memory status: process using {cls.get_memory_usage_mb():.0f}MB, "
            f"system available: {cls.get_available_memory_mb():.0f}MB"
        )
