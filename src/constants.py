"""
Centralized configuration constants for the OWL to graph importer.

This module provides a single source of truth for all configuration constants,
default values, and limits used throughout the application.
"""

from enum import IntEnum
from typing import Final

__version__ = "0.6.0"


# ============================================================================
# Exit Codes
# ============================================================================

class ExitCode(IntEnum):
    """Standard exit codes for CLI commands.

    Following Unix conventions:
    - 0: Success
    - 1: General error
    - 2: Validation/syntax error
    - 3+: Specific error categories
    """
    SUCCESS = 0
    ERROR = 1
    VALIDATION_ERROR = 2
    CONFIG_ERROR = 3
    API_ERROR = 4
    FILE_NOT_FOUND = 5
    PERMISSION_DENIED = 6
    CANCELLED = 7


# ============================================================================
# Graph Schema
# ============================================================================

class GraphSchema:
    """Node labels, relationship types and the synthetic root class."""

    CLASS_LABEL: Final[str] = "Class"
    """Label shared by every class node."""

    ONTOLOGY_LABEL: Final[str] = "Ontology"
    """Label of the ontology metadata node."""

    ROOT_ONTOLOGY: Final[str] = "OWL"
    ROOT_CLASS: Final[str] = "Thing"
    ROOT_CLASS_ONT_ID: Final[str] = ROOT_ONTOLOGY + ":" + ROOT_CLASS
    ROOT_CLASS_URI: Final[str] = "http://www.w3.org/2002/07/owl#" + ROOT_CLASS

    SUBCLASS_OF: Final[str] = "RDFS:subClassOf"
    EQUIVALENT_CLASS: Final[str] = "OWL:equivalentClass"

    NAME_KEY: Final[str] = "name"
    LABEL_KEY: Final[str] = "rdfs:label"
    LABEL_LANG_KEY: Final[str] = "labelLang"


# ============================================================================
# Graph Store Defaults
# ============================================================================

class StoreDefaults:
    """Neo4j transactional HTTP endpoint defaults."""

    SERVER_URL: Final[str] = "http://localhost:7474"
    """Server root URL used when none is configured."""

    REST_ENDPOINT: Final[str] = "/db/data"
    """REST root, also used for the credential check."""

    TRANSACTION_ENDPOINT: Final[str] = "/transaction"
    """Transaction resource, relative to the REST root."""

    TIMEOUT_SECONDS: Final[int] = 30
    """HTTP request timeout."""

    HEADERS: Final[dict] = {
        "Content-Type": "application/json",
        "Accept": "application/json; charset=UTF-8",
        "X-Stream": "true",
    }


# ============================================================================
# Processing Limits
# ============================================================================

class ProcessingLimits:
    """Processing and traversal limits."""

    MAX_EXPRESSION_DEPTH: Final[int] = 32
    """Maximum nesting depth when parsing class expressions."""

    PROGRESS_MIN_CLASSES: Final[int] = 10
    """Progress bars are hidden for signatures smaller than this."""


# ============================================================================
# Memory Management
# ============================================================================

class MemoryLimits:
    """Memory management constants."""

    MAX_SAFE_FILE_MB: Final[int] = 500
    """Default maximum file size without explicit override (MB)."""

    MEMORY_MULTIPLIER: Final[float] = 3.5
    """RDFlib typically uses ~3-4x file size in memory."""

    MIN_AVAILABLE_MEMORY_MB: Final[int] = 256
    """Minimum available memory required before parsing (MB)."""

    LOAD_FACTOR: Final[float] = 0.7
    """Share of available memory considered safe to use."""


# ============================================================================
# File Extensions
# ============================================================================

class FileExtensions:
    """Supported file extensions."""

    OWL_EXTENSIONS: Final[tuple] = ('.owl', '.rdf', '.xml', '.ttl', '.turtle', '.n3', '.nt', '.jsonld', '.owx')
    """Ontology document extensions scanned by the local IRI mapper."""

    MANIFEST_EXTENSIONS: Final[tuple] = ('.json',)
    """Valid batch manifest extensions."""


# ============================================================================
# Logging
# ============================================================================

class LoggingConfig:
    """Logging configuration constants."""

    DEFAULT_LOG_LEVEL: Final[str] = "INFO"
    LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

    STATEMENT_LOG_TEMPLATE: Final[str] = "Cypher log for {acronym}.log"
    """File name of the per-ontology statement log written in verbose mode."""

    MAX_LOG_FILE_MB: Final[int] = 10
    LOG_BACKUP_COUNT: Final[int] = 5
