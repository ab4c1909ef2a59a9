"""
Base command class.

Commands resolve the graph store configuration from the command line,
run imports and translate every failure into an ``ExitCode``. They never
exit the process themselves.
"""

import argparse
import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

from constants import ExitCode
from core.graph_client import GraphStoreAPIError, GraphStoreClient, GraphStoreConfig
from core.transaction import TransactionStateError
from formats.owl.loader import OntologyLoadError
from formats.owl.reasoner import InconsistentOntologyError
from importer import ImportConfig, ImportStats, OntologyImporter
from ..helpers import ManifestError, print_footer, print_header, setup_logging, statement_log

logger = logging.getLogger(__name__)

ImporterFactory = Callable[..., OntologyImporter]


class BaseCommand(ABC):
    """
    Base class for CLI commands.

    Args:
        client: Optional graph store client (for dependency injection)
        importer_factory: Builds the importer for one ontology
    """

    def __init__(
        self,
        client: Optional[GraphStoreClient] = None,
        importer_factory: ImporterFactory = OntologyImporter,
    ):
        self._client = client
        self.importer_factory = importer_factory

    def setup_logging_from_args(self, args: argparse.Namespace) -> None:
        level = "DEBUG" if getattr(args, 'verbose', False) else "INFO"
        setup_logging(level, getattr(args, 'log_file', None))

    def get_store_config(self, args: argparse.Namespace, server_override: Optional[str] = None) -> GraphStoreConfig:
        """Connection settings: config file, then command line, then manifest server."""
        config_path = getattr(args, 'config', None)
        config = GraphStoreConfig.from_file(config_path) if config_path else GraphStoreConfig()

        if getattr(args, 'server', None):
            config.server_url = args.server
        if server_override:
            config.server_url = server_override
        if getattr(args, 'user', None) is not None:
            config.user = args.user
        if getattr(args, 'password', None) is not None:
            config.password = args.password
        return config

    def get_client(self, config: GraphStoreConfig) -> GraphStoreClient:
        if self._client is None:
            self._client = GraphStoreClient(config)
        return self._client

    def run_import(self, client: GraphStoreClient, config: ImportConfig, verbose: bool = False) -> ImportStats:
        """Import one ontology, with the statement log in verbose mode."""
        print_header(f"Importing {config.name} ({config.acronym})")
        with statement_log(config.acronym, enabled=verbose):
            importer = self.importer_factory(client, config, show_progress=verbose)
            stats = importer.run()
        print(stats.get_summary())
        print_footer()
        return stats

    @staticmethod
    def handle_error(error: BaseException) -> int:
        """Log and print an error; return the matching exit code."""
        if isinstance(error, KeyboardInterrupt):
            print("\nImport cancelled")
            return ExitCode.CANCELLED

        if isinstance(error, GraphStoreAPIError):
            logger.error(f"Graph store error: {error}")
            print(f"Error: {error}")
            return ExitCode.API_ERROR

        if isinstance(error, InconsistentOntologyError):
            logger.error(str(error))
            print(f"Error: {error}")
            return ExitCode.VALIDATION_ERROR

        if isinstance(error, OntologyLoadError):
            logger.error(f"Could not load ontology: {error.message}")
            print(f"Error: {error.message}")
            return ExitCode.VALIDATION_ERROR

        if isinstance(error, FileNotFoundError):
            logger.error(str(error))
            print(f"Error: {error}")
            return ExitCode.FILE_NOT_FOUND

        if isinstance(error, PermissionError):
            logger.error(str(error))
            print(f"Error: {error}")
            return ExitCode.PERMISSION_DENIED

        if isinstance(error, (ManifestError, ValueError, TypeError)):
            logger.error(f"Configuration error: {error}")
            print(f"Error: {error}")
            return ExitCode.CONFIG_ERROR

        if isinstance(error, TransactionStateError):
            logger.error(f"Transaction error: {error}")
            print(f"Error: {error}")
            return ExitCode.ERROR

        logger.exception(f"Unexpected error: {error}")
        print(f"Error: {error}")
        return ExitCode.ERROR

    @abstractmethod
    def execute(self, args: argparse.Namespace) -> int:
        """
        Execute the command.

        Args:
            args: Parsed command-line arguments.

        Returns:
            Exit code (0 for success, non-zero for error).
        """
        pass
