"""
Import commands.

- ImportCommand: import one ontology given on the command line
- BatchImportCommand: import every ontology listed in a JSON manifest
"""

import argparse
import logging

from constants import ExitCode
from importer import ImportConfig
from .base import BaseCommand
from ..helpers import load_batch_manifest
from ..parsers import existential_properties

logger = logging.getLogger(__name__)


class ImportCommand(BaseCommand):
    """Import a single ontology."""

    def execute(self, args: argparse.Namespace) -> int:
        self.setup_logging_from_args(args)

        try:
            import_config = ImportConfig(
                path=args.owl,
                name=args.name,
                acronym=args.abbreviation,
                include_closure=args.incl_imports,
                existential_properties=existential_properties(args),
                no_local=args.no_local,
                force_memory=args.force_memory,
            )
            store_config = self.get_store_config(args)

            with self.get_client(store_config) as client:
                client.check_server()
                self.run_import(client, import_config, verbose=args.verbose)

        except (Exception, KeyboardInterrupt) as e:
            return self.handle_error(e)

        return ExitCode.SUCCESS


class BatchImportCommand(BaseCommand):
    """Import all ontologies of a batch manifest, one transaction each."""

    def execute(self, args: argparse.Namespace) -> int:
        self.setup_logging_from_args(args)

        try:
            server, configs = load_batch_manifest(
                args.batch,
                no_local=args.no_local,
                force_memory=args.force_memory,
            )
            store_config = self.get_store_config(args, server_override=server)

            with self.get_client(store_config) as client:
                client.check_server()
                for index, import_config in enumerate(configs, 1):
                    logger.info(f"[{index}/{len(configs)}] {import_config.path}")
                    self.run_import(client, import_config, verbose=args.verbose)

        except (Exception, KeyboardInterrupt) as e:
            return self.handle_error(e)

        print(f"Imported {len(configs)} ontologies")
        return ExitCode.SUCCESS
