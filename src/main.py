#!/usr/bin/env python3
"""
OWL to Graph Importer

This is the main entry point for importing OWL ontologies into a graph store.

Usage:
    python main.py -o <owl_file> -n <name> -a <acronym> [-s <url>] [-u <user>] [-p <password>]
    python main.py -b <manifest.json> [-s <url>] [-u <user>] [-p <password>]
"""

import sys
from typing import List, Optional

from cli.commands import BatchImportCommand, ImportCommand
from cli.parsers import create_argument_parser, validate_arguments


def main(argv: Optional[List[str]] = None) -> int:
    """Parse the command line and run the matching command."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)
    validate_arguments(parser, args)

    command = BatchImportCommand() if args.batch else ImportCommand()
    return int(command.execute(args))


if __name__ == "__main__":
    sys.exit(main())
