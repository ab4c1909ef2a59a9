"""
CLI argument parser configuration.

This module defines the argument parser for the importer. Single imports
take the ontology options; batch imports take a manifest instead.
"""

import argparse

from constants import StoreDefaults, __version__


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the main argument parser.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog='owl2graph',
        description="Import classified OWL ontologies into a graph database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s -o pizza.owl -n "Pizza Ontology" -a pizza -u neo4j -p secret
    %(prog)s -o pizza.owl -n Pizza -a pizza --eqp http://www.co-ode.org/ontologies/pizza/pizza.owl#hasTopping
    %(prog)s -o go.owl -n "Gene Ontology" -a go -i -v
    %(prog)s -b ontologies.json -s http://localhost:7474 -u neo4j -p secret
        """,
    )
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")

    _add_ontology_arguments(parser)
    _add_connection_arguments(parser)
    _add_output_arguments(parser)

    return parser


def _add_ontology_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the options selecting what to import."""
    group = parser.add_argument_group('ontology')
    source = group.add_mutually_exclusive_group()
    source.add_argument('-o', '--owl', metavar='PATH', help='Path to OWL file')
    source.add_argument('-b', '--batch', metavar='PATH', help='Path to JSON batch manifest')
    group.add_argument('-n', '--name', help='Ontology name (E.g. Gene Ontology)')
    group.add_argument('-a', '--abbreviation', metavar='ACRONYM', help='Ontology abbreviation (E.g. go)')
    group.add_argument(
        '--eqp',
        action='append',
        nargs='+',
        metavar='IRI',
        default=[],
        help='Existential quantification property '
             '(E.g. http://www.co-ode.org/ontologies/pizza/pizza.owl#hasTopping)'
    )
    group.add_argument(
        '-i', '--incl-imports',
        action='store_true',
        help='Include import closure'
    )
    group.add_argument(
        '-l', '--no-local',
        action='store_true',
        help="Don't scan for locally available OWL files to ensure loading remote files"
    )
    group.add_argument(
        '--force-memory',
        action='store_true',
        help='Skip memory safety checks for very large files (use with caution)'
    )


def _add_connection_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the graph store connection options."""
    group = parser.add_argument_group('connection')
    group.add_argument(
        '-s', '--server',
        metavar='URL',
        help=f'Graph store server root URL [Default: {StoreDefaults.SERVER_URL}]'
    )
    group.add_argument('-u', '--user', help='Graph store user name')
    group.add_argument('-p', '--password', help='Graph store user password')
    group.add_argument('-c', '--config', help='Path to JSON configuration file with connection settings')


def _add_output_arguments(parser: argparse.ArgumentParser) -> None:
    """Add logging and verbosity options."""
    group = parser.add_argument_group('output')
    group.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output; also writes every statement to "Cypher log for <ACRONYM>.log"'
    )
    group.add_argument('--log-file', help='Write the log to this file as well')


def validate_arguments(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    """Check option combinations argparse cannot express; exits via parser.error."""
    if args.batch:
        return
    missing = [
        flag for flag, value in (('-o/--owl', args.owl), ('-n/--name', args.name), ('-a/--abbreviation', args.abbreviation))
        if not value
    ]
    if missing:
        parser.error(f"the following arguments are required: {', '.join(missing)} (or -b/--batch)")


def existential_properties(args: argparse.Namespace) -> frozenset:
    """Flatten repeated ``--eqp`` options."""
    return frozenset(iri for group in args.eqp for iri in group)
