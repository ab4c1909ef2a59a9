"""
OWL to Graph Importer

Drives one ontology import end to end:

    load -> classify -> consistency check -> begin transaction ->
    ontology node -> root class -> per-class mutations -> commit

Every mutation is sent as soon as the builder produces it. Any failure
raises; nothing is retried and already sent statements are left to the
store's uncommitted transaction.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, Iterable, Optional

from tqdm import tqdm

from constants import ProcessingLimits
from core.graph_client import GraphStoreClient
from core.transaction import Transaction
from formats.owl.loader import OntologyDocument, load_ontology
from formats.owl.reasoner import InconsistentOntologyError, ReasonerAdapter, StructuralReasoner
from graph.builder import GraphMutationBuilder
from graph.mutations import GraphMutation

logger = logging.getLogger(__name__)

ReasonerFactory = Callable[[OntologyDocument], ReasonerAdapter]


def format_duration(seconds: float) -> str:
    """Format a duration as ``N min and M sec``."""
    minutes, secs = divmod(int(round(seconds)), 60)
    return f"{minutes} min and {secs} sec"


def _as_list(value: Any) -> list:
    if isinstance(value, str):
        return [value]
    return list(value or ())


def structural_reasoner(document: OntologyDocument) -> ReasonerAdapter:
    return StructuralReasoner(document.closure)


@dataclass(frozen=True)
class ImportConfig:
    """
    Configuration of one ontology import.

    Attributes:
        path: Path to the OWL document
        name: Display name of the ontology node
        acronym: ID space and label of all nodes; stored upper-cased
        include_closure: Also import the classes of imported ontologies
        existential_properties: Object property IRIs whose existential
            restrictions become relationships
        no_local: Don't resolve imports from the document's directory
        force_memory: Parse even if the memory check fails
    """
    path: str
    name: str
    acronym: str
    include_closure: bool = False
    existential_properties: FrozenSet[str] = frozenset()
    no_local: bool = False
    force_memory: bool = False

    def __post_init__(self):
        if not self.path:
            raise ValueError("An ontology path is required")
        if not self.name:
            raise ValueError("An ontology name is required")
        if not self.acronym or not self.acronym.strip():
            raise ValueError("An ontology acronym is required")
        object.__setattr__(self, 'acronym', self.acronym.strip().upper())
        object.__setattr__(self, 'existential_properties', frozenset(self.existential_properties))

    @classmethod
    def from_dict(cls, entry: Dict[str, Any], **overrides) -> 'ImportConfig':
        """
        Create ImportConfig from a manifest entry.

        Accepts the short keys ``o``, ``n``, ``a``, ``i`` and ``eqp`` as well
        as ``path``, ``name``, ``acronym`` and ``includeClosure``.
        """
        include_closure = entry.get('i', entry.get('includeClosure', False))
        if not isinstance(include_closure, bool):
            raise TypeError(f"'i' must be true or false, got {include_closure!r}")

        values = dict(
            path=entry.get('o', entry.get('path', '')),
            name=entry.get('n', entry.get('name', '')),
            acronym=entry.get('a', entry.get('acronym', '')),
            include_closure=include_closure,
            existential_properties=frozenset(_as_list(entry.get('eqp', ()))),
        )
        values.update(overrides)
        return cls(**values)


@dataclass
class ImportStats:
    """Counters and timings of one ontology import."""
    acronym: str
    classes_seen: int = 0
    classes_imported: int = 0
    unsatisfiable_skipped: int = 0
    statements_sent: int = 0
    load_seconds: float = 0.0
    import_seconds: float = 0.0

    def get_summary(self) -> str:
        """Generate human-readable summary."""
        lines = [
            f"Import Summary ({self.acronym}):",
            f"  Classes: {self.classes_imported}/{self.classes_seen} imported",
            f"  Unsatisfiable (skipped): {self.unsatisfiable_skipped}",
            f"  Statements sent: {self.statements_sent:,}",
            f"  Loading took {format_duration(self.load_seconds)}",
            f"  Import took {format_duration(self.import_seconds)}",
        ]
        return "\n".join(lines)


class OntologyImporter:
    """
    Import one ontology into the graph store.

    Args:
        client: Shared graph store client
        config: What to import and how
        reasoner_factory: Builds the reasoner for a loaded document
        show_progress: Show a progress bar over the classes
    """

    def __init__(
        self,
        client: GraphStoreClient,
        config: ImportConfig,
        reasoner_factory: ReasonerFactory = structural_reasoner,
        show_progress: bool = True,
    ):
        self.client = client
        self.config = config
        self.reasoner_factory = reasoner_factory
        self.show_progress = show_progress

    def load(self) -> OntologyDocument:
        return load_ontology(
            self.config.path,
            no_local=self.config.no_local,
            force_memory=self.config.force_memory,
        )

    def classify(self, document: OntologyDocument) -> ReasonerAdapter:
        """Classify the document and refuse inconsistent ontologies."""
        reasoner = self.reasoner_factory(document)
        reasoner.classify()
        if not reasoner.is_consistent():
            raise InconsistentOntologyError(document.iri, getattr(reasoner, 'inconsistency_reason', ''))
        return reasoner

    @staticmethod
    def _send_all(transaction: Transaction, mutations: Iterable[GraphMutation]) -> None:
        for mutation in mutations:
            transaction.send(mutation)

    def run(self, document: Optional[OntologyDocument] = None) -> ImportStats:
        """
        Run the import.

        Args:
            document: Already loaded document; loaded from the config if None

        Returns:
            ImportStats of the committed import

        Raises:
            OntologyLoadError: If the ontology cannot be loaded
            InconsistentOntologyError: If the ontology is inconsistent
            GraphStoreAPIError: If the store reports an error
        """
        config = self.config
        stats = ImportStats(acronym=config.acronym)

        start = time.monotonic()
        if document is None:
            document = self.load()
        reasoner = self.classify(document)
        stats.load_seconds = time.monotonic() - start
        logger.info(f"Loading took {format_duration(stats.load_seconds)}")

        builder = GraphMutationBuilder(
            reasoner, document, config.acronym, config.existential_properties
        )
        classes = document.class_signature(include_closure=config.include_closure)
        logger.info(f"Importing {len(classes)} classes of {document.iri} as {config.acronym}")

        start = time.monotonic()
        transaction = Transaction(self.client)
        transaction.begin()

        self._send_all(transaction, builder.ontology_mutations(config.name))
        self._send_all(transaction, builder.root_mutations())

        progress = tqdm(
            classes,
            desc=f"Importing {config.acronym}",
            unit="class",
            disable=not self.show_progress or len(classes) < ProcessingLimits.PROGRESS_MIN_CLASSES,
        )
        try:
            for class_uri in progress:
                stats.classes_seen += 1
                if not reasoner.is_satisfiable(class_uri):
                    stats.unsatisfiable_skipped += 1
                    logger.debug(f"Unsatisfiable class excluded: {class_uri}")
                    continue
                self._send_all(transaction, builder.class_mutations(class_uri))
                stats.classes_imported += 1
        finally:
            progress.close()
            stats.statements_sent = transaction.statements_sent

        transaction.commit()
        stats.import_seconds = time.monotonic() - start
        logger.info(f"Import took {format_duration(stats.import_seconds)}")

        return stats
