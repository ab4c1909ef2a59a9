"""
OWL Document Loader

Parses an ontology document with rdflib and resolves its ``owl:imports``
closure. Imports are looked up in the document's directory first (every
ontology document there is indexed by the IRI it declares) and fetched from
their IRI otherwise, unless local lookup is disabled.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Set

from rdflib import Graph, OWL, RDF, RDFS, Literal, URIRef
from rdflib.util import guess_format

from constants import FileExtensions
from core.memory import MemoryManager
from core.validators import InputValidator
from .expressions import named_classes, parse_class_expression

logger = logging.getLogger(__name__)

_CLASS_AXIOM_PREDICATES = (RDFS.subClassOf, OWL.equivalentClass, OWL.disjointWith)
_BUILTIN_CLASSES = {str(OWL.Thing), str(OWL.Nothing)}


class OntologyLoadError(Exception):
    """Raised when an ontology document or one of its imports cannot be loaded."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.message = message
        self.source = source
        super().__init__(message)


@dataclass
class Label:
    """An ``rdfs:label`` value with its optional language tag."""
    text: str
    lang: Optional[str] = None


@dataclass
class ImportedOntology:
    """One member of the import closure."""
    iri: str
    graph: Graph
    source: str


@dataclass
class OntologyDocument:
    """A loaded ontology together with its import closure."""
    path: Path
    iri: str
    version_iri: Optional[str]
    graph: Graph
    imports: List[ImportedOntology] = field(default_factory=list)
    _closure: Optional[Graph] = field(default=None, init=False, repr=False)

    @property
    def namespace(self) -> str:
        """Namespace that ``#`` fragments of the ontology's own terms share."""
        return self.iri.rstrip('#')

    def graphs(self, include_closure: bool = True) -> Iterator[Graph]:
        """The root graph followed by the imported graphs in load order."""
        yield self.graph
        if include_closure:
            for imported in self.imports:
                yield imported.graph

    @property
    def closure(self) -> Graph:
        """Union of the root document and all imported documents."""
        if self._closure is None:
            if not self.imports:
                self._closure = self.graph
            else:
                merged = Graph()
                for graph in self.graphs():
                    merged += graph
                self._closure = merged
        return self._closure

    def class_signature(self, include_closure: bool = False) -> List[str]:
        """
        Named classes referenced by class axioms or declarations.

        ``owl:Thing`` and ``owl:Nothing`` are never part of the signature.

        Args:
            include_closure: Also collect classes of imported ontologies

        Returns:
            Sorted list of class IRIs
        """
        graph = self.closure if include_closure else self.graph
        classes: Set[str] = set()

        for class_type in (OWL.Class, RDFS.Class):
            for subject in graph.subjects(RDF.type, class_type):
                if isinstance(subject, URIRef):
                    classes.add(str(subject))

        for predicate in _CLASS_AXIOM_PREDICATES:
            for subject, obj in graph.subject_objects(predicate):
                for node in (subject, obj):
                    classes |= named_classes(parse_class_expression(graph, node))

        return sorted(classes - _BUILTIN_CLASSES)

    def get_label(self, class_uri: str) -> Optional[Label]:
        """
        Resolve the label of a class.

        The root document wins; otherwise the first imported ontology with a
        non-blank label is used. Among several labels in one document the
        choice is made by sorting on (language, text).
        """
        for graph in self.graphs():
            label = _label_in(graph, URIRef(class_uri))
            if label is not None:
                return label
        return None


def _label_in(graph: Graph, subject: URIRef) -> Optional[Label]:
    candidates = [
        value for value in graph.objects(subject, RDFS.label)
        if isinstance(value, Literal) and str(value).strip()
    ]
    if not candidates:
        return None
    chosen = sorted(candidates, key=lambda lit: (lit.language or '', str(lit)))[0]
    return Label(text=str(chosen), lang=chosen.language or None)


def _guess_format(source: str) -> str:
    # rdflib maps .owl to RDF/XML; anything unknown is tried as RDF/XML too.
    return guess_format(source) or 'xml'


def _parse_graph(source: str, fmt: Optional[str] = None) -> Graph:
    graph = Graph()
    graph.parse(source, format=fmt)
    return graph


def _ontology_iri(graph: Graph) -> Optional[URIRef]:
    subjects = sorted(
        (subject for subject in graph.subjects(RDF.type, OWL.Ontology) if isinstance(subject, URIRef)),
        key=str,
    )
    return subjects[0] if subjects else None


class LocalIRIMapper:
    """
    Map ontology IRIs to documents in a directory.

    Every file with a known ontology extension is parsed once, lazily, and
    indexed by the ontology IRI it declares.
    """

    def __init__(self, directory: Path, exclude: Optional[Path] = None):
        self.directory = directory
        self.exclude = exclude
        self._index: Optional[Dict[str, Path]] = None

    def _build_index(self) -> Dict[str, Path]:
        index: Dict[str, Path] = {}
        for candidate in sorted(self.directory.iterdir()):
            if not candidate.is_file() or candidate.suffix.lower() not in FileExtensions.OWL_EXTENSIONS:
                continue
            if self.exclude is not None and candidate.resolve() == self.exclude:
                continue
            try:
                graph = _parse_graph(str(candidate), _guess_format(str(candidate)))
            except Exception as e:
                logger.debug(f"Skipping {candidate} while indexing local ontologies: {e}")
                continue
            iri = _ontology_iri(graph)
            if iri is not None:
                index.setdefault(str(iri), candidate)
        logger.debug(f"Indexed {len(index)} local ontology documents in {self.directory}")
        return index

    def resolve(self, iri: str) -> Optional[Path]:
        if self._index is None:
            self._index = self._build_index()
        return self._index.get(iri)


def _load_imports(
    root_graph: Graph,
    root_iri: str,
    mapper: Optional[LocalIRIMapper],
) -> List[ImportedOntology]:
    loaded: List[ImportedOntology] = []
    seen = {root_iri}

    def _visit(graph: Graph, iri: str) -> None:
        for imported in sorted(graph.objects(URIRef(iri), OWL.imports), key=str):
            imported_iri = str(imported)
            if imported_iri in seen:
                continue
            seen.add(imported_iri)

            local_path = mapper.resolve(imported_iri) if mapper else None
            source = str(local_path) if local_path else imported_iri
            fmt = _guess_format(source) if local_path else None
            logger.info(f"Loading import {imported_iri} from {source}")
            try:
                imported_graph = _parse_graph(source, fmt)
            except Exception as e:
                raise OntologyLoadError(f"Could not load imported ontology {imported_iri}: {e}", source) from e

            loaded.append(ImportedOntology(iri=imported_iri, graph=imported_graph, source=source))
            _visit(imported_graph, str(_ontology_iri(imported_graph) or imported_iri))

    _visit(root_graph, root_iri)
    return loaded


def load_ontology(path: str, no_local: bool = False, force_memory: bool = False) -> OntologyDocument:
    """
    Load an ontology document and its import closure.

    Args:
        path: Path to the OWL document
        no_local: Don't look for imported ontologies next to the document
        force_memory: Parse even if the memory pre-flight check fails

    Returns:
        The loaded OntologyDocument

    Raises:
        FileNotFoundError: If the document doesn't exist
        PermissionError: If the document is not readable
        OntologyLoadError: If the document or an import cannot be parsed,
            or the ontology has no IRI
    """
    try:
        validated_path = InputValidator.validate_file_path(path)
    except ValueError as e:
        raise OntologyLoadError(str(e), str(path)) from e

    file_size_mb = validated_path.stat().st_size / (1024 * 1024)
    can_proceed, message = MemoryManager.check_memory_available(file_size_mb, force=force_memory)
    if not can_proceed:
        raise OntologyLoadError(message, str(validated_path))
    logger.debug(message)

    try:
        graph = _parse_graph(str(validated_path), _guess_format(str(validated_path)))
    except Exception as e:
        raise OntologyLoadError(f"Invalid ontology document {validated_path}: {e}", str(validated_path)) from e

    logger.info(f"Parsed {len(graph)} triples from {validated_path}")

    ontology_iri = _ontology_iri(graph)
    if ontology_iri is None:
        raise OntologyLoadError("Ontology doesn't have a URI.", str(validated_path))

    version = graph.value(ontology_iri, OWL.versionIRI)

    mapper = None if no_local else LocalIRIMapper(validated_path.parent, exclude=validated_path)
    imports = _load_imports(graph, str(ontology_iri), mapper)

    document = OntologyDocument(
        path=validated_path,
        iri=str(ontology_iri),
        version_iri=str(version) if version is not None else None,
        graph=graph,
        imports=imports,
    )

    logger.debug(f"Document path: {document.path}")
    logger.debug(f"Ontology IRI: {document.iri}")
    logger.debug(f"Version IRI: {document.version_iri}")
    MemoryManager.log_memory_status("after load")

    return document
