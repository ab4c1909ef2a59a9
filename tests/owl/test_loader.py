"""
Tests for loading OWL documents and their import closure.
"""

from unittest.mock import patch

import pytest

from conftest import write_ontology
from fixtures import (
    EDGE_NS,
    IMPORT_BASE_TTL,
    NO_IRI_TTL,
    PIZZA_IRI,
    PIZZA_NS,
)
from formats.owl import loader
from formats.owl.loader import Label, LocalIRIMapper, OntologyLoadError, load_ontology

ROOT_NS = "http://example.org/root#"
BASE_NS = "http://example.org/base#"


@pytest.mark.unit
class TestLoadOntology:

    def test_ontology_metadata(self, pizza_document):
        assert pizza_document.iri == PIZZA_IRI
        assert pizza_document.version_iri == "http://www.co-ode.org/ontologies/pizza/2.0.0"
        assert pizza_document.namespace == PIZZA_IRI
        assert pizza_document.imports == []

    def test_namespace_strips_trailing_hash(self, tmp_path):
        path = write_ontology(tmp_path, "hash.ttl", """
@prefix owl: <http://www.w3.org/2002/07/owl#> .
<http://example.org/hash#> a owl:Ontology .
""")
        assert load_ontology(path).namespace == "http://example.org/hash"

    def test_missing_version(self, edge_cases_owl_file):
        assert load_ontology(edge_cases_owl_file).version_iri is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_ontology(str(tmp_path / "missing.owl"))

    def test_directory_is_rejected(self, tmp_path):
        with pytest.raises(OntologyLoadError):
            load_ontology(str(tmp_path))

    def test_ontology_without_iri(self, tmp_path):
        path = write_ontology(tmp_path, "anonymous.ttl", NO_IRI_TTL)
        with pytest.raises(OntologyLoadError, match="Ontology doesn't have a URI."):
            load_ontology(path)

    def test_malformed_document(self, tmp_path):
        path = write_ontology(tmp_path, "broken.ttl", "@prefix : <http://x.org/> .\n:A :b")
        with pytest.raises(OntologyLoadError) as exc_info:
            load_ontology(path)
        assert exc_info.value.source.endswith("broken.ttl")

    def test_memory_check_refusal(self, pizza_owl_file):
        with patch.object(loader.MemoryManager, 'check_memory_available', return_value=(False, "Too big")):
            with pytest.raises(OntologyLoadError, match="Too big"):
                load_ontology(pizza_owl_file)

    def test_force_memory_is_passed_on(self, pizza_owl_file):
        with patch.object(loader.MemoryManager, 'check_memory_available', return_value=(True, "ok")) as check:
            load_ontology(pizza_owl_file, force_memory=True)
        assert check.call_args.kwargs['force'] is True


@pytest.mark.unit
class TestClassSignature:

    def test_sorted_named_classes(self, pizza_document):
        signature = pizza_document.class_signature()
        assert signature == sorted(signature)
        assert PIZZA_NS + "Margherita" in signature
        assert PIZZA_NS + "Pie" in signature
        assert PIZZA_NS + "hasTopping" not in signature

    def test_excludes_builtin_classes(self, edge_cases_owl_file):
        signature = load_ontology(edge_cases_owl_file).class_signature()
        assert "http://www.w3.org/2002/07/owl#Thing" not in signature
        assert "http://www.w3.org/2002/07/owl#Nothing" not in signature
        assert EDGE_NS + "Everything" in signature


@pytest.mark.unit
class TestLabels:

    def test_label_with_language(self, pizza_document):
        assert pizza_document.get_label(PIZZA_NS + "Margherita") == Label("Margherita", "en")

    def test_label_without_language(self, pizza_document):
        assert pizza_document.get_label(PIZZA_NS + "MozzarellaTopping") == Label("Mozzarella", None)

    def test_no_label(self, pizza_document):
        assert pizza_document.get_label(PIZZA_NS + "Pie") is None

    def test_blank_label_is_ignored(self, edge_cases_owl_file):
        assert load_ontology(edge_cases_owl_file).get_label(EDGE_NS + "Special") is None


@pytest.mark.unit
class TestImports:

    def test_local_import_resolution(self, import_closure_dir):
        document = load_ontology(str(import_closure_dir / "root.ttl"))
        assert [imported.iri for imported in document.imports] == ["http://example.org/base"]
        assert document.imports[0].source.endswith("base.ttl")

    def test_signature_with_and_without_closure(self, import_closure_dir):
        document = load_ontology(str(import_closure_dir / "root.ttl"))
        assert BASE_NS + "Sibling" not in document.class_signature()
        assert document.class_signature(include_closure=True) == [
            BASE_NS + "Parent",
            BASE_NS + "Sibling",
            ROOT_NS + "Child",
        ]

    def test_label_from_imported_ontology(self, import_closure_dir):
        document = load_ontology(str(import_closure_dir / "root.ttl"))
        assert document.get_label(BASE_NS + "Parent") == Label("Parent class", "en")

    def test_closure_merges_graphs(self, import_closure_dir):
        document = load_ontology(str(import_closure_dir / "root.ttl"))
        assert len(document.closure) == len(document.graph) + len(document.imports[0].graph)

    def test_no_local_fetches_remote_iri(self, import_closure_dir):
        sources = []
        original = loader._parse_graph

        def _parse(source, fmt=None):
            sources.append(source)
            if source.startswith("http"):
                raise OSError("network disabled")
            return original(source, fmt)

        with patch.object(loader, '_parse_graph', side_effect=_parse):
            with pytest.raises(OntologyLoadError, match="http://example.org/base"):
                load_ontology(str(import_closure_dir / "root.ttl"), no_local=True)

        assert "http://example.org/base" in sources

    def test_mapper_indexes_by_declared_iri(self, tmp_path):
        write_ontology(tmp_path, "whatever-name.ttl", IMPORT_BASE_TTL)
        write_ontology(tmp_path, "notes.txt", "not an ontology")
        mapper = LocalIRIMapper(tmp_path)
        assert mapper.resolve("http://example.org/base") == tmp_path / "whatever-name.ttl"
        assert mapper.resolve("http://example.org/unknown") is None


@pytest.mark.security
class TestInputPaths:

    def test_symlinked_document_is_resolved(self, pizza_owl_file, tmp_path, caplog):
        link = tmp_path / "link.ttl"
        try:
            link.symlink_to(pizza_owl_file)
        except OSError:
            pytest.skip("Symlinks not supported on this platform")

        with caplog.at_level("WARNING", logger="core.validators"):
            document = load_ontology(str(link))

        assert document.iri == PIZZA_IRI
        assert document.path.name == "pizza.ttl"
        assert "symlink" in caplog.text

    def test_empty_path(self):
        with pytest.raises(OntologyLoadError, match="cannot be empty"):
            load_ontology("  ")
