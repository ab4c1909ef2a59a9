"""
Tests for URI to ontology ID normalization.

Run with:
    pytest tests/owl/test_normalizer.py -v
"""

import pytest

from formats.owl.normalizer import extract_uri, normalize_id


@pytest.mark.unit
class TestNormalizeId:
    """Worked examples and edge cases of normalize_id."""

    def test_hash_fragment_in_own_namespace_uses_acronym(self):
        assert normalize_id("http://x.org/a/b#Foo", "TEST", "http://x.org/a/b") == "TEST:Foo"

    def test_acronym_is_upper_cased(self):
        assert normalize_id("http://x.org/a/b#Foo", "test", "http://x.org/a/b") == "TEST:Foo"

    def test_obo_style_uri(self):
        assert normalize_id("http://purl.obolibrary.org/obo/GO_0008150", "GO", None) == "GO:0008150"

    def test_obo_id_space_ignores_acronym(self):
        assert normalize_id("http://purl.obolibrary.org/obo/BFO_0000050", "GO", "http://purl.obolibrary.org/obo/go.owl") == "BFO:0000050"

    def test_bare_fragment_without_hash_or_underscore(self):
        assert normalize_id("http://x.org/a/b", "TEST", None) == "b"

    def test_foreign_namespace_has_no_id_space(self):
        assert normalize_id("http://other.org/onto#Foo", "TEST", "http://x.org/a/b") == "Foo"

    def test_foreign_hash_fragment_with_underscore(self):
        assert normalize_id("http://other.org/onto#CL_0000000", "TEST", "http://x.org/a/b") == "CL:0000000"

    def test_underscore_after_own_hash_keeps_acronym(self):
        # The acronym wins, but the local ID still drops the underscore prefix.
        assert normalize_id("http://x.org/a/b#part_of", "TEST", "http://x.org/a/b") == "TEST:of"

    def test_trailing_slash_backs_up_one_segment(self):
        assert normalize_id("http://x.org/terms/Foo/", "TEST", None) == "Foo"

    def test_trailing_hash_is_kept(self):
        assert normalize_id("http://x.org/a/b#", "TEST", "http://x.org/a/b") == "b#"

    def test_trailing_underscore_is_kept(self):
        assert normalize_id("http://x.org/a/Foo_", "TEST", None) == "Foo_"

    def test_deterministic(self):
        uri = "http://www.co-ode.org/ontologies/pizza/pizza.owl#Margherita"
        namespace = "http://www.co-ode.org/ontologies/pizza/pizza.owl"
        results = {normalize_id(uri, "PIZZA", namespace) for _ in range(5)}
        assert results == {"PIZZA:Margherita"}


@pytest.mark.unit
class TestExtractUri:

    def test_strips_angle_brackets(self):
        assert extract_uri("<http://x.org/A>") == "http://x.org/A"

    def test_rendered_expression(self):
        assert extract_uri("Class(<http://x.org/A>)") == "http://x.org/A"

    def test_plain_text_unchanged(self):
        assert extract_uri("http://x.org/A") == "http://x.org/A"

    def test_unbalanced_brackets_unchanged(self):
        assert extract_uri(">http://x.org/A<") == ">http://x.org/A<"
