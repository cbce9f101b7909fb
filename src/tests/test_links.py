"""Unit tests for wiki link extraction and the link index."""

import logging

from conftest import make_document

from sitegraph.core.links import (
    AliasCollision,
    LinkIndex,
    WikiLink,
    extract_wiki_links,
    iter_wiki_links,
    normalize_key,
)


# ============================================================
# normalize_key
# ============================================================


class TestNormalizeKey:
    def test_lowercases_and_trims(self):
        assert normalize_key("  Emotional Sovereignty ") == "emotional sovereignty"

    def test_keeps_punctuation(self):
        assert normalize_key("Don't-Panic!") == "don't-panic!"

    def test_inner_whitespace_untouched(self):
        assert normalize_key("a   b") == "a   b"


# ============================================================
# Extraction
# ============================================================


class TestExtractWikiLinks:
    def test_basic(self):
        links = extract_wiki_links("See [[HomePage]] for info.")
        assert links == [WikiLink("HomePage", None, 4)]

    def test_with_display_text(self):
        links = extract_wiki_links("[[Page|Display]]")
        assert links == [WikiLink("Page", "Display", 0)]

    def test_no_links(self):
        assert extract_wiki_links("No links here.") == []

    def test_multiple_links_in_order(self):
        links = extract_wiki_links("[[A]], [[B]], [[C]]")
        assert [link.target for link in links] == ["A", "B", "C"]
        assert [link.position for link in links] == [0, 7, 14]

    def test_target_kept_raw(self):
        links = extract_wiki_links("[[ Spaced ]]")
        assert links[0].target == " Spaced "

    def test_unterminated_is_invisible(self):
        assert extract_wiki_links("broken [[link and more") == []

    def test_stray_closing_is_invisible(self):
        assert extract_wiki_links("just ]] here") == []

    def test_empty_target_not_matched(self):
        assert extract_wiki_links("[[]] and [[|x]]") == []

    def test_bracket_in_display_not_matched(self):
        assert extract_wiki_links("[[a|b]c]]") == []

    def test_open_bracket_allowed_in_target(self):
        links = extract_wiki_links("[[open and [[Closed]]")
        assert links == [WikiLink("open and [[Closed", None, 0)]

    def test_unterminated_then_valid(self):
        links = extract_wiki_links("[[open] and [[Closed]]")
        assert links == [WikiLink("Closed", None, 12)]

    def test_generator_is_restartable(self):
        body = "[[One]] then [[Two|2]]"
        assert list(iter_wiki_links(body)) == list(iter_wiki_links(body))

    def test_iter_is_lazy(self):
        links = iter_wiki_links("[[A]] [[B]]")
        assert next(links).target == "A"
        assert next(links).target == "B"


# ============================================================
# LinkIndex
# ============================================================


class TestLinkIndexBuild:
    def test_registers_title_slug_and_id(self):
        doc = make_document(id="01ES", title="Emotional Sovereignty", slug="emotional-sovereignty")
        index = LinkIndex.build([doc])
        canonical = "/library/principles/emotional-sovereignty"
        assert index.get("emotional sovereignty") == canonical
        assert index.get("emotional-sovereignty") == canonical
        assert index.get("01es") == canonical
        assert len(index) == 3

    def test_resolve_normalizes_target(self):
        doc = make_document(title="Emotional Sovereignty", slug="emotional-sovereignty")
        index = LinkIndex.build([doc])
        assert index.resolve("  EMOTIONAL Sovereignty ") == doc.canonical
        assert index.resolve("Unknown") is None

    def test_skips_non_public(self):
        draft = make_document(title="Draft", slug="draft", status="draft")
        private = make_document(title="Secret", slug="secret", visibility="private")
        index = LinkIndex.build([draft, private])
        assert len(index) == 0

    def test_skips_documents_without_canonical(self):
        doc = make_document(title="Nowhere", slug="nowhere", canonical="")
        assert len(LinkIndex.build([doc])) == 0

    def test_empty_title_not_registered(self):
        doc = make_document(id="01X", title="", slug="no-title")
        index = LinkIndex.build([doc])
        assert "" not in index
        assert set(index) == {"no-title", "01x"}

    def test_last_write_wins(self):
        first = make_document(id="1", title="Shared", slug="first")
        second = make_document(id="2", title="Shared", slug="second")
        index = LinkIndex.build([first, second])
        assert index.resolve("Shared") == "/library/principles/second"

    def test_collisions_recorded(self, caplog):
        first = make_document(id="1", title="Shared", slug="first")
        second = make_document(id="2", title="Shared", slug="second")
        with caplog.at_level(logging.WARNING, logger="sitegraph.core.links"):
            index = LinkIndex.build([first, second])
        assert index.collisions == [
            AliasCollision(
                "shared", "/library/principles/first", "/library/principles/second"
            )
        ]
        assert "re-pointed" in caplog.text

    def test_same_canonical_is_not_a_collision(self):
        doc = make_document(id="same", title="Same", slug="same")
        assert LinkIndex.build([doc]).collisions == []


class TestLinkIndexSerialization:
    def test_round_trip(self, corpus):
        index = LinkIndex.build(corpus)
        restored = LinkIndex.from_json(index.to_json())
        assert restored == index
        assert restored.to_json() == index.to_json()

    def test_to_json_is_flat(self, corpus):
        data = LinkIndex.build(corpus).to_json()
        assert all(isinstance(k, str) and isinstance(v, str) for k, v in data.items())

    def test_to_json_is_a_copy(self):
        index = LinkIndex({"a": "/x/a"})
        index.to_json()["b"] = "/x/b"
        assert "b" not in index

    def test_canonicals(self, corpus):
        index = LinkIndex.build(corpus)
        assert index.canonicals() == {doc.canonical for doc in corpus}
