"""Unit tests for normalizing upstream completion chunks."""

from types import SimpleNamespace

import pytest
import pytest_check as check

from lumina.agent.fragments import (
    SNIPPET_LENGTH,
    SourcedFragment,
    SourceRef,
    TextFragment,
    normalize_fragment,
    to_source_ref,
)


class TestTextChunks:
    """Raw incremental text in its various wrappers."""

    def test_plain_string(self) -> None:
        assert normalize_fragment("Hello") == TextFragment(text="Hello")

    def test_object_with_content(self) -> None:
        chunk = SimpleNamespace(content="token")

        assert normalize_fragment(chunk) == TextFragment(text="token")

    def test_mapping_with_content(self) -> None:
        assert normalize_fragment({"content": "token"}) == TextFragment(text="token")

    @pytest.mark.parametrize(
        "chunk",
        [None, "", SimpleNamespace(content=""), SimpleNamespace(content=None), 42, {"other": 1}],
    )
    def test_chunks_without_text_are_dropped(self, chunk: object) -> None:
        assert normalize_fragment(chunk) is None

    def test_non_string_content_is_dropped(self) -> None:
        assert normalize_fragment(SimpleNamespace(content={"structured": True})) is None


class TestStructuredResults:
    """Results carrying an answer and supporting context."""

    def test_answer_with_context(self) -> None:
        chunk = {
            "answer": "It covers security policy.",
            "context": [
                {"metadata": {"page": 0}, "page_content": "Information security policy"},
                {"metadata": {"page": 4}, "page_content": "Access control"},
            ],
        }

        fragment = normalize_fragment(chunk)

        check.is_instance(fragment, SourcedFragment)
        check.equal(fragment.answer, "It covers security policy.")
        check.equal(
            fragment.sources,
            [
                SourceRef(page=1, snippet="Information security policy"),
                SourceRef(page=5, snippet="Access control"),
            ],
        )

    def test_answer_without_context(self) -> None:
        fragment = normalize_fragment({"answer": "Just text"})

        assert fragment == SourcedFragment(answer="Just text", sources=None)

    def test_empty_context_list(self) -> None:
        fragment = normalize_fragment({"answer": "x", "context": []})

        assert fragment.sources == []

    def test_object_style_result(self) -> None:
        document = SimpleNamespace(metadata={"page": 2}, page_content="Body text")
        chunk = SimpleNamespace(answer="From page three", context=[document])

        fragment = normalize_fragment(chunk)

        assert fragment.sources == [SourceRef(page=3, snippet="Body text")]

    def test_answer_takes_precedence_over_content(self) -> None:
        fragment = normalize_fragment({"answer": "a", "content": "c"})

        assert isinstance(fragment, SourcedFragment)


class TestSourceRef:
    """Page numbering and snippet limits."""

    def test_snippet_is_truncated(self) -> None:
        ref = to_source_ref({"metadata": {"page": 1}, "page_content": "x" * 500})

        check.equal(len(ref.snippet), SNIPPET_LENGTH)
        check.equal(ref.page, 2)

    def test_missing_page_counts_as_first(self) -> None:
        assert to_source_ref({"page_content": "text"}).page == 1

    def test_camel_case_content_key(self) -> None:
        assert to_source_ref({"pageContent": "camel"}).snippet == "camel"

    def test_non_string_content_gives_empty_snippet(self) -> None:
        assert to_source_ref({"metadata": {"page": 0}, "page_content": None}).snippet == ""
