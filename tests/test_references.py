"""Tests for cross-reference resolution."""

from tipstage.core.documents import Document
from tipstage.core.references import find_references, resolve_references
from tipstage.core.types import TipId


def _doc(tip_id: int, body: str = "", source: str | None = None) -> Document:
    return Document(
        id=TipId(tip_id),
        title=f"Tip {tip_id}",
        permalink=f"tips/{tip_id}",
        order=str(tip_id).zfill(3),
        published=True,
        body=body,
        source=source or f"totw-{tip_id}.md",
    )


class TestFindReferences:
    """Tests for find_references()."""

    def test__mention_forms__all_found(self) -> None:
        """Find short, long and abbreviated mentions."""
        doc = _doc(1, "See Tip #36, Tip of the Week #59 and TotW #140. Also tip #3.")

        refs = find_references(doc)

        assert [r.target_id for r in refs] == [36, 59, 140, 3]
        assert [r.raw_text for r in refs] == ["Tip #36", "Tip of the Week #59", "TotW #140", "tip #3"]
        assert all(r.kind == "mention" for r in refs)
        assert all(r.source_id == 1 for r in refs)

    def test__span__points_into_body(self) -> None:
        doc = _doc(1, "Read Tip #36 first.")

        (ref,) = find_references(doc)

        assert doc.body[ref.start : ref.end] == "Tip #36"

    def test__markdown_link__counted_once(self) -> None:
        """A link whose text mentions the tip is one reference."""
        doc = _doc(1, "See [TotW #36](/tips/36) and [this tip](tips/59/).")

        refs = find_references(doc)

        assert [(r.target_id, r.kind) for r in refs] == [(36, "link"), (59, "link")]
        assert refs[0].raw_text == "[TotW #36](/tips/36)"

    def test__code__ignored(self) -> None:
        """Ignore mentions inside fenced blocks and inline code."""
        body = (
            "Intro Tip #1.\n\n"
            "```c++\n"
            "// Tip #2 in a comment\n"
            "#include <string>\n"
            "```\n\n"
            "Inline `Tip #3` and ~~~ is not a fence here.\n\n"
            "~~~\n"
            "Tip #4\n"
            "~~~\n"
            "After Tip #5.\n"
        )

        refs = find_references(_doc(9, body))

        assert [r.target_id for r in refs] == [1, 5]

    def test__indented_code_block__ignored(self) -> None:
        body = "Example:\n\n    // see Tip #1\n    int x;\n\nAfter Tip #2.\n"

        refs = find_references(_doc(9, body))

        assert [r.target_id for r in refs] == [2]

    def test__indented_line_without_blank_line__scanned(self) -> None:
        """A continuation line is not a code block."""
        refs = find_references(_doc(9, "First line\n    continues with Tip #1.\n"))

        assert [r.target_id for r in refs] == [1]

    def test__longer_closing_fence__closes_block(self) -> None:
        body = "```\nTip #1\n````\nAfter Tip #2.\n\n~~~~\nTip #3\n~~~~~\nThen Tip #4.\n"

        refs = find_references(_doc(9, body))

        assert [r.target_id for r in refs] == [2, 4]

    def test__shorter_closing_fence__does_not_close(self) -> None:
        refs = find_references(_doc(9, "````\nTip #1\n```\nTip #2\n````\nTip #3\n"))

        assert [r.target_id for r in refs] == [3]

    def test__double_backtick_span__ignored(self) -> None:
        refs = find_references(_doc(9, "Use ``a `Tip #1` b`` not Tip #2."))

        assert [r.target_id for r in refs] == [2]

    def test__unterminated_fence__ignores_rest(self) -> None:
        refs = find_references(_doc(9, "Tip #1\n```\nTip #2\n"))

        assert [r.target_id for r in refs] == [1]

    def test__hash_without_tip__ignored(self) -> None:
        refs = find_references(_doc(1, "Issue #12 and C# #define and Tipping #3."))

        assert refs == []

    def test__custom_prefix__links(self) -> None:
        refs = find_references(_doc(1, "[x](/fast/7)"), permalink_prefix="fast")

        assert [r.target_id for r in refs] == [7]


class TestResolveReferences:
    """Tests for resolve_references()."""

    def test__existing_target__resolved(self) -> None:
        docs = [_doc(1, "See Tip #36."), _doc(36)]

        result = resolve_references(docs)

        assert result.broken == ()
        assert len(result.resolved) == 1
        assert result.resolved[0].target.id == 36
        assert result.resolved[0].href == "/tips/36"

    def test__missing_target__one_broken_reference(self) -> None:
        """A reference to Tip #999 yields exactly one diagnostic."""
        docs = [_doc(1), _doc(42, "Intro.\nRefer to Tip #999 here.")]

        result = resolve_references(docs)

        assert len(result.broken) == 1
        broken = result.broken[0]
        assert broken.source_id == 42
        assert broken.target_id == 999
        assert broken.raw_text == "Tip #999"
        assert broken.line == 2
        assert broken.source == "totw-42.md"

    def test__diagnostics__ordered_by_id_then_position(self) -> None:
        docs = [
            _doc(20, "Tip #900 then Tip #901"),
            _doc(3, "Tip #902"),
            _doc(21, "Tip #903"),
        ]

        result = resolve_references(docs)

        assert [(b.source_id, b.target_id) for b in result.broken] == [
            (3, 902),
            (20, 900),
            (20, 901),
            (21, 903),
        ]

    def test__self_reference__resolved(self) -> None:
        result = resolve_references([_doc(5, "As this Tip #5 says")])

        assert result.broken == ()
        assert len(result.resolved) == 1

    def test__for_document__filters_by_source(self) -> None:
        docs = [_doc(1, "Tip #2"), _doc(2, "Tip #1 and Tip #1")]

        result = resolve_references(docs)

        assert len(result.for_document(1)) == 1
        assert len(result.for_document(2)) == 2

    def test__broken__to_dict_and_str(self) -> None:
        result = resolve_references([_doc(1, "Tip #7")])

        broken = result.broken[0]
        assert broken.to_dict() == {
            "source_id": 1,
            "target_id": 7,
            "raw_text": "Tip #7",
            "line": 1,
            "source": "totw-1.md",
        }
        assert str(broken) == "totw-1.md:1: tip #1 references missing tip #7 ('Tip #7')"
