"""Markdown rendering with cross-reference links.

Resolved "Tip #N" mentions become links to the target permalink before the
body is converted with mistune. Broken references stay as plain text and
are returned as warnings.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from html import escape

import mistune
from mistune.toc import add_toc_hook

from tipstage.core.documents import Document
from tipstage.core.index import TipIndex
from tipstage.core.references import BrokenReference, ResolvedReference
from tipstage.core.site import BuildResult

logger = logging.getLogger(__name__)

# Any inline markdown link; mentions inside its text are not wrapped again
_LINK = re.compile(r"!?\[[^\]\n]*\]\([^)\n]*\)")

_PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
{header}<main>
<h1>{title}</h1>
{content}
</main>
{footer}</body>
</html>
"""


@dataclass(frozen=True)
class TocEntry:
    """Table of contents entry."""

    level: int
    title: str
    id: str

    def to_dict(self) -> dict[str, str | int]:
        return {"level": self.level, "title": self.title, "id": self.id}


@dataclass
class RenderResult:
    """Result of rendering a tip body."""

    html: str
    title: str
    toc: list[TocEntry]
    warnings: list[str] = field(default_factory=list)


class PageRenderer:
    """Renders tip bodies and site pages to HTML.

    Raw HTML inside tip bodies is passed through; tips are trusted content.
    """

    def __init__(self, *, toc_min_level: int = 2, toc_max_level: int = 3) -> None:
        """Initialize renderer.

        Args:
            toc_min_level: Smallest heading level listed in the table of contents
            toc_max_level: Largest heading level listed in the table of contents
        """
        self._toc_min_level = toc_min_level
        self._toc_max_level = toc_max_level

    def render(
        self,
        document: Document,
        references: Sequence[ResolvedReference] = (),
        broken: Sequence[BrokenReference] = (),
        *,
        index: TipIndex | None = None,
    ) -> RenderResult:
        """Render a document body.

        Args:
            document: Document to render
            references: Resolved references originating from this document
            broken: Broken references originating from this document
            index: Pages that get written; references to other tips stay
                plain text and are reported as warnings

        Returns:
            RenderResult with HTML, title, ToC and warnings
        """
        linked = list(references)
        unlinked: list[ResolvedReference] = []
        if index is not None:
            linked = [r for r in references if r.target in index]
            unlinked = [r for r in references if r.target not in index]

        markdown_text = link_references(document.body, linked, unlinked)

        md = mistune.create_markdown(escape=False, plugins=["table", "strikethrough"])
        add_toc_hook(md, min_level=self._toc_min_level, max_level=self._toc_max_level)
        html, state = md.parse(markdown_text)

        toc = [
            TocEntry(level=level, title=title, id=anchor)
            for level, anchor, title in state.env.get("toc_items", [])
        ]
        warnings = [
            f"line {b.line}: reference to missing tip #{b.target_id} ({b.raw_text})"
            for b in broken
            if b.source_id == document.id
        ]
        for r in unlinked:
            ref = r.reference
            line = document.body_line + document.body.count("\n", 0, ref.start)
            warnings.append(f"line {line}: reference to unpublished tip #{ref.target_id} ({ref.raw_text})")
        logger.debug(f"Rendered tip #{document.id}: {len(html)} characters of HTML")

        return RenderResult(html=str(html), title=document.title, toc=toc, warnings=warnings)

    def render_page(self, document: Document, build: BuildResult) -> str:
        """Render a complete HTML page for a tip.

        Args:
            document: Document to render
            build: Build the document belongs to (for links and neighbours)

        Returns:
            HTML document
        """
        result = self.render(
            document,
            build.references.for_document(document.id),
            build.references.broken,
            index=build.index,
        )

        crumbs = " &rsaquo; ".join(
            f'<a href="{escape(b.path)}">{escape(b.title)}</a>'
            for b in build.site.get_breadcrumbs(document.path)
        )
        header = f'<nav class="breadcrumbs">{crumbs}</nav>\n' if crumbs else ""

        links: list[str] = []
        prev_page, next_page = build.site.get_neighbours(document.path)
        if prev_page is not None:
            links.append(f'<a rel="prev" href="{escape(prev_page.path)}">&larr; {escape(prev_page.title)}</a>')
        if next_page is not None:
            links.append(f'<a rel="next" href="{escape(next_page.path)}">{escape(next_page.title)} &rarr;</a>')
        footer = f'<nav class="pager">{" ".join(links)}</nav>\n' if links else ""

        return _PAGE_TEMPLATE.format(
            title=escape(result.title),
            header=header,
            content=result.html,
            footer=footer,
        )

    def render_index(self, index: TipIndex, title: str = "Tips of the Week") -> str:
        """Render the index page as an ordered list of links."""
        items = "\n".join(
            f'<li value="{doc.id}"><a href="{escape(doc.path)}">{escape(doc.title)}</a></li>'
            for doc in index
        )
        return _PAGE_TEMPLATE.format(
            title=escape(title),
            header="",
            content=f'<ol class="tips">\n{items}\n</ol>',
            footer="",
        )


def link_references(
    body: str,
    references: Sequence[ResolvedReference],
    unlinked: Sequence[ResolvedReference] = (),
) -> str:
    """Turn resolved mentions into markdown links.

    Link references are already links and are left as written, as are
    mentions inside the text of any other markdown link. Links in
    ``unlinked`` are replaced by their text.

    Args:
        body: Markdown body the reference spans point into
        references: Resolved references for this body
        unlinked: References whose target page is not written

    Returns:
        Markdown with mentions wrapped as links
    """
    link_spans = [m.span() for m in _LINK.finditer(body)]
    mentions = [
        r
        for r in references
        if r.reference.kind == "mention"
        and not any(start <= r.reference.start < end for start, end in link_spans)
    ]
    edits = [(r.reference.start, r.reference.end, f"[{r.reference.raw_text}]({r.href})") for r in mentions]
    edits.extend(
        (r.reference.start, r.reference.end, _link_text(r.reference.raw_text))
        for r in unlinked
        if r.reference.kind == "link"
    )
    for start, end, replacement in sorted(edits, reverse=True):
        body = f"{body[:start]}{replacement}{body[end:]}"
    return body


def _link_text(raw_link: str) -> str:
    return raw_link[1 : raw_link.index("](")]
