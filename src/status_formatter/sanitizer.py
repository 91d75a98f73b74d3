"""HTML sanitizer collaborator for remote content.

Remote statuses arrive as HTML.  The sanitizer reduces them to a small
allowlist of tags and reports where the text nodes of the cleaned markup
are, so entity scanning can run on text without touching tags.

The default implementation uses nh3 (Rust ammonia bindings).  Anything
with a matching ``sanitize`` method can stand in for it.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Protocol

import nh3

# Tags and attributes remote content may keep
STRICT_TAGS: frozenset[str] = frozenset({"p", "br", "span", "a"})
STRICT_ATTRIBUTES: dict[str, frozenset[str]] = {
    "a": frozenset({"href", "rel", "class"}),
    "span": frozenset({"class"}),
}
# Elements dropped together with their content
STRIPPED_CONTENT_TAGS: frozenset[str] = frozenset({"script", "style"})
URL_SCHEMES: frozenset[str] = frozenset({"http", "https", "mailto"})

# A start or end tag; attribute values may contain ">"
TAG = re.compile(r"""<(?:[^>"']|"[^"]*"|'[^']*')*>""")


@dataclass(frozen=True, slots=True)
class SanitizedHtml:
    """Cleaned markup and the half-open offsets of its text nodes."""
    html: str
    text_nodes: tuple[tuple[int, int], ...]


class HtmlSanitizer(Protocol):
    def sanitize(self, html: str) -> SanitizedHtml:
        ...


class Nh3Sanitizer:
    """Allowlist sanitizer backed by nh3."""

    __slots__ = ("tags", "attributes")

    def __init__(
        self,
        tags: set[str] | frozenset[str] | None = None,
        attributes: dict[str, set[str] | frozenset[str]] | None = None,
    ) -> None:
        self.tags = set(tags if tags is not None else STRICT_TAGS)
        self.attributes = {
            tag: set(attrs)
            for tag, attrs in (attributes if attributes is not None else STRICT_ATTRIBUTES).items()
        }

    def sanitize(self, html: str) -> SanitizedHtml:
        cleaned = nh3.clean(
            html,
            tags=self.tags,
            clean_content_tags=set(STRIPPED_CONTENT_TAGS - self.tags),
            attributes=self.attributes,
            link_rel=None,
            url_schemes=set(URL_SCHEMES),
        )
        return SanitizedHtml(cleaned, split_text_nodes(cleaned))


def split_text_nodes(html: str) -> tuple[tuple[int, int], ...]:
    """Offsets of the non-empty runs of text between tags."""
    nodes: list[tuple[int, int]] = []
    pos = 0
    for m in TAG.finditer(html):
        if m.start() > pos:
            nodes.append((pos, m.start()))
        pos = m.end()
    if pos < len(html):
        nodes.append((pos, len(html)))
    return tuple(nodes)
