"""Document assembler — stitches escaped text and rendered entities.

``assemble`` walks the raw text once.  Gaps between spans are escaped;
each span goes to the renderer for its kind, and the markup that comes
back is trusted as-is.  A renderer returning None (e.g. an unknown
mention) makes the span fall back to escaped text.

``simple_format`` then turns line structure into paragraphs:

    "a\\nb\\n\\nc"  ->  "<p>a<br />b</p><p>c</p>"
"""

from __future__ import annotations
import re
from typing import Callable, Mapping, Optional

from .escaping import encode
from .types import EntitySpan, Payload

Renderer = Callable[[Payload], Optional[str]]

_PARAGRAPH_BREAK = re.compile(r"\n{2,}")
_BLOCK_TAG = r"<(?:p|div|blockquote|ul|ol|pre|h[1-6])(?:\s[^>]*)?>"
# Markup with a block element anywhere is not wrapped again
_BLOCK = re.compile(_BLOCK_TAG, re.IGNORECASE)
# A leading block element takes a prefix inside it
_BLOCK_START = re.compile(r"\s*" + _BLOCK_TAG, re.IGNORECASE)


def assemble(text: str, spans: list[EntitySpan], renderers: Mapping[str, Renderer]) -> str:
    """Interleave escaped gaps with rendered spans.  Spans must be ordered."""
    out: list[str] = []
    pos = 0
    for span in spans:
        out.append(encode(text[pos:span.start]))
        render = renderers.get(span.kind)
        markup = render(span.payload) if render is not None else None
        out.append(markup if markup is not None else encode(span.text))
        pos = span.end
    out.append(encode(text[pos:]))
    return "".join(out)


def simple_format(html: str) -> str:
    """Wrap in paragraphs; blank lines split them, single newlines become ``<br />``."""
    html = html.replace("\r\n", "\n").replace("\r", "\n")
    paragraphs = [p.strip("\n") for p in _PARAGRAPH_BREAK.split(html)]
    paragraphs = [p for p in paragraphs if p] or [""]
    return "".join("<p>" + p.replace("\n", "<br />") + "</p>" for p in paragraphs)


def has_block_structure(html: str) -> bool:
    return _BLOCK.search(html) is not None


def reblog_prefix(mention: str) -> str:
    """Attribution for a boost: ``RT <mention> ``."""
    return f"RT {mention} "


def insert_prefix(html: str, prefix: str) -> str:
    """Put a prefix at the start of the content, inside a leading block element."""
    m = _BLOCK_START.match(html)
    if m is None:
        return prefix + html
    return html[:m.end()] + prefix + html[m.end():]
