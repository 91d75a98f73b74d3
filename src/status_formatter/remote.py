"""Remote-content adapter — decides how much of a status body to trust.

Local statuses are plain text: the whole body is one text segment and
every character gets escaped during assembly.  Remote statuses carry
HTML: it is passed through the sanitizer first, the surviving markup is
kept verbatim, and only its text nodes are scanned for entities.
"""

from __future__ import annotations
import html as htmllib
import re
from dataclasses import dataclass
from typing import Callable, Iterator

from .sanitizer import TAG, SanitizedHtml
from .types import Status

# Trust modes
PLAIN_TEXT = "plain_text"
PRE_SANITIZED = "pre_sanitized"

_ANCHOR_OPEN = re.compile(r"<a[\s>]", re.IGNORECASE)
_ANCHOR_CLOSE = re.compile(r"</a\s*>", re.IGNORECASE)
_LINE_BREAK = re.compile(r"<br\s*/?>", re.IGNORECASE)
_PARAGRAPH_END = re.compile(r"</p\s*>", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class PreparedContent:
    """Status body ready for assembly."""
    text: str
    trust_mode: str                                # PLAIN_TEXT | PRE_SANITIZED
    text_nodes: tuple[tuple[int, int], ...]


def prepare(
    status: Status,
    sanitize: Callable[[str], SanitizedHtml],
    *,
    force_markup: bool = False,
) -> PreparedContent:
    """Pick the trust mode for a status and sanitize remote markup."""
    if status.local and not force_markup:
        text = status.text
        return PreparedContent(text, PLAIN_TEXT, ((0, len(text)),) if text else ())
    cleaned = sanitize(status.text)
    return PreparedContent(cleaned.html, PRE_SANITIZED, cleaned.text_nodes)


def iter_segments(content: PreparedContent) -> Iterator[tuple[str, bool]]:
    """Yield ``(chunk, linkable)`` pairs covering the whole body in order.

    Linkable chunks are raw text: plain-text bodies as written, sanitized
    text nodes with character references decoded.  Everything else
    (tags, text already inside an ``<a>``) is trusted markup to be
    emitted untouched.
    """
    if content.trust_mode == PLAIN_TEXT:
        if content.text:
            yield content.text, True
        return

    depth = 0
    pos = 0
    for start, end in content.text_nodes:
        if start > pos:
            markup = content.text[pos:start]
            depth = _anchor_depth(markup, depth)
            yield markup, False
        node = content.text[start:end]
        if depth:
            yield node, False
        else:
            yield htmllib.unescape(node), True
        pos = end
    if pos < len(content.text):
        yield content.text[pos:], False


def _anchor_depth(markup: str, depth: int) -> int:
    for m in TAG.finditer(markup):
        tag = m.group()
        if _ANCHOR_OPEN.match(tag):
            depth += 1
        elif _ANCHOR_CLOSE.match(tag):
            depth = max(0, depth - 1)
    return depth


def text_content(content: PreparedContent) -> str:
    """Plain text of a body: tags dropped, line and paragraph breaks kept."""
    if content.trust_mode == PLAIN_TEXT:
        return content.text

    parts: list[str] = []
    pos = 0
    for start, end in content.text_nodes:
        if start > pos:
            parts.append(_breaks(content.text[pos:start], leading=bool(parts)))
        parts.append(htmllib.unescape(content.text[start:end]))
        pos = end
    return "".join(parts)


def _breaks(markup: str, *, leading: bool) -> str:
    out = "\n" * len(_LINE_BREAK.findall(markup))
    if leading and _PARAGRAPH_END.search(markup):
        out += "\n\n"
    return out
