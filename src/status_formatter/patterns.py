"""Entity scanner — URLs, mentions and hashtags in raw text.

Scanning order decides ownership of characters:

1. URLs are found first and claim their characters.  A URL candidate
   starts at ``http://`` or ``https://`` (any case) and extends to the
   next whitespace, ``<``, ``>`` or ``"``.  Trailing ``. , : ; ! ? '``
   are dropped, as is a trailing ``)`` or ``]`` without a matching
   opener inside the candidate.  Candidates whose host is not a valid
   (possibly internationalized) domain are discarded, along with the
   rest of their run.
2. Mentions and hashtags are matched over the whole text.  One that
   starts inside a URL is discarded.  One that runs into a URL is cut
   where the URL starts, so ``#taghttps://x.com`` yields ``#tag``
   followed by the URL.
3. Remaining overlaps are settled by start offset, then length.

Cashtags (``$AAPL``) and anything else are not entities.
"""

from __future__ import annotations
import logging
import re
from bisect import bisect_right

from .links import to_ascii_host
from .types import EntitySpan, HashtagPayload, MentionPayload, UrlPayload, HASHTAG, MENTION, URL

logger = logging.getLogger(__name__)

_SCHEME = re.compile(r"https?://", re.IGNORECASE)

# Longest run a URL may extend over: up to whitespace, "<", ">" or '"'
_URL_EXTENT = re.compile(r'[^\s<>"]*')
_TRAILING_PUNCT = frozenset(".,:;!?'")
_CLOSERS = {")": "(", "]": "["}

# @user or @user@domain; "@" must not follow a word character or "/"
_MENTION = re.compile(
    r"(?<![\w/])@"
    r"([A-Za-z0-9_]+(?:[.\-]+[A-Za-z0-9_]+)*)"
    r"(?:@([A-Za-z0-9](?:[A-Za-z0-9\-]*[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9\-]*[A-Za-z0-9])?)*))?"
)

# "#" must not follow a word character, "/" or ")"
_HASHTAG = re.compile(r"(?<![\w/)])#(\w+)")
_HASHTAG_NAME_HAS_LETTER = re.compile(r"[^\W\d_]")

# Tie-break when two candidates start at the same offset
_PRIORITY = {URL: 0, MENTION: 1, HASHTAG: 2}


def scan_entities(text: str) -> list[EntitySpan]:
    """Find all entities in text.  Returns ordered, non-overlapping spans."""
    urls = scan_urls(text)
    candidates: list[EntitySpan] = list(urls)
    candidates.extend(scan_mentions(text, claimed=urls))
    candidates.extend(scan_hashtags(text, claimed=urls))
    return _deduplicate(candidates)


# ------------------------------------------------------------------
# URLs
# ------------------------------------------------------------------

def scan_urls(text: str) -> list[EntitySpan]:
    """Find URL spans, left to right.

    A rejected candidate consumes the rest of its run, so schemes later in
    that run are not scanned again.
    """
    spans: list[EntitySpan] = []
    scanned_to = 0
    for m in _SCHEME.finditer(text):
        start = m.start()
        if start < scanned_to:
            continue
        extent = _URL_EXTENT.match(text, m.end()).end()
        end = _trim_trailing(text, start, extent)
        candidate = text[start:end]
        payload = parse_url(candidate)
        if payload is None:
            logger.debug("Dropped URL candidate %r at %d", candidate[:80], start)
            scanned_to = extent
            continue
        spans.append(EntitySpan(URL, start, end, candidate, payload))
        scanned_to = end
    return spans


def _trim_trailing(text: str, start: int, end: int) -> int:
    """Drop trailing punctuation and unbalanced closing brackets."""
    opened = {opener: text.count(opener, start, end) for opener in _CLOSERS.values()}
    closed = {closer: text.count(closer, start, end) for closer in _CLOSERS}
    while end > start:
        ch = text[end - 1]
        if ch in _TRAILING_PUNCT:
            end -= 1
            continue
        opener = _CLOSERS.get(ch)
        if opener is not None and opened[opener] < closed[ch]:
            closed[ch] -= 1
            end -= 1
            continue
        break
    return end


def parse_url(candidate: str) -> UrlPayload | None:
    """Split a URL candidate into parts.  None if it is not a usable URL."""
    scheme, sep, rest = candidate.partition("://")
    if not sep or scheme.lower() not in ("http", "https"):
        return None

    authority_end = len(rest)
    for delim in "/?#":
        idx = rest.find(delim)
        if idx != -1:
            authority_end = min(authority_end, idx)
    authority, remainder = rest[:authority_end], rest[authority_end:]

    if "@" in authority:
        return None  # userinfo is not linked
    host, colon, port = authority.partition(":")
    if colon and not port.isdigit():
        return None
    if not _valid_host(host):
        return None

    remainder, hash_, fragment = remainder.partition("#")
    path, qmark, query = remainder.partition("?")
    return UrlPayload(
        scheme=scheme,
        host=host,
        path=path,
        query=query if qmark else None,
        fragment=fragment if hash_ else None,
        port=port or None,
    )


def _valid_host(host: str) -> bool:
    if not host:
        return False
    for label in host.split("."):
        if not label or label[0] == "-" or label[-1] == "-":
            return False
        if not all(ch.isalnum() or ch in "-_" for ch in label):
            return False
    return to_ascii_host(host) is not None


# ------------------------------------------------------------------
# Mentions and hashtags
# ------------------------------------------------------------------

def scan_mentions(text: str, claimed: list[EntitySpan] | None = None) -> list[EntitySpan]:
    """Find ``@user`` / ``@user@domain`` spans outside claimed URL spans."""
    claims = _Claims(claimed or [])
    spans: list[EntitySpan] = []
    for m in _MENTION.finditer(text):
        m = claims.fit(_MENTION, text, m)
        if m is None:
            continue
        payload = MentionPayload(username=m.group(1), domain=m.group(2))
        spans.append(EntitySpan(MENTION, m.start(), m.end(), m.group(), payload))
    return spans


def scan_hashtags(text: str, claimed: list[EntitySpan] | None = None) -> list[EntitySpan]:
    """Find ``#tag`` spans outside claimed URL spans."""
    claims = _Claims(claimed or [])
    spans: list[EntitySpan] = []
    for m in _HASHTAG.finditer(text):
        m = claims.fit(_HASHTAG, text, m)
        if m is None or not _HASHTAG_NAME_HAS_LETTER.search(m.group(1)):
            continue
        spans.append(EntitySpan(HASHTAG, m.start(), m.end(), m.group(), HashtagPayload(m.group(1))))
    return spans


class _Claims:
    """Ordered, non-overlapping spans that other matches must stay clear of."""

    __slots__ = ("_spans", "_starts")

    def __init__(self, spans: list[EntitySpan]) -> None:
        self._spans = spans
        self._starts = [s.start for s in spans]

    def fit(self, pattern: re.Pattern, text: str, m: re.Match) -> re.Match | None:
        """Keep a match clear of claimed spans.

        A match starting inside a claimed span is dropped; one running into
        the next claimed span is re-matched with the text cut off where that
        span starts.
        """
        idx = bisect_right(self._starts, m.start())
        if idx and self._spans[idx - 1].end > m.start():
            return None
        if idx < len(self._spans) and self._starts[idx] < m.end():
            return pattern.match(text, m.start(), self._starts[idx])
        return m


def _deduplicate(spans: list[EntitySpan]) -> list[EntitySpan]:
    """Remove overlapping spans, keeping the earliest, then longest."""
    ranked = sorted(spans, key=lambda s: (s.start, -(s.end - s.start), _PRIORITY[s.kind]))
    taken: list[EntitySpan] = []
    for span in ranked:
        if taken and span.start < taken[-1].end:
            continue
        taken.append(span)
    return taken
