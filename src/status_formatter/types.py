"""Core types."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union

# Entity kinds
URL = "URL"
MENTION = "MENTION"
HASHTAG = "HASHTAG"


@dataclass(frozen=True, slots=True)
class UrlPayload:
    """A URL split into the parts the link renderer needs."""
    scheme: str            # as written, e.g. "https" or "HTTP"
    host: str              # as written, may contain non-ASCII labels
    path: str = ""
    query: str | None = None
    fragment: str | None = None
    port: str | None = None


@dataclass(frozen=True, slots=True)
class MentionPayload:
    username: str
    domain: str | None = None   # None = local account


@dataclass(frozen=True, slots=True)
class HashtagPayload:
    name: str              # original case, lowered only for the link target


Payload = Union[UrlPayload, MentionPayload, HashtagPayload]


@dataclass(frozen=True, slots=True)
class EntitySpan:
    """A single recognized entity in raw text."""
    kind: str              # URL | MENTION | HASHTAG
    start: int             # half-open offsets into the raw text
    end: int
    text: str              # raw[start:end]
    payload: Payload


@dataclass(frozen=True, slots=True)
class Account:
    """Minimal view of an account record returned by a resolver."""
    username: str
    domain: str | None = None
    url: str | None = None          # canonical profile URL, if known
    display_name: str = ""

    @property
    def local(self) -> bool:
        return self.domain is None


@dataclass(frozen=True, slots=True)
class Status:
    """A message to be formatted.  ``reblog`` is the boosted status, if any."""
    text: str
    account: Account
    local: bool = True
    reblog: Status | None = None
    spoiler_text: str = ""

    @property
    def proper(self) -> Status:
        return self.reblog if self.reblog is not None else self
