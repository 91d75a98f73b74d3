"""Formatter — the main API.  Status body in, display HTML out.

Usage:
    from status_formatter import Account, AccountDirectory, Formatter, FormatterConfig, Status

    alice = Account("alice")
    formatter = Formatter(
        FormatterConfig(local_domain="social.example"),
        resolver=AccountDirectory([alice]),
    )

    status = Status("Hi @alice, see https://example.com #python", account=alice)
    print(formatter.format(status))
    # <p>Hi <span class="h-card"><a href="https://social.example/@alice" ...

A Formatter holds configuration and collaborators only; every call is a
pure function of its arguments, so one instance can be shared across
threads.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from functools import partial
from typing import Protocol

from .assembler import (
    Renderer,
    assemble,
    has_block_structure,
    insert_prefix,
    reblog_prefix,
    simple_format,
)
from .errors import SanitizerError
from .escaping import encode
from .links import DEFAULT_REL, DEFAULT_TARGET, DEFAULT_VISIBLE_LENGTH, link_url
from .mentions import AccountDirectory, AccountResolver, mention_html, render_hashtag, render_mention
from .patterns import scan_entities
from .remote import PLAIN_TEXT, PreparedContent, iter_segments, prepare, text_content
from .sanitizer import HtmlSanitizer, Nh3Sanitizer, SanitizedHtml
from .types import Account, Status, HASHTAG, MENTION, URL

logger = logging.getLogger(__name__)


class Emojifier(Protocol):
    """Replaces ``:shortcode:`` emoji in rendered HTML with images."""

    def emojify(self, html: str) -> str:
        ...


@dataclass
class FormatterConfig:
    """Configuration for the Formatter."""
    local_domain: str = "localhost"   # host for local profile and tag URLs
    scheme: str = "https"
    visible_url_length: int = DEFAULT_VISIBLE_LENGTH
    link_rel: str = DEFAULT_REL
    link_target: str = DEFAULT_TARGET
    # Sanitizer allowlist overrides (None = strict defaults)
    allowed_tags: set[str] | None = None
    allowed_attributes: dict[str, set[str]] | None = None

    def __post_init__(self) -> None:
        if self.scheme not in ("http", "https"):
            raise ValueError(f"scheme must be http or https, got {self.scheme!r}")
        if self.visible_url_length <= 0:
            raise ValueError("visible_url_length must be positive")
        if not self.local_domain:
            raise ValueError("local_domain must not be empty")

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.local_domain}"


class Formatter:
    """Renders statuses to safe, linkified HTML.

    Collaborators:
        resolver:  account lookup for mentions (default: knows nobody)
        sanitizer: allowlist cleaner for remote HTML (default: nh3)
        emojifier: optional custom-emoji substitution
    """

    def __init__(
        self,
        config: FormatterConfig | None = None,
        *,
        resolver: AccountResolver | None = None,
        sanitizer: HtmlSanitizer | None = None,
        emojifier: Emojifier | None = None,
    ) -> None:
        self.config = config or FormatterConfig()
        self.resolver = resolver if resolver is not None else AccountDirectory()
        self.sanitizer = sanitizer if sanitizer is not None else Nh3Sanitizer(
            self.config.allowed_tags, self.config.allowed_attributes,
        )
        self.emojifier = emojifier

    # ------------------------------------------------------------------
    # Core API
    # ------------------------------------------------------------------

    def format(self, status: Status) -> str:
        """Format a status for display.

        Local statuses are treated as plain text, remote ones as HTML to
        be sanitized.  A boost renders the original status, credited to
        its author with an ``RT @author`` prefix.
        """
        return self._format(status, force_markup=False)

    def reformat(self, status: Status) -> str:
        """Format a status whose body is markup, regardless of origin."""
        return self._format(status, force_markup=True)

    def _format(self, status: Status, *, force_markup: bool) -> str:
        credit: Account | None = None
        if status.reblog is not None:
            credit = status.reblog.account
            status = status.proper

        content = prepare(status, self.sanitize, force_markup=force_markup)
        html = self._render(content)

        if credit is not None:
            html = insert_prefix(html, reblog_prefix(mention_html(credit, self.config.base_url)))
        if content.trust_mode == PLAIN_TEXT or not has_block_structure(html):
            html = simple_format(html)
        return self._emojify(html)

    def linkify(self, text: str) -> str:
        """Escape plain text and link its entities (no paragraph wrapping)."""
        return assemble(text, scan_entities(text), self._renderers())

    # ------------------------------------------------------------------
    # Other fields
    # ------------------------------------------------------------------

    def plaintext(self, status: Status) -> str:
        """Status text with all markup removed."""
        return text_content(prepare(status.proper, self.sanitize))

    def simplified_format(self, note: str) -> str:
        """Format an account bio: plain text, linkified, in paragraphs."""
        return self._emojify(simple_format(self.linkify(note)))

    def format_spoiler(self, status: Status) -> str:
        """Escape a content warning."""
        return self._emojify(encode(status.proper.spoiler_text))

    def format_display_name(self, account: Account) -> str:
        """Escape a display name, falling back to the username."""
        return self._emojify(encode(account.display_name or account.username))

    def sanitize(self, html: str) -> SanitizedHtml:
        """Run the sanitizer collaborator; failures surface as SanitizerError."""
        try:
            return self.sanitizer.sanitize(html)
        except SanitizerError:
            raise
        except Exception as exc:
            logger.warning("HTML sanitizer failed: %s", exc)
            raise SanitizerError(f"sanitizer failed: {exc}") from exc

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _render(self, content: PreparedContent) -> str:
        renderers = self._renderers()
        parts: list[str] = []
        for chunk, linkable in iter_segments(content):
            if linkable:
                parts.append(assemble(chunk, scan_entities(chunk), renderers))
            else:
                parts.append(chunk)
        return "".join(parts)

    def _renderers(self) -> dict[str, Renderer]:
        cfg = self.config
        return {
            URL: partial(
                link_url,
                visible_length=cfg.visible_url_length,
                rel=cfg.link_rel,
                target=cfg.link_target,
            ),
            MENTION: partial(
                render_mention,
                resolver=self.resolver,
                base_url=cfg.base_url,
                local_domain=cfg.local_domain,
            ),
            HASHTAG: partial(render_hashtag, base_url=cfg.base_url),
        }

    def _emojify(self, html: str) -> str:
        return self.emojifier.emojify(html) if self.emojifier is not None else html
