"""Mention and hashtag rendering, plus the account-resolver interface.

Mentions only become links when the resolver knows the account; an
unknown ``@user@domain`` stays plain text so no dead profile links are
emitted.  Hashtags always link.
"""

from __future__ import annotations
import logging
from typing import Protocol
from urllib.parse import quote

from .errors import ResolverError
from .escaping import encode
from .types import Account, HashtagPayload, MentionPayload

logger = logging.getLogger(__name__)


class AccountResolver(Protocol):
    """Looks up an account by username and optional domain (None = local)."""

    def resolve(self, username: str, domain: str | None = None) -> Account | None:
        ...


class AccountDirectory:
    """In-memory resolver, case-insensitive on username and domain."""

    __slots__ = ("_accounts",)

    def __init__(self, accounts: list[Account] | None = None) -> None:
        self._accounts: dict[tuple[str, str | None], Account] = {}
        for account in accounts or []:
            self.add(account)

    def add(self, account: Account) -> None:
        self._accounts[_key(account.username, account.domain)] = account

    def resolve(self, username: str, domain: str | None = None) -> Account | None:
        return self._accounts.get(_key(username, domain))


def _key(username: str, domain: str | None) -> tuple[str, str | None]:
    return username.lower(), domain.lower() if domain else None


# ------------------------------------------------------------------
# URLs
# ------------------------------------------------------------------

def profile_url(account: Account, base_url: str) -> str:
    """Canonical profile URL; local accounts live under ``base_url``."""
    if account.url:
        return account.url
    if account.local:
        return f"{base_url}/@{quote(account.username)}"
    return f"https://{account.domain}/@{quote(account.username)}"


def tag_url(name: str, base_url: str) -> str:
    return f"{base_url}/tags/{quote(name.lower(), safe='')}"


# ------------------------------------------------------------------
# Rendering
# ------------------------------------------------------------------

def mention_html(account: Account, base_url: str) -> str:
    """h-card anchor for an account, displayed as ``@username``."""
    return (
        f'<span class="h-card"><a href="{encode(profile_url(account, base_url))}" class="u-url mention">'
        f"@<span>{encode(account.username)}</span></a></span>"
    )


def render_mention(
    mention: MentionPayload,
    resolver: AccountResolver,
    *,
    base_url: str,
    local_domain: str | None = None,
) -> str | None:
    """Resolve and render a mention.  None when the account is unknown.

    ``@user@local_domain`` is looked up as a local account.  Resolver
    failures are raised as ResolverError.
    """
    domain = mention.domain
    if domain and local_domain and domain.lower() == local_domain.lower():
        domain = None

    acct = mention.username if domain is None else f"{mention.username}@{domain}"
    try:
        account = resolver.resolve(mention.username, domain)
    except ResolverError:
        raise
    except Exception as exc:
        logger.warning("Account resolver failed for %s: %s", acct, exc)
        raise ResolverError(f"could not resolve @{acct}") from exc

    if account is None:
        logger.debug("Unresolved mention @%s left as text", acct)
        return None
    return mention_html(account, base_url)


def render_hashtag(tag: HashtagPayload, *, base_url: str) -> str:
    """Anchor to the tag index; the link target is lowercase."""
    return (
        f'<a href="{encode(tag_url(tag.name, base_url))}" class="mention hashtag" rel="tag">'
        f"#<span>{encode(tag.name)}</span></a>"
    )
