"""Link renderer — URL entities to anchor markup.

The anchor text keeps the whole URL in the DOM but only shows a bounded
part of it:

    <a href="https://example.com/a/long/path" rel="nofollow noopener" target="_blank">
      <span class="invisible">https://</span>
      <span class="ellipsis">example.com/a/long/pa</span>
      <span class="invisible">th</span>
    </a>

(whitespace added for readability).  Copying the link text yields the
original URL; the visible part is capped at ``visible_length`` characters.

IDN hosts are converted to punycode for the href only.  The display text
keeps the host exactly as the author wrote it.
"""

from __future__ import annotations
from urllib.parse import quote

from .escaping import encode
from .types import UrlPayload

DEFAULT_VISIBLE_LENGTH = 30
DEFAULT_REL = "nofollow noopener"
DEFAULT_TARGET = "_blank"

# Everything printable in ASCII that is legal in a URL stays as-is; "%" is
# safe so existing escapes are not escaped again.
_SAFE_URL_CHARS = "/:@!$&'()*+,;=-._~%?#[]"


def to_ascii_host(host: str) -> str | None:
    """Return the ASCII-compatible (punycode) form of ``host``.

    Returns None when the host cannot be encoded (empty or overlong labels).
    """
    try:
        return host.encode("idna").decode("ascii").lower()
    except UnicodeError:
        return None


def to_href(url: UrlPayload) -> str:
    """Build the link target: punycode host, percent-encoded non-ASCII."""
    host = to_ascii_host(url.host) or url.host
    href = f"{url.scheme}://{host}"
    if url.port:
        href += f":{url.port}"
    href += quote(url.path or "/", safe=_SAFE_URL_CHARS)
    if url.query is not None:
        href += "?" + quote(url.query, safe=_SAFE_URL_CHARS)
    if url.fragment is not None:
        href += "#" + quote(url.fragment, safe=_SAFE_URL_CHARS)
    return href


def display_url(url: UrlPayload) -> str:
    """The URL as shown to readers (original host, "/" for an empty path)."""
    text = f"{url.scheme}://{url.host}"
    if url.port:
        text += f":{url.port}"
    text += url.path or "/"
    if url.query is not None:
        text += "?" + url.query
    if url.fragment is not None:
        text += "#" + url.fragment
    return text


def link_html(url: UrlPayload, *, visible_length: int = DEFAULT_VISIBLE_LENGTH) -> str:
    """The three-span anchor body: invisible scheme, visible part, invisible rest."""
    text = display_url(url)
    prefix = f"{url.scheme}://"
    rest = text[len(prefix):]
    visible = rest[:visible_length]
    hidden = rest[visible_length:]
    css = "ellipsis" if hidden else ""
    return (
        f'<span class="invisible">{encode(prefix)}</span>'
        f'<span class="{css}">{encode(visible)}</span>'
        f'<span class="invisible">{encode(hidden)}</span>'
    )


def link_url(
    url: UrlPayload,
    *,
    visible_length: int = DEFAULT_VISIBLE_LENGTH,
    rel: str = DEFAULT_REL,
    target: str = DEFAULT_TARGET,
) -> str:
    """Render a URL entity as a complete anchor element."""
    return (
        f'<a href="{encode(to_href(url))}" rel="{encode(rel)}" target="{encode(target)}">'
        f"{link_html(url, visible_length=visible_length)}</a>"
    )
