"""HTML escaping for plain-text segments.

Only text between entity spans goes through ``encode``; markup built by
the renderers is emitted verbatim.  Applying ``encode`` twice to the same
text double-escapes it, so every raw character must pass through here
exactly once per rendering pass.
"""

from __future__ import annotations

_ESCAPES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&apos;",
})


def encode(text: str) -> str:
    """Replace ``& < > " '`` with named character references."""
    return text.translate(_ESCAPES)
