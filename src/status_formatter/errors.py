"""Exception hierarchy.

Malformed input never raises: it is rendered as escaped plain text.
These errors are reserved for collaborator failures, which indicate
infrastructure trouble and must reach the caller.
"""

from __future__ import annotations


class FormatterError(Exception):
    """Base formatter error."""


class CollaboratorError(FormatterError):
    """An external collaborator (resolver, sanitizer) failed."""


class ResolverError(CollaboratorError):
    """The account resolver raised while looking up a mention."""


class SanitizerError(CollaboratorError):
    """The HTML sanitizer raised while cleaning remote content."""
