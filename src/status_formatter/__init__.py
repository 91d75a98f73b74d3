"""status-formatter — safe, linkified HTML for social status text."""

from .formatter import Formatter, FormatterConfig, Emojifier
from .mentions import AccountDirectory, AccountResolver
from .sanitizer import Nh3Sanitizer, HtmlSanitizer, SanitizedHtml
from .patterns import scan_entities
from .escaping import encode
from .config import create_formatter, load_config, load_from_yaml
from .errors import FormatterError, CollaboratorError, ResolverError, SanitizerError
from .types import Account, Status, EntitySpan, UrlPayload, MentionPayload, HashtagPayload

__all__ = [
    "Formatter", "FormatterConfig", "Emojifier",
    "AccountDirectory", "AccountResolver",
    "Nh3Sanitizer", "HtmlSanitizer", "SanitizedHtml",
    "scan_entities", "encode",
    "create_formatter", "load_config", "load_from_yaml",
    "FormatterError", "CollaboratorError", "ResolverError", "SanitizerError",
    "Account", "Status", "EntitySpan", "UrlPayload", "MentionPayload", "HashtagPayload",
]
__version__ = "0.1.0"
