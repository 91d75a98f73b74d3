"""YAML/dict config loader for status-formatter.

Supports loading from a YAML file or a plain dict (for embedding
in a larger application config).

Example YAML:

    status_formatter:
      local_domain: social.example
      scheme: https
      visible_url_length: 30
      links:
        rel: nofollow noopener
        target: _blank
      sanitizer:
        tags: [p, br, span, a]
        attributes:
          a: [href, rel, class]
          span: [class]
"""

from __future__ import annotations
from pathlib import Path
from typing import Any

from .formatter import Emojifier, Formatter, FormatterConfig
from .links import DEFAULT_REL, DEFAULT_TARGET, DEFAULT_VISIBLE_LENGTH
from .mentions import AccountResolver
from .sanitizer import HtmlSanitizer


def load_config(data: dict[str, Any]) -> dict[str, Any]:
    """Normalize a config dict (from YAML or inline)."""
    # Support nested under "status_formatter" key or flat
    if "status_formatter" in data:
        data = data["status_formatter"] or {}

    links = data.get("links") or {}
    sanitizer = data.get("sanitizer") or {}
    tags = sanitizer.get("tags")
    attributes = sanitizer.get("attributes")

    return {
        "local_domain": data.get("local_domain", "localhost"),
        "scheme": data.get("scheme", "https"),
        "visible_url_length": int(data.get("visible_url_length", DEFAULT_VISIBLE_LENGTH)),
        "link_rel": links.get("rel", DEFAULT_REL),
        "link_target": links.get("target", DEFAULT_TARGET),
        "allowed_tags": set(tags) if tags is not None else None,
        "allowed_attributes": (
            {tag: set(attrs) for tag, attrs in attributes.items()}
            if attributes is not None else None
        ),
    }


def load_from_yaml(path: str | Path) -> dict[str, Any]:
    """Load config from a YAML file."""
    import yaml
    with open(path) as f:
        return load_config(yaml.safe_load(f) or {})


def create_formatter(
    config: dict[str, Any],
    *,
    resolver: AccountResolver | None = None,
    sanitizer: HtmlSanitizer | None = None,
    emojifier: Emojifier | None = None,
) -> Formatter:
    """Create a fully configured formatter from a config dict."""
    cfg = config if "link_rel" in config else load_config(config)
    return Formatter(
        FormatterConfig(**cfg),
        resolver=resolver,
        sanitizer=sanitizer,
        emojifier=emojifier,
    )
