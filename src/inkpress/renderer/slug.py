"""Heading slug derivation shared by anchors and the table of contents."""

import re
from urllib.parse import quote

_WHITESPACE_RE = re.compile(r"\s+")

# Characters a URI component may carry unencoded besides ``A-Za-z0-9_.-~``
_URI_COMPONENT_SAFE = "!*'()"


def slugify(text: str) -> str:
    """
    Derive an anchor id from heading text.

    The text is lower-cased, trimmed, whitespace runs become single hyphens,
    and the result is percent-encoded as a URI component. Non-ASCII input
    such as CJK survives as its UTF-8 percent-encoding.

    Args:
        text: Plain heading text

    Returns:
        URL-fragment-safe slug
    """
    collapsed = _WHITESPACE_RE.sub("-", text.lower().strip())
    return quote(collapsed, safe=_URI_COMPONENT_SAFE)
