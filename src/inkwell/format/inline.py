"""Inline formatting for note text previews."""

import html
import re

PREVIEW_LIMIT = 200
ELLIPSIS = "..."

BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
ITALIC_RE = re.compile(r"\*(.*?)\*")
CODE_RE = re.compile(r"`([^`]+)`")
HEADING_RE = re.compile(r"^#{1,3}\s+(.+)$", re.MULTILINE)


def format_inline(text: str) -> str:
    """Apply the supported inline subset and flatten to a single line.

    Supported, in this order:
        **bold**        -> <strong>bold</strong>
        *italic*        -> <em>italic</em>
        `code`          -> <code>code</code>
        # Heading       -> <strong>Heading</strong>  (levels 1-3)

    Anything else is left as (escaped) text. Newlines become spaces.
    """
    result = html.escape(text, quote=False)
    result = BOLD_RE.sub(r"<strong>\1</strong>", result)
    result = ITALIC_RE.sub(r"<em>\1</em>", result)
    result = CODE_RE.sub(r"<code>\1</code>", result)
    result = HEADING_RE.sub(r"<strong>\1</strong>", result)
    return result.replace("\n", " ")


def truncate(text: str, limit: int = PREVIEW_LIMIT) -> tuple[str, bool]:
    """Cut `text` to `limit` characters plus an ellipsis.

    Returns the (possibly shortened) text and whether it was cut.
    """
    if limit <= 0 or len(text) <= limit:
        return text, False
    return text[:limit] + ELLIPSIS, True
