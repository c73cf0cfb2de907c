"""
Text sanitization for values written to the options and description stores.

Markup is removed with BeautifulSoup's html.parser, so stray "<", ">" and
"&" in plain text survive as text.
"""

import re
import warnings

import structlog
from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning

logger = structlog.get_logger()

# Short inputs such as "example.com" are content here, not file names or URLs
warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)

# Elements whose text is never content
REMOVE_TAGS = ["script", "style", "noscript", "template"]

_WHITESPACE_RE = re.compile(r"\s+")
_LINE_WHITESPACE_RE = re.compile(r"[ \t\r\f\v]+")


def _strip_control_chars(value: str) -> str:
    """Drop control characters except tab and newline."""
    return "".join(char for char in value if char >= " " or char in "\n\t")


def _strip_tags(value: str) -> str:
    """Return the text content of value. Text without markup is returned untouched."""
    if "<" not in value:
        return value

    soup = BeautifulSoup(value, "html.parser")
    for element in soup.find_all(REMOVE_TAGS):
        element.decompose()
    return soup.get_text()


def sanitize_text_field(value: str | None) -> str:
    """
    Sanitize a single-line text value.

    Removes tags and control characters, collapses all whitespace
    (newlines included) into single spaces and trims the result.
    """
    if not value:
        return ""

    cleaned = _strip_control_chars(_strip_tags(value))
    cleaned = _WHITESPACE_RE.sub(" ", cleaned).strip()

    if cleaned != value.strip():
        logger.debug("sanitize_text_field_modified", original_len=len(value), cleaned_len=len(cleaned))

    return cleaned


def sanitize_textarea_field(value: str | None) -> str:
    """Like sanitize_text_field but preserves line breaks."""
    if not value:
        return ""

    cleaned = _strip_control_chars(_strip_tags(value))
    lines = [_LINE_WHITESPACE_RE.sub(" ", line).strip() for line in cleaned.split("\n")]
    return "\n".join(lines).strip()
