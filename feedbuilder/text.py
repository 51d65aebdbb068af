"""Text helpers for item descriptions and titles."""

from bs4 import BeautifulSoup
from bs4.element import CData, NavigableString, Script, Stylesheet, TemplateString

TEXT_TYPES = (NavigableString, CData, Script, Stylesheet, TemplateString)


def truncate(text: str, limit: int) -> str:
    """Cut text to at most ``limit`` characters.

    Counts code points, so multi-byte characters are never split.
    A limit of zero or less yields an empty string.
    """
    if limit <= 0:
        return ""
    return text[:limit]


def strip_html(content: str) -> str:
    """Remove HTML tags from content and decode HTML entities.

    Args:
        content: Raw text that may contain HTML

    Returns:
        Plain text with entities decoded
    """
    if not content:
        return ""

    # Entity-only text still goes through the parser to be decoded
    if "<" not in content and "&" not in content:
        return content

    soup = BeautifulSoup(content, "html.parser")

    # Script and style text is kept, only the tags go
    return soup.get_text(types=TEXT_TYPES)
