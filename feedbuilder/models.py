"""Data models for the feed builder."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

ATOM_MIME_TYPE = "application/atom+xml"
RSS_MIME_TYPE = "application/rss+xml"


class FeedFormat(str, Enum):
    """Supported output formats."""

    ATOM = "atom"
    RSS = "rss"

    @property
    def mime_type(self) -> str:
        return RSS_MIME_TYPE if self is FeedFormat.RSS else ATOM_MIME_TYPE

    @property
    def template(self) -> str:
        return f"{self.value}.xml.jinja"

    @classmethod
    def parse(cls, value: "FeedFormat | str") -> "FeedFormat":
        """Only the exact value "rss" selects RSS, everything else is Atom."""
        if isinstance(value, cls):
            return value
        return cls.RSS if value == cls.RSS.value else cls.ATOM


class DateFormat(str, Enum):
    """How raw publish dates handed to the builder are represented."""

    STRUCTURED = "structured"
    TIMESTAMP = "timestamp"
    TEXTUAL = "textual"

    @classmethod
    def parse(cls, value: "DateFormat | str") -> "DateFormat":
        if isinstance(value, cls):
            return value
        aliases = {"carbon": cls.STRUCTURED, "datetime": cls.TEXTUAL}
        if value in aliases:
            return aliases[value]
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown date format: {value!r}") from None


@dataclass
class FeedItem:
    """A single entry of the feed, with its publish date already normalized."""

    title: str
    author: str
    link: str
    pubdate: str
    description: str
    content: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Template view of the item, extra keys included."""
        data = dict(self.extra)
        data.update(
            title=self.title,
            author=self.author,
            link=self.link,
            pubdate=self.pubdate,
            description=self.description,
            content=self.content,
        )
        return data


@dataclass
class Channel:
    """Feed-level metadata. Empty strings mean "not set"."""

    title: str = "My feed title"
    description: str = "My feed description"
    link: str = ""
    feed_url: str = ""
    logo: str = ""
    icon: str = ""
    pubdate: Any = ""
    lang: str = ""


@dataclass
class RenderedFeed:
    """A rendered document plus the header it must be served with."""

    body: str
    content_type: str
    charset: str = "utf-8"

    @property
    def content_type_header(self) -> str:
        return f"{self.content_type}; charset={self.charset}"

    @property
    def headers(self) -> dict[str, str]:
        return {"Content-Type": self.content_type_header}

    def __str__(self) -> str:
        return self.body
