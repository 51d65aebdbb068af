"""Feed builder: collects items and renders them as Atom or RSS."""

import html
from collections.abc import Mapping
from dataclasses import asdict, replace
from typing import Any

from .cache import CacheStore
from .config import Config
from .dates import format_date, get_timezone, now_rfc2822
from .exceptions import FieldMissing
from .logging_config import create_execution_logger
from .models import (
    ATOM_MIME_TYPE,
    Channel,
    DateFormat,
    FeedFormat,
    FeedItem,
    RenderedFeed,
)
from .renderer import TemplateRenderer
from .text import strip_html, truncate

REQUIRED_FIELDS = ("title", "author", "link", "pubdate", "description")
ITEM_FIELDS = REQUIRED_FIELDS + ("content",)

DEFAULT_CACHE_KEY = "laravel-feed"


class Feed:
    """Accumulates feed items and renders them, optionally through a cache.

    Example:
        feed = Feed(config=Config(), cache=MemoryCache())
        feed.channel.title = "Latest posts"
        feed.add("Hello", "Jane", "https://example.com/hello",
                 "2024-01-02 15:04:05", "First post")
        response = feed.render("rss", 60, "posts-rss")
    """

    def __init__(
        self,
        config: Config | None = None,
        cache: CacheStore | None = None,
        renderer: TemplateRenderer | None = None,
        execution_id: str | None = None,
    ):
        """Initialize the builder.

        Args:
            config: Source of the default language, site URL and timezone
            cache: Store for rendered documents (defaults to the configured one)
            renderer: Template engine (defaults to the bundled Jinja2 templates)
            execution_id: Execution ID for logging context
        """
        self.config = config or Config()
        self.cache = cache if cache is not None else self.config.get_cache()
        self.renderer = renderer or TemplateRenderer(execution_id=execution_id)
        self.execution_id = execution_id
        self.logger = create_execution_logger("feed", execution_id)
        self.tz = get_timezone(self.config.get("timezone", "UTC"))

        self.items: list[FeedItem] = []
        self.channel = Channel()
        self.charset = "utf-8"
        self.content_type = ATOM_MIME_TYPE
        self.cache_key = DEFAULT_CACHE_KEY
        self.cache_ttl = 0
        self.shortening = False
        self.shortening_limit = 150
        self.date_format = DateFormat.TEXTUAL
        self._namespaces: list[str] = []
        self._generated_pubdate: str | None = None

    def make(self) -> "Feed":
        """Return a new, empty builder sharing this one's collaborators."""
        return Feed(
            config=self.config,
            cache=self.cache,
            renderer=self.renderer,
            execution_id=self.execution_id,
        )

    def add(
        self,
        title: str,
        author: str,
        link: str,
        pubdate: Any,
        description: str,
        content: str = "",
    ) -> None:
        """Append an item to the feed."""
        self.items.append(
            self._build_item(title, author, link, pubdate, description, content)
        )

    def add_array(self, record: Mapping[str, Any]) -> None:
        """Append an item given as a mapping.

        Keys other than the item fields are kept and passed to the templates.

        Raises:
            FieldMissing: If one of the required fields is absent
        """
        for name in REQUIRED_FIELDS:
            if name not in record:
                raise FieldMissing(name)

        item = self._build_item(
            record["title"],
            record["author"],
            record["link"],
            record["pubdate"],
            record["description"],
            record.get("content", ""),
        )
        item.extra = {k: v for k, v in record.items() if k not in ITEM_FIELDS}
        self.items.append(item)

    def _build_item(self, title, author, link, pubdate, description, content):
        if self.shortening:
            description = truncate(description, self.shortening_limit)

        return FeedItem(
            title=title,
            author=author,
            link=link,
            pubdate=format_date(pubdate, self.date_format, FeedFormat.ATOM, self.tz),
            description=description,
            content=content,
        )

    def add_namespace(self, namespace: str) -> None:
        """Add a raw namespace declaration to the root element."""
        self._namespaces.append(namespace)

    def get_namespaces(self) -> list[str]:
        return list(self._namespaces)

    def set_text_limit(self, limit: int = 150) -> None:
        self.shortening_limit = limit

    def set_shortening(self, enabled: bool = False) -> None:
        self.shortening = enabled

    def set_date_format(self, date_format: DateFormat | str = "datetime") -> None:
        """Choose how raw publish dates are read: structured, timestamp or textual."""
        self.date_format = DateFormat.parse(date_format)

    def render(
        self,
        format: FeedFormat | str = FeedFormat.ATOM,
        cache_ttl: int = 0,
        cache_key: str = DEFAULT_CACHE_KEY,
    ) -> RenderedFeed | str:
        """Render the feed.

        Args:
            format: "atom" or "rss"
            cache_ttl: Seconds to cache the document. 0 renders without the
                cache; a negative value also skips the cache and returns the
                bare XML string instead of a RenderedFeed.
            cache_key: Key the document is cached under

        Returns:
            RenderedFeed, or the XML string when ``cache_ttl`` is negative
        """
        feed_format = FeedFormat.parse(format)
        channel = self.channel

        if not channel.lang:
            channel.lang = self.config.get("language")
        if not channel.link:
            channel.link = self.config.get("url")
        if channel.pubdate in (None, ""):
            channel.pubdate = now_rfc2822(self.tz)
            self._generated_pubdate = channel.pubdate

        # A pubdate filled in above is always text, whatever the date format
        if channel.pubdate == self._generated_pubdate:
            pubdate_format = DateFormat.TEXTUAL
        else:
            pubdate_format = self.date_format
        pubdate = format_date(channel.pubdate, pubdate_format, feed_format, self.tz)

        self.cache_key = cache_key
        self.cache_ttl = cache_ttl
        self.content_type = feed_format.mime_type

        channel_view = asdict(channel)
        channel_view["pubdate"] = pubdate
        items = list(self.items)

        if feed_format is FeedFormat.RSS:
            channel_view["title"] = strip_html(channel.title)
            channel_view["description"] = strip_html(channel.description)

            # Every item is stamped with the channel's date
            item_pubdate = format_date(
                pubdate, DateFormat.TEXTUAL, FeedFormat.RSS, self.tz
            )
            items = [
                replace(
                    item,
                    title=strip_html(item.title),
                    description=strip_html(item.description),
                    pubdate=item_pubdate,
                )
                for item in items
            ]

        self.logger.log_render(feed_format.value, len(items), cache_ttl, cache_key)

        def render_document() -> str:
            return self._render_template(feed_format, items, channel_view)

        if cache_ttl > 0:
            cache_hit = self.cache.has(cache_key)
            self.logger.log_cache_decision(cache_key, cache_hit)
            body = self.cache.get(cache_key) if cache_hit else None
            if body is None:
                # Missed, or expired between has() and get()
                body = render_document()
                self.cache.put(cache_key, body, cache_ttl)
                body = self.cache.get(cache_key) or body
            return self._respond(body)

        if cache_ttl < 0:
            return render_document()

        return self._respond(render_document())

    def _render_template(
        self, feed_format: FeedFormat, items: list[FeedItem], channel: dict[str, Any]
    ) -> str:
        try:
            return self.renderer.render(
                feed_format.template,
                items=[item.as_dict() for item in items],
                channel=channel,
                namespaces=self.get_namespaces(),
            )
        except Exception as e:
            self.logger.error(
                f"Failed to render {feed_format.value} feed: {e}",
                feed_format=feed_format.value,
                template=feed_format.template,
                error=str(e),
            )
            raise

    def _respond(self, body: str) -> RenderedFeed:
        return RenderedFeed(body=body, content_type=self.content_type, charset=self.charset)

    def link(self, url: str, format: FeedFormat | str = FeedFormat.ATOM) -> str:
        """Build an HTML <link> tag advertising the feed."""
        mime_type = FeedFormat.parse(format).mime_type
        return f'<link rel="alternate" type="{mime_type}" href="{html.escape(url)}" />'

    def is_cached(self) -> bool:
        """Check if a document is cached under the last used cache key."""
        return self.cache.has(self.cache_key)
