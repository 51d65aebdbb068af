"""Lambda handler serving the configured feed over API Gateway."""

import json
import os
from datetime import UTC, datetime
from typing import Any

from .cache import CacheStore
from .config import Config
from .exceptions import FeedError
from .feed import Feed
from .logging_config import create_execution_logger, setup_structured_logging
from .models import FeedFormat, RenderedFeed

# Setup structured logging
setup_structured_logging(os.getenv("LOG_LEVEL", "INFO"))

# Cache shared by warm invocations of the same container
_feed_cache: CacheStore | None = None


def get_feed_cache(config: Config) -> CacheStore:
    """Return the container-wide cache, creating it on first use."""
    global _feed_cache
    if _feed_cache is None:
        _feed_cache = config.get_cache()
    return _feed_cache


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Render the configured feed and wrap it as an HTTP response.

    The format is read from the ``format`` query string parameter
    (``atom`` unless it is exactly ``rss``).

    Args:
        event: API Gateway proxy event
        context: Lambda context object

    Returns:
        API Gateway proxy response
    """
    execution_id = f"lambda_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"
    main_logger = create_execution_logger("main", execution_id)
    main_logger.info(
        "Handling feed request",
        lambda_request_id=getattr(context, "aws_request_id", "unknown"),
    )

    params = (event or {}).get("queryStringParameters") or {}
    feed_format = params.get("format", "atom")

    try:
        config = Config()
        feed = build_feed(config, execution_id)

        # Negative TTLs would drop the headers, the handler always needs them
        cache_ttl = max(config.cache_ttl, 0)
        cache_key = f"feed-{FeedFormat.parse(feed_format).value}"
        rendered = feed.render(feed_format, cache_ttl, cache_key)

        main_logger.info(
            "Feed rendered",
            feed_format=feed_format,
            items_count=len(feed.items),
            cache_key=feed.cache_key,
        )
        return to_response(rendered)

    except FeedError as e:
        error_msg = f"Invalid feed data: {e}"
        main_logger.error(error_msg, error=str(e))
        return error_response(400, error_msg, execution_id)

    except Exception as e:
        error_msg = f"Critical error in Lambda handler: {str(e)}"
        main_logger.error(error_msg, error=str(e))
        return error_response(500, error_msg, execution_id)


def build_feed(config: Config, execution_id: str | None = None) -> Feed:
    """Create a Feed from the channel and items in the configured items file."""
    feed = Feed(config=config, cache=get_feed_cache(config), execution_id=execution_id)

    channel_config = config.get_channel_config()
    feed.channel.title = channel_config.title
    feed.channel.description = channel_config.description
    feed.channel.logo = channel_config.logo
    feed.channel.icon = channel_config.icon

    for record in config.get_items():
        feed.add_array(record)

    return feed


def to_response(rendered: RenderedFeed) -> dict[str, Any]:
    """Wrap a rendered feed as an API Gateway proxy response."""
    return {
        "statusCode": 200,
        "headers": rendered.headers,
        "body": rendered.body,
    }


def error_response(status_code: int, message: str, execution_id: str) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(
            {
                "message": "Feed rendering failed",
                "execution_id": execution_id,
                "error": message,
            }
        ),
    }
