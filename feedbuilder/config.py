"""Configuration management for the feed builder."""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .cache import CacheStore, DynamoDBCache, MemoryCache


@dataclass
class ChannelConfig:
    """Channel metadata loaded from the items file."""

    title: str = "My feed title"
    description: str = "My feed description"
    logo: str = ""
    icon: str = ""


class Config:
    """Main configuration manager."""

    # Default items file path
    ITEMS_FILE = "items.json"

    # Dotted keys accepted by get() for the channel defaults
    KEY_ALIASES = {
        "application.language": "language",
        "application.url": "url",
    }

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.language = os.getenv("FEED_LANGUAGE", "en")
        self.url = os.getenv("FEED_URL", "")
        self.timezone = os.getenv("FEED_TIMEZONE", "UTC")
        self.cache_table = os.getenv("FEED_CACHE_TABLE", "")
        self.cache_ttl = int(os.getenv("FEED_CACHE_TTL", "0"))
        self.items_file = os.getenv("FEED_ITEMS_FILE", self.ITEMS_FILE)
        self.aws_region = os.getenv(
            "CURRENT_AWS_REGION", os.getenv("AWS_DEFAULT_REGION", "us-east-1")
        )
        self.log_level = os.getenv("LOG_LEVEL", "INFO")

    def get(self, key: str, default: str = "") -> str:
        """Look up a configuration value by name."""
        key = self.KEY_ALIASES.get(key, key)
        value = vars(self).get(key)
        if value is None:
            return default
        return str(value)

    def _load_items_file(self) -> dict[str, Any]:
        items_file = Path(self.items_file)
        if not items_file.exists():
            # Try in Lambda root directory
            items_file = Path("/var/task") / self.items_file

        if not items_file.exists():
            raise FileNotFoundError(f"Items file not found: {self.items_file}")

        try:
            with open(items_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in items file: {e}")

        if not isinstance(data, dict):
            raise ValueError("Items file must contain a JSON object")
        return data

    def get_channel_config(self) -> ChannelConfig:
        """Get channel metadata from the items file."""
        channel = self._load_items_file().get("channel", {})
        defaults = ChannelConfig()
        return ChannelConfig(
            title=channel.get("title", defaults.title),
            description=channel.get("description", defaults.description),
            logo=channel.get("logo", ""),
            icon=channel.get("icon", ""),
        )

    def get_items(self) -> list[dict[str, Any]]:
        """Get the item records from the items file."""
        items = self._load_items_file().get("items", [])
        if not isinstance(items, list):
            raise ValueError("'items' in items file must be a list")
        return items

    def get_cache(self) -> CacheStore:
        """Build the configured cache backend."""
        if self.cache_table:
            return DynamoDBCache(self.cache_table, aws_region=self.aws_region)
        return MemoryCache()
