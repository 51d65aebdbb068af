"""Cache stores for rendered feeds."""

import time
from typing import Protocol

import boto3
from botocore.exceptions import ClientError

from .logging_config import create_execution_logger


class CacheStore(Protocol):
    """Capabilities the feed builder needs from a cache backend."""

    def has(self, key: str) -> bool: ...

    def get(self, key: str) -> str | None: ...

    def put(self, key: str, value: str, ttl_seconds: int) -> None: ...


class MemoryCache:
    """Process-local cache with per-entry expiry."""

    def __init__(self, clock=time.time):
        """Initialize the cache.

        Args:
            clock: Callable returning the current time in seconds
        """
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def get(self, key: str) -> str | None:
        if key not in self._entries:
            return None

        value, expires_at = self._entries[key]
        if self._clock() >= expires_at:
            # Expired
            del self._entries[key]
            return None

        return value

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        self._entries[key] = (value, self._clock() + ttl_seconds)

    def forget(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class DynamoDBCache:
    """Cache of rendered feeds in a DynamoDB table with TTL."""

    def __init__(
        self,
        table_name: str,
        aws_region: str = "us-east-1",
        execution_id: str | None = None,
        clock=time.time,
    ):
        """Initialize the cache with DynamoDB configuration.

        Args:
            table_name: Name of the DynamoDB table, keyed on ``cache_key``
            aws_region: AWS region for DynamoDB client
            execution_id: Execution ID for logging context
            clock: Callable returning the current time in seconds
        """
        self.table_name = table_name
        self.aws_region = aws_region
        self.logger = create_execution_logger("cache", execution_id)
        self.dynamodb = boto3.resource("dynamodb", region_name=aws_region)
        self.table = self.dynamodb.Table(table_name)
        self._clock = clock

        self.logger.info(
            "DynamoDBCache initialized", table_name=table_name, aws_region=aws_region
        )

    def has(self, key: str) -> bool:
        """Check if a live entry exists for ``key``."""
        return self.get(key) is not None

    def get(self, key: str) -> str | None:
        """Fetch the cached body for ``key``.

        DynamoDB deletes expired items lazily, so entries whose ``ttl`` has
        passed are reported as absent.
        """
        try:
            response = self.table.get_item(
                Key={"cache_key": key}, ConsistentRead=True
            )
        except ClientError as e:
            self.logger.error(
                f"Error reading cache entry {key}: {e}", cache_key=key, error=str(e)
            )
            raise

        item = response.get("Item")
        if item is None:
            return None

        if int(item.get("ttl", 0)) <= int(self._clock()):
            self.logger.debug("Cache entry expired", cache_key=key)
            return None

        return item["body"]

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store ``value`` under ``key`` for ``ttl_seconds`` seconds."""
        ttl_timestamp = int(self._clock() + ttl_seconds)
        try:
            self.table.put_item(
                Item={"cache_key": key, "body": value, "ttl": ttl_timestamp}
            )
        except ClientError as e:
            self.logger.error(
                f"Error storing cache entry {key}: {e}", cache_key=key, error=str(e)
            )
            raise

        self.logger.info(
            "Stored feed in DynamoDB",
            cache_key=key,
            cache_ttl=ttl_seconds,
        )
