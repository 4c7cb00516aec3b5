"""
Redis cluster driver for the cache facade.
Namespaces keys with a fixed prefix and delegates storage to redis-py's cluster client.

Configuration example:

    CACHE_GROUPS = {
        "default": {
            "driver": "redis",
            "servers": [
                {"host": "localhost", "port": 6379, "alias": "local"},
                {"host": "redis.domain.tld", "port": 6379, "alias": "remote"},
            ],
        },
    }

Server settings:

    host   required  Host of the redis server
    port   optional  Port redis listens on, default 6379
    alias  optional  Name for direct reference to this server, default None
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from cluster_cache.core.exceptions import CacheConfigurationError, CacheException
from cluster_cache.core.logging import get_logger, log_cache_operation, log_error
from cluster_cache.infrastructure.cache.base import Cache
from cluster_cache.infrastructure.cache.serializers import get_serializer

logger = get_logger(__name__)


class RedisServerConfig(BaseModel):
    """A single redis server descriptor."""

    host: str = Field(..., min_length=1, description="Redis server host")
    port: int = Field(6379, gt=0, lt=65536, description="Redis server port")
    alias: Optional[str] = Field(None, description="Name for direct reference")


@Cache.register_driver("redis")
class RedisCache(Cache):
    """Cache driver backed by a Redis cluster."""

    # Prefix on every key, keeps delete_all() away from foreign keys
    KEY_PREFIX = "cluster-cache-redis-"

    def __init__(self, config: Dict[str, Any]):
        """
        Build the cluster client from the group configuration.

        Args:
            config (Dict[str, Any]): Group configuration with a ``servers`` list

        Raises:
            CacheException: If the redis client library cannot be imported
            CacheConfigurationError: If no valid servers are configured
        """
        try:
            from redis.cluster import ClusterNode, RedisCluster
        except ImportError as e:
            raise CacheException(
                "Redis client library not found", details={"error": str(e)}
            ) from e

        super().__init__(config)

        raw_servers = self._config.get("servers")
        if not raw_servers:
            raise CacheConfigurationError("No Redis servers defined in configuration")

        self._servers: List[RedisServerConfig] = []
        self._aliases: Dict[str, RedisServerConfig] = {}

        # Merge defaults into each server definition
        for server in raw_servers:
            try:
                normalized = RedisServerConfig.model_validate(server)
            except ValidationError as e:
                raise CacheConfigurationError(
                    "Invalid Redis server definition",
                    details={"server": server, "errors": e.errors()},
                ) from e

            self._servers.append(normalized)
            if normalized.alias is not None:
                self._aliases[normalized.alias] = normalized

        self._serializer = get_serializer(self._config.get("serializer", "json"))

        try:
            self._redis = RedisCluster(
                startup_nodes=[ClusterNode(s.host, s.port) for s in self._servers]
            )
        except Exception as e:
            log_error(e, {"group": self._config.get("group"), "operation": "connect"})
            raise

        logger.info(
            "Redis cache initialised",
            servers=[f"{s.host}:{s.port}" for s in self._servers],
            serializer=self._serializer.name,
        )

    @property
    def servers(self) -> List[RedisServerConfig]:
        """Normalized server descriptors."""
        return list(self._servers)

    def server(self, alias: str):
        """
        Get a direct connection to an aliased server.

        Args:
            alias (str): Alias from the server definition

        Returns:
            redis.Redis: Connection to that node only

        Raises:
            CacheException: If the alias is unknown or not part of the cluster
        """
        descriptor = self._aliases.get(alias)
        if descriptor is None:
            raise CacheException(
                f"Unknown Redis server alias: {alias}",
                details={"aliases": sorted(self._aliases)},
            )

        node = self._redis.get_node(host=descriptor.host, port=descriptor.port)
        if node is None:
            raise CacheException(
                f"Redis server '{alias}' is not part of the cluster",
                details={"host": descriptor.host, "port": descriptor.port},
            )
        return self._redis.get_redis_connection(node)

    def get(self, id: str, default: Any = None) -> Any:
        """
        Retrieve a cached value entry by id.

            # Retrieve cache entry from redis group
            data = Cache.instance("redis").get("foo")

            # Retrieve cache entry and return "bar" on a miss
            data = Cache.instance("redis").get("foo", "bar")

        Args:
            id (str): Id of the cache entry
            default (Any): Value returned on a miss

        Returns:
            Any: Deserialized value or ``default``
        """
        key = self._sanitize_id(id)
        value = self._redis.get(key)

        if value is None:
            logger.debug(f"Cache miss for key: {key}")
            return default

        logger.debug(f"Cache hit for key: {key}")
        return self._serializer.loads(value)

    def set(self, id: str, data: Any, lifetime: Optional[int] = None) -> bool:
        """
        Set a value to cache with id and lifetime.

            # Set "bar" to "foo" for 10 minutes
            if Cache.instance("redis").set("foo", "bar", 600):
                ...

        Args:
            id (str): Id of the cache entry
            data (Any): Data to cache
            lifetime (Optional[int]): Lifetime in seconds, defaults to the group's default_expire

        Returns:
            bool: True if the store acknowledged the write
        """
        key = self._sanitize_id(id)
        result = self._redis.setex(key, self._lifetime(lifetime), self._serializer.dumps(data))

        if result:
            logger.debug(f"Cache set for key: {key}")
            return True

        logger.warning(f"Failed to set cache for key: {key}")
        return False

    def delete(self, id: str, timeout: int = 0) -> bool:
        """
        Delete a cache entry based on id.

            # Delete "foo" immediately
            Cache.instance("redis").delete("foo")

            # Delete "bar" after 30 seconds
            Cache.instance("redis").delete("bar", 30)

        Args:
            id (str): Id of the entry to delete
            timeout (int): Zero deletes now, otherwise the entry expires after this many seconds

        Returns:
            bool: True if the entry was deleted or its expiry was set
        """
        key = self._sanitize_id(id)

        if timeout > 0:
            return bool(self._redis.expire(key, self._seconds(timeout)))

        result = self._redis.delete(key)
        if result:
            logger.debug(f"Cache deleted for key: {key}")
            return True

        logger.debug(f"Key not found for deletion: {key}")
        return False

    def delete_all(self) -> bool:
        """
        Delete all entries carrying this driver's key prefix.

        Keys written by other clients of a shared server are left alone.

        Returns:
            bool: Always True
        """
        deleted = 0
        # TODO: batch deletes per slot instead of one DEL per key
        for key in self._redis.scan_iter(match=self.KEY_PREFIX + "*"):
            self._redis.delete(key)
            deleted += 1

        log_cache_operation(
            "delete_all",
            key=self.KEY_PREFIX + "*",
            group=self._config.get("group"),
            deleted=deleted,
        )
        return True

    def _sanitize_id(self, id: str) -> str:
        """
        Sanitize an id and prepend the key prefix.

        Args:
            id (str): Id of the cache entry

        Returns:
            str: Namespaced key
        """
        return self.KEY_PREFIX + super()._sanitize_id(id)
