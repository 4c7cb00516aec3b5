"""
Generic cache facade.
Resolves named cache groups from settings to singleton driver instances.
"""

import math
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Type

from cluster_cache.core.config import settings
from cluster_cache.core.exceptions import CacheDriverNotFoundError, CacheException
from cluster_cache.core.logging import get_logger

logger = get_logger(__name__)


class Cache(ABC):
    """
    Base class for cache drivers.

    Drivers are obtained through ``Cache.instance(group)`` which keeps one
    instance per configured group:

        cache = Cache.instance("redis")
        cache.set("foo", {"bar": 1}, 600)
        cache.get("foo")
    """

    DEFAULT_EXPIRE: int = settings.CACHE_DEFAULT_EXPIRE

    # Default group name used when none is passed to instance()
    default: str = settings.CACHE_DEFAULT_GROUP

    instances: Dict[str, "Cache"] = {}

    _drivers: Dict[str, Type["Cache"]] = {}

    @classmethod
    def register_driver(cls, name: str):
        """
        Class decorator registering a driver under ``name``.

        Args:
            name (str): Value of the group ``driver`` setting

        Returns:
            Callable: The decorator
        """
        def decorator(driver_cls: Type["Cache"]) -> Type["Cache"]:
            cls._drivers[name] = driver_cls
            return driver_cls
        return decorator

    @classmethod
    def instance(cls, group: Optional[str] = None) -> "Cache":
        """
        Get the singleton cache instance for a group.

        Args:
            group (Optional[str]): Group name, defaults to ``Cache.default``

        Returns:
            Cache: Driver instance for the group

        Raises:
            CacheException: If the group is not configured
            CacheDriverNotFoundError: If the group's driver is not registered
        """
        if group is None:
            group = cls.default

        if group in Cache.instances:
            return Cache.instances[group]

        groups = settings.CACHE_GROUPS
        if group not in groups:
            raise CacheException(
                f"Failed to load cache group: {group}",
                details={"group": group},
            )

        config = dict(groups[group])
        driver = config.get("driver")
        driver_cls = cls._drivers.get(driver)
        if driver_cls is None:
            raise CacheDriverNotFoundError(driver, details={"group": group})

        config.setdefault("group", group)
        Cache.instances[group] = driver_cls(config)
        logger.info(f"Cache group '{group}' loaded with driver '{driver}'")
        return Cache.instances[group]

    def __init__(self, config: Dict[str, Any]):
        self._config: Dict[str, Any] = {}
        self.config(config)

    def config(self, key=None, value=None):
        """
        Getter and setter for the driver configuration.

            # Whole config
            cache.config()

            # Single setting
            cache.config("servers")

            # Set a value, chainable
            cache.config("default_expire", 60)

            # Replace the config
            cache.config({"driver": "redis", "servers": [...]})
        """
        if key is None:
            return self._config

        if isinstance(key, dict):
            self._config = dict(key)
            return self

        if value is None:
            return self._config.get(key)

        self._config[key] = value
        return self

    def __copy__(self):
        raise CacheException("Cloning of cache objects is forbidden")

    def __deepcopy__(self, memo):
        raise CacheException("Cloning of cache objects is forbidden")

    @abstractmethod
    def get(self, id: str, default: Any = None) -> Any:
        """Retrieve a cached value by id, or ``default`` on a miss."""

    @abstractmethod
    def set(self, id: str, data: Any, lifetime: Optional[int] = None) -> bool:
        """Store a value under id for ``lifetime`` seconds."""

    @abstractmethod
    def delete(self, id: str, timeout: int = 0) -> bool:
        """Delete a value by id."""

    @abstractmethod
    def delete_all(self) -> bool:
        """Delete every entry owned by this cache."""

    def _lifetime(self, lifetime: Optional[int]) -> int:
        """Resolve a lifetime, falling back to the group's ``default_expire``."""
        if lifetime is None:
            lifetime = self._config.get("default_expire") or self.DEFAULT_EXPIRE
        return self._seconds(lifetime)

    @staticmethod
    def _seconds(value) -> int:
        """Whole seconds for the store, rounding fractions up so 0.5 never becomes 0."""
        return int(math.ceil(value))

    def _sanitize_id(self, id: str) -> str:
        """Replace slashes, backslashes and spaces with underscores."""
        return str(id).replace("/", "_").replace("\\", "_").replace(" ", "_")


def get_cache(group: Optional[str] = None) -> Cache:
    """
    Get cache instance.

    Args:
        group (Optional[str]): Cache group name

    Returns:
        Cache: Cache instance for the group
    """
    return Cache.instance(group)
