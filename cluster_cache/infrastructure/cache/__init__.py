"""
Cache infrastructure module.
Provides the cache facade and its Redis cluster driver.
"""

from .base import Cache, get_cache
from .redis_cache import RedisCache, RedisServerConfig
from .serializers import JSONSerializer, PickleSerializer, get_serializer

__all__ = [
    "Cache",
    "get_cache",
    "RedisCache",
    "RedisServerConfig",
    "JSONSerializer",
    "PickleSerializer",
    "get_serializer",
]
