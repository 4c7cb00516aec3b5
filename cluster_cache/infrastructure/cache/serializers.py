"""
Value serializers for cache entries.
The store only ever sees the serialized bytes.
"""

import json
import pickle
from typing import Any, Dict

from cluster_cache.core.exceptions import CacheConfigurationError


class JSONSerializer:
    """UTF-8 JSON serialization. Values JSON cannot encode raise TypeError."""

    name = "json"

    def dumps(self, value: Any) -> bytes:
        return json.dumps(value).encode("utf-8")

    def loads(self, blob: bytes) -> Any:
        if isinstance(blob, bytes):
            blob = blob.decode("utf-8")
        return json.loads(blob)


class PickleSerializer:
    """Pickle serialization, for values JSON cannot represent."""

    name = "pickle"

    def dumps(self, value: Any) -> bytes:
        return pickle.dumps(value, protocol=pickle.HIGHEST_PROTOCOL)

    def loads(self, blob: bytes) -> Any:
        return pickle.loads(blob)


SERIALIZERS: Dict[str, Any] = {
    JSONSerializer.name: JSONSerializer(),
    PickleSerializer.name: PickleSerializer(),
}


def get_serializer(name: str = "json"):
    """
    Get a serializer by name.

    Args:
        name (str): Serializer name ("json" or "pickle")

    Returns:
        Serializer instance

    Raises:
        CacheConfigurationError: If the name is unknown
    """
    try:
        return SERIALIZERS[name]
    except KeyError:
        raise CacheConfigurationError(
            f"Unknown cache serializer: {name}",
            details={"available": sorted(SERIALIZERS)},
        ) from None
