import fnmatch
import os
import sys

import pytest

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from cluster_cache.core.config import settings  # noqa: E402
from cluster_cache.infrastructure.cache import Cache  # noqa: E402


class FakeRedisCluster:
    """In-memory stand-in for redis.cluster.RedisCluster."""

    instances = []

    def __init__(self, startup_nodes=None, **kwargs):
        self.startup_nodes = startup_nodes or []
        self.kwargs = kwargs
        self.store = {}
        self.ttls = {}
        self.deleted = []
        FakeRedisCluster.instances.append(self)

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, time, value):
        self.store[key] = value
        self.ttls[key] = time
        return True

    def expire(self, key, time):
        if key not in self.store:
            return False
        self.ttls[key] = time
        return True

    def delete(self, *keys):
        removed = 0
        for key in keys:
            self.deleted.append(key)
            if key in self.store:
                del self.store[key]
                self.ttls.pop(key, None)
                removed += 1
        return removed

    def scan_iter(self, match=None, **kwargs):
        keys = [k for k in self.store if match is None or fnmatch.fnmatchcase(k, match)]
        return iter(keys)

    def get_node(self, host=None, port=None, node_name=None):
        for node in self.startup_nodes:
            if node.host == host and node.port == port:
                return node
        return None

    def get_redis_connection(self, node):
        return ("connection", node.host, node.port)


@pytest.fixture(autouse=True)
def reset_cache_instances():
    """Each test starts without cached group instances."""
    Cache.instances.clear()
    yield
    Cache.instances.clear()


@pytest.fixture
def fake_cluster(monkeypatch):
    """
    Replace the cluster client so no Redis server is needed.
    Returns the class; the created client is ``FakeRedisCluster.instances[-1]``.
    """
    FakeRedisCluster.instances = []
    monkeypatch.setattr("redis.cluster.RedisCluster", FakeRedisCluster)
    return FakeRedisCluster


@pytest.fixture
def redis_config():
    """Two-server group configuration, one aliased."""
    return {
        "driver": "redis",
        "servers": [
            {"host": "10.0.0.1", "port": 7000, "alias": "primary"},
            {"host": "10.0.0.2"},
        ],
    }


@pytest.fixture
def cache_groups(monkeypatch, redis_config):
    """Install test cache groups into settings."""
    groups = {
        "default": redis_config,
        "pickled": dict(redis_config, serializer="pickle", default_expire=60),
        "broken": {"driver": "memcache", "servers": [{"host": "10.0.0.3"}]},
    }
    monkeypatch.setattr(settings, "CACHE_GROUPS", groups)
    return groups
