"""
redis-helpers — Cache Module

Resilient cache containers on top of a StoreClient.

Usage:
    from redis_helpers.cache import KeyedListCache, ValueCache

    values = ValueCache(client, config)
    await values.set("key", {"a": 1})
    value = await values.get("key")
"""

from .base import BaseCache, ObjectCache
from .keyed_list_cache import KeyedListCache
from .keys import AttributeKeyExtractor, CallableKeyExtractor, KeyCodec, KeyExtractor
from .list_cache import ListCache
from .value_cache import ValueCache

__all__ = [
    # Containers
    "ValueCache",
    "ListCache",
    "KeyedListCache",
    # Bases
    "BaseCache",
    "ObjectCache",
    # Keys
    "KeyCodec",
    "KeyExtractor",
    "AttributeKeyExtractor",
    "CallableKeyExtractor",
]
