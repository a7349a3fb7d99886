"""
redis-helpers — Store Backends

Redis backend is lazy-loaded via factory.py to avoid import overhead.
"""

from .memory import InMemoryStoreClient

__all__ = [
    "InMemoryStoreClient",
]
