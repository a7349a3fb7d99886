"""
redis-helpers — Key Derivation

Maps logical identity to fully qualified store keys: ``<prefix>:<local key>``.

No normalization, escaping, or collision detection is applied; two objects
extracting the same id share a key and the last write wins.
"""

from collections.abc import Callable, Mapping
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from ..errors import ConfigurationError

T = TypeVar("T")
T_contra = TypeVar("T_contra", contravariant=True)


@runtime_checkable
class KeyExtractor(Protocol[T_contra]):
    """
    Strategy deriving a local key from a payload.

    extract() must be total and deterministic. Containers that operate on a
    whole list call it with no object; it must then return the list identity.
    """

    def extract(self, obj: T_contra | None = None) -> str: ...


class CallableKeyExtractor(Generic[T]):
    """
    Adapts a plain function to KeyExtractor.

    The function receives None for list-wide keys.
    """

    def __init__(self, fn: Callable[[T | None], str]):
        self._fn = fn

    def extract(self, obj: T | None = None) -> str:
        return str(self._fn(obj))


class AttributeKeyExtractor(Generic[T]):
    """
    Reads one field of the payload (mapping key or attribute).

    Args:
        field: Field holding the id
        list_key: Value returned when called without an object
    """

    def __init__(self, field: str, list_key: str = "list"):
        self.field = field
        self.list_key = list_key

    def extract(self, obj: T | None = None) -> str:
        if obj is None:
            return self.list_key
        if isinstance(obj, Mapping):
            value: Any = obj[self.field]
        else:
            value = getattr(obj, self.field)
        return str(value)


def as_key_extractor(extractor: Any) -> KeyExtractor[Any] | None:
    """Accept a KeyExtractor, a plain callable, or None."""
    if extractor is None or isinstance(extractor, KeyExtractor):
        return extractor
    if callable(extractor):
        return CallableKeyExtractor(extractor)
    raise ConfigurationError(
        "key_extractor must be a KeyExtractor or a callable",
        details={"type": type(extractor).__name__},
    )


class KeyCodec(Generic[T]):
    """Namespaced key builder. The prefix is fixed at construction."""

    def __init__(self, prefix: str = "", extractor: KeyExtractor[T] | Callable[..., str] | None = None):
        self._prefix = prefix
        self._extractor = as_key_extractor(extractor)

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def has_extractor(self) -> bool:
        return self._extractor is not None

    def key(self, local_key: str) -> str:
        """Key for an explicit identifier."""
        return f"{self._prefix}:{local_key}"

    def key_for(self, obj: T | None = None) -> str:
        """Key for a payload (or, without one, for the container's list)."""
        if self._extractor is None:
            raise ConfigurationError(
                "A key_extractor is required to derive keys from objects",
                details={"prefix": self._prefix},
            )
        return self.key(self._extractor.extract(obj))
