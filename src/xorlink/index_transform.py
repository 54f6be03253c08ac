"""Message index to key offset transform."""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from .types import INDEX_WORD_MASK, NoValidOffsetError


class IndexHash(ABC):
    """Pure hash applied to the masked index before offset reduction."""

    @abstractmethod
    def __call__(self, index: int) -> int:
        """Hash a 32-bit index."""
        ...


class IdentityHash(IndexHash):
    """Default hash. Required for wire compatibility with deployed firmware."""

    def __call__(self, index: int) -> int:
        return index

    def __repr__(self) -> str:
        return "IdentityHash()"


class CustomHash(IndexHash):
    """Wraps a caller-supplied ``int -> int`` function."""

    def __init__(self, fn: Callable[[int], int]) -> None:
        self._fn = fn

    def __call__(self, index: int) -> int:
        return self._fn(index) & INDEX_WORD_MASK

    def __repr__(self) -> str:
        return f"CustomHash({getattr(self._fn, '__name__', self._fn)!r})"


def valid_offsets(total_words: int, subkey_words: int) -> int:
    """
    Number of starting positions for a ``subkey_words`` window.

    Raises:
        NoValidOffsetError: If the window does not fit in the key
    """
    max_index = total_words - subkey_words + 1
    if max_index <= 0:
        raise NoValidOffsetError(total_words, subkey_words)
    return max_index


class IndexTransform:
    """
    Maps a message index to a word offset into the key material.

    ``offset = hash(index ^ index_key) % (total_words - subkey_words + 1)``

    The XOR happens before the hash so the hash input does not reveal the raw
    sequence index.
    """

    def __init__(
        self,
        index_key: int,
        total_words: int,
        subkey_words: int,
        index_hash: Optional[IndexHash] = None,
    ) -> None:
        self._index_key = index_key & INDEX_WORD_MASK
        self._hash = index_hash or IdentityHash()
        self._max_index = valid_offsets(total_words, subkey_words)

    @property
    def max_index(self) -> int:
        """Number of valid starting offsets."""
        return self._max_index

    @property
    def index_hash(self) -> IndexHash:
        """The hash strategy in use."""
        return self._hash

    def offset_for(self, index: int) -> int:
        """Return the subkey word offset for ``index``."""
        masked = (index ^ self._index_key) & INDEX_WORD_MASK
        return self._hash(masked) % self._max_index
