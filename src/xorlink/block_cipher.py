"""XOR block cipher over key material subkeys."""

import logging
from typing import Optional

from .index_transform import IndexHash, IndexTransform
from .key_store import WORD_FORMATS, KeyStore
from .stats import OffsetHistogram
from .types import (
    PAYLOAD_BYTES,
    WORD_BYTES,
    BlockSizeMismatchError,
    SubkeyTooLargeError,
)

logger = logging.getLogger(__name__)


class BlockCipher:
    """
    Encrypts or decrypts fixed-size blocks by XOR with a subkey.

    The subkey is the window of ``block_bytes // word_size`` words at the
    offset selected by the message index. Because XOR is used, encryption and
    decryption are the same operation.

    All configuration checks run here, once. ``apply`` on a correctly sized
    block cannot fail.
    """

    def __init__(
        self,
        key_store: KeyStore,
        index_key: int,
        block_bytes: int = PAYLOAD_BYTES,
        word_size: int = WORD_BYTES,
        index_hash: Optional[IndexHash] = None,
        histogram: Optional[OffsetHistogram] = None,
    ) -> None:
        """
        Create a block cipher.

        Args:
            key_store: Key material to draw subkeys from
            index_key: 32-bit mask XORed into every index
            block_bytes: Size of each block in bytes
            word_size: Word width used for the XOR
            index_hash: Hash strategy (identity by default)
            histogram: Optional recorder of selected offsets

        Raises:
            BlockSizeMismatchError: If ``block_bytes`` is not a positive multiple of ``word_size``
            MisalignedAccessError: If the key store cannot be viewed as ``word_size`` words
            SubkeyTooLargeError: If one block needs more words than the key holds
        """
        if word_size not in WORD_FORMATS:
            raise BlockSizeMismatchError(f"Unsupported word size: {word_size}")
        if block_bytes <= 0 or block_bytes % word_size != 0:
            raise BlockSizeMismatchError(
                f"Block of {block_bytes} bytes is not a whole number of {word_size}-byte words"
            )

        subkey_words = block_bytes // word_size
        total_words = key_store.total_words(word_size)
        if subkey_words > total_words:
            raise SubkeyTooLargeError(subkey_words, total_words)

        self._key_store = key_store
        self._block_bytes = block_bytes
        self._word_size = word_size
        self._format = WORD_FORMATS[word_size]
        self._subkey_words = subkey_words
        self._transform = IndexTransform(index_key, total_words, subkey_words, index_hash)
        self._histogram = histogram

        logger.info(
            "Block cipher ready: %d-byte blocks, %d-byte words, %d valid offsets",
            block_bytes,
            word_size,
            self._transform.max_index,
        )

    @property
    def block_bytes(self) -> int:
        return self._block_bytes

    @property
    def word_size(self) -> int:
        return self._word_size

    @property
    def subkey_words(self) -> int:
        """Number of words XORed per block."""
        return self._subkey_words

    @property
    def transform(self) -> IndexTransform:
        return self._transform

    def offset_for(self, index: int) -> int:
        """Return the subkey word offset used for ``index``."""
        return self._transform.offset_for(index)

    def apply(self, index: int, block) -> None:
        """
        Encrypt or decrypt ``block`` in place.

        Args:
            index: Message index selecting the subkey
            block: Writable contiguous buffer of exactly ``block_bytes`` bytes

        Raises:
            TypeError: If ``block`` is read-only or not contiguous
            BlockSizeMismatchError: If ``block`` has the wrong size
        """
        raw = memoryview(block)
        if raw.readonly:
            raise TypeError("Block must be a writable buffer")
        if raw.nbytes != self._block_bytes:
            raise BlockSizeMismatchError(
                f"Block is {raw.nbytes} bytes, cipher expects {self._block_bytes}"
            )

        words = raw.cast("B").cast(self._format)

        offset = self._transform.offset_for(index)
        if self._histogram is not None:
            self._histogram.record(offset)

        subkey = self._key_store.subkey(offset, self._subkey_words, self._word_size)
        for i, key_word in enumerate(subkey):
            words[i] ^= key_word

    def transform_bytes(self, index: int, data: bytes) -> bytes:
        """Return a ciphered copy of ``data``, leaving the input untouched."""
        block = bytearray(data)
        self.apply(index, block)
        return bytes(block)
