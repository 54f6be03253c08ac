"""Key material storage and subkey extraction."""

import struct

from .keys import fingerprint
from .types import (
    KEY_ALIGNMENT,
    SUPPORTED_WORD_SIZES,
    WORD_BYTES,
    InvalidKeyLengthError,
    LayoutError,
    MisalignedAccessError,
    SubkeyOutOfRangeError,
    SubkeyTooLargeError,
)


# Native memoryview format codes for each supported word width
WORD_FORMATS = {1: "B", 2: "H", 4: "I", 8: "Q"}

for _size, _fmt in WORD_FORMATS.items():
    if struct.calcsize(_fmt) != _size:
        raise LayoutError(f"Native format {_fmt!r} is {struct.calcsize(_fmt)} bytes, expected {_size}")


class KeyStore:
    """
    Immutable key material viewed as arrays of native-endian words.

    The store guarantees that its length is a multiple of ``alignment``, so
    any word width up to the alignment tiles the buffer exactly. Subkeys are
    returned as read-only ``memoryview`` windows over the stored bytes.

    Example usage:
        ```python
        store = KeyStore(key_material)
        words = store.subkey(word_offset=12, length=7)
        ```
    """

    def __init__(self, key_material: bytes, alignment: int = KEY_ALIGNMENT) -> None:
        """
        Create a key store from a provisioning blob.

        Args:
            key_material: Raw key bytes (copied)
            alignment: Guaranteed word alignment, one of SUPPORTED_WORD_SIZES

        Raises:
            InvalidKeyLengthError: If the length is zero or not a multiple of ``alignment``
        """
        if alignment not in SUPPORTED_WORD_SIZES:
            raise ValueError(f"Unsupported alignment: {alignment}")

        data = bytes(key_material)
        if not data or len(data) % alignment != 0:
            raise InvalidKeyLengthError(len(data), alignment)

        self._data = data
        self._alignment = alignment
        self._views = {
            size: memoryview(data).cast(fmt)
            for size, fmt in WORD_FORMATS.items()
            if size <= alignment
        }

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"KeyStore(size={len(self._data)}, alignment={self._alignment})"

    @property
    def size(self) -> int:
        """Size of the key material in bytes."""
        return len(self._data)

    @property
    def alignment(self) -> int:
        """Guaranteed word alignment in bytes."""
        return self._alignment

    @property
    def fingerprint(self) -> str:
        """Short fingerprint of the key material for out-of-band comparison."""
        return fingerprint(self._data)

    def total_words(self, word_size: int = WORD_BYTES) -> int:
        """Number of ``word_size`` words in the key material."""
        return len(self._words(word_size))

    def subkey(self, word_offset: int, length: int, word_size: int = WORD_BYTES) -> memoryview:
        """
        Return ``length`` contiguous words starting at ``word_offset``.

        The offset must already be reduced into ``[0, total_words - length]``;
        no modulus is applied here.

        Args:
            word_offset: Index of the first word
            length: Number of words (0 gives an empty window)
            word_size: Word width in bytes

        Returns:
            Read-only memoryview of ``length`` native-endian words

        Raises:
            MisalignedAccessError: If ``word_size`` exceeds the store's alignment
            SubkeyTooLargeError: If ``length`` exceeds the total word count
            SubkeyOutOfRangeError: If the window runs past the end of the key
        """
        words = self._words(word_size)
        total = len(words)

        if length < 0:
            raise ValueError(f"Subkey length must be non-negative, got {length}")
        if length > total:
            raise SubkeyTooLargeError(length, total)
        if word_offset < 0 or word_offset + length > total:
            raise SubkeyOutOfRangeError(word_offset, length, total)

        return words[word_offset : word_offset + length]

    def subkey_bytes(self, word_offset: int, length: int, word_size: int = WORD_BYTES) -> memoryview:
        """Return the same window as :meth:`subkey` as raw bytes."""
        window = self.subkey(word_offset, length, word_size)
        if length == 0:
            # memoryview.cast rejects zero-length views
            return memoryview(b"")
        return window.cast("B")

    def read_word(self, word_offset: int, word_size: int = WORD_BYTES) -> int:
        """Read a single word, bounds-checked."""
        return self.subkey(word_offset, 1, word_size)[0]

    def _words(self, word_size: int) -> memoryview:
        """Return the full word view for ``word_size``."""
        if word_size not in WORD_FORMATS:
            raise MisalignedAccessError(f"Unsupported word size: {word_size}")

        view = self._views.get(word_size)
        if view is None:
            raise MisalignedAccessError(
                f"{word_size}-byte words exceed key alignment of {self._alignment} bytes"
            )
        return view
