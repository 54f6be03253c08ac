"""Fixed-size indexed frame: header word plus ciphered payload."""

import struct
from typing import Iterable

from .block_cipher import BlockCipher
from .frame_tag import FrameTag
from .types import (
    FRAME_ALIGNMENT,
    FRAME_BYTES,
    PAYLOAD_WORDS,
    WORD_MASK,
    InvalidFrameError,
    LayoutError,
)


# Native layout: one header word followed by the payload words
FRAME_FORMAT = f"@I{PAYLOAD_WORDS}I"

if struct.calcsize(FRAME_FORMAT) != FRAME_BYTES:
    raise LayoutError(
        f"Frame layout is {struct.calcsize(FRAME_FORMAT)} bytes, wire format requires {FRAME_BYTES}"
    )
if struct.calcsize("@BI") - struct.calcsize("@I") != FRAME_ALIGNMENT:
    raise LayoutError(f"Frame words are not {FRAME_ALIGNMENT}-byte aligned")


class Frame:
    """
    One transmissible block: a :class:`FrameTag` followed by payload words.

    Format (32 bytes, native-endian words):
        [0..3]   header word (index in low 31 bits, tag in bit 31)
        [4..31]  payload (7 words)

    Only the payload is ciphered. The header travels in the clear so the
    receiver can select the same subkey.
    """

    __slots__ = ("_buffer", "_tag", "_data")

    def __init__(self) -> None:
        """Create a zeroed frame."""
        self._buffer = bytearray(FRAME_BYTES)
        words = memoryview(self._buffer).cast("I")
        self._tag = FrameTag._bound(words[0:1])
        self._data = words[1:]

    @classmethod
    def from_bytes(cls, data: bytes) -> "Frame":
        """
        Decode a frame from wire bytes.

        Raises:
            InvalidFrameError: If ``data`` is not exactly FRAME_BYTES long
        """
        view = memoryview(data)
        if view.nbytes != FRAME_BYTES:
            raise InvalidFrameError(f"Frame must be {FRAME_BYTES} bytes, got {view.nbytes}")

        frame = cls()
        frame.as_bytes_mut()[:] = view.cast("B")
        return frame

    @property
    def tag(self) -> FrameTag:
        """The header word, bound to this frame."""
        return self._tag

    @property
    def data(self) -> memoryview:
        """Writable view of the payload words."""
        return self._data

    @property
    def payload_bytes(self) -> memoryview:
        """Writable view of the payload as bytes."""
        return self._data.cast("B")

    def set_payload(self, words: Iterable[int]) -> None:
        """Write payload words from the start; remaining words are left as is."""
        words = list(words)
        if len(words) > PAYLOAD_WORDS:
            raise ValueError(f"Payload holds {PAYLOAD_WORDS} words, got {len(words)}")

        for i, word in enumerate(words):
            self._data[i] = word & WORD_MASK

    def as_bytes(self) -> memoryview:
        """Read-only view of the whole frame, suitable for transmitting."""
        return memoryview(self._buffer).toreadonly()

    def as_bytes_mut(self) -> memoryview:
        """Writable view of the whole frame, suitable for receiving into."""
        return memoryview(self._buffer)

    def to_bytes(self) -> bytes:
        """Copy of the frame's wire bytes."""
        return bytes(self._buffer)

    def cipher(self, cipher: BlockCipher) -> None:
        """Encrypt or decrypt the payload using the header's index."""
        cipher.apply(self._tag.get_index(), self._data)

    def __len__(self) -> int:
        return FRAME_BYTES

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Frame):
            return NotImplemented
        return self._buffer == other._buffer

    def __repr__(self) -> str:
        return f"Frame(tag={self._tag!r}, data={list(self._data)})"
