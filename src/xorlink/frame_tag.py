"""Frame header word: 31-bit index and 1-bit tag."""

from .types import INDEX_FIELD_BITS, INDEX_MASK, TAG_BITS, TAG_MASK, TAG_WORD_BYTES


class FrameTag:
    """
    Fixed-width header word holding a message index and tag bits.

    Layout (32-bit native word):
        bits 0..30  index
        bit  31     tag

    A tag either owns its word or is bound to the header word of a
    :class:`~xorlink.frame.Frame`, in which case setters write through to
    the frame's buffer.
    """

    __slots__ = ("_word",)

    def __init__(self, index: int = 0) -> None:
        """Create a tag with ``index`` (masked) and tag bits cleared."""
        self._word = memoryview(bytearray(TAG_WORD_BYTES)).cast("I")
        self._word[0] = index & INDEX_MASK

    @classmethod
    def _bound(cls, word: memoryview) -> "FrameTag":
        """Create a tag backed by a one-element ``"I"`` view."""
        tag = cls.__new__(cls)
        tag._word = word
        return tag

    @property
    def value(self) -> int:
        """The raw header word."""
        return self._word[0]

    def get_index(self) -> int:
        """Return the index with the tag bits removed."""
        return self._word[0] & INDEX_MASK

    def set_index(self, index: int) -> None:
        """Store ``index``, keeping only the low 31 bits. Tag bits are preserved."""
        self._word[0] = (index & INDEX_MASK) | (self._word[0] & ~INDEX_MASK)

    def get_tag(self) -> int:
        """Return the tag bits."""
        return self._word[0] >> INDEX_FIELD_BITS

    def set_tag(self, tag: int) -> None:
        """
        Store the lowest ``tag_bits_count()`` bits of ``tag``.

        Higher bits are discarded.
        """
        self._word[0] = (self._word[0] & INDEX_MASK) | ((tag & TAG_MASK) << INDEX_FIELD_BITS)

    @classmethod
    def tag_bits_count(cls) -> int:
        """Number of tag bits this header supports."""
        return TAG_BITS

    @classmethod
    def index_bits_count(cls) -> int:
        return INDEX_FIELD_BITS

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FrameTag):
            return NotImplemented
        return self.value == other.value

    def __repr__(self) -> str:
        return f"FrameTag(index={self.get_index()}, tag={self.get_tag()})"
