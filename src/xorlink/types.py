"""Type definitions and constants for xorlink."""

from typing import Optional


# Word constants
WORD_BYTES = 4
WORD_MASK = 0xFFFF_FFFF
SUPPORTED_WORD_SIZES = (1, 2, 4, 8)
KEY_ALIGNMENT = 4

# Provisioned key blob size: 2^15 * 13/8 + 32 bytes
KEY_MATERIAL_SIZE = 53280
INDEX_KEY_SIZE = 4

# Header word layout: 31-bit index, 1-bit tag
INDEX_BITS = 32
INDEX_WORD_MASK = 0xFFFF_FFFF
TAG_BITS = 1
INDEX_FIELD_BITS = INDEX_BITS - TAG_BITS
INDEX_MASK = (1 << INDEX_FIELD_BITS) - 1  # 0x7FFF_FFFF
TAG_MASK = (1 << TAG_BITS) - 1

# Frame layout
TAG_WORD_BYTES = 4
PAYLOAD_WORDS = 7
PAYLOAD_BYTES = PAYLOAD_WORDS * WORD_BYTES
FRAME_BYTES = TAG_WORD_BYTES + PAYLOAD_BYTES
FRAME_ALIGNMENT = 4

# Key derivation constants
KEY_MATERIAL_SALT = b"xorlink-v1-key-material"
KEY_MATERIAL_INFO = b"chacha20-keystream"
INDEX_KEY_INFO = b"index-key"


# Exception types
class XorLinkError(Exception):
    """Base exception for xorlink errors."""
    pass


class InvalidKeyLengthError(XorLinkError):
    """Key material length is incompatible with the supported word width."""

    def __init__(self, length: int, alignment: int, expected: Optional[int] = None) -> None:
        self.length = length
        self.alignment = alignment
        self.expected = expected
        if expected is not None:
            detail = f"expected {expected}"
        else:
            detail = f"must be a non-zero multiple of {alignment}"
        super().__init__(f"Invalid key length: {length} bytes ({detail})")


class SubkeyTooLargeError(XorLinkError):
    """Requested subkey is longer than the key material."""

    def __init__(self, requested: int, total_words: int) -> None:
        self.requested = requested
        self.total_words = total_words
        super().__init__(
            f"Subkey larger than main key: requested {requested} words, key has {total_words}"
        )


class SubkeyOutOfRangeError(XorLinkError):
    """Subkey window runs past the end of the key material."""

    def __init__(self, word_offset: int, length: int, total_words: int) -> None:
        self.word_offset = word_offset
        self.length = length
        self.total_words = total_words
        super().__init__(
            f"Subkey window [{word_offset}, {word_offset + length}) "
            f"out of range for {total_words} words"
        )


class MisalignedAccessError(XorLinkError):
    """Word-width view not supported by the buffer's alignment."""
    pass


class NoValidOffsetError(XorLinkError):
    """No valid starting offset exists for the requested subkey length."""

    def __init__(self, total_words: int, subkey_words: int) -> None:
        self.total_words = total_words
        self.subkey_words = subkey_words
        super().__init__(
            f"No valid offset: {subkey_words} subkey words do not fit in {total_words} key words"
        )


class BlockSizeMismatchError(XorLinkError):
    """Block size does not match the configured cipher."""
    pass


class InvalidFrameError(XorLinkError):
    """Invalid frame wire data."""
    pass


class LayoutError(XorLinkError):
    """Frame memory layout does not match the wire format."""
    pass


class KeyNotFoundError(XorLinkError):
    """Provisioning data not found in storage."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Key material not found: {name}")
        self.name = name


class StorageError(XorLinkError):
    """Storage operation failed."""
    pass


class PasswordRequiredError(StorageError):
    """Password is required but not set."""

    def __init__(self) -> None:
        super().__init__("Password is required for encrypted key storage")


class DecryptionFailedError(StorageError):
    """Stored key data could not be decrypted."""

    def __init__(self) -> None:
        super().__init__("Decryption failed - incorrect password or corrupted data")
