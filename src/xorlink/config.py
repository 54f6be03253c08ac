"""Cipher configuration and one-time setup validation."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .block_cipher import BlockCipher
from .index_transform import IndexHash
from .key_store import KeyStore
from .keys import derive_index_key, derive_key_material
from .stats import OffsetHistogram
from .storage import KeyMaterialStorage, load_index_key, load_key_material
from .types import (
    KEY_ALIGNMENT,
    KEY_MATERIAL_SIZE,
    PAYLOAD_BYTES,
    WORD_BYTES,
    InvalidKeyLengthError,
)

logger = logging.getLogger(__name__)


@dataclass
class CipherConfig:
    """Configuration for a link cipher."""

    key_material: bytes = field(repr=False)
    """Shared key material."""

    index_key: int = field(repr=False)
    """32-bit index key XORed into every message index."""

    block_bytes: int = PAYLOAD_BYTES
    """Bytes ciphered per block."""

    word_size: int = WORD_BYTES
    """Word width used for the XOR."""

    alignment: int = KEY_ALIGNMENT
    """Guaranteed alignment of the key material."""

    expected_key_size: Optional[int] = KEY_MATERIAL_SIZE
    """Required key material size, or None to accept any valid length."""

    index_hash: Optional[IndexHash] = None
    """Index hash strategy (identity when None)."""

    @classmethod
    def from_files(cls, key_path, index_key_path, **kwargs) -> "CipherConfig":
        """Creates configuration from raw ``key.bin`` / ``index-key.bin`` files."""
        return cls(
            key_material=load_key_material(key_path),
            index_key=load_index_key(index_key_path),
            **kwargs,
        )

    @classmethod
    def from_storage(cls, storage: KeyMaterialStorage, name: str, **kwargs) -> "CipherConfig":
        """Creates configuration from a named entry in key material storage."""
        provisioning = storage.retrieve(name)
        return cls(
            key_material=provisioning.key_material,
            index_key=provisioning.index_key,
            **kwargs,
        )

    @classmethod
    def from_seed(cls, seed: bytes, **kwargs) -> "CipherConfig":
        """Creates configuration with key material and index key derived from a seed."""
        length = kwargs.get("expected_key_size") or KEY_MATERIAL_SIZE
        return cls(
            key_material=derive_key_material(seed, length),
            index_key=derive_index_key(seed),
            **kwargs,
        )

    def build_cipher(self, histogram: Optional[OffsetHistogram] = None) -> BlockCipher:
        """
        Validate the configuration and build a cipher.

        Raises:
            InvalidKeyLengthError: If the key material has the wrong size
            XorLinkError: For any other configuration mismatch
        """
        if self.expected_key_size is not None and len(self.key_material) != self.expected_key_size:
            raise InvalidKeyLengthError(len(self.key_material), self.alignment, self.expected_key_size)

        key_store = KeyStore(self.key_material, alignment=self.alignment)
        cipher = BlockCipher(
            key_store,
            self.index_key,
            block_bytes=self.block_bytes,
            word_size=self.word_size,
            index_hash=self.index_hash,
            histogram=histogram,
        )

        logger.info(
            "Loaded key material: %d bytes, %d words, fingerprint %s",
            key_store.size,
            key_store.total_words(self.word_size),
            key_store.fingerprint,
        )
        return cipher
