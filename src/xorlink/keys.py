"""Key material and index key provisioning for xorlink."""

import hashlib
import os
import sys

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms
from cryptography.hazmat.primitives.hashes import SHA256
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from .types import (
    INDEX_KEY_INFO,
    INDEX_KEY_SIZE,
    INDEX_WORD_MASK,
    KEY_MATERIAL_INFO,
    KEY_MATERIAL_SALT,
    KEY_MATERIAL_SIZE,
)


SEED_SIZE = 32
_CHACHA20_NONCE = bytes(16)


def generate_key_material(length: int = KEY_MATERIAL_SIZE) -> bytes:
    """
    Generate random key material from the OS CSPRNG.

    Args:
        length: Size of the blob in bytes

    Returns:
        Random key material
    """
    if length <= 0:
        raise ValueError(f"Key material length must be positive, got {length}")
    return os.urandom(length)


def derive_key_material(seed: bytes, length: int = KEY_MATERIAL_SIZE) -> bytes:
    """
    Deterministically expand a 32-byte seed into key material.

    HKDF-SHA256 derives a ChaCha20 key from the seed, and the ChaCha20
    keystream (zero nonce) is used as the blob. Both ends of a link can be
    provisioned from the same seed.

    Args:
        seed: 32-byte seed
        length: Size of the blob in bytes

    Returns:
        Key material of ``length`` bytes
    """
    if len(seed) != SEED_SIZE:
        raise ValueError(f"Seed must be {SEED_SIZE} bytes, got {len(seed)}")
    if length <= 0:
        raise ValueError(f"Key material length must be positive, got {length}")

    hkdf = HKDF(
        algorithm=SHA256(),
        length=32,
        salt=KEY_MATERIAL_SALT,
        info=KEY_MATERIAL_INFO,
    )
    stream_key = hkdf.derive(seed)

    encryptor = Cipher(algorithms.ChaCha20(stream_key, _CHACHA20_NONCE), mode=None).encryptor()
    return encryptor.update(bytes(length)) + encryptor.finalize()


def generate_index_key() -> int:
    """Generate a random 32-bit index key."""
    return index_key_from_bytes(os.urandom(INDEX_KEY_SIZE))


def derive_index_key(seed: bytes) -> int:
    """Derive a 32-bit index key from a 32-byte seed using HKDF-SHA256."""
    if len(seed) != SEED_SIZE:
        raise ValueError(f"Seed must be {SEED_SIZE} bytes, got {len(seed)}")

    hkdf = HKDF(
        algorithm=SHA256(),
        length=INDEX_KEY_SIZE,
        salt=KEY_MATERIAL_SALT,
        info=INDEX_KEY_INFO,
    )
    return index_key_from_bytes(hkdf.derive(seed))


def index_key_from_bytes(data: bytes) -> int:
    """Decode a 4-byte native-endian index key."""
    if len(data) != INDEX_KEY_SIZE:
        raise ValueError(f"Index key must be {INDEX_KEY_SIZE} bytes, got {len(data)}")
    return int.from_bytes(data, sys.byteorder)


def index_key_to_bytes(index_key: int) -> bytes:
    """Encode an index key as 4 native-endian bytes."""
    return (index_key & INDEX_WORD_MASK).to_bytes(INDEX_KEY_SIZE, sys.byteorder)


def fingerprint(key_material: bytes) -> str:
    """
    Generate a human-readable fingerprint for key material.

    The fingerprint is a truncated SHA-256 hash formatted for easy comparison.

    Args:
        key_material: Raw key bytes

    Returns:
        A fingerprint string like "A7B3C9D1 E5F28A4B"
    """
    hash_bytes = hashlib.sha256(key_material).digest()

    hex_bytes = [f"{b:02X}" for b in hash_bytes[:8]]
    groups = ["".join(hex_bytes[i : i + 4]) for i in range(0, 8, 4)]

    return " ".join(groups)
