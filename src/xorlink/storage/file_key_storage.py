"""
File-based key material storage with optional password protection.

Each link is stored as two files in the storage directory:

- ``<name>.key``: key material
- ``<name>.index``: 4-byte native-endian index key

## Storage Format

Without a password, both files are raw blobs in the same format firmware
images embed (``key.bin`` / ``index-key.bin``).

With a password, each file contains:
- Salt: 32 bytes (random, for PBKDF2)
- Nonce: 12 bytes (random, for AES-GCM)
- Ciphertext: the raw blob, encrypted
- Tag: 16 bytes (authentication tag)

## Security

- Uses PBKDF2 with 100,000 iterations for key derivation
- Uses AES-256-GCM for authenticated encryption
- Files are stored with 600 permissions (owner read/write only)
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..keys import fingerprint, index_key_from_bytes, index_key_to_bytes
from ..types import (
    DecryptionFailedError,
    KeyNotFoundError,
    PasswordRequiredError,
    StorageError,
)
from .key_material_storage import KeyMaterialStorage, Provisioning

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_key_material(path: PathLike) -> bytes:
    """Read a raw key material blob."""
    path = Path(path)
    try:
        return path.read_bytes()
    except FileNotFoundError as e:
        raise KeyNotFoundError(str(path)) from e


def load_index_key(path: PathLike) -> int:
    """Read a raw 4-byte native-endian index key."""
    data = load_key_material(path)
    try:
        return index_key_from_bytes(data)
    except ValueError as e:
        raise StorageError(f"Invalid index key file {path}: {e}") from e


class FileKeyStorage(KeyMaterialStorage):
    """
    File-based key material storage.

    Example usage:
        ```python
        storage = FileKeyStorage(password="operator-password")
        storage.store("link-a", key_material, index_key)

        provisioning = storage.retrieve("link-a")
        ```
    """

    # PBKDF2 iteration count (OWASP recommendation for SHA256)
    PBKDF2_ITERATIONS = 100_000

    # Salt size in bytes
    SALT_SIZE = 32

    # AES-GCM nonce size in bytes
    NONCE_SIZE = 12

    # AES-GCM tag size in bytes
    TAG_SIZE = 16

    # Default directory, relative to the home directory
    DIRECTORY_NAME = ".xorlink/keys"

    KEY_SUFFIX = ".key"
    INDEX_SUFFIX = ".index"

    def __init__(self, directory: Optional[PathLike] = None, password: Optional[str] = None) -> None:
        """
        Create a new file key storage.

        Args:
            directory: Storage directory (default: ``~/.xorlink/keys``)
            password: Optional password. Without one (or with an empty one), blobs are stored raw.
        """
        self._directory = Path(directory) if directory is not None else Path.home() / self.DIRECTORY_NAME
        self._password = password or None

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def encrypted(self) -> bool:
        """Whether blobs are encrypted at rest."""
        return self._password is not None

    def set_password(self, password: str) -> None:
        """Set the password for encryption/decryption."""
        if not password:
            raise PasswordRequiredError()
        self._password = password

    def clear_password(self) -> None:
        """Clear the password; subsequent blobs are stored raw."""
        self._password = None

    def store(self, name: str, key_material: bytes, index_key: int) -> None:
        """
        Store key material and index key under ``name``.

        Args:
            name: Link name
            key_material: Raw key material
            index_key: 32-bit index key
        """
        self._ensure_directory()

        self._write(self._path(name, self.KEY_SUFFIX), bytes(key_material))
        self._write(self._path(name, self.INDEX_SUFFIX), index_key_to_bytes(index_key))

        logger.info(
            "Stored key material %r (%d bytes, fingerprint %s, encrypted=%s)",
            name,
            len(key_material),
            fingerprint(key_material),
            self.encrypted,
        )

    def retrieve(self, name: str) -> Provisioning:
        """
        Retrieve the provisioning stored under ``name``.

        Raises:
            KeyNotFoundError: If nothing is stored under ``name``
            DecryptionFailedError: If decryption fails (wrong password)
            StorageError: If the stored data is malformed
        """
        key_path = self._path(name, self.KEY_SUFFIX)
        index_path = self._path(name, self.INDEX_SUFFIX)

        if not key_path.exists() or not index_path.exists():
            raise KeyNotFoundError(name)

        key_material = self._read(key_path)
        try:
            index_key = index_key_from_bytes(self._read(index_path))
        except ValueError as e:
            raise StorageError(f"Invalid index key for {name!r}: {e}") from e

        logger.info("Loaded key material %r (fingerprint %s)", name, fingerprint(key_material))
        return Provisioning(key_material=key_material, index_key=index_key)

    def has_key(self, name: str) -> bool:
        return self._path(name, self.KEY_SUFFIX).exists() and self._path(name, self.INDEX_SUFFIX).exists()

    def delete(self, name: str) -> None:
        for suffix in (self.KEY_SUFFIX, self.INDEX_SUFFIX):
            self._path(name, suffix).unlink(missing_ok=True)

    def list_names(self) -> list[str]:
        if not self._directory.exists():
            return []

        return sorted(
            f.stem
            for f in self._directory.iterdir()
            if f.suffix == self.KEY_SUFFIX and self.has_key(f.stem)
        )

    def _path(self, name: str, suffix: str) -> Path:
        """Return the file path for a blob."""
        return self._directory / f"{name}{suffix}"

    def _ensure_directory(self) -> None:
        """Ensure the storage directory exists (700 on Unix)."""
        self._directory.mkdir(parents=True, exist_ok=True)
        try:
            self._directory.chmod(0o700)
        except OSError:
            logger.debug("Could not restrict permissions on %s", self._directory)

    def _write(self, path: Path, blob: bytes) -> None:
        """Write a blob, encrypting it when a password is set."""
        if self._password is not None:
            salt = os.urandom(self.SALT_SIZE)
            nonce = os.urandom(self.NONCE_SIZE)
            aesgcm = AESGCM(self._derive_key(self._password, salt))
            blob = salt + nonce + aesgcm.encrypt(nonce, blob, None)

        path.write_bytes(blob)
        try:
            path.chmod(0o600)
        except OSError:
            logger.debug("Could not restrict permissions on %s", path)

    def _read(self, path: Path) -> bytes:
        """Read a blob, decrypting it when a password is set."""
        data = path.read_bytes()
        if self._password is None:
            return data

        header = self.SALT_SIZE + self.NONCE_SIZE
        if len(data) < header + self.TAG_SIZE:
            raise StorageError(f"Invalid key data format: {path.name}")

        salt = data[: self.SALT_SIZE]
        nonce = data[self.SALT_SIZE : header]
        aesgcm = AESGCM(self._derive_key(self._password, salt))
        try:
            return aesgcm.decrypt(nonce, data[header:], None)
        except InvalidTag as e:
            raise DecryptionFailedError() from e

    def _derive_key(self, password: str, salt: bytes) -> bytes:
        """Derive an encryption key from password using PBKDF2."""
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=self.PBKDF2_ITERATIONS,
        )
        return kdf.derive(password.encode("utf-8"))
