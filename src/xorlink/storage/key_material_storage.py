"""Key material storage interface and in-memory implementation."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..types import KeyNotFoundError


@dataclass(frozen=True)
class Provisioning:
    """Shared secrets for one link: key material and index key."""

    key_material: bytes
    index_key: int

    def __repr__(self) -> str:
        return f"Provisioning(key_material=<{len(self.key_material)} bytes>, index_key=<hidden>)"


class KeyMaterialStorage(ABC):
    """Interface for storing link provisioning under a name."""

    @abstractmethod
    def store(self, name: str, key_material: bytes, index_key: int) -> None:
        """Store key material and index key under ``name``."""
        ...

    @abstractmethod
    def retrieve(self, name: str) -> Provisioning:
        """Retrieve the provisioning stored under ``name``."""
        ...

    @abstractmethod
    def has_key(self, name: str) -> bool:
        """Check if provisioning exists for ``name``."""
        ...

    @abstractmethod
    def delete(self, name: str) -> None:
        """Delete the provisioning stored under ``name``."""
        ...

    @abstractmethod
    def list_names(self) -> list[str]:
        """List all stored names."""
        ...


class InMemoryKeyMaterialStorage(KeyMaterialStorage):
    """
    In-memory implementation of KeyMaterialStorage (for testing).

    WARNING: Key material is held unencrypted and lost when the process exits.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Provisioning] = {}

    def store(self, name: str, key_material: bytes, index_key: int) -> None:
        self._entries[name] = Provisioning(bytes(key_material), index_key)

    def retrieve(self, name: str) -> Provisioning:
        entry = self._entries.get(name)
        if entry is None:
            raise KeyNotFoundError(name)
        return entry

    def has_key(self, name: str) -> bool:
        return name in self._entries

    def delete(self, name: str) -> None:
        self._entries.pop(name, None)

    def list_names(self) -> list[str]:
        return list(self._entries.keys())
