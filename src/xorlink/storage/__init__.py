"""xorlink key material storage module."""

from .key_material_storage import (
    KeyMaterialStorage,
    InMemoryKeyMaterialStorage,
    Provisioning,
)
from .file_key_storage import (
    FileKeyStorage,
    load_key_material,
    load_index_key,
)

__all__ = [
    "KeyMaterialStorage",
    "InMemoryKeyMaterialStorage",
    "Provisioning",
    "FileKeyStorage",
    "load_key_material",
    "load_index_key",
]
