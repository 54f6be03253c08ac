"""
xorlink - Indexed XOR keystream framing for constrained radio links

Derives a per-message subkey from shared key material, selected by the
message sequence index, and XORs it into a fixed 32-byte frame payload.
"""

from .key_store import KeyStore
from .index_transform import (
    IndexHash,
    IdentityHash,
    CustomHash,
    IndexTransform,
    valid_offsets,
)
from .block_cipher import BlockCipher
from .frame_tag import FrameTag
from .frame import Frame
from .crypto import encrypt_frame, decrypt_frame, cipher_payload, is_frame
from .sequence import SequenceState, advance_send_index
from .stats import OffsetHistogram
from .keys import (
    generate_key_material,
    derive_key_material,
    generate_index_key,
    derive_index_key,
    index_key_from_bytes,
    index_key_to_bytes,
    fingerprint,
)
from .storage import (
    KeyMaterialStorage,
    InMemoryKeyMaterialStorage,
    FileKeyStorage,
    Provisioning,
    load_key_material,
    load_index_key,
)
from .config import CipherConfig
from .types import (
    WORD_BYTES,
    WORD_MASK,
    KEY_MATERIAL_SIZE,
    INDEX_MASK,
    TAG_BITS,
    PAYLOAD_WORDS,
    PAYLOAD_BYTES,
    FRAME_BYTES,
    FRAME_ALIGNMENT,
    XorLinkError,
    InvalidKeyLengthError,
    SubkeyTooLargeError,
    SubkeyOutOfRangeError,
    MisalignedAccessError,
    NoValidOffsetError,
    BlockSizeMismatchError,
    InvalidFrameError,
    LayoutError,
    KeyNotFoundError,
    StorageError,
    PasswordRequiredError,
    DecryptionFailedError,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "KeyStore",
    "IndexHash",
    "IdentityHash",
    "CustomHash",
    "IndexTransform",
    "valid_offsets",
    "BlockCipher",
    "FrameTag",
    "Frame",
    # Frame helpers
    "encrypt_frame",
    "decrypt_frame",
    "cipher_payload",
    "is_frame",
    # Sequence
    "SequenceState",
    "advance_send_index",
    # Diagnostics
    "OffsetHistogram",
    # Keys
    "generate_key_material",
    "derive_key_material",
    "generate_index_key",
    "derive_index_key",
    "index_key_from_bytes",
    "index_key_to_bytes",
    "fingerprint",
    # Storage
    "KeyMaterialStorage",
    "InMemoryKeyMaterialStorage",
    "FileKeyStorage",
    "Provisioning",
    "load_key_material",
    "load_index_key",
    # Config
    "CipherConfig",
    # Constants
    "WORD_BYTES",
    "WORD_MASK",
    "KEY_MATERIAL_SIZE",
    "INDEX_MASK",
    "TAG_BITS",
    "PAYLOAD_WORDS",
    "PAYLOAD_BYTES",
    "FRAME_BYTES",
    "FRAME_ALIGNMENT",
    # Errors
    "XorLinkError",
    "InvalidKeyLengthError",
    "SubkeyTooLargeError",
    "SubkeyOutOfRangeError",
    "MisalignedAccessError",
    "NoValidOffsetError",
    "BlockSizeMismatchError",
    "InvalidFrameError",
    "LayoutError",
    "KeyNotFoundError",
    "StorageError",
    "PasswordRequiredError",
    "DecryptionFailedError",
]
