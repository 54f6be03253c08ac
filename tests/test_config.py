"""Tests for cipher configuration."""

import logging

import pytest
from xorlink.config import CipherConfig
from xorlink.crypto import decrypt_frame, encrypt_frame
from xorlink.index_transform import CustomHash
from xorlink.keys import index_key_to_bytes
from xorlink.stats import OffsetHistogram
from xorlink.storage import InMemoryKeyMaterialStorage
from xorlink.types import (
    KEY_MATERIAL_SIZE,
    BlockSizeMismatchError,
    InvalidKeyLengthError,
    KeyNotFoundError,
)
from .test_vectors import INDEX_KEY, LINK_A_SEED_HEX, LINK_B_SEED_HEX, PATTERN_KEY, SAMPLE_PAYLOAD


class TestCipherConfig:
    """Test building ciphers from configuration."""

    def test_from_seed_interoperates(self) -> None:
        """Two ends provisioned from the same seed can talk."""
        seed = bytes.fromhex(LINK_A_SEED_HEX)
        sender = CipherConfig.from_seed(seed).build_cipher()
        receiver = CipherConfig.from_seed(seed).build_cipher()

        wire = encrypt_frame(sender, 77, SAMPLE_PAYLOAD)
        assert list(decrypt_frame(receiver, wire).data) == SAMPLE_PAYLOAD

    def test_different_seeds_do_not_interoperate(self) -> None:
        """A receiver with other key material recovers garbage."""
        sender = CipherConfig.from_seed(bytes.fromhex(LINK_A_SEED_HEX)).build_cipher()
        receiver = CipherConfig.from_seed(bytes.fromhex(LINK_B_SEED_HEX)).build_cipher()

        wire = encrypt_frame(sender, 77, SAMPLE_PAYLOAD)
        assert list(decrypt_frame(receiver, wire).data) != SAMPLE_PAYLOAD

    def test_full_size_key(self) -> None:
        """The default configuration uses the 53280-byte key."""
        cipher = CipherConfig.from_seed(bytes.fromhex(LINK_A_SEED_HEX)).build_cipher()
        assert cipher.transform.max_index == KEY_MATERIAL_SIZE // 4 - 7 + 1

    def test_wrong_key_size(self) -> None:
        """Key material must have the expected size."""
        config = CipherConfig(key_material=PATTERN_KEY, index_key=INDEX_KEY)
        with pytest.raises(InvalidKeyLengthError, match=f"expected {KEY_MATERIAL_SIZE}"):
            config.build_cipher()

    def test_any_size_when_unchecked(self) -> None:
        """expected_key_size=None accepts any aligned key."""
        config = CipherConfig(key_material=PATTERN_KEY, index_key=INDEX_KEY, expected_key_size=None)
        cipher = config.build_cipher()
        assert cipher.transform.max_index == 250

    def test_mismatched_block(self) -> None:
        """Block and word size mismatches fail at build time."""
        config = CipherConfig(
            key_material=PATTERN_KEY,
            index_key=INDEX_KEY,
            expected_key_size=None,
            block_bytes=30,
        )
        with pytest.raises(BlockSizeMismatchError):
            config.build_cipher()

    def test_custom_hash_and_histogram(self) -> None:
        """Hash strategy and histogram are passed through."""
        histogram = OffsetHistogram()
        config = CipherConfig(
            key_material=PATTERN_KEY,
            index_key=0,
            expected_key_size=None,
            index_hash=CustomHash(lambda i: i * 2),
        )
        cipher = config.build_cipher(histogram=histogram)
        encrypt_frame(cipher, 3, SAMPLE_PAYLOAD)

        assert histogram.count(6) == 1

    def test_from_files(self, tmp_path) -> None:
        """Raw key.bin / index-key.bin files are loaded."""
        key_path = tmp_path / "key.bin"
        index_path = tmp_path / "index-key.bin"
        key_path.write_bytes(PATTERN_KEY)
        index_path.write_bytes(index_key_to_bytes(INDEX_KEY))

        config = CipherConfig.from_files(key_path, index_path, expected_key_size=None)

        assert config.key_material == PATTERN_KEY
        assert config.index_key == INDEX_KEY

    def test_from_storage(self) -> None:
        """Configuration can come from key material storage."""
        storage = InMemoryKeyMaterialStorage()
        storage.store("link", PATTERN_KEY, INDEX_KEY)

        config = CipherConfig.from_storage(storage, "link", expected_key_size=None)
        assert config.index_key == INDEX_KEY

        with pytest.raises(KeyNotFoundError):
            CipherConfig.from_storage(storage, "other")

    def test_repr_hides_secrets(self) -> None:
        """Key material and index key are left out of repr."""
        config = CipherConfig(key_material=PATTERN_KEY, index_key=INDEX_KEY)
        text = repr(config)
        assert "key_material" not in text
        assert str(INDEX_KEY) not in text

    def test_logs_fingerprint(self, caplog) -> None:
        """Building a cipher logs the key fingerprint, not the key."""
        caplog.set_level(logging.INFO, logger="xorlink")
        config = CipherConfig(key_material=PATTERN_KEY, index_key=INDEX_KEY, expected_key_size=None)
        cipher = config.build_cipher()

        assert "fingerprint" in caplog.text
        assert "valid offsets" in caplog.text
        assert cipher is not None
