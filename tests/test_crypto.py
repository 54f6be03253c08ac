"""Tests for frame-level encryption helpers and sender sequencing."""

import dataclasses

import pytest
from xorlink.block_cipher import BlockCipher
from xorlink.crypto import cipher_payload, decrypt_frame, encrypt_frame, is_frame
from xorlink.frame import Frame
from xorlink.key_store import KeyStore
from xorlink.sequence import SequenceState, advance_send_index
from xorlink.types import FRAME_BYTES, INDEX_MASK, PAYLOAD_BYTES, InvalidFrameError
from .test_vectors import INDEX_KEY, PATTERN_KEY, SAMPLE_INDEX, SAMPLE_PAYLOAD


@pytest.fixture
def cipher() -> BlockCipher:
    return BlockCipher(KeyStore(PATTERN_KEY), INDEX_KEY)


class TestEncryptFrame:
    """Test building encrypted frames."""

    def test_round_trip_words(self, cipher) -> None:
        """Word payloads decrypt back to the same words."""
        wire = encrypt_frame(cipher, SAMPLE_INDEX, SAMPLE_PAYLOAD)
        assert len(wire) == FRAME_BYTES

        frame = decrypt_frame(cipher, wire)
        assert list(frame.data) == SAMPLE_PAYLOAD
        assert frame.tag.get_index() == SAMPLE_INDEX
        assert frame.tag.get_tag() == 0

    def test_round_trip_bytes(self, cipher) -> None:
        """Raw byte payloads decrypt back to the same bytes."""
        payload = b"Hello world! I need 28 bytes"
        assert len(payload) == PAYLOAD_BYTES

        wire = encrypt_frame(cipher, 42, payload, tag=1)
        assert payload not in wire

        frame = decrypt_frame(cipher, wire)
        assert frame.payload_bytes.tobytes() == payload
        assert frame.tag.get_tag() == 1

    def test_header_in_clear(self, cipher) -> None:
        """The wire header carries the index unencrypted."""
        wire = encrypt_frame(cipher, SAMPLE_INDEX, SAMPLE_PAYLOAD)
        header = Frame.from_bytes(wire).tag

        assert header.get_index() == SAMPLE_INDEX

    def test_index_truncated(self, cipher) -> None:
        """Indices wider than 31 bits keep their low bits."""
        wire = encrypt_frame(cipher, INDEX_MASK + 2, SAMPLE_PAYLOAD)
        frame = decrypt_frame(cipher, wire)

        assert frame.tag.get_index() == 1
        assert list(frame.data) == SAMPLE_PAYLOAD

    def test_wrong_payload_size(self, cipher) -> None:
        """Raw payloads must be exactly one block."""
        with pytest.raises(ValueError, match="28 bytes"):
            encrypt_frame(cipher, 0, b"short")

    def test_word_view_payload(self, cipher) -> None:
        """Raw payloads are measured in bytes whatever their format."""
        payload = b"Hello world! I need 28 bytes"
        wire = encrypt_frame(cipher, 42, memoryview(payload).cast("I"))

        assert decrypt_frame(cipher, wire).payload_bytes.tobytes() == payload
        assert is_frame(memoryview(wire).cast("I"))

    def test_decrypt_wrong_length(self, cipher) -> None:
        """Truncated wire data is rejected."""
        with pytest.raises(InvalidFrameError):
            decrypt_frame(cipher, bytes(FRAME_BYTES - 1))

    def test_is_frame(self) -> None:
        """is_frame checks the wire size."""
        assert is_frame(bytes(FRAME_BYTES))
        assert not is_frame(bytes(FRAME_BYTES + 1))
        assert not is_frame(b"")


class TestCipherPayload:
    """Test the raw buffer contract used by transports."""

    def test_in_place(self, cipher) -> None:
        """The buffer is transformed in place and restored by a second call."""
        original = bytes(range(PAYLOAD_BYTES))
        buffer = bytearray(original)

        cipher_payload(cipher, 3, buffer)
        assert bytes(buffer) != original

        cipher_payload(cipher, 3, buffer)
        assert bytes(buffer) == original

    def test_matches_frame_payload(self, cipher) -> None:
        """Raw ciphering produces the same bytes as frame ciphering."""
        payload = bytes(range(PAYLOAD_BYTES))
        buffer = bytearray(payload)
        cipher_payload(cipher, 11, buffer)

        wire = encrypt_frame(cipher, 11, payload)
        assert wire[4:] == bytes(buffer)


class TestSequence:
    """Test sender index sequencing."""

    def test_starts_at_zero(self) -> None:
        """A fresh state hands out index 0, then 1."""
        state = SequenceState()
        index, state = advance_send_index(state)
        assert index == 0
        index, state = advance_send_index(state)
        assert index == 1
        assert state.next_index == 2

    def test_input_not_mutated(self) -> None:
        """Advancing returns a new state."""
        state = SequenceState(next_index=10)
        _, new_state = advance_send_index(state)

        assert state.next_index == 10
        assert new_state.next_index == 11

    def test_frozen(self) -> None:
        """States are immutable."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            SequenceState().next_index = 5

    def test_wraps_at_index_field(self) -> None:
        """The index wraps after the 31-bit field is exhausted."""
        index, state = advance_send_index(SequenceState(next_index=INDEX_MASK))
        assert index == INDEX_MASK
        assert state.next_index == 0

    def test_sender_receiver_sequence(self, cipher) -> None:
        """Consecutive frames decrypt with the index read from the header."""
        state = SequenceState()
        for _ in range(20):
            index, state = advance_send_index(state)
            wire = encrypt_frame(cipher, index, [index] * 7)

            frame = decrypt_frame(cipher, wire)
            assert list(frame.data) == [index] * 7
