"""Encryption and decryption of whole frames."""

from typing import Sequence, Union

from .block_cipher import BlockCipher
from .frame import Frame
from .types import FRAME_BYTES, PAYLOAD_BYTES


def encrypt_frame(
    cipher: BlockCipher,
    index: int,
    payload: Union[bytes, Sequence[int]],
    tag: int = 0,
) -> bytes:
    """
    Build, encrypt and serialize a frame.

    Args:
        cipher: Configured block cipher
        index: Message sequence index (low 31 bits are kept)
        payload: Either exactly PAYLOAD_BYTES raw bytes or up to 7 words
        tag: Tag bits (low bit is kept)

    Returns:
        FRAME_BYTES of wire data
    """
    frame = Frame()
    frame.tag.set_index(index)
    frame.tag.set_tag(tag)

    if isinstance(payload, (bytes, bytearray, memoryview)):
        view = memoryview(payload)
        if view.nbytes != PAYLOAD_BYTES:
            raise ValueError(f"Payload must be {PAYLOAD_BYTES} bytes, got {view.nbytes}")
        frame.payload_bytes[:] = view.cast("B")
    else:
        frame.set_payload(payload)

    frame.cipher(cipher)
    return frame.to_bytes()


def decrypt_frame(cipher: BlockCipher, data: bytes) -> Frame:
    """
    Decode and decrypt a frame received from the transport.

    Args:
        cipher: Configured block cipher
        data: FRAME_BYTES of wire data

    Returns:
        Frame holding the plaintext payload

    Raises:
        InvalidFrameError: If data has the wrong length
    """
    frame = Frame.from_bytes(data)
    frame.cipher(cipher)
    return frame


def cipher_payload(cipher: BlockCipher, index: int, payload) -> None:
    """Encrypt or decrypt a raw writable payload buffer in place."""
    cipher.apply(index, payload)


def is_frame(data: bytes) -> bool:
    """Check if data has the size of a frame."""
    return memoryview(data).nbytes == FRAME_BYTES
