"""Sender sequence index state."""

from dataclasses import dataclass

from .types import INDEX_FIELD_BITS

INDEX_SPACE = 1 << INDEX_FIELD_BITS


@dataclass(frozen=True)
class SequenceState:
    """Tracks the next index a sender will put in a frame header.

    Attributes:
        next_index: The index to use for the next outgoing frame.
    """

    next_index: int = 0


def advance_send_index(state: SequenceState) -> tuple:
    """Return the index to use and the updated state.

    The index wraps around after the 31-bit index field is exhausted, which
    reuses subkeys. Callers that care should rotate key material first.

    Args:
        state: The current sequence state.

    Returns:
        Tuple of (index_to_use, updated_state).
    """
    index = state.next_index % INDEX_SPACE
    return index, SequenceState(next_index=(index + 1) % INDEX_SPACE)
