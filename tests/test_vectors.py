"""Shared test vectors for xorlink."""

# 32-byte key whose bytes equal their offsets
SEQUENTIAL_KEY = bytes(range(32))

# 1 KiB key with no all-zero 28-byte window
PATTERN_KEY = bytes(i % 251 for i in range(1024))

# Seeds (32-byte hex strings)
LINK_A_SEED_HEX = "0000000000000000000000000000000000000000000000000000000000000001"
LINK_B_SEED_HEX = "0000000000000000000000000000000000000000000000000000000000000002"

INDEX_KEY = 0x1234_ABCD

# Payload words from the transmitter self test
SAMPLE_PAYLOAD = [0, 1, 2, 3, 4, 5, 6]
SAMPLE_INDEX = 5

# SHA-256("") = e3b0c442 98fc1c14 ...
EMPTY_FINGERPRINT = "E3B0C442 98FC1C14"
