# Canonical encodings, mostly taken from RFC 5050 section 4.1
CANONICAL_EXAMPLES = [
    (0xabc, b"\x95\x3c"),
    (0x1234, b"\xa4\x34"),
    (0x4234, b"\x81\x84\x34"),
    (0x7f, b"\x7f"),
    # Lower bound
    (0x00, b"\x00"),
    # Upper bound
    (0xffffffffffffffff, b"\x81" + b"\xff" * 8 + b"\x7f"),
]

# 10 bytes, but the first byte carries more than a single bit
OVERFLOW_FIRST_BYTE = b"\x83" + b"\xff" * 8 + b"\x7f"

# The continuation flag is still set on the 10th byte
OVERFLOW_TOO_LONG = b"\xff" * 12


def repeated_groups(count):
    """Returns an SDNV of count groups, all holding the value 1, together with
    the integer it represents.
    """
    value = 0
    for _ in range(count):
        value = (value << 7) | 1
    return value, b"\x81" * (count - 1) + b"\x01"
