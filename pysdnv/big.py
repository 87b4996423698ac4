"""SDNV encoding of integers wider than 64 bits

The wire format is identical to :mod:`pysdnv.sdnv`, only the 64-bit limit is
lifted. For all values fitting into 64 bits both variants produce and accept
the same bytes.
"""

from .sdnv import check_value, encode_into, decode_from


def encode_big(buffer, value, offset=0):
    """Encodes an arbitrarily large non-negative integer as SDNV into buffer

    Args:
        buffer (bytearray): Writable target buffer. It needs at least
            :func:`~pysdnv.sdnv.encoded_size` bytes after offset.
        value (int): Non-negative integer
        offset (int): Position in the buffer of the first encoded byte
    Returns:
        int: Number of bytes written
    Raises:
        ValueError: If value not an integer or negative
        BufferTooSmallError: If the buffer cannot hold the encoding
    """
    check_value(value)
    return encode_into(buffer, value, offset)


def decode_big(buffer, offset=0):
    """Decodes an arbitrarily large integer from an SDNV in buffer

    Returns:
        tuple: Decoded integer and the number of consumed bytes
    Raises:
        EndOfInputError: If there is no byte at offset
        UnexpectedEndOfInputError: If the SDNV is not terminated within buffer
    """
    return decode_from(buffer, offset, bounded=False)
