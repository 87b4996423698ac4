"""Self-Delimiting Numeric Values (RFC 5050, section 4.1 / RFC 6256)

Every byte of an SDNV carries a 7-bit group of the value in its lower bits.
The most significant bit is set on all bytes except the last one. Groups are
ordered most significant first, hence ``0x1234`` is encoded as ``a4 34``.

Usage:
    .. code:: python

        from pysdnv.sdnv import encode, decode, MAX_BYTE_SIZE

        buf = bytearray(MAX_BYTE_SIZE)
        size = encode(buf, 0x1234)
        assert decode(buf[:size]) == (0x1234, 2)
"""

from .errors import (
    BufferTooSmallError,
    EndOfInputError,
    Overflow64Error,
    UnexpectedEndOfInputError,
)

# Largest number of bytes an unsigned 64-bit integer is encoded into
MAX_BYTE_SIZE = 10

MAX_UINT64 = 0xffffffffffffffff

# 64 = 9 * 7 + 1: the first byte of a 10-byte SDNV may only carry a single bit
MAX_SIZE_FIRST_BYTE = 0x81


def check_value(value):
    """Ensures that value can be SDNV-encoded at all

    Raises:
        ValueError: If value not an integer or negative
    """
    if not isinstance(value, int) or value < 0:
        raise ValueError("Only non-negative integers can be SDNV-encoded")


def check_uint64(value):
    """Ensures that value is an unsigned 64-bit integer

    Raises:
        ValueError: If value not an integer or negative
        Overflow64Error: If value does not fit into 64 bits
    """
    check_value(value)
    if value > MAX_UINT64:
        raise Overflow64Error()


def encoded_size(value):
    """Returns the number of bytes of the canonical SDNV encoding of value

    Args:
        value (int): Non-negative integer
    Returns:
        int: Length of the encoding, at least 1
    """
    # Special case: zero has no significant bits but still needs one byte
    if value == 0:
        return 1
    return (value.bit_length() - 1) // 7 + 1


def iter_encoded(value):
    """Yields the bytes of the canonical SDNV encoding of value in network
    byte order (most significant group first).

    Args:
        value (int): Non-negative integer
    """
    for i in range(encoded_size(value) - 1, -1, -1):
        byte = (value >> (7 * i)) & 0x7f
        # All groups but the last one get the continuation flag
        if i != 0:
            byte |= 0x80
        yield byte


def encode_into(buffer, value, offset=0):
    """Writes the SDNV encoding of value into buffer without any width limit.

    Nothing is written if the buffer is too small.

    Returns:
        int: Number of bytes written
    Raises:
        BufferTooSmallError: If the buffer cannot hold the encoding
    """
    size = encoded_size(value)
    if len(buffer) < offset + size:
        raise BufferTooSmallError(offset + size, len(buffer))

    for i, byte in enumerate(iter_encoded(value), offset):
        buffer[i] = byte

    return size


def encode(buffer, value, offset=0):
    """Encodes an unsigned 64-bit integer as SDNV into a writable buffer

    Args:
        buffer (bytearray): Target buffer, e.g. a ``bytearray`` or a writable
            ``memoryview``. A buffer of :data:`MAX_BYTE_SIZE` bytes is always
            sufficient.
        value (int): Integer in the range ``[0, 2**64 - 1]``
        offset (int): Position in the buffer of the first encoded byte
    Returns:
        int: Number of bytes written (1 to 10)
    Raises:
        ValueError: If value not an integer or negative
        Overflow64Error: If value does not fit into 64 bits
        BufferTooSmallError: If the buffer cannot hold the encoding
    """
    check_uint64(value)
    return encode_into(buffer, value, offset)


class SDNVDecoder(object):
    """Incremental SDNV decoder which is fed one byte at a time.

    All decoding functions are built on this class, whether they read from a
    buffer, an iterator or a stream. A decoder instance decodes exactly one
    SDNV and must not be reused.

    .. code:: python

        decoder = SDNVDecoder()
        for byte in b"\\x95\\x3c":
            if decoder.feed(byte):
                break
        assert decoder.value == 0xabc

    Args:
        bounded (bool): If True, the value is limited to 64 bits. Encodings
            longer than :data:`MAX_BYTE_SIZE` bytes and 10-byte encodings not
            starting with ``0x81`` are rejected.

    Attrs:
        value (int): Value accumulated so far
        count (int): Number of bytes consumed so far
        done (bool): True if the terminating byte has been consumed
    """

    def __init__(self, bounded=True):
        self.bounded = bounded
        self.value = 0
        self.count = 0
        self.first_byte = None
        self.done = False

    def feed(self, byte):
        """Consumes the next byte of the SDNV

        Args:
            byte (int): Byte value in the range ``[0, 255]``
        Returns:
            bool: True if the byte terminated the SDNV
        Raises:
            Overflow64Error: If the decoder is bounded and the SDNV does not
                fit into 64 bits. ``bytes_consumed`` is always
                :data:`MAX_BYTE_SIZE`.
        """
        if self.done:
            raise ValueError("SDNV already decoded completely")

        if self.count == 0:
            self.first_byte = byte
        elif self.bounded and self.count == MAX_BYTE_SIZE - 1:
            # Last possible byte but it says there is more, or the first byte
            # carries more than the single bit left for the 10th group
            if byte & 0x80 or self.first_byte != MAX_SIZE_FIRST_BYTE:
                raise Overflow64Error(MAX_BYTE_SIZE)

        self.value = (self.value << 7) | (byte & 0x7f)
        self.count += 1
        self.done = byte & 0x80 == 0
        return self.done

    def eof(self):
        """Signals that the input ended before the SDNV was terminated.

        Raises:
            EndOfInputError: If no byte was consumed at all
            UnexpectedEndOfInputError: If the SDNV was cut off
        """
        if self.count == 0:
            raise EndOfInputError()
        raise UnexpectedEndOfInputError(self.count)

    def result(self):
        """Returns the ``(value, bytes_consumed)`` tuple of a complete SDNV"""
        assert self.done, "SDNV not terminated yet"
        return self.value, self.count


def decode_from(buffer, offset=0, bounded=True):
    """Decodes one SDNV from buffer, starting at offset. See :func:`decode`."""
    decoder = SDNVDecoder(bounded)
    for i in range(offset, len(buffer)):
        if decoder.feed(buffer[i]):
            return decoder.result()
    decoder.eof()


def decode(buffer, offset=0):
    """Decodes an unsigned 64-bit integer from an SDNV at the beginning of
    buffer. Bytes following the SDNV are ignored.

    Args:
        buffer (bytes): Encoded SDNV (any indexable sequence of byte values)
        offset (int): Position of the first byte of the SDNV
    Returns:
        tuple: Decoded integer and the number of consumed bytes
    Raises:
        EndOfInputError: If there is no byte at offset
        UnexpectedEndOfInputError: If the buffer contains insufficient bytes
            (not the complete SDNV)
        Overflow64Error: If the SDNV does not fit into 64 bits
    """
    return decode_from(buffer, offset, bounded=True)
