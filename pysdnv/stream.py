"""Reading and writing SDNVs directly from and to streams

Readers pull exactly as many bytes as the SDNV is long, one byte at a time.
Nothing is buffered ahead, hence the stream is positioned right after the SDNV
when a read returns. All readers enforce the 64-bit limit and distinguish an
empty stream (:class:`~pysdnv.errors.EndOfInputError`) from an SDNV which was
cut off (:class:`~pysdnv.errors.UnexpectedEndOfInputError`).

Errors raised by the streams themselves are passed through unchanged.

Usage:
    .. code:: python

        import io
        from pysdnv.stream import read, write

        stream = io.BytesIO()
        write(stream, 0x4234)
        stream.seek(0)
        assert read(stream) == (0x4234, 3)
"""

import errno
import logging

from .errors import EndOfInputError, Overflow64Error
from .sdnv import (
    MAX_BYTE_SIZE,
    SDNVDecoder,
    check_uint64,
    encode,
    iter_encoded,
)

logger = logging.getLogger(__name__)


def _consume(decoder, byte):
    try:
        return decoder.feed(byte)
    except Overflow64Error:
        logger.debug(
            "SDNV: 64-bit overflow after %d bytes (first byte 0x%02x)",
            MAX_BYTE_SIZE, decoder.first_byte,
        )
        raise


def _end_of_input(decoder):
    if decoder.count:
        logger.debug("SDNV: Input ended after %d bytes", decoder.count)
    decoder.eof()


def _first_byte(decoder, data):
    # Non-blocking raw streams return None if no data is available yet
    if data is None:
        logger.debug(
            "SDNV: No data available after %d bytes", decoder.count,
        )
        raise BlockingIOError(
            errno.EAGAIN,
            "No data available after {} bytes of the SDNV".format(
                decoder.count,
            ),
        )
    if len(data) == 0:
        _end_of_input(decoder)
    return data[0]


def write(stream, value):
    """Writes the SDNV encoding of value with a single write operation

    Args:
        stream: File-like object providing ``write(bytes)``
        value (int): Unsigned 64-bit integer
    Returns:
        int: Number of bytes written as reported by the stream. If the stream
        does not report anything, the length of the encoding is returned.
    """
    buf = bytearray(MAX_BYTE_SIZE)
    size = encode(buf, value)
    written = stream.write(bytes(buf[:size]))
    if written is None:
        return size
    return written


def write_bytes(stream, value):
    """Writes the SDNV encoding of value with one write operation per byte

    Args:
        stream: File-like object providing ``write(bytes)``
        value (int): Unsigned 64-bit integer
    Returns:
        int: Sum of the byte counts reported by the stream. Writes that
        do not report anything count as one byte.
    """
    check_uint64(value)
    count = 0
    for byte in iter_encoded(value):
        written = stream.write(bytes((byte,)))
        count += 1 if written is None else written
    return count


def read(stream):
    """Reads a single SDNV from a stream

    Args:
        stream: File-like object providing ``read(size)``. An empty result is
            treated as end of input.
    Returns:
        tuple: Decoded integer and the number of consumed bytes
    Raises:
        EndOfInputError: If the stream was exhausted before the first byte
        UnexpectedEndOfInputError: If the stream was exhausted within the SDNV
        Overflow64Error: If the SDNV does not fit into 64 bits
        BlockingIOError: If a non-blocking stream returned ``None`` because no
            data was available. The bytes consumed so far are lost.
    """
    decoder = SDNVDecoder()
    while True:
        data = stream.read(1)
        if _consume(decoder, _first_byte(decoder, data)):
            return decoder.result()


def read_bytes(source):
    """Reads a single SDNV from an iterator over byte values.

    Pass the same iterator for reading consecutive SDNVs. An iterable like
    :class:`bytes` would be restarted from the beginning on every call.

    Args:
        source: Iterator yielding integers in the range ``[0, 255]``
    Returns:
        tuple: Decoded integer and the number of consumed bytes
    Raises:
        See :func:`read`
    """
    source = iter(source)
    decoder = SDNVDecoder()
    for byte in source:
        if _consume(decoder, byte):
            return decoder.result()
    _end_of_input(decoder)


def iter_read(stream):
    """Yields ``(value, bytes_consumed)`` tuples for all SDNVs in a stream
    until its regular end. Truncated or too wide SDNVs raise an error.
    """
    while True:
        try:
            yield read(stream)
        except EndOfInputError:
            return


async def write_async(writer, value):
    """Writes the SDNV encoding of value to an :class:`asyncio.StreamWriter`
    and waits until the buffer of the writer is flushed.

    Returns:
        int: Number of bytes written
    """
    check_uint64(value)
    data = bytes(iter_encoded(value))
    writer.write(data)
    await writer.drain()
    return len(data)


async def read_async(reader):
    """Async variant of :func:`read` for :class:`asyncio.StreamReader`. The
    interface is identical, except that this function is a coroutine and has
    to be awaited.
    """
    decoder = SDNVDecoder()
    while True:
        data = await reader.read(1)
        if _consume(decoder, _first_byte(decoder, data)):
            return decoder.result()
