import io
import asyncio
import logging

import pytest

from pysdnv.errors import (
    EndOfInputError,
    Overflow64Error,
    UnexpectedEndOfInputError,
)
from pysdnv.sdnv import MAX_BYTE_SIZE, MAX_UINT64
from pysdnv.stream import (
    iter_read,
    read,
    read_async,
    read_bytes,
    write,
    write_async,
    write_bytes,
)

from .helpers import (
    CANONICAL_EXAMPLES,
    OVERFLOW_FIRST_BYTE,
    OVERFLOW_TOO_LONG,
)


class RecordingSink(object):
    """Sink remembering every single write call"""

    def __init__(self, result=None):
        self.chunks = []
        self.result = result

    def write(self, data):
        self.chunks.append(bytes(data))
        return self.result


class FailingStream(object):

    def __init__(self, error):
        self.error = error

    def read(self, count):
        raise self.error

    def write(self, data):
        raise self.error


class FakeStreamWriter(object):
    """Minimal stand-in for asyncio.StreamWriter"""

    def __init__(self):
        self.buffer = bytearray()
        self.drained = False

    def write(self, data):
        self.drained = False
        self.buffer += data

    async def drain(self):
        self.drained = True


@pytest.mark.parametrize("value,data", CANONICAL_EXAMPLES)
def test_write(value, data):
    stream = io.BytesIO()
    assert write(stream, value) == len(data)
    assert stream.getvalue() == data


@pytest.mark.parametrize("value,data", CANONICAL_EXAMPLES)
def test_write_bytes(value, data):
    sink = RecordingSink()
    assert write_bytes(sink, value) == len(data)
    assert b"".join(sink.chunks) == data
    assert all(len(chunk) == 1 for chunk in sink.chunks)


def test_write_single_call():
    sink = RecordingSink()
    # The stream does not report a count, the encoded size is returned
    assert write(sink, 0x4234) == 3
    assert sink.chunks == [b"\x81\x84\x34"]

    # A count reported by the stream is passed through
    assert write(RecordingSink(result=1), 0x4234) == 1


def test_write_invalid_values():
    sink = RecordingSink()
    with pytest.raises(Overflow64Error):
        write(sink, MAX_UINT64 + 1)
    with pytest.raises(Overflow64Error):
        write_bytes(sink, MAX_UINT64 + 1)
    with pytest.raises(ValueError):
        write_bytes(sink, -1)
    assert sink.chunks == []


def test_write_propagates_errors():
    error = BrokenPipeError("connection lost")
    with pytest.raises(BrokenPipeError) as excinfo:
        write(FailingStream(error), 0x1234)
    assert excinfo.value is error

    with pytest.raises(BrokenPipeError):
        write_bytes(FailingStream(error), 0x1234)


@pytest.mark.parametrize("value,data", CANONICAL_EXAMPLES)
def test_read(value, data):
    stream = io.BytesIO(data + b"\x42")
    assert read(stream) == (value, len(data))
    # Nothing has been read ahead
    assert stream.tell() == len(data)


@pytest.mark.parametrize("value,data", CANONICAL_EXAMPLES)
def test_read_bytes(value, data):
    source = iter(data + b"\x42")
    assert read_bytes(source) == (value, len(data))
    assert next(source) == 0x42


def test_read_bytes_consecutive():
    source = iter(b"\x95\x3c\xa4\x34\x7f")
    assert read_bytes(source) == (0xabc, 2)
    assert read_bytes(source) == (0x1234, 2)
    assert read_bytes(source) == (0x7f, 1)
    with pytest.raises(EndOfInputError):
        read_bytes(source)


@pytest.mark.parametrize("data", [OVERFLOW_FIRST_BYTE, OVERFLOW_TOO_LONG])
def test_read_overflow(data):
    with pytest.raises(Overflow64Error) as excinfo:
        read(io.BytesIO(data))
    assert excinfo.value.bytes_consumed == MAX_BYTE_SIZE

    with pytest.raises(Overflow64Error) as excinfo:
        read_bytes(iter(data))
    assert excinfo.value.bytes_consumed == MAX_BYTE_SIZE


def test_read_overflow_stops_at_tenth_byte():
    stream = io.BytesIO(OVERFLOW_TOO_LONG)
    with pytest.raises(Overflow64Error):
        read(stream)
    assert stream.tell() == MAX_BYTE_SIZE


def test_read_end_of_input():
    with pytest.raises(EndOfInputError) as excinfo:
        read(io.BytesIO(b""))
    assert excinfo.value.bytes_consumed == 0

    with pytest.raises(EndOfInputError):
        read_bytes(iter(b""))


def test_read_unexpected_end_of_input():
    with pytest.raises(UnexpectedEndOfInputError) as excinfo:
        read(io.BytesIO(b"\xff\xff"))
    assert excinfo.value.bytes_consumed == 2

    with pytest.raises(UnexpectedEndOfInputError) as excinfo:
        read_bytes(b"\xff\xff")
    assert excinfo.value.bytes_consumed == 2


def test_read_propagates_errors():
    error = ConnectionResetError("reset by peer")
    with pytest.raises(ConnectionResetError) as excinfo:
        read(FailingStream(error))
    assert excinfo.value is error


def test_read_logs_overflow(caplog):
    caplog.set_level(logging.DEBUG, logger="pysdnv.stream")
    with pytest.raises(Overflow64Error):
        read(io.BytesIO(OVERFLOW_FIRST_BYTE))
    assert "overflow" in caplog.text
    assert "0x83" in caplog.text


def test_iter_read():
    stream = io.BytesIO()
    for value, _ in CANONICAL_EXAMPLES:
        write(stream, value)
    stream.seek(0)

    assert list(iter_read(stream)) == [
        (value, len(data)) for value, data in CANONICAL_EXAMPLES
    ]


def test_iter_read_truncated():
    records = iter_read(io.BytesIO(b"\xa4\x34\x81\x84"))
    assert next(records) == (0x1234, 2)
    with pytest.raises(UnexpectedEndOfInputError):
        next(records)


def test_read_async():
    async def run():
        reader = asyncio.StreamReader()
        for _, data in CANONICAL_EXAMPLES:
            reader.feed_data(data)
        reader.feed_data(b"\xff")
        reader.feed_eof()

        results = []
        for _ in CANONICAL_EXAMPLES:
            results.append(await read_async(reader))

        with pytest.raises(UnexpectedEndOfInputError):
            await read_async(reader)
        with pytest.raises(EndOfInputError):
            await read_async(reader)

        return results

    assert asyncio.run(run()) == [
        (value, len(data)) for value, data in CANONICAL_EXAMPLES
    ]


def test_read_async_overflow():
    async def run():
        reader = asyncio.StreamReader()
        reader.feed_data(OVERFLOW_TOO_LONG)
        reader.feed_eof()
        await read_async(reader)

    with pytest.raises(Overflow64Error) as excinfo:
        asyncio.run(run())
    assert excinfo.value.bytes_consumed == MAX_BYTE_SIZE


def test_write_async():
    writer = FakeStreamWriter()

    async def run():
        sizes = []
        for value, _ in CANONICAL_EXAMPLES:
            sizes.append(await write_async(writer, value))
        return sizes

    assert asyncio.run(run()) == [len(data) for _, data in CANONICAL_EXAMPLES]
    assert writer.buffer == b"".join(data for _, data in CANONICAL_EXAMPLES)
    assert writer.drained


class ChunkedStream(object):
    """Stream returning the given read results one after another"""

    def __init__(self, chunks):
        self.chunks = list(chunks)

    def read(self, count):
        return self.chunks.pop(0)


def test_read_no_data_available():
    stream = ChunkedStream([b"\x81", None, b"\x84", b"\x34"])
    with pytest.raises(BlockingIOError) as excinfo:
        read(stream)
    # Not mistaken for the end of the stream
    assert not isinstance(excinfo.value, EOFError)
    assert "after 1 bytes" in str(excinfo.value)

    with pytest.raises(BlockingIOError):
        read(ChunkedStream([None]))


def test_read_empty_chunk_is_end_of_input():
    with pytest.raises(UnexpectedEndOfInputError) as excinfo:
        read(ChunkedStream([b"\x81", b""]))
    assert excinfo.value.bytes_consumed == 1


def test_write_bytes_reported_counts():
    # A stream accepting nothing reports zero bytes written
    assert write_bytes(RecordingSink(result=0), 0x4234) == 0
    assert write_bytes(RecordingSink(result=1), 0x4234) == 3
    assert write_bytes(RecordingSink(), 0x4234) == 3
