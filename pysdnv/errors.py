"""Exceptions raised by the SDNV encoders, decoders and stream readers.

All exceptions derive from :class:`SDNVError` which is itself a
:class:`ValueError`. Exceptions raised by the underlying streams (e.g.
:class:`OSError`) are never wrapped.
"""


class SDNVError(ValueError):
    """Base class for all SDNV codec errors.

    Args:
        message (str): Human readable description
        bytes_consumed (int): Number of bytes that were consumed from the input
            before the error was detected
    """

    def __init__(self, message, bytes_consumed=0):
        super().__init__(message)
        self.bytes_consumed = bytes_consumed


class BufferTooSmallError(SDNVError):
    """The target buffer cannot hold the encoded value.

    Args:
        bytes_needed (int): Required buffer size (including the offset)
        buffer_size (int): Actual size of the buffer
    """

    def __init__(self, bytes_needed, buffer_size):
        super().__init__(
            "Buffer too small: {} bytes needed, {} available".format(
                bytes_needed, buffer_size,
            )
        )
        self.bytes_needed = bytes_needed
        self.buffer_size = buffer_size


class Overflow64Error(SDNVError, OverflowError):
    """The value does not fit into an unsigned 64-bit integer."""

    def __init__(self, bytes_consumed=0):
        super().__init__(
            "SDNV byte sequence overflows a 64-bit integer",
            bytes_consumed,
        )


class EndOfInputError(SDNVError, EOFError):
    """The input was exhausted before the first byte of an SDNV.

    This usually is the regular end of a stream of SDNVs.
    """

    def __init__(self):
        super().__init__("End of input", 0)


class UnexpectedEndOfInputError(SDNVError, EOFError):
    """The input was exhausted in the middle of an SDNV."""

    def __init__(self, bytes_consumed):
        super().__init__(
            "Unexpected end of input after {} bytes".format(bytes_consumed),
            bytes_consumed,
        )
