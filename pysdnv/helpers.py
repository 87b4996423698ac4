import select
import logging

logger = logging.getLogger(__name__)


def sock_recv_raw(sock, count, timeout=None):
    """Tries to receive an exact number of bytes from a socket.

    Less bytes are returned if the remote peer closes the connection before.

    Args:
        sock: socket object
        count (int): number of bytes to be received
        timeout (float): maximum time to wait, in s (None for infinite timeout)
    Returns:
        bytes: Received raw data
    Raises:
        TimeoutError: If no data arrived within the timeout
    """
    buf = b""
    while len(buf) < count:
        if timeout is not None:
            ready = select.select([sock], [], [], timeout)
        else:
            ready = select.select([sock], [], [])
        if not ready[0]:
            raise TimeoutError("select operation ran into timeout")
        r = sock.recv(count - len(buf))
        if not r:
            # e.g. because the socket was closed
            logger.debug("SocketStream: Remote peer closed connection")
            break
        buf += r
    return buf


class SocketStream(object):
    """File-like wrapper around a connected socket

    It can be passed to the stream functions of :mod:`pysdnv.stream`. Timeouts
    are handled here, the SDNV readers do not know about them.

    .. code:: python

        from pysdnv.helpers import SocketStream
        from pysdnv.stream import read

        with SocketStream(sock, timeout=1.) as stream:
            length, _ = read(stream)

    Args:
        sock: Connected socket object
        timeout (float): Timeout for receiving data (None for infinite)
    """

    def __init__(self, sock, timeout=None):
        self.sock = sock
        self.timeout = timeout

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def read(self, count=1):
        """Receives up to count bytes. An empty byte string is returned once
        the remote peer closed the connection.
        """
        return sock_recv_raw(self.sock, count, self.timeout)

    def write(self, data):
        self.sock.sendall(data)
        return len(data)

    def close(self):
        self.sock.close()
