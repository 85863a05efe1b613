import socket

from qsccontrol.conduit import base
from qsccontrol.connector.base import ConnectionClosedError, ConnectorError, DeadlineExceededError


class SocketConduit(base.Conduit):
    """
    A conduit that provides communication via a connected TCP socket.

    Reads are buffered: bytes that arrive after a delimiter stay in the buffer and
    are returned by the next read_until() call.
    """

    def __init__(self, sock: socket.socket, chunk_size=4096):
        """
        :param sock: the client socket that represents the connection
        :param chunk_size: the maximum number of bytes to receive at a time
        """
        self.sock = sock
        self.chunk_size = chunk_size
        self._buffer = bytearray()
        self._closed = False

    @property
    def open(self) -> bool:
        return not self._closed and self.sock.fileno() >= 0

    @property
    def target(self):
        return self.sock

    @property
    def remote_address(self) -> str:
        return self.sock.getpeername()[0]

    def write(self, data: bytes, deadline=None):
        self._set_timeout(deadline)
        try:
            self.sock.sendall(data)
        except socket.timeout as e:
            raise DeadlineExceededError("timed out writing %d bytes" % len(data)) from e
        except OSError as e:
            raise ConnectorError("unable to write %d bytes: %s" % (len(data), e)) from e

    def read_until(self, delimiter: bytes, deadline=None) -> bytes:
        buffer = self._buffer
        while True:
            index = buffer.find(delimiter)
            if index >= 0:
                end = index + len(delimiter)
                result = bytes(buffer[:end])
                del buffer[:end]
                return result
            self._set_timeout(deadline)
            try:
                chunk = self.sock.recv(self.chunk_size)
            except socket.timeout as e:
                raise DeadlineExceededError("timed out waiting for %r after %d bytes" %
                                            (delimiter, len(buffer))) from e
            except OSError as e:
                raise ConnectorError("unable to read: %s" % e) from e
            if not chunk:
                raise ConnectionClosedError("connection closed by peer after %d bytes" % len(buffer))
            buffer.extend(chunk)

    def _set_timeout(self, deadline):
        if deadline is None:
            self.sock.settimeout(None)
            return
        remaining = deadline.remaining()
        if remaining <= 0:
            raise DeadlineExceededError("deadline expired")
        self.sock.settimeout(remaining)

    def close(self):
        if self._closed:
            return
        self._closed = True
        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            # the peer may have closed the socket
            pass
        finally:
            self.sock.close()
