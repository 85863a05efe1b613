import logging
import socket

from qsccontrol.conduit.base import Conduit
from qsccontrol.conduit.socket_conduit import SocketConduit
from qsccontrol.connector.base import Connector, ConnectorError, DeadlineExceededError, DialError, HandshakeError
from qsccontrol.protocol.framing import DELIMITER
from qsccontrol.support.timing import Deadline

logger = logging.getLogger(__name__)

# the unit's control port
QRC_PORT = 1710


class SocketConnector(Connector):
    """
    A connector that dials the unit over TCP and completes the connection handshake.

    On connect the unit sends a banner of unspecified length, terminated by a NUL byte.
    The banner is read and discarded before the conduit is handed out, so the first
    read a caller makes returns the response to its own first request.
    """
    def __init__(self, address, port=QRC_PORT, dial_timeout=5.0, report_errors=True):
        """
        :param address: hostname or IP address of the unit.
        :param port: the TCP port to connect to.
        :param dial_timeout: seconds allowed for dial and handshake when the caller gives no deadline.
        :param report_errors: when False, dial failures are logged at debug level rather than warning.
        """
        super().__init__()
        self.address = address
        self.port = port
        self.dial_timeout = dial_timeout
        self._report_errors = report_errors

    @property
    def endpoint(self):
        return self.address, self.port

    def connect(self, deadline=None) -> Conduit:
        deadline = Deadline.resolve(deadline, self.dial_timeout)
        conduit = SocketConduit(self._dial(deadline))
        try:
            banner = conduit.read_until(DELIMITER, deadline)
        except ConnectorError as e:
            conduit.close()
            method = logger.warning if self._report_errors else logger.debug
            method("no banner from %s:%s: %s" % (self.address, self.port, e))
            raise HandshakeError("unable to read new connection prompt from %s:%s: %s" %
                                 (self.address, self.port, e)) from e
        logger.info("opened connection to %s:%s" % (self.address, self.port))
        logger.debug("discarded %d byte banner from %s" % (len(banner), self.address))
        return conduit

    def _dial(self, deadline) -> socket.socket:
        remaining = deadline.remaining()
        if remaining <= 0:
            raise DeadlineExceededError("deadline expired before dialing %s:%s" % self.endpoint)
        try:
            return socket.create_connection(self.endpoint, timeout=remaining)
        except socket.timeout as e:
            raise DeadlineExceededError("timed out dialing %s:%s" % self.endpoint) from e
        except OSError as e:
            method = logger.warning if self._report_errors else logger.debug
            method("error opening socket to %s:%s: %s" % (self.address, self.port, e))
            raise DialError("unable to connect to %s:%s: %s" % (self.address, self.port, e)) from e
