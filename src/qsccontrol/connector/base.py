from abc import abstractmethod

from qsccontrol.conduit.base import Conduit


class ConnectorError(Exception):
    """
    Indicates an error condition with a connection: dialing, the handshake, a write or a read.
    The conduit the error occurred on is no longer usable.
    """


class DialError(ConnectorError):
    """ The TCP connection to the unit could not be established. """


class HandshakeError(ConnectorError):
    """ The unit's banner could not be read after connecting. """


class ConnectionClosedError(ConnectorError):
    """ The peer closed the connection before a complete frame was received. """


class DeadlineExceededError(ConnectorError):
    """ The deadline expired before the operation completed. """


class Connector:
    """ A connector describes an endpoint to which a conduit can be established. """

    @property
    @abstractmethod
    def endpoint(self):
        """ the endpoint that this connector reaches out to """
        raise NotImplementedError

    @abstractmethod
    def connect(self, deadline=None) -> Conduit:
        """
        Opens a new conduit to the endpoint, ready for requests.
        Raises ConnectorError if the conduit cannot be established before the deadline.
        """
        raise NotImplementedError
