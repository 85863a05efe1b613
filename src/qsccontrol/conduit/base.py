from abc import abstractmethod


class Conduit:
    """
    A conduit allows two-way communication with a unit. Data is written whole, and read back
    one delimited frame at a time.
    """

    @property
    @abstractmethod
    def target(self):
        """ the underlying resource, such as a socket. """
        raise NotImplementedError

    @property
    @abstractmethod
    def remote_address(self) -> str:
        """ the IP address of the peer at the far end of this conduit. """
        raise NotImplementedError

    @property
    @abstractmethod
    def open(self) -> bool:
        """ determines if this conduit is open and can be written to and read from. """
        raise NotImplementedError

    @abstractmethod
    def write(self, data: bytes, deadline=None):
        """
        Writes all of data, or raises ConnectorError.
        :param deadline: a Deadline bounding the write. None blocks indefinitely.
        """
        raise NotImplementedError

    @abstractmethod
    def read_until(self, delimiter: bytes, deadline=None) -> bytes:
        """
        Reads up to and including the first occurrence of delimiter.
        Any data received beyond the delimiter is kept for the next read.
        :param deadline: a Deadline bounding the read. None blocks indefinitely.
        """
        raise NotImplementedError

    @abstractmethod
    def close(self):
        raise NotImplementedError


class ConduitDecorator(Conduit):
    """
    A ConduitDecorator wraps another conduit and delegates to its methods.
    This allows subclasses to easily override some behaviors while keeping others
    unchanged.
    """

    def __init__(self, decorate: Conduit):
        self.decorate = decorate

    @property
    def target(self):
        return self.decorate.target

    @property
    def remote_address(self) -> str:
        return self.decorate.remote_address

    @property
    def open(self) -> bool:
        return self.decorate.open

    def write(self, data: bytes, deadline=None):
        self.decorate.write(data, deadline)

    def read_until(self, delimiter: bytes, deadline=None) -> bytes:
        return self.decorate.read_until(delimiter, deadline)

    def close(self):
        self.decorate.close()
