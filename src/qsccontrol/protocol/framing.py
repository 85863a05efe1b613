"""
NUL framing used on the wire. Every message, in either direction, ends with a single NUL byte.
There is no length prefix.
"""

DELIMITER = b'\x00'


def frame(payload: bytes) -> bytes:
    """
    >>> frame(b'{}')
    b'{}\\x00'
    """
    return payload + DELIMITER


def unframe(data: bytes) -> bytes:
    """
    Strips every NUL byte from both ends of a received frame.
    >>> unframe(b'\\x00{}\\x00\\x00')
    b'{}'
    """
    return data.strip(DELIMITER)


def read_frame(conduit, deadline=None) -> bytes:
    """ reads the next frame from the conduit and returns its payload. """
    return unframe(conduit.read_until(DELIMITER, deadline))
