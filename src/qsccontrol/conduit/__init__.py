"""
The conduit package provides an abstraction of a bi-directional byte stream to a unit.
Writes and reads are bounded by a deadline, and reads are framed by a delimiter.

The concrete implementation is a TCP socket.
"""
