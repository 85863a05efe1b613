"""
The connector dials an endpoint and produces a conduit that has completed the unit's handshake.

A connector can be thought of as a conduit factory. The connection pool calls it each time it needs
a fresh connection.
"""
