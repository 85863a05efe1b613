"""
The unit's remote control protocol: JSON-RPC 2.0 envelopes, one per NUL-terminated frame.

Only three methods are used: Control.Get, Control.Set and StatusGet. Requests always carry id 1;
a response is paired with its request by being the next frame read on the same connection.
"""
