"""
Control of QSC audio processors over their TCP control port.

- Conduit: a connection to a unit, read and written in whole NUL-terminated frames.
- Connector: dials a unit and reads past the banner it sends on connect, producing a conduit.
- ConnectionPool: lends conduits to one caller at a time. Conduits are reused for a while
  (ttl), rested between uses (reuse_delay), and thrown away on any error.
- protocol.qrc: the JSON-RPC requests and responses: Control.Get, Control.Set and StatusGet.
- ControlClient: named controls, volume as a percentage, mute, status and device info for
  one unit address.
- ClientRegistry and facade: one client per address for the life of the process, and
  functions that take the address as their first argument.

Nothing is retried. Transport errors (ConnectorError) mean the connection was discarded;
protocol errors (ProtocolError) mean the unit answered with something that could not be accepted.

Typical use:

    from qsccontrol import facade
    facade.set_volume("10.0.0.5", "MainGain", 40)
    facade.get_mutes("10.0.0.5", ["MainMute", "LobbyMute"])

The simulator module provides a unit stand-in for trying this out without hardware.
"""
