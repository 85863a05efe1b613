"""
A stand-in for a unit, for development and testing without hardware.

SimulatedUnit answers Control.Get, Control.Set and StatusGet requests from a table of control
values. It can be reached two ways:

- SimulatedConduit: an in-memory conduit. Nothing touches the network; every frame written
  is recorded, so tests can check exactly what was sent and in which order.
- SimulatedUnitServer: a TCP server on the loopback interface that sends a banner on connect,
  as a real unit does, then serves requests on each connection.
"""
import json
import logging
import socketserver
import threading

from qsccontrol.conduit.base import Conduit
from qsccontrol.conduit.socket_conduit import SocketConduit
from qsccontrol.connector.base import ConnectionClosedError, ConnectorError, DeadlineExceededError
from qsccontrol.protocol.framing import DELIMITER, frame, unframe
from qsccontrol.protocol.qrc import CONTROL_GET, CONTROL_SET, JSONRPC_VERSION, STATUS_GET, EngineStatus, \
    StatusCode, encode_json

logger = logging.getLogger(__name__)

DEFAULT_BANNER = b'{"jsonrpc":"2.0","method":"EngineStatus","params":{"State":"Active"}}' + DELIMITER

# JSON-RPC "method not found"
METHOD_NOT_FOUND = -32601


class SimulatedUnit:
    """
    Holds control values and produces responses.

    :param controls: initial control values by name.
    :param status: the EngineStatus reported by StatusGet.
    """

    def __init__(self, controls=None, status=None):
        self.controls = dict(controls or {})
        self.status = status or EngineStatus(platform="Core 110f", state="Active", design_name="Simulated",
                                             design_code="sim0", status=StatusCode(0, "OK"))
        self.requests = []
        # maps a control name to the name echoed back when it is set
        self.echo_names = {}
        # control names whose Control.Get answers with an empty result list
        self.hidden = set()
        self._lock = threading.Lock()

    def handle(self, payload: bytes) -> bytes:
        """ answers one unframed request payload with one framed response. """
        request = json.loads(payload.decode('utf-8'))
        with self._lock:
            self.requests.append(request)
            method = request.get("method")
            params = request.get("params")
            response = {"jsonrpc": JSONRPC_VERSION, "id": request.get("id")}
            if method == CONTROL_GET:
                response["result"] = [self._control_result(name) for name in params
                                      if name in self.controls and name not in self.hidden]
            elif method == CONTROL_SET:
                name, value = params["Name"], params["Value"]
                self.controls[name] = value
                response["result"] = {"Name": self.echo_names.get(name, name), "Value": value}
            elif method == STATUS_GET:
                response["result"] = self.status.as_json()
            else:
                response["error"] = {"code": METHOD_NOT_FOUND, "message": "Method not found"}
        return frame(encode_json(response))

    def _control_result(self, name):
        value = self.controls[name]
        return {"Name": name, "Value": value, "String": "%g" % value, "Position": 0}


class SimulatedConduit(Conduit):
    """
    An in-memory conduit connected to a SimulatedUnit.

    Frames written are answered immediately; the answers are buffered for read_until().
    Setting `fail_writes` or `fail_reads` to an exception makes the next writes or reads raise it.
    """

    def __init__(self, unit: SimulatedUnit, remote_address="127.0.0.1"):
        self.unit = unit
        self._remote_address = remote_address
        self.writes = []
        self.fail_writes = None
        self.fail_reads = None
        self._buffer = bytearray()
        self._closed = False

    @property
    def target(self):
        return self.unit

    @property
    def remote_address(self) -> str:
        return self._remote_address

    @property
    def open(self) -> bool:
        return not self._closed

    def write(self, data: bytes, deadline=None):
        self._check(deadline)
        if self.fail_writes is not None:
            raise self.fail_writes
        self.writes.append(data)
        for payload in data.split(DELIMITER)[:-1]:
            self._buffer.extend(self.unit.handle(payload))

    def read_until(self, delimiter: bytes, deadline=None) -> bytes:
        self._check(deadline)
        if self.fail_reads is not None:
            raise self.fail_reads
        index = self._buffer.find(delimiter)
        if index < 0:
            raise DeadlineExceededError("the simulated unit has nothing more to send")
        end = index + len(delimiter)
        result = bytes(self._buffer[:end])
        del self._buffer[:end]
        return result

    def close(self):
        self._closed = True

    def _check(self, deadline):
        if self._closed:
            raise ConnectionClosedError("simulated conduit is closed")
        if deadline is not None and deadline.expired:
            raise DeadlineExceededError("deadline expired")


class SimulatedConnector:
    """ a connector that hands out SimulatedConduit instances to one SimulatedUnit. """

    def __init__(self, unit: SimulatedUnit, address="127.0.0.1"):
        self.unit = unit
        self.address = address
        self.conduits = []

    @property
    def endpoint(self):
        return self.address, 0

    def connect(self, deadline=None) -> Conduit:
        conduit = SimulatedConduit(self.unit, self.address)
        self.conduits.append(conduit)
        return conduit


class _UnitRequestHandler(socketserver.BaseRequestHandler):

    def handle(self):
        server = self.server
        server.connections += 1
        conduit = SocketConduit(self.request)
        try:
            conduit.write(server.banner)
            while True:
                payload = unframe(conduit.read_until(DELIMITER))
                conduit.write(server.unit.handle(payload))
        except ConnectionClosedError:
            pass
        except ConnectorError as e:
            logger.debug("simulated unit connection ended: %s" % e)


class SimulatedUnitServer(socketserver.ThreadingTCPServer):
    """
    Serves a SimulatedUnit on the loopback interface. Use port 0 for any free port;
    the bound port is available as `port` once constructed.
    """
    daemon_threads = True
    allow_reuse_address = True

    def __init__(self, unit: SimulatedUnit, port=0, banner=DEFAULT_BANNER):
        super().__init__(("127.0.0.1", port), _UnitRequestHandler)
        self.unit = unit
        self.banner = banner
        self.connections = 0
        self._thread = None

    @property
    def port(self):
        return self.server_address[1]

    def start(self):
        self._thread = threading.Thread(target=self.serve_forever, daemon=True)
        self._thread.start()
        return self

    def stop(self):
        self.shutdown()
        self.server_close()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
