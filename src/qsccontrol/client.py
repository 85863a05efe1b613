"""
The control client: reads and writes named controls on one unit, and reports on its status.

Every call is one request/response exchange on a connection borrowed from the client's pool.
Calls that take several names make one exchange per name, in order, and stop at the first failure;
no partial results are returned.

Volume is given and reported as a percentage, and converted to and from the decibel gain the unit
works with. Mute controls hold 1.0 when muted and 0.0 when not.
"""
import logging
import socket

from qsccontrol.config.options import ClientOptions
from qsccontrol.connector.base import ConnectorError
from qsccontrol.connector.socketconn import SocketConnector
from qsccontrol.levels import db_to_percent, volume_to_db
from qsccontrol.pool import ConnectionPool
from qsccontrol.protocol.framing import read_frame
from qsccontrol.protocol.qrc import ControlGetRequest, ControlSetRequest, GainRangeError, InvalidMuteValueError, \
    NameMismatchError, StatusGetRequest
from qsccontrol.support.mixins import CommonEqualityMixin, StringerMixin
from qsccontrol.support.timing import Deadline

logger = logging.getLogger(__name__)

MUTED = 1.0
UNMUTED = 0.0


class ControlNotFoundError(LookupError):
    """ The unit did not report the requested control. """

    def __init__(self, address, name, error=None):
        message = "control %s not found on %s" % (name, address)
        if error:
            message += ": %s" % error.get("message", error)
        super().__init__(message)
        self.address = address
        self.name = name
        self.error = error


class HealthCheckError(Exception):
    """ The unit could not be asked for its status. The cause is chained. """

    def __init__(self, address, cause):
        super().__init__("health check of %s failed: %s" % (address, cause))
        self.address = address


class DeviceInfo(CommonEqualityMixin, StringerMixin):
    """ Identifies a unit and summarizes its state. """

    def __init__(self, hostname, model_name, ip_address, state, status_code, status_string, raw_state):
        self.hostname = hostname
        self.model_name = model_name
        self.ip_address = ip_address
        self.state = state
        self.status_code = status_code
        self.status_string = status_string
        # the StatusGet response as compact JSON
        self.raw_state = raw_state

    def as_json(self):
        return {
            "Hostname": self.hostname,
            "ModelName": self.model_name,
            "IPAddress": self.ip_address,
            "State": self.state,
            "StatusCode": self.status_code,
            "StatusString": self.status_string,
            "RawState": self.raw_state,
        }


def lookup_hostname(ip_address):
    """ the name the address reverse-resolves to, without a trailing dot, or the address itself. """
    try:
        hostname = socket.gethostbyaddr(ip_address)[0]
    except OSError as e:
        logger.debug("no hostname for %s: %s" % (ip_address, e))
        return ip_address
    return hostname.rstrip('.') or ip_address


class ControlClient:
    """
    Talks to the unit at one address.

    Every public method takes an optional `timeout` in seconds covering the whole call, including
    any dial and handshake. Without one, each step is bounded by the corresponding option
    (dial_timeout, write_timeout, read_timeout).

    Transport failures raise ConnectorError subclasses; responses that cannot be accepted raise
    ProtocolError subclasses. Neither is retried.
    """

    def __init__(self, address, options: ClientOptions=None, pool: ConnectionPool=None):
        """
        :param address: hostname or IP address of the unit.
        :param options: connection settings. Defaults apply when not given.
        :param pool: the pool to borrow connections from. Created from the options when not given.
        """
        self.address = address
        self.options = options or ClientOptions()
        if pool is None:
            connector = SocketConnector(address, port=self.options.port, dial_timeout=self.options.dial_timeout)
            pool = ConnectionPool(connector, ttl=self.options.ttl, reuse_delay=self.options.reuse_delay)
        self.pool = pool

    def _deadline(self, timeout):
        return Deadline.after(timeout) if timeout is not None else None

    def _exchange(self, request, deadline):
        """
        Sends the request and reads one response frame on a borrowed connection.
        :return: a tuple of the response payload and the remote IP address of the connection.
        """
        data = request.encode()
        with self.pool.connection(deadline) as conduit:
            try:
                logger.debug("%s -> %r" % (self.address, data))
                conduit.write(data, Deadline.resolve(deadline, self.options.write_timeout))
                payload = read_frame(conduit, Deadline.resolve(deadline, self.options.read_timeout))
                logger.debug("%s <- %r" % (self.address, payload))
            except ConnectorError as e:
                subject = " ".join([request.method] + list(request.names))
                raise type(e)("unable to %s on %s: %s" % (subject, self.address, e)) from e
            remote_address = conduit.remote_address
        return payload, remote_address

    def _round_trip(self, request, deadline):
        payload, _ = self._exchange(request, deadline)
        return request.decode_response(payload)

    def _get(self, name, deadline) -> float:
        response = self._round_trip(ControlGetRequest(name), deadline)
        result = response.find(name)
        if result is None:
            raise ControlNotFoundError(self.address, name, response.error)
        return result.value

    def _set(self, name, value, deadline) -> float:
        response = self._round_trip(ControlSetRequest(name, value), deadline)
        if response.result.name != name:
            raise NameMismatchError(name, response.result.name, self.address)
        return response.result.value

    def get_control(self, name, timeout=None) -> float:
        """
        :return: the current value of the named control.
        :raises ControlNotFoundError: if the unit does not report the control.
        """
        return self._get(name, self._deadline(timeout))

    def set_control(self, name, value, timeout=None) -> float:
        """
        Sets the named control.
        :return: the value the unit reports it was set to.
        :raises NameMismatchError: if the unit reports setting some other control.
        """
        logger.info("setting %s on %s to %s" % (name, self.address, value))
        return self._set(name, value, self._deadline(timeout))

    def get_volumes(self, names, timeout=None):
        """
        :return: a dict mapping each named gain control to its volume as a percentage.
        :raises GainRangeError: if a control holds a gain with no percentage, such as a huge positive gain.
        """
        deadline = self._deadline(timeout)
        return {name: self._volume(name, self._get(name, deadline)) for name in names}

    def _volume(self, name, db) -> int:
        try:
            return db_to_percent(db)
        except ValueError as e:
            raise GainRangeError(name, db, self.address) from e

    def get_volume(self, name, timeout=None) -> int:
        return self.get_volumes([name], timeout)[name]

    def set_volume(self, name, percent, timeout=None):
        """
        Sets a gain control to a volume percentage. Zero is sent as the lowest gain the unit
        accepts rather than converted.
        """
        db = volume_to_db(percent)
        logger.info("setting volume of %s on %s to %s%% (%s dB)" % (name, self.address, percent, db))
        self._set(name, db, self._deadline(timeout))

    def get_mutes(self, names, timeout=None):
        """
        :return: a dict mapping each named mute control to True when muted.
        :raises InvalidMuteValueError: if a control holds a value other than 1.0 or 0.0.
        """
        deadline = self._deadline(timeout)
        return {name: self._mute_state(name, self._get(name, deadline)) for name in names}

    def get_mute(self, name, timeout=None) -> bool:
        return self.get_mutes([name], timeout)[name]

    def set_mute(self, name, muted, timeout=None):
        logger.info("%s %s on %s" % ("muting" if muted else "unmuting", name, self.address))
        value = self._set(name, MUTED if muted else UNMUTED, self._deadline(timeout))
        self._mute_state(name, value)

    def _mute_state(self, name, value) -> bool:
        if value == MUTED:
            return True
        if value == UNMUTED:
            return False
        raise InvalidMuteValueError(name, value, self.address)

    def get_status(self, timeout=None):
        """
        :return: the unit's EngineStatus.
        """
        return self._round_trip(StatusGetRequest(), self._deadline(timeout)).status

    def get_info(self, timeout=None) -> DeviceInfo:
        """
        Describes the unit: its status, plus the address actually connected to and the name
        that address resolves to.
        """
        request = StatusGetRequest()
        payload, ip_address = self._exchange(request, self._deadline(timeout))
        response = request.decode_response(payload)
        status = response.status
        return DeviceInfo(hostname=lookup_hostname(ip_address),
                          model_name=status.platform,
                          ip_address=ip_address,
                          state=status.state,
                          status_code=status.status.code,
                          status_string=status.status.string,
                          raw_state=response.raw)

    def healthy(self, timeout=None) -> bool:
        """
        :return: True if the unit answers a status request.
        :raises HealthCheckError: otherwise, chained to the reason.
        """
        try:
            self.get_status(timeout)
        except Exception as e:
            logger.warning("unit %s is not healthy: %s" % (self.address, e))
            raise HealthCheckError(self.address, e) from e
        return True

    def __repr__(self):
        return "ControlClient(%r)" % self.address
