"""
Request and response envelopes for the unit's JSON-RPC control protocol.

Requests encode themselves to a complete wire frame. Each request knows the response type
to decode its reply with, so callers do not need to track methods separately.

Decoding is lenient about missing members (they take zero values, as the unit omits members
it has nothing to say about) and strict about present members of the wrong type.
"""
import json
from abc import abstractmethod

from qsccontrol.protocol.framing import frame
from qsccontrol.support.mixins import CommonEqualityMixin, StringerMixin

JSONRPC_VERSION = "2.0"

# The id is never varied or checked. Only one request is in flight per connection.
REQUEST_ID = 1

CONTROL_GET = "Control.Get"
CONTROL_SET = "Control.Set"
STATUS_GET = "StatusGet"


def _prefix(address):
    return "[%s] " % address if address else ""


class ProtocolError(Exception):
    """ A response was received but could not be accepted as a reply to the request. """


class ResponseParseError(ProtocolError):
    """ The response body is not valid JSON, or does not have the shape expected for the method. """


class NameMismatchError(ProtocolError):
    """ The control name echoed in a Control.Set response differs from the name that was set. """

    def __init__(self, requested, received, address=None):
        super().__init__("%sresponse name (%s) does not match the name sent (%s)" %
                         (_prefix(address), received, requested))
        self.address = address
        self.requested = requested
        self.received = received


class InvalidMuteValueError(ProtocolError):
    """ A mute control reported a value other than 1.0 (muted) or 0.0 (unmuted). """

    def __init__(self, name, value, address=None):
        super().__init__("%sinvalid mute value %r for %s" % (_prefix(address), value, name))
        self.address = address
        self.name = name
        self.value = value


class GainRangeError(ProtocolError):
    """ A gain control reported a value that has no volume percentage. """

    def __init__(self, name, value, address=None):
        super().__init__("%sgain %r dB for %s is out of range" % (_prefix(address), value, name))
        self.address = address
        self.name = name
        self.value = value


def encode_json(obj) -> bytes:
    """
    >>> encode_json({"a": [1, 2]})
    b'{"a":[1,2]}'

    NaN and infinities are not JSON, and raise ValueError.
    """
    return json.dumps(obj, separators=(',', ':'), allow_nan=False).encode('utf-8')


def wire_number(value):
    """
    Integral values are sent without a fractional part.
    >>> wire_number(-100.0)
    -100
    >>> wire_number(0.5)
    0.5
    """
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _reject_constant(name):
    raise ResponseParseError("%s is not a JSON value" % name)


def _member(obj, key, types, default):
    value = obj.get(key)
    if value is None:
        return default
    # bool is an int subclass, so it has to be excluded explicitly
    if not isinstance(value, types) or (isinstance(value, bool) and bool not in types):
        raise ResponseParseError("member %s: expected %s, got %r" % (key, types[0].__name__, value))
    return value


def _number(obj, key):
    return float(_member(obj, key, (float, int), 0.0))


def _string(obj, key):
    return _member(obj, key, (str,), "")


def _object(obj, key):
    return _member(obj, key, (dict,), {})


class ControlResult(CommonEqualityMixin, StringerMixin):
    """ One control as reported by the unit. """

    def __init__(self, name, value=0.0, string="", position=0.0):
        self.name = name
        self.value = value
        self.string = string
        self.position = position

    @classmethod
    def from_json(cls, obj):
        if not isinstance(obj, dict):
            raise ResponseParseError("expected a control result object, got %r" % (obj,))
        return cls(_string(obj, "Name"), _number(obj, "Value"), _string(obj, "String"), _number(obj, "Position"))


class StatusCode(CommonEqualityMixin, StringerMixin):
    def __init__(self, code=0, string=""):
        self.code = code
        self.string = string


class EngineStatus(CommonEqualityMixin, StringerMixin):
    """ The unit's status record, as returned by StatusGet. """

    def __init__(self, platform="", state="", design_name="", design_code="", is_redundant=False,
                 is_emulator=False, status=None):
        self.platform = platform
        self.state = state
        self.design_name = design_name
        self.design_code = design_code
        self.is_redundant = is_redundant
        self.is_emulator = is_emulator
        self.status = status if status is not None else StatusCode()

    @classmethod
    def from_json(cls, obj):
        status = _object(obj, "Status")
        code = _member(status, "Code", (int,), 0)
        return cls(platform=_string(obj, "Platform"),
                   state=_string(obj, "State"),
                   design_name=_string(obj, "DesignName"),
                   design_code=_string(obj, "DesignCode"),
                   is_redundant=_member(obj, "IsRedundant", (bool,), False),
                   is_emulator=_member(obj, "IsEmulator", (bool,), False),
                   status=StatusCode(code, _string(status, "String")))

    def as_json(self):
        return {
            "Platform": self.platform,
            "State": self.state,
            "DesignName": self.design_name,
            "DesignCode": self.design_code,
            "IsRedundant": self.is_redundant,
            "IsEmulator": self.is_emulator,
            "Status": {"Code": self.status.code, "String": self.status.string},
        }


class Response:
    """
    A decoded response envelope.

    :param envelope: the decoded JSON object as received.
    """

    def __init__(self, envelope):
        self.envelope = envelope

    @classmethod
    def decode(cls, payload: bytes):
        """ decodes an unframed response payload. Raises ResponseParseError. """
        try:
            envelope = json.loads(payload.decode('utf-8'), parse_constant=_reject_constant)
        except (UnicodeDecodeError, ValueError) as e:
            raise ResponseParseError("unable to parse response %r: %s" % (payload, e)) from e
        if not isinstance(envelope, dict):
            raise ResponseParseError("expected a response object, got %r" % (payload,))
        response = cls(envelope)
        response._decode_result(envelope.get("result"))
        return response

    @abstractmethod
    def _decode_result(self, result):
        raise NotImplementedError

    @property
    def error(self):
        """ the JSON-RPC error member, if the unit sent one. """
        error = self.envelope.get("error")
        return error if isinstance(error, dict) else None

    @property
    def raw(self) -> str:
        """ the envelope re-serialized as compact JSON. """
        return encode_json(self.envelope).decode('utf-8')


class ControlGetResponse(Response):

    def _decode_result(self, result):
        if result is None:
            result = []
        if not isinstance(result, list):
            raise ResponseParseError("expected a list of control results, got %r" % (result,))
        self.results = [ControlResult.from_json(r) for r in result]

    def find(self, name):
        """ :return: the first result for the named control, or None if the unit did not report it. """
        for result in self.results:
            if result.name == name:
                return result
        return None


class ControlSetResponse(Response):

    def _decode_result(self, result):
        self.result = ControlResult.from_json(result if result is not None else {})


class StatusGetResponse(Response):

    def _decode_result(self, result):
        if result is None:
            result = {}
        if not isinstance(result, dict):
            raise ResponseParseError("expected a status object, got %r" % (result,))
        self.status = EngineStatus.from_json(result)


class Request:
    """ Encapsulates the request data. A request is a message sent from the client to the unit. """

    method = None
    response_type = Response
    # the controls a request concerns
    names = ()

    @property
    @abstractmethod
    def params(self):
        raise NotImplementedError

    def as_json(self):
        return {"jsonrpc": JSONRPC_VERSION, "id": REQUEST_ID, "method": self.method, "params": self.params}

    def encode(self) -> bytes:
        """ the complete wire frame for this request, including the terminating NUL. """
        return frame(encode_json(self.as_json()))

    def decode_response(self, payload: bytes):
        return self.response_type.decode(payload)


class ControlGetRequest(Request):
    method = CONTROL_GET
    response_type = ControlGetResponse

    def __init__(self, *names):
        self.names = list(names)

    @property
    def params(self):
        return self.names


class ControlSetRequest(Request):
    method = CONTROL_SET
    response_type = ControlSetResponse

    def __init__(self, name, value):
        self.name = name
        self.value = value

    @property
    def names(self):
        return [self.name]

    @property
    def params(self):
        return {"Name": self.name, "Value": wire_number(self.value)}


class StatusGetRequest(Request):
    method = STATUS_GET
    response_type = StatusGetResponse

    def __init__(self, code=0):
        self.code = code

    @property
    def params(self):
        return self.code
