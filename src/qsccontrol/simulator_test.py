import json
import unittest

from hamcrest import assert_that, calling, has_length, is_, raises

from qsccontrol.connector.base import ConnectionClosedError, DeadlineExceededError
from qsccontrol.protocol.framing import DELIMITER
from qsccontrol.simulator import METHOD_NOT_FOUND, SimulatedConduit, SimulatedConnector, SimulatedUnit
from qsccontrol.support.timing import Deadline


def request(method, params):
    return json.dumps({"jsonrpc": "2.0", "id": 1, "method": method, "params": params}).encode('utf-8')


def decode(frame):
    assert_that(frame.endswith(DELIMITER), is_(True))
    return json.loads(frame[:-1].decode('utf-8'))


class SimulatedUnitTest(unittest.TestCase):

    def setUp(self):
        self.sut = SimulatedUnit({"MainGain": -6.0, "MainMute": 1.0})

    def test_control_get(self):
        response = decode(self.sut.handle(request("Control.Get", ["MainGain"])))
        assert_that(response["result"], is_([{"Name": "MainGain", "Value": -6.0, "String": "-6", "Position": 0}]))

    def test_control_get_unknown_and_hidden(self):
        self.sut.hidden.add("MainMute")
        response = decode(self.sut.handle(request("Control.Get", ["MainMute", "Other"])))
        assert_that(response["result"], is_([]))

    def test_control_set(self):
        response = decode(self.sut.handle(request("Control.Set", {"Name": "MainGain", "Value": -3})))
        assert_that(response["result"], is_({"Name": "MainGain", "Value": -3}))
        assert_that(self.sut.controls["MainGain"], is_(-3))

    def test_control_set_echoes_configured_name(self):
        self.sut.echo_names["MainGain"] = "Other"
        response = decode(self.sut.handle(request("Control.Set", {"Name": "MainGain", "Value": 0})))
        assert_that(response["result"]["Name"], is_("Other"))

    def test_status_get(self):
        response = decode(self.sut.handle(request("StatusGet", 0)))
        assert_that(response["result"]["Platform"], is_("Core 110f"))
        assert_that(response["result"]["Status"], is_({"Code": 0, "String": "OK"}))

    def test_unknown_method(self):
        response = decode(self.sut.handle(request("Mixer.Set", {})))
        assert_that(response["error"]["code"], is_(METHOD_NOT_FOUND))

    def test_requests_are_recorded(self):
        self.sut.handle(request("StatusGet", 0))
        assert_that(self.sut.requests, is_([{"jsonrpc": "2.0", "id": 1, "method": "StatusGet", "params": 0}]))


class SimulatedConduitTest(unittest.TestCase):

    def setUp(self):
        self.unit = SimulatedUnit({"MainGain": 0})
        self.sut = SimulatedConduit(self.unit, "10.1.1.1")

    def test_write_then_read(self):
        self.sut.write(request("Control.Get", ["MainGain"]) + DELIMITER)
        reply = self.sut.read_until(DELIMITER)
        assert_that(decode(reply)["result"][0]["Name"], is_("MainGain"))
        assert_that(self.sut.writes, has_length(1))

    def test_read_with_nothing_sent(self):
        assert_that(calling(self.sut.read_until).with_args(DELIMITER), raises(DeadlineExceededError))

    def test_expired_deadline(self):
        assert_that(calling(self.sut.write).with_args(b'{}\x00', Deadline.after(-1)), raises(DeadlineExceededError))

    def test_closed(self):
        self.sut.close()
        assert_that(self.sut.open, is_(False))
        assert_that(calling(self.sut.write).with_args(b'{}\x00'), raises(ConnectionClosedError))

    def test_injected_failures(self):
        self.sut.fail_writes = ConnectionClosedError("reset")
        assert_that(calling(self.sut.write).with_args(b'{}\x00'), raises(ConnectionClosedError))
        assert_that(self.unit.requests, is_([]))

    def test_properties(self):
        assert_that(self.sut.remote_address, is_("10.1.1.1"))
        assert_that(self.sut.target, is_(self.unit))


class SimulatedConnectorTest(unittest.TestCase):

    def test_each_connect_is_a_new_conduit(self):
        sut = SimulatedConnector(SimulatedUnit(), "10.1.1.2")
        first = sut.connect()
        second = sut.connect()
        assert_that(sut.conduits, is_([first, second]))
        assert_that(first.remote_address, is_("10.1.1.2"))
        assert_that(sut.endpoint, is_(("10.1.1.2", 0)))


if __name__ == '__main__':  # pragma: no cover
    unittest.main()
