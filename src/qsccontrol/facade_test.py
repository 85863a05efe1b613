import socket
import unittest
from unittest.mock import patch

from hamcrest import assert_that, is_, is_not

from qsccontrol import facade
from qsccontrol.client import ControlClient
from qsccontrol.config.options import ClientOptions
from qsccontrol.pool import ConnectionPool
from qsccontrol.registry import ClientRegistry
from qsccontrol.simulator import SimulatedConnector, SimulatedUnit


class FacadeTest(unittest.TestCase):

    def setUp(self):
        self.unit = SimulatedUnit({"MainGain": 0.0, "MainMute": 1.0})

        def simulated_client(address, options):
            pool = ConnectionPool(SimulatedConnector(self.unit, address), reuse_delay=0)
            return ControlClient(address, options, pool)

        self.registry = facade.configure(registry=ClientRegistry(factory=simulated_client))
        self.addCleanup(facade.configure)

    def test_uses_configured_registry(self):
        assert_that(facade.registry(), is_(self.registry))
        assert_that(facade.client("10.0.0.5"), is_(self.registry.get_or_create("10.0.0.5")))

    def test_configure_with_options(self):
        options = ClientOptions(ttl=10)
        registry = facade.configure(options)
        assert_that(registry, is_not(self.registry))
        assert_that(facade.client("10.0.0.5").options, is_(options))

    def test_controls(self):
        assert_that(facade.set_control("10.0.0.5", "Level", 2), is_(2.0))
        assert_that(facade.get_control("10.0.0.5", "Level"), is_(2.0))

    def test_volumes(self):
        facade.set_volume("10.0.0.5", "MainGain", 0)
        assert_that(facade.get_volumes("10.0.0.5", ["MainGain"]), is_({"MainGain": 0}))
        assert_that(self.unit.controls["MainGain"], is_(-100))

    def test_mutes(self):
        assert_that(facade.get_mutes("10.0.0.5", ["MainMute"]), is_({"MainMute": True}))
        facade.set_mute("10.0.0.5", "MainMute", False)
        assert_that(facade.get_mutes("10.0.0.5", ["MainMute"]), is_({"MainMute": False}))

    def test_status(self):
        assert_that(facade.get_status("10.0.0.5"), is_(self.unit.status))
        assert_that(facade.healthy("10.0.0.5"), is_(True))
        with patch('qsccontrol.client.socket.gethostbyaddr', side_effect=socket.herror("unknown host")):
            assert_that(facade.get_info("10.0.0.5").model_name, is_("Core 110f"))


if __name__ == '__main__':  # pragma: no cover
    unittest.main()
