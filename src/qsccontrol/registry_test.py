import threading
import unittest
from unittest.mock import Mock

import timeout_decorator
from hamcrest import assert_that, contains_inanyorder, has_length, instance_of, is_, is_not

from qsccontrol.client import ControlClient
from qsccontrol.config.options import ClientOptions
from qsccontrol.registry import ClientRegistry


class ClientRegistryTest(unittest.TestCase):

    def test_creates_control_clients_with_options(self):
        options = ClientOptions(port=1711)
        sut = ClientRegistry(options)
        client = sut.get_or_create("10.0.0.1")
        assert_that(client, is_(instance_of(ControlClient)))
        assert_that(client.address, is_("10.0.0.1"))
        assert_that(client.options, is_(options))

    def test_same_address_same_client(self):
        sut = ClientRegistry()
        assert_that(sut.get_or_create("10.0.0.1"), is_(sut.get_or_create("10.0.0.1")))
        assert_that(sut, has_length(1))

    def test_distinct_addresses_distinct_clients(self):
        sut = ClientRegistry()
        assert_that(sut.get_or_create("10.0.0.1"), is_not(sut.get_or_create("10.0.0.2")))
        assert_that(sut.addresses, contains_inanyorder("10.0.0.1", "10.0.0.2"))

    def test_factory_called_once_per_address(self):
        factory = Mock()
        sut = ClientRegistry(factory=factory)
        sut.get_or_create("a")
        sut.get_or_create("a")
        factory.assert_called_once_with("a", sut.options)

    @timeout_decorator.timeout(5)
    def test_concurrent_first_use_converges(self):
        barrier = threading.Barrier(16)
        sut = ClientRegistry()
        results = []

        def work():
            barrier.wait()
            results.append(sut.get_or_create("10.0.0.9"))

        threads = [threading.Thread(target=work) for _ in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert_that(results, has_length(16))
        assert_that(set(map(id, results)), has_length(1))
        assert_that(sut, has_length(1))


if __name__ == '__main__':  # pragma: no cover
    unittest.main()
