"""
Keeps one ControlClient per unit address for the life of the process.
"""
import logging
import threading

from qsccontrol.client import ControlClient
from qsccontrol.config.options import ClientOptions

logger = logging.getLogger(__name__)


class ClientRegistry:
    """
    Creates clients on first use and hands out the same client for an address thereafter.
    Clients are never removed.

    :param options: the options each new client is created with.
    :param factory: a callable taking an address and options and returning a new client.
    """

    def __init__(self, options: ClientOptions=None, factory=ControlClient):
        self.options = options or ClientOptions()
        self.factory = factory
        self._clients = {}
        self._lock = threading.Lock()

    def get_or_create(self, address) -> ControlClient:
        with self._lock:
            client = self._clients.get(address)
            if client is None:
                logger.info("creating client for %s" % address)
                client = self._clients[address] = self.factory(address, self.options)
            return client

    @property
    def addresses(self):
        with self._lock:
            return list(self._clients)

    def __len__(self):
        with self._lock:
            return len(self._clients)
