"""
Address-first functions over a process-wide client registry.

Each function finds or creates the client for the address and makes one call on it:

    >>> from qsccontrol import facade
    >>> facade.set_volume("10.0.0.5", "MainGain", 50)      # doctest: +SKIP

configure() replaces the registry, for example to apply options loaded from configuration files.
"""
import threading

from qsccontrol.config.options import ClientOptions
from qsccontrol.registry import ClientRegistry

_registry = None
_registry_lock = threading.Lock()


def configure(options: ClientOptions=None, registry: ClientRegistry=None) -> ClientRegistry:
    """
    Installs the registry used by the functions in this module. Clients already handed out
    are unaffected.
    """
    global _registry
    with _registry_lock:
        _registry = registry if registry is not None else ClientRegistry(options)
        return _registry


def registry() -> ClientRegistry:
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = ClientRegistry()
        return _registry


def client(address):
    return registry().get_or_create(address)


def get_control(address, name, timeout=None):
    return client(address).get_control(name, timeout)


def set_control(address, name, value, timeout=None):
    return client(address).set_control(name, value, timeout)


def get_volumes(address, names, timeout=None):
    return client(address).get_volumes(names, timeout)


def set_volume(address, name, percent, timeout=None):
    client(address).set_volume(name, percent, timeout)


def get_mutes(address, names, timeout=None):
    return client(address).get_mutes(names, timeout)


def set_mute(address, name, muted, timeout=None):
    client(address).set_mute(name, muted, timeout)


def get_status(address, timeout=None):
    return client(address).get_status(timeout)


def get_info(address, timeout=None):
    return client(address).get_info(timeout)


def healthy(address, timeout=None):
    return client(address).healthy(timeout)
