"""
Client settings and loading them from configuration files.
"""
import logging
import os

from qsccontrol.config.config import apply_conf_path, load_config
from qsccontrol.connector.socketconn import QRC_PORT
from qsccontrol.support.mixins import CommonEqualityMixin, StringerMixin

logger = logging.getLogger(__name__)

# the directory holding the packaged schema
config_directory = os.path.dirname(__file__)

CLIENT_SECTION = 'client'
SCHEMA_NAME = 'qsccontrol'


class ClientOptions(CommonEqualityMixin, StringerMixin):
    """
    Settings shared by the clients a registry creates.

    :param port: the unit's TCP control port.
    :param ttl: seconds a connection is reused before it is closed.
    :param reuse_delay: minimum seconds between two uses of a connection.
    :param dial_timeout: seconds allowed to dial and handshake when no timeout is given.
    :param write_timeout: seconds allowed to send a request when no timeout is given.
    :param read_timeout: seconds allowed to receive a response when no timeout is given.
    """

    def __init__(self, port=QRC_PORT, ttl=30.0, reuse_delay=0.5, dial_timeout=5.0, write_timeout=3.0,
                 read_timeout=3.0):
        self.port = port
        self.ttl = ttl
        self.reuse_delay = reuse_delay
        self.dial_timeout = dial_timeout
        self.write_timeout = write_timeout
        self.read_timeout = read_timeout


def load_options(directory=None, name='qsccontrol', user_overrides=True) -> ClientOptions:
    """
    Reads ClientOptions from the [client] section of the configuration files named `name`
    in `directory`. Settings not found in any file take the schema's defaults.
    """
    conf = load_config(name, directory or config_directory, config_directory, user_overrides,
                       schema_name=SCHEMA_NAME)
    options = ClientOptions()
    apply_conf_path(conf, [CLIENT_SECTION], options)
    logger.debug("loaded %s from %s" % (options, directory or config_directory))
    return options
