"""
A pool of connections to one unit.

Connections are borrowed for the duration of one request/response exchange. A borrowed connection
is held by exactly one caller; concurrent callers are given distinct connections, dialing new ones
as needed.

- connections older than the pool's ttl are closed rather than reused
- a connection is not reused until reuse_delay has passed since it was last returned; a caller
  that finds only such a connection waits out the remainder, or dials another when its deadline
  expires first
- a connection is discarded (closed, never returned) if anything goes wrong while it is borrowed

The pool fires ConnectionOpenedEvent, ConnectionRetiredEvent and ConnectionDiscardedEvent
to its `events` source as connections come and go.
"""
import logging
import threading
import time

from qsccontrol.conduit.base import Conduit, ConduitDecorator
from qsccontrol.connector.base import Connector
from qsccontrol.support.events import EventSource
from qsccontrol.support.timing import PeriodStrategy

logger = logging.getLogger(__name__)


class ConnectionEvent:
    """ base class for pool events. """
    def __init__(self, pool, conduit):
        self.pool = pool
        self.conduit = conduit


class ConnectionOpenedEvent(ConnectionEvent):
    """ A new connection was dialed and completed its handshake. """


class ConnectionRetiredEvent(ConnectionEvent):
    """ A connection outlived the pool's ttl and was closed. """


class ConnectionDiscardedEvent(ConnectionEvent):
    """ A connection was closed because an error occurred while it was borrowed. """
    def __init__(self, pool, conduit, error):
        super().__init__(pool, conduit)
        self.error = error


class PooledConduit(ConduitDecorator):
    """ A conduit owned by a pool, with the bookkeeping the pool needs to decide on reuse. """

    def __init__(self, decorate: Conduit, created, reuse_delay):
        super().__init__(decorate)
        self.created = created
        self.reuse = PeriodStrategy(reuse_delay)

    def age(self, current_time):
        return current_time - self.created


class BorrowedConnection:
    """
    Acquires a connection on entry. On a clean exit the connection goes back to the pool;
    on any exception it is discarded.
    """

    def __init__(self, pool: "ConnectionPool", deadline=None):
        self.pool = pool
        self.deadline = deadline
        self.conduit = None

    def __enter__(self) -> Conduit:
        self.conduit = self.pool._acquire(self.deadline)
        return self.conduit

    def __exit__(self, exc_type, exc_val, exc_tb):
        conduit, self.conduit = self.conduit, None
        if exc_type is None:
            self.pool._release(conduit)
        else:
            self.pool._discard(conduit, exc_val)
        return False


class ConnectionPool:
    """
    :param connector: dials and handshakes new connections.
    :param ttl: maximum age in seconds of a connection before it is no longer reused.
    :param reuse_delay: minimum seconds between returning a connection and using it again.
    :param clock: a monotonic clock, replaceable for testing.
    :param sleep: used to wait out the reuse delay, replaceable for testing.
    """

    def __init__(self, connector: Connector, ttl=30.0, reuse_delay=0.5, clock=time.monotonic, sleep=time.sleep):
        self.connector = connector
        self.ttl = ttl
        self.reuse_delay = reuse_delay
        self.clock = clock
        self.sleep = sleep
        self.events = EventSource()
        self._idle = []
        self._lock = threading.Lock()

    def connection(self, deadline=None) -> BorrowedConnection:
        """
        Borrows a connection for the duration of a with block:

            with pool.connection(deadline) as conduit:
                conduit.write(...)
                reply = conduit.read_until(...)

        :param deadline: bounds acquiring the connection, including dialing a new one.
        """
        return BorrowedConnection(self, deadline)

    def do(self, operation, deadline=None):
        """ calls operation(conduit) with a borrowed connection and returns its result. """
        with self.connection(deadline) as conduit:
            return operation(conduit)

    @property
    def idle_count(self):
        with self._lock:
            return len(self._idle)

    def close(self):
        """ closes all idle connections. Borrowed connections are unaffected. """
        with self._lock:
            idle, self._idle = self._idle, []
        for conduit in idle:
            conduit.close()

    def _acquire(self, deadline) -> PooledConduit:
        conduit = self._take_idle()
        if conduit is None:
            return self._open(deadline)
        wait = conduit.reuse(self.clock())
        if wait > 0:
            if deadline is not None and deadline.remaining() <= wait:
                # no time to wait out the delay: leave it resting and dial another
                self._put_idle(conduit)
                return self._open(deadline)
            self.sleep(wait)
        return conduit

    def _take_idle(self):
        """ removes and returns the idle connection that may be reused soonest, retiring expired ones. """
        now = self.clock()
        with self._lock:
            expired = [c for c in self._idle if self._expired(c, now)]
            live = [c for c in self._idle if not self._expired(c, now)]
            chosen = min(live, key=lambda c: c.reuse(now)) if live else None
            if chosen is not None:
                live.remove(chosen)
            self._idle = live
        for conduit in expired:
            self._retire(conduit)
        return chosen

    def _put_idle(self, conduit):
        with self._lock:
            self._idle.append(conduit)

    def _open(self, deadline) -> PooledConduit:
        conduit = PooledConduit(self.connector.connect(deadline), self.clock(), self.reuse_delay)
        self.events.fire(ConnectionOpenedEvent(self, conduit))
        return conduit

    def _release(self, conduit: PooledConduit):
        now = self.clock()
        conduit.reuse.touch(now)
        if self._expired(conduit, now):
            self._retire(conduit)
        else:
            self._put_idle(conduit)

    def _retire(self, conduit: PooledConduit):
        logger.info("closing connection to %s:%s after %.1fs" % (self.connector.endpoint +
                                                                 (conduit.age(self.clock()),)))
        conduit.close()
        self.events.fire(ConnectionRetiredEvent(self, conduit))

    def _discard(self, conduit: PooledConduit, error):
        logger.info("discarding connection to %s:%s: %s" % (self.connector.endpoint + (error,)))
        conduit.close()
        self.events.fire(ConnectionDiscardedEvent(self, conduit, error))

    def _expired(self, conduit: PooledConduit, current_time):
        return conduit.age(current_time) > self.ttl
