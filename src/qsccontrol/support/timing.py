import time


class Deadline:
    """
    An absolute point in time by which an operation must complete.

    A single deadline is shared by every blocking step of one logical operation (dial, handshake,
    write, read), so the caller's budget is spent across all of them rather than restarted for each.
    """

    def __init__(self, expires_at, clock=time.monotonic):
        """
        :param expires_at: the clock value at which the deadline expires.
        :param clock: a callable returning the current time in seconds. Must be the same clock
            that produced expires_at.
        """
        self.expires_at = expires_at
        self.clock = clock

    @classmethod
    def after(cls, seconds, clock=time.monotonic):
        """
        >>> Deadline.after(5, clock=lambda: 10).expires_at
        15
        """
        return cls(clock() + seconds, clock)

    @classmethod
    def resolve(cls, deadline, default_seconds, clock=time.monotonic):
        """
        Returns the given deadline, or a new one default_seconds from now when no deadline is given.
        """
        return deadline if deadline is not None else cls.after(default_seconds, clock)

    def remaining(self):
        """ the number of seconds left. Negative once the deadline has passed. """
        return self.expires_at - self.clock()

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0

    def __repr__(self):
        return "Deadline(remaining=%.3f)" % self.remaining()


class PeriodStrategy:
    """
    Tracks when something was last used and how long until it may be used again.
    """

    def __init__(self, period, last_used=None):
        """
        :param period: The minimum time in seconds between two uses.
        :param last_used: The time of the previous use, or None if never used.
        """
        self.period = period
        self.last_used = last_used

    def __call__(self, current_time):
        """
        Determines how long until the next use is allowed.
        :return: the number of seconds to wait. Zero or negative means it may be used now.
        """
        return 0 if self.last_used is None else self.period - (current_time - self.last_used)

    def touch(self, current_time):
        """ records a use at current_time. """
        self.last_used = current_time
