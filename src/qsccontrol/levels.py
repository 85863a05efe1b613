"""
Conversions between the percentage volume callers work in and the decibel gain the unit works in,
and the naming convention for gain and mute controls.
"""
import math

# Sent in place of percent_to_db(0), which is undefined.
SILENT_DB = -100

GAIN_SUFFIX = "Gain"
MUTE_SUFFIX = "Mute"


def percent_to_db(percent):
    """
    >>> percent_to_db(100)
    0.0
    >>> round(percent_to_db(50), 4)
    -6.0206
    """
    if percent <= 0:
        raise ValueError("percent must be positive, got %r" % (percent,))
    return 20 * math.log10(percent / 100)


def db_to_percent(db) -> int:
    """
    Truncates rather than rounds. Raises ValueError for a gain too large or not a number.
    >>> db_to_percent(0)
    100
    >>> db_to_percent(-6.0206)
    49
    """
    try:
        return int(math.pow(10, db / 20) * 100)
    except (OverflowError, ValueError) as e:
        raise ValueError("gain %r dB has no volume percentage" % (db,)) from e


def volume_to_db(percent):
    """ the gain to send for a volume percentage; zero is sent as SILENT_DB. """
    return SILENT_DB if percent == 0 else percent_to_db(percent)


def gain_control(block):
    """
    >>> gain_control("Main")
    'MainGain'
    """
    return block + GAIN_SUFFIX


def mute_control(block):
    """
    >>> mute_control("Main")
    'MainMute'
    """
    return block + MUTE_SUFFIX
