"""
Time stamps.

An *instant* is an integer count of nanoseconds since 1970-01-01T00:00:00,
which is exactly the integer view of a numpy ``datetime64[ns]``. Leap seconds
are not modelled, so adding seconds is plain integer arithmetic.

>>> t = civil_to_instant(2001, 3, 4, 5, 6, 7)
>>> format_instant(t)
'2001-03-04T05:06:07'
>>> instant_to_civil(increment(t, 60))
(2001, 3, 4, 5, 7, 7)
"""
import datetime

import numba as nb
import numpy as np

from .errors import InvalidDateTimeError

NANOS_PER_SECOND = 1000000000
INSTANT_DTYPE = np.dtype("<M8[ns]")

_EPOCH = datetime.datetime(1970, 1, 1)
# datetime64[ns] covers 1677-09-21 to 2262-04-11; keep to whole years inside it
_MIN_DATETIME = datetime.datetime(1678, 1, 1)
_MAX_DATETIME = datetime.datetime(2262, 1, 1)


@nb.jit(nopython=True, nogil=True)
def _fill_series(start, step, count):
    """
    Builds ``count`` instants, ``step`` nanoseconds apart.

    Examples
    --------
    >>> _fill_series(10, 5, 3)
    array([10, 15, 20])
    """
    out = np.empty(count, dtype=np.int64)
    value = start
    for i in range(count):
        out[i] = value
        value += step
    return out


@nb.jit(nopython=True, nogil=True)
def _strictly_increasing(values):
    """
    Checks every element is larger than the one before it.

    Examples
    --------
    >>> _strictly_increasing(np.array([1, 2, 3], dtype=np.int64))
    True
    >>> _strictly_increasing(np.array([1, 1, 3], dtype=np.int64))
    False
    """
    for i in range(1, len(values)):
        if values[i] <= values[i - 1]:
            return False
    return True


def civil_to_instant(year, month, day, hour=0, minute=0, second=0):
    """
    Converts a civil date/time to an instant.

    Month and day start at 1; hour, minute and second start at 0.

    Raises
    ------
    InvalidDateTimeError
        If the parts are not a valid date/time, or it is out of range.

    Examples
    --------
    >>> civil_to_instant(1970, 1, 1, 0, 0, 1)
    1000000000
    >>> civil_to_instant(2001, 2, 30)
    Traceback (most recent call last):
        ...
    imagcdf.errors.InvalidDateTimeError: Date/time cannot be represented: (2001, 2, 30, 0, 0, 0)
    """
    try:
        dt = datetime.datetime(year, month, day, hour, minute, second)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidDateTimeError(
            repr((year, month, day, hour, minute, second))
        ) from e
    if not _MIN_DATETIME <= dt < _MAX_DATETIME:
        raise InvalidDateTimeError(dt.isoformat(sep=" "))
    delta = dt - _EPOCH
    return (delta.days * 86400 + delta.seconds) * NANOS_PER_SECOND


def instant_to_civil(instant):
    """
    Converts an instant to ``(year, month, day, hour, minute, second)``.

    Any sub-second remainder is rounded to the nearest second, halves up.

    Examples
    --------
    >>> instant_to_civil(civil_to_instant(2015, 12, 31, 23, 59, 59) + 500000000)
    (2016, 1, 1, 0, 0, 0)
    """
    seconds = (int(instant) + NANOS_PER_SECOND // 2) // NANOS_PER_SECOND
    dt = _EPOCH + datetime.timedelta(seconds=seconds)
    return dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second


def increment(instant, seconds):
    """Moves an instant by a whole number of seconds (may be negative)."""
    return int(instant) + int(seconds) * NANOS_PER_SECOND


def make_series(start, increment_seconds, count):
    """
    Builds ``count`` evenly spaced instants.

    Parameters
    ----------
    start : tuple
        ``(year, month, day, hour, minute, second)`` of the first sample.
    increment_seconds : int
        The time between samples.
    count : int
        The number of samples.

    Examples
    --------
    >>> series = make_series((2020, 1, 1, 0, 0, 0), 60, 3)
    >>> [format_instant(t) for t in series]
    ['2020-01-01T00:00:00', '2020-01-01T00:01:00', '2020-01-01T00:02:00']
    """
    if count < 0:
        raise ValueError("count must not be negative, got {}".format(count))
    first = civil_to_instant(*start)
    return _fill_series(
        np.int64(first), np.int64(int(increment_seconds) * NANOS_PER_SECOND), count
    )


def sample_period(series):
    """
    The sample period of a series, in whole seconds (truncated towards zero).

    Only the first two elements are looked at, so the series must hold at
    least two instants.

    Examples
    --------
    >>> sample_period(make_series((2020, 1, 1, 0, 0, 0), 60, 2))
    60
    """
    diff = int(series[1]) - int(series[0])
    if diff < 0:
        return -(-diff // NANOS_PER_SECOND)
    return diff // NANOS_PER_SECOND


def format_instant(instant):
    """ISO style rendering to whole seconds, e.g. ``2020-01-01T00:00:00``."""
    value = np.datetime64(int(instant), "ns")
    return str(np.datetime_as_string(value, unit="s"))


def is_strictly_increasing(instants):
    return bool(_strictly_increasing(np.ascontiguousarray(instants, dtype=np.int64)))


def as_datetime64(instants):
    """Views an array of instants as ``datetime64[ns]``."""
    return np.asarray(instants, dtype=np.int64).view(INSTANT_DTYPE)
