"""
Canonical ImagCDF file names.

A file name is built from the station code, the start of the data, the
cadence of the samples, the span of time the file covers and the
publication level::

    <prefix><station>_<date part>_<cadence token>_<publication level>.cdf

>>> from imagcdf.schema import PublicationLevel
>>> from imagcdf.times import civil_to_instant
>>> start = civil_to_instant(2001, 3, 4, 5, 6, 7)
>>> build_filename("", "AAA", start, PublicationLevel.LEVEL_1,
...                Interval.MINUTE, Interval.DAILY)
'AAA_20010304_pt1m_1.cdf'
>>> build_filename("/data/", "AAA", start, PublicationLevel.LEVEL_1,
...                Interval.SECOND, Interval.HOURLY, lower_case=True)
'/data/aaa_20010304_05_pt1s_1.cdf'
"""
import enum
import logging

from .config import DEFAULT_CONFIG
from .schema import PublicationLevel
from .times import instant_to_civil

logger = logging.getLogger(__name__)


class Interval(enum.Enum):
    """A span of time, used for both cadence and coverage."""

    ANNUAL = "annual"
    MONTHLY = "monthly"
    DAILY = "daily"
    HOURLY = "hourly"
    MINUTE = "minute"
    SECOND = "second"

    @property
    def token(self):
        return _CADENCE_TOKENS[self]


_CADENCE_TOKENS = {
    Interval.ANNUAL: "p1y",
    Interval.MONTHLY: "p1m",
    Interval.DAILY: "p1d",
    Interval.HOURLY: "pt1h",
    Interval.MINUTE: "pt1m",
    Interval.SECOND: "pt1s",
}
UNKNOWN_CADENCE_TOKEN = "unkn"

# coverage -> number of civil date/time parts shown
_DATE_FIELDS = {
    Interval.ANNUAL: 1,
    Interval.MONTHLY: 2,
    Interval.DAILY: 3,
    Interval.HOURLY: 4,
    Interval.MINUTE: 5,
}

# upper bound (seconds) of the sample period for each cadence
_PERIOD_LIMITS = (
    (1.0, Interval.SECOND),
    (60.0, Interval.MINUTE),
    (3600.0, Interval.HOURLY),
    (86400.0, Interval.DAILY),
    (2678400.0, Interval.MONTHLY),
)


def _interval(value):
    if value is None or isinstance(value, Interval):
        return value
    try:
        return Interval(str(value).lower())
    except ValueError:
        return None


def cadence_token(cadence):
    """
    >>> cadence_token(Interval.HOURLY)
    'pt1h'
    >>> cadence_token("fortnightly")
    'unkn'
    """
    cadence = _interval(cadence)
    if cadence is None:
        return UNKNOWN_CADENCE_TOKEN
    return cadence.token


def cadence_from_sample_period(seconds):
    """
    Picks the cadence for a sample period given in seconds.

    >>> cadence_from_sample_period(60)
    <Interval.MINUTE: 'minute'>
    >>> cadence_from_sample_period(31536000)
    <Interval.ANNUAL: 'annual'>
    """
    for limit, cadence in _PERIOD_LIMITS:
        if seconds <= limit:
            return cadence
    return Interval.ANNUAL


def date_part(start_instant, coverage):
    """
    The date and time of the start of the data, to the precision of the coverage.

    Anything other than a known coverage is treated as second coverage.

    >>> from imagcdf.times import civil_to_instant
    >>> date_part(civil_to_instant(2001, 3, 4, 5, 6, 7), Interval.MONTHLY)
    '200103'
    >>> date_part(civil_to_instant(2001, 3, 4, 5, 6, 7), None)
    '20010304_050607'
    """
    year, month, day, hour, minute, second = instant_to_civil(start_instant)
    n_fields = _DATE_FIELDS.get(_interval(coverage), 6)
    text = "{:04d}{:02d}{:02d}".format(year, month, day)[: 2 + 2 * n_fields]
    if n_fields > 3:
        text += "_" + "{:02d}{:02d}{:02d}".format(hour, minute, second)[
            : 2 * (n_fields - 3)
        ]
    return text


def build_filename(
    prefix,
    station_code,
    start_instant,
    publication_level,
    cadence,
    coverage,
    lower_case=None,
    config=None,
):
    """
    Makes the file name for a set of data.

    Parameters
    ----------
    prefix : str or None
        Put unchanged in front of the name, e.g. a directory path.
    station_code : str
        The IAGA code of the observatory.
    start_instant : int
        The time of the first sample.
    publication_level : PublicationLevel or str
        The publication level, or its code.
    cadence : Interval
        How often samples are taken. Unknown cadences give ``unkn``.
    coverage : Interval
        How much time the file covers.
    lower_case : bool, optional
        Fold everything after the prefix to lower case. Taken from
        ``config.lower_case_filenames`` when not given.
    config : Config, optional
        Settings, :data:`~imagcdf.config.DEFAULT_CONFIG` if not given.
    """
    if lower_case is None:
        lower_case = (config or DEFAULT_CONFIG).lower_case_filenames
    prefix = prefix or ""
    level = PublicationLevel(publication_level)
    body = "{}_{}_{}_{}.cdf".format(
        station_code,
        date_part(start_instant, coverage),
        cadence_token(cadence),
        level.code,
    )
    if lower_case:
        body = body.lower()
    logger.debug("Built file name %s%s", prefix, body)
    return prefix + body
