"""Astronomical epochs and sidereal time."""

from datetime import datetime, timedelta
from enum import Enum

from pytz import utc

from starsight.angles import Polynomial, RightOpenInterval, normalize_positive, of_hr
from starsight.coordinates import GeographicCoordinates

DAYS_PER_JULIAN_CENTURY = 36525.0

_ONE_DAY = timedelta(days=1)
_ONE_HOUR = timedelta(hours=1)


def as_utc(when: datetime) -> datetime:
    """Return when converted to UTC. Naive datetimes are taken to be UTC already."""
    if when.tzinfo is None:
        return when.replace(tzinfo=utc)
    return when.astimezone(utc)


class Epoch(Enum):
    """Reference instants from which elapsed time is measured."""

    J2000 = datetime(2000, 1, 1, 12, 0, tzinfo=utc)
    J2010 = datetime(2009, 12, 31, 0, 0, tzinfo=utc)

    def days_until(self, when: datetime) -> float:
        """Elapsed days (fractional, possibly negative) from the epoch to when."""
        return (as_utc(when) - self.value) / _ONE_DAY

    def julian_centuries_until(self, when: datetime) -> float:
        return self.days_until(when) / DAYS_PER_JULIAN_CENTURY


# Greenwich sidereal time at 0h UT, in hours, as a function of julian centuries since J2000
GST_AT_MIDNIGHT = Polynomial.of(0.000025862, 2400.051336, 6.697374558)
SIDEREAL_PER_SOLAR = 1.002737909

_HOURS = RightOpenInterval.of(0.0, 24.0)


def _greenwich_hours(when: datetime) -> float:
    instant = as_utc(when)
    midnight = instant.replace(hour=0, minute=0, second=0, microsecond=0)
    centuries = Epoch.J2000.julian_centuries_until(midnight)
    hours = (instant - midnight) / _ONE_HOUR
    return GST_AT_MIDNIGHT.at(centuries) + SIDEREAL_PER_SOLAR * hours


def sidereal_greenwich(when: datetime) -> float:
    """Greenwich sidereal time at when, in radians in [0, 2π)."""
    return normalize_positive(of_hr(_HOURS.reduce(_greenwich_hours(when))))


def sidereal_local(when: datetime, where: GeographicCoordinates) -> float:
    """Local sidereal time at when for an observer at where, in radians in [0, 2π)."""
    hours = _greenwich_hours(when) + where.lon_deg / 15.0
    return normalize_positive(of_hr(_HOURS.reduce(hours)))
