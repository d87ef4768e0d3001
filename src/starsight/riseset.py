"""Rise, set and zenith clock times of a fixed equatorial position.

Times are universal time on the given date, truncated to whole seconds. An
object that never rises on that date gives 00:00:00 for every query, one that
never sets gives 23:59:59.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from pytz import timezone, utc

from starsight.angles import RightOpenInterval, to_hr
from starsight.compute import timezone_name
from starsight.conversions import EclipticToEquatorialConversion
from starsight.coordinates import EquatorialCoordinates, GeographicCoordinates
from starsight.ephemeris import SunModel
from starsight.epoch import GST_AT_MIDNIGHT, Epoch

NEVER_RISES = time(0, 0, 0)
NEVER_SETS = time(23, 59, 59)

SOLAR_PER_SIDEREAL = 0.9972695663

_HOURS = RightOpenInterval.of(0.0, 24.0)
_SECONDS_PER_DAY = 86400


def _midnight(day: date) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=utc)


def _clock(hours: float) -> time:
    return _clock_of_seconds(int(hours * 3600))


def _clock_of_seconds(seconds: int) -> time:
    h, rest = divmod(seconds % _SECONDS_PER_DAY, 3600)
    m, s = divmod(rest, 60)
    return time(h, m, s)


def _seconds(clock: time) -> int:
    return clock.hour * 3600 + clock.minute * 60 + clock.second


def _crossing(
    equ: EquatorialCoordinates, where: GeographicCoordinates, day: date, sign: int
) -> time:
    """UT of the horizon crossing on the eastern (sign -1) or western (sign +1) side."""
    cos_h = -math.tan(where.lat) * math.tan(equ.dec)
    if cos_h > 1:
        return NEVER_RISES
    if cos_h < -1:
        return NEVER_SETS

    hour_angle = to_hr(math.acos(cos_h))
    lst = _HOURS.reduce(equ.ra_hr + sign * hour_angle)
    gst = _HOURS.reduce(lst - where.lon_deg / 15.0)
    t0 = _HOURS.reduce(GST_AT_MIDNIGHT.at(Epoch.J2000.julian_centuries_until(_midnight(day))))
    return _clock(_HOURS.reduce(gst - t0) * SOLAR_PER_SIDEREAL)


def rise(equ: EquatorialCoordinates, where: GeographicCoordinates, day: date) -> time:
    return _crossing(equ, where, day, -1)


def set_(equ: EquatorialCoordinates, where: GeographicCoordinates, day: date) -> time:
    return _crossing(equ, where, day, +1)


def zenith(equ: EquatorialCoordinates, where: GeographicCoordinates, day: date) -> time:
    """Midpoint of the rise and set clock times, taken across midnight when set comes first.

    This ignores the change of sidereal time between rise and set, so it can be
    off by a few minutes from the true meridian transit.
    """
    return _midpoint(rise(equ, where, day), set_(equ, where, day))


def _midpoint(rising: time, setting: time) -> time:
    r = _seconds(rising)
    s = _seconds(setting)
    if s < r:
        s += _SECONDS_PER_DAY
    return _clock_of_seconds((r + s) // 2)


@dataclass(frozen=True)
class RiseSetTimes:
    """Rise, set and zenith times of one object on one date, in UT."""

    day: date
    rising: time
    setting: time
    zenith: time


def rise_set_times(
    equ: EquatorialCoordinates, where: GeographicCoordinates, day: date
) -> RiseSetTimes:
    rising = rise(equ, where, day)
    setting = set_(equ, where, day)
    return RiseSetTimes(day=day, rising=rising, setting=setting, zenith=_midpoint(rising, setting))


def _sun_position(day: date) -> EquatorialCoordinates:
    when = _midnight(day)
    sun = SunModel().at(Epoch.J2010.days_until(when), EclipticToEquatorialConversion(when))
    return sun.equatorial_pos


def sunrise(where: GeographicCoordinates, day: date) -> time:
    return rise(_sun_position(day), where, day)


def sunset(where: GeographicCoordinates, day: date) -> time:
    return set_(_sun_position(day), where, day)


def sun_zenith(where: GeographicCoordinates, day: date) -> time:
    return zenith(_sun_position(day), where, day)


def sun_times(where: GeographicCoordinates, day: date) -> RiseSetTimes:
    """Sunrise, sunset and solar zenith on day, in UT."""
    return rise_set_times(_sun_position(day), where, day)


def to_local(day: date, clock: time, where: GeographicCoordinates) -> datetime:
    """Convert a UT clock time on day to the observer's local time.

    Raises:
        TimezoneError: If no timezone covers the observer's position.
    """
    local_tz = timezone(timezone_name(where))
    instant = _midnight(day) + timedelta(
        hours=clock.hour, minutes=clock.minute, seconds=clock.second
    )
    return instant.astimezone(local_tz)
