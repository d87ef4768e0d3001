"""Coordinate conversions and the stereographic projection.

Every conversion precomputes what depends only on its construction parameters
and can then be applied to any number of coordinates.
"""

import math
from datetime import datetime

from starsight.angles import Polynomial, normalize_positive, of_arcsec, of_dms
from starsight.coordinates import (
    CartesianCoordinates,
    EclipticCoordinates,
    EquatorialCoordinates,
    GeographicCoordinates,
    HorizontalCoordinates,
    Incomparable,
)
from starsight.epoch import Epoch, sidereal_local

# Obliquity of the ecliptic as a function of julian centuries since J2000
_OBLIQUITY = Polynomial.of(
    of_arcsec(0.00181),
    of_arcsec(-0.0006),
    of_arcsec(-46.815),
    of_dms(23, 26, 21.45),
)


class EclipticToEquatorialConversion(Incomparable):
    """Ecliptic → equatorial rotation by Earth's obliquity at a given instant."""

    __slots__ = ("_sin_obliquity", "_cos_obliquity")

    def __init__(self, when: datetime):
        obliquity = _OBLIQUITY.at(Epoch.J2000.julian_centuries_until(when))
        self._sin_obliquity = math.sin(obliquity)
        self._cos_obliquity = math.cos(obliquity)

    def apply(self, ecl: EclipticCoordinates) -> EquatorialCoordinates:
        sin_lon = math.sin(ecl.lon)
        ra = math.atan2(
            sin_lon * self._cos_obliquity - math.tan(ecl.lat) * self._sin_obliquity,
            math.cos(ecl.lon),
        )
        dec = math.asin(
            math.sin(ecl.lat) * self._cos_obliquity
            + math.cos(ecl.lat) * self._sin_obliquity * sin_lon
        )
        return EquatorialCoordinates.of(normalize_positive(ra), dec)

    __call__ = apply


class EquatorialToHorizontalConversion(Incomparable):
    """Equatorial → horizontal coordinates for an observer at a given instant."""

    __slots__ = ("_sidereal", "_sin_lat", "_cos_lat")

    def __init__(self, when: datetime, where: GeographicCoordinates):
        self._sidereal = sidereal_local(when, where)
        self._sin_lat = math.sin(where.lat)
        self._cos_lat = math.cos(where.lat)

    def apply(self, equ: EquatorialCoordinates) -> HorizontalCoordinates:
        hour_angle = self._sidereal - equ.ra
        sin_dec = math.sin(equ.dec)
        cos_dec = math.cos(equ.dec)
        sin_alt = sin_dec * self._sin_lat + cos_dec * self._cos_lat * math.cos(hour_angle)
        alt = math.asin(max(-1.0, min(1.0, sin_alt)))
        az = math.atan2(
            -cos_dec * self._cos_lat * math.sin(hour_angle),
            sin_dec - self._sin_lat * sin_alt,
        )
        return HorizontalCoordinates.of(normalize_positive(az), alt)

    __call__ = apply


class StereographicProjection(Incomparable):
    """Stereographic projection of the celestial sphere centred on a horizontal direction.

    The center maps to the origin; the forward transform is undefined only at the
    antipode of the center.
    """

    __slots__ = ("_center", "_lambda0", "_sin_phi1", "_cos_phi1")

    def __init__(self, center: HorizontalCoordinates):
        self._center = center
        self._lambda0 = center.az
        self._sin_phi1 = math.sin(center.alt)
        self._cos_phi1 = math.cos(center.alt)

    @property
    def center(self) -> HorizontalCoordinates:
        return self._center

    def circle_center_for_parallel(self, hor: HorizontalCoordinates) -> CartesianCoordinates:
        """Center of the circle onto which the parallel through hor is projected."""
        return CartesianCoordinates.of(
            0.0, self._cos_phi1 / (math.sin(hor.alt) + self._sin_phi1)
        )

    def circle_radius_for_parallel(self, hor: HorizontalCoordinates) -> float:
        """Radius of the circle onto which the parallel through hor is projected."""
        return math.cos(hor.alt) / (math.sin(hor.alt) + self._sin_phi1)

    def apply_to_angle(self, rad: float) -> float:
        """Projected diameter of an object of angular size rad lying near the center."""
        return 2.0 * math.tan(rad / 4.0)

    def apply(self, hor: HorizontalCoordinates) -> CartesianCoordinates:
        delta_lambda = hor.az - self._lambda0
        sin_phi = math.sin(hor.alt)
        cos_phi = math.cos(hor.alt)
        cos_delta = math.cos(delta_lambda)
        d = 1.0 / (1.0 + sin_phi * self._sin_phi1 + cos_phi * self._cos_phi1 * cos_delta)
        return CartesianCoordinates.of(
            d * cos_phi * math.sin(delta_lambda),
            d * (sin_phi * self._cos_phi1 - cos_phi * self._sin_phi1 * cos_delta),
        )

    __call__ = apply

    def inverse_apply(self, xy: CartesianCoordinates) -> HorizontalCoordinates:
        """Horizontal coordinates whose projection is xy.

        The origin has no defined direction in the closed form below (it divides
        by ρ), so it maps straight back to the center.
        """
        rho_squared = xy.x * xy.x + xy.y * xy.y
        if rho_squared == 0.0:
            return self._center
        rho = math.sqrt(rho_squared)
        sin_c = 2.0 * rho / (rho_squared + 1.0)
        cos_c = (1.0 - rho_squared) / (rho_squared + 1.0)
        az = (
            math.atan2(
                xy.x * sin_c,
                rho * self._cos_phi1 * cos_c - xy.y * self._sin_phi1 * sin_c,
            )
            + self._lambda0
        )
        sin_alt = cos_c * self._sin_phi1 + xy.y * sin_c * self._cos_phi1 / rho
        alt = math.asin(max(-1.0, min(1.0, sin_alt)))
        return HorizontalCoordinates.of(normalize_positive(az), alt)

    def __str__(self) -> str:
        return f"StereographicProjection(center={self._center})"
