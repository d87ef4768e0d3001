"""Coordinate systems: immutable angle pairs, each validated against its own domain.

None of these types supports ``==`` or ``hash()``: they hold floating-point
values and are not meant to be compared structurally or used as mapping keys.
"""

import math
from dataclasses import dataclass
from enum import Enum

from starsight.angles import (
    TAU,
    ClosedInterval,
    RightOpenInterval,
    check_in_interval,
    of_deg,
    to_deg,
    to_hr,
)


class Incomparable:
    """Refuses structural comparison and hashing."""

    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        raise TypeError(f"{type(self).__name__} does not support equality")

    __hash__ = None  # type: ignore[assignment]


_LON_DEG = RightOpenInterval.symmetric(360.0)
_LAT_DEG = ClosedInterval.symmetric(180.0)
_FULL_TURN = RightOpenInterval.of(0.0, TAU)
_HALF_TURN_CLOSED = ClosedInterval.symmetric(math.pi)
_HALF_TURN_OPEN = RightOpenInterval.symmetric(math.pi)


@dataclass(frozen=True, eq=False)
class GeographicCoordinates(Incomparable):
    """Observer position on Earth, stored in degrees.

    lon_deg ∈ [-180, 180), lat_deg ∈ [-90, 90].
    """

    lon_deg: float
    lat_deg: float

    def __post_init__(self) -> None:
        check_in_interval(_LON_DEG, self.lon_deg)
        check_in_interval(_LAT_DEG, self.lat_deg)

    @classmethod
    def of_deg(cls, lon: float, lat: float) -> "GeographicCoordinates":
        return cls(lon, lat)

    @staticmethod
    def is_valid_lon_deg(lon_deg: float) -> bool:
        return _LON_DEG.contains(lon_deg)

    @staticmethod
    def is_valid_lat_deg(lat_deg: float) -> bool:
        return _LAT_DEG.contains(lat_deg)

    @property
    def lon(self) -> float:
        """Longitude in radians."""
        return of_deg(self.lon_deg)

    @property
    def lat(self) -> float:
        """Latitude in radians."""
        return of_deg(self.lat_deg)

    def __str__(self) -> str:
        return f"(lon={self.lon_deg:.4f}°, lat={self.lat_deg:.4f}°)"


@dataclass(frozen=True, eq=False)
class EquatorialCoordinates(Incomparable):
    """Right ascension ∈ [0, 2π) and declination ∈ [-π/2, π/2), in radians."""

    ra: float
    dec: float

    def __post_init__(self) -> None:
        check_in_interval(_FULL_TURN, self.ra)
        check_in_interval(_HALF_TURN_OPEN, self.dec)

    @classmethod
    def of(cls, ra: float, dec: float) -> "EquatorialCoordinates":
        return cls(ra, dec)

    @property
    def ra_deg(self) -> float:
        return to_deg(self.ra)

    @property
    def ra_hr(self) -> float:
        return to_hr(self.ra)

    @property
    def dec_deg(self) -> float:
        return to_deg(self.dec)

    def __str__(self) -> str:
        return f"(ra={self.ra_hr:.4f}h, dec={self.dec_deg:.4f}°)"


@dataclass(frozen=True, eq=False)
class EclipticCoordinates(Incomparable):
    """Ecliptic longitude λ ∈ [0, 2π) and latitude β ∈ [-π/2, π/2], in radians."""

    lon: float
    lat: float

    def __post_init__(self) -> None:
        check_in_interval(_FULL_TURN, self.lon)
        check_in_interval(_HALF_TURN_CLOSED, self.lat)

    @classmethod
    def of(cls, lon: float, lat: float) -> "EclipticCoordinates":
        return cls(lon, lat)

    @property
    def lon_deg(self) -> float:
        return to_deg(self.lon)

    @property
    def lat_deg(self) -> float:
        return to_deg(self.lat)

    def __str__(self) -> str:
        return f"(λ={self.lon_deg:.4f}°, β={self.lat_deg:.4f}°)"


class CardinalPoint(Enum):
    """Cardinal and intercardinal directions, by azimuth in degrees."""

    N = 0.0
    NE = 45.0
    E = 90.0
    SE = 135.0
    S = 180.0
    SW = 225.0
    W = 270.0
    NW = 315.0

    @property
    def az_deg(self) -> float:
        return self.value


@dataclass(frozen=True, eq=False)
class HorizontalCoordinates(Incomparable):
    """Azimuth ∈ [0, 2π) measured from North towards East, altitude ∈ [-π/2, π/2]."""

    az: float
    alt: float

    def __post_init__(self) -> None:
        check_in_interval(_FULL_TURN, self.az)
        check_in_interval(_HALF_TURN_CLOSED, self.alt)

    @classmethod
    def of(cls, az: float, alt: float) -> "HorizontalCoordinates":
        return cls(az, alt)

    @classmethod
    def of_deg(cls, az_deg: float, alt_deg: float) -> "HorizontalCoordinates":
        return cls(of_deg(az_deg), of_deg(alt_deg))

    @property
    def az_deg(self) -> float:
        return to_deg(self.az)

    @property
    def alt_deg(self) -> float:
        return to_deg(self.alt)

    def az_octant_name(self, n: str, e: str, s: str, w: str) -> str:
        """Label of the 45° sector containing the azimuth, e.g. ``n + e`` for North-East.

        Sectors are centred on the directions of CardinalPoint.
        """
        octant = int((self.az_deg + 22.5) // 45.0) % 8
        return (n, n + e, e, s + e, s, s + w, w, n + w)[octant]

    def angular_distance_to(self, that: "HorizontalCoordinates") -> float:
        """Great-circle distance to another point, in radians."""
        cos_d = math.sin(self.alt) * math.sin(that.alt) + math.cos(self.alt) * math.cos(
            that.alt
        ) * math.cos(self.az - that.az)
        return math.acos(max(-1.0, min(1.0, cos_d)))

    def __str__(self) -> str:
        return f"(az={self.az_deg:.4f}°, alt={self.alt_deg:.4f}°)"


@dataclass(frozen=True, eq=False)
class CartesianCoordinates(Incomparable):
    """Point on the projection plane. Unconstrained."""

    x: float
    y: float

    @classmethod
    def of(cls, x: float, y: float) -> "CartesianCoordinates":
        return cls(x, y)

    def dist_squared(self, that: "CartesianCoordinates") -> float:
        dx = self.x - that.x
        dy = self.y - that.y
        return dx * dx + dy * dy

    def dist(self, that: "CartesianCoordinates") -> float:
        return math.sqrt(self.dist_squared(that))

    def __str__(self) -> str:
        return f"(x={self.x:.4f}, y={self.y:.4f})"
