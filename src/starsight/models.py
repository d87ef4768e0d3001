"""Data model definitions for celestial object snapshots, asterisms and observer input."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from starsight.angles import ClosedInterval, check_argument, check_in_interval
from starsight.coordinates import (
    EclipticCoordinates,
    EquatorialCoordinates,
    GeographicCoordinates,
)


@dataclass(frozen=True)
class QueryInput:
    """Raw user input. Not yet validated."""

    lat: float  # Latitude (decimal degrees)
    lng: float  # Longitude (decimal degrees)
    when: str  # Local time at the observer, "YYYY-MM-DD HH:MM"


@dataclass(frozen=True, eq=False)
class ObserverContext:
    """Result of timezone resolution. Input to sky computation."""

    where: GeographicCoordinates
    utc_dt: datetime  # UTC datetime (with tzinfo=utc)
    tz_name: str  # IANA timezone of the observer ("Europe/Zurich")


class ObjectKind(Enum):
    STAR = "star"
    PLANET = "planet"
    MOON = "moon"
    SUN = "sun"


_PHASE = ClosedInterval.of(0.0, 1.0)
_COLOR_INDEX = ClosedInterval.of(-0.5, 5.5)


@dataclass(frozen=True, eq=False, kw_only=True)
class CelestialObject:
    """A named object of the sky at one instant. Compared by identity only."""

    name: str
    equatorial_pos: EquatorialCoordinates
    angular_size: float  # Radians, non-negative
    magnitude: float  # Apparent magnitude

    kind = None  # type: ObjectKind | None

    def __post_init__(self) -> None:
        check_argument(
            self.angular_size >= 0, f"negative angular size: {self.angular_size}"
        )

    def info(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.info()


@dataclass(frozen=True, eq=False, kw_only=True)
class Sun(CelestialObject):
    """The Sun. Keeps its ecliptic position and mean anomaly for the Moon model."""

    name: str = field(default="Sun", init=False)
    magnitude: float = field(default=-26.7, init=False)
    ecliptic_pos: EclipticCoordinates
    mean_anomaly: float  # Radians

    kind = ObjectKind.SUN


@dataclass(frozen=True, eq=False, kw_only=True)
class Moon(CelestialObject):
    """The Moon, with its illuminated fraction and, when known, its ecliptic position."""

    name: str = field(default="Moon", init=False)
    magnitude: float = 0.0
    phase: float  # Illuminated fraction in [0, 1]
    ecliptic_pos: EclipticCoordinates | None = None

    kind = ObjectKind.MOON

    def __post_init__(self) -> None:
        super().__post_init__()
        check_in_interval(_PHASE, self.phase)

    def info(self) -> str:
        return f"{self.name} ({self.phase * 100:.1f}%)"


@dataclass(frozen=True, eq=False, kw_only=True)
class Planet(CelestialObject):
    """A planet of the Solar System other than Earth."""

    kind = ObjectKind.PLANET


@dataclass(frozen=True, eq=False, kw_only=True)
class Star(CelestialObject):
    """A catalogue star. Stars are point-like: their angular size is always 0."""

    angular_size: float = field(default=0.0, init=False)
    hipparcos_id: int  # Hipparcos catalogue number, 0 when unknown
    color_index: float  # B-V color index in [-0.5, 5.5]

    kind = ObjectKind.STAR

    def __post_init__(self) -> None:
        super().__post_init__()
        check_argument(
            self.hipparcos_id >= 0, f"negative Hipparcos id: {self.hipparcos_id}"
        )
        check_in_interval(_COLOR_INDEX, self.color_index)

    @property
    def color_temperature(self) -> int:
        """Color temperature in Kelvin derived from the B-V color index."""
        c = 0.92 * self.color_index
        return math.floor(4600 * (1 / (c + 1.7) + 1 / (c + 0.62)))


@dataclass(frozen=True, eq=False)
class Asterism:
    """A non-empty ordered group of stars. Holds no catalogue state."""

    stars: tuple[Star, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "stars", tuple(self.stars))
        check_argument(len(self.stars) > 0, "an asterism needs at least one star")
