"""Sky computation layer: observer resolution and the projected sky at one instant."""

import logging
import time
from collections.abc import Iterator
from datetime import datetime
from functools import lru_cache

import numpy as np
from pytz import timezone, utc
from timezonefinder import TimezoneFinder

from starsight.angles import check_argument
from starsight.catalogue import StarCatalogue
from starsight.conversions import (
    EclipticToEquatorialConversion,
    EquatorialToHorizontalConversion,
    StereographicProjection,
)
from starsight.coordinates import (
    CartesianCoordinates,
    EquatorialCoordinates,
    GeographicCoordinates,
    HorizontalCoordinates,
)
from starsight.ephemeris import ALL_PLANETS, MoonModel, PlanetModel, SunModel
from starsight.epoch import Epoch
from starsight.models import (
    Asterism,
    CelestialObject,
    Moon,
    ObserverContext,
    Planet,
    QueryInput,
    Star,
    Sun,
)

logger = logging.getLogger(__name__)

ZENITH = HorizontalCoordinates.of_deg(0.0, 90.0)


class TimezoneError(Exception):
    """No timezone could be found for an observer position."""


@lru_cache(maxsize=1)
def _timezone_finder() -> TimezoneFinder:
    return TimezoneFinder()


def timezone_name(where: GeographicCoordinates) -> str:
    """IANA timezone name at a position on Earth.

    Raises:
        TimezoneError: If the position has no timezone.
    """
    tz_str = _timezone_finder().timezone_at(lat=where.lat_deg, lng=where.lon_deg)
    if tz_str is None:
        raise TimezoneError(f"Timezone not found: lat={where.lat_deg}, lng={where.lon_deg}")
    return tz_str


def resolve_observer(query: QueryInput) -> ObserverContext:
    """Resolve a position and local time string to an ObserverContext.

    Args:
        query: Latitude/longitude in degrees and local time "YYYY-MM-DD HH:MM".

    Returns:
        ObserverContext with the validated position, UTC datetime and timezone name.

    Raises:
        ValueError: On an invalid position or time string.
        TimezoneError: When no timezone covers the position.
    """
    where = GeographicCoordinates.of_deg(query.lng, query.lat)
    dt = datetime.strptime(query.when, "%Y-%m-%d %H:%M")
    tz_str = timezone_name(where)
    local_tz = timezone(tz_str)
    utc_dt = local_tz.localize(dt, is_dst=None).astimezone(utc)
    return ObserverContext(where=where, utc_dt=utc_dt, tz_name=tz_str)


def _packed(points: list[CartesianCoordinates]) -> np.ndarray:
    """x0, y0, x1, y1, ... as a read-only array."""
    arr = np.array([c for p in points for c in (p.x, p.y)], dtype=np.float64)
    arr.flags.writeable = False
    return arr


class ObservedSky:
    """Sun, Moon, planets and catalogue stars projected onto the plane for one observation.

    Everything is computed at construction. A different instant, observer or
    projection needs a new ObservedSky.
    """

    def __init__(
        self,
        moment: datetime,
        observer: GeographicCoordinates,
        projection: StereographicProjection,
        catalogue: StarCatalogue,
    ):
        started = time.perf_counter()
        days = Epoch.J2010.days_until(moment)
        ecl_to_equ = EclipticToEquatorialConversion(moment)
        equ_to_hor = EquatorialToHorizontalConversion(moment, observer)
        self._projection = projection
        self._catalogue = catalogue

        def project(pos: EquatorialCoordinates) -> CartesianCoordinates:
            return projection.apply(equ_to_hor.apply(pos))

        sun_model = SunModel()
        self._sun = sun_model.at(days, ecl_to_equ)
        self._sun_position = project(self._sun.equatorial_pos)

        self._moon = MoonModel(sun_model).at(days, ecl_to_equ)
        self._moon_position = project(self._moon.equatorial_pos)

        self._planets = tuple(
            model.at(days, ecl_to_equ) for model in ALL_PLANETS if model is not PlanetModel.EARTH
        )
        self._planet_positions = _packed([project(p.equatorial_pos) for p in self._planets])
        self._star_positions = _packed([project(s.equatorial_pos) for s in catalogue.stars])

        self._candidates: tuple[CelestialObject, ...] = (
            (self._sun, self._moon) + self._planets + catalogue.stars
        )
        xy = np.concatenate(
            (
                [self._sun_position.x, self._sun_position.y],
                [self._moon_position.x, self._moon_position.y],
                self._planet_positions,
                self._star_positions,
            )
        )
        self._candidate_xy = xy.reshape(-1, 2)

        logger.debug(
            "Observed sky with %d stars computed in %.1f ms",
            len(catalogue.stars),
            (time.perf_counter() - started) * 1000,
        )

    @property
    def projection(self) -> StereographicProjection:
        return self._projection

    @property
    def sun(self) -> Sun:
        return self._sun

    @property
    def sun_position(self) -> CartesianCoordinates:
        return self._sun_position

    @property
    def moon(self) -> Moon:
        return self._moon

    @property
    def moon_position(self) -> CartesianCoordinates:
        return self._moon_position

    @property
    def planets(self) -> tuple[Planet, ...]:
        """The seven planets other than Earth, in model order."""
        return self._planets

    @property
    def planet_positions(self) -> np.ndarray:
        """Projected planet positions, packed as x then y per planet."""
        return self._planet_positions

    @property
    def stars(self) -> tuple[Star, ...]:
        return self._catalogue.stars

    @property
    def star_positions(self) -> np.ndarray:
        """Projected star positions, packed as x then y per star, in catalogue order."""
        return self._star_positions

    @property
    def asterisms(self) -> tuple[Asterism, ...]:
        return self._catalogue.asterisms

    def asterism_indices(self, asterism: Asterism) -> tuple[int, ...]:
        return self._catalogue.asterism_indices(asterism)

    def objects(self) -> Iterator[tuple[CelestialObject, CartesianCoordinates]]:
        """Every object with its projected position: Sun, Moon, planets, then stars."""
        for obj, (x, y) in zip(self._candidates, self._candidate_xy):
            yield obj, CartesianCoordinates.of(float(x), float(y))

    def object_closest_to(
        self, point: CartesianCoordinates, max_distance: float
    ) -> CelestialObject | None:
        """Object nearest to point on the plane, if at most max_distance away.

        Ties go to the first object in the order Sun, Moon, planets, stars.

        Raises:
            ValueError: If max_distance is negative.
        """
        check_argument(max_distance >= 0, f"negative max distance: {max_distance}")
        d2 = np.sum((self._candidate_xy - (point.x, point.y)) ** 2, axis=1)
        i = int(np.argmin(d2))
        if d2[i] > max_distance * max_distance:
            return None
        return self._candidates[i]

    def locate(self, obj: CelestialObject) -> HorizontalCoordinates | None:
        """Horizontal position of an object of this sky, recovered from its projection."""
        for i, candidate in enumerate(self._candidates):
            if candidate is obj:
                x, y = self._candidate_xy[i]
                return self._projection.inverse_apply(CartesianCoordinates.of(float(x), float(y)))
        return None


def compute_observed_sky(
    context: ObserverContext,
    catalogue: StarCatalogue,
    center: HorizontalCoordinates = ZENITH,
) -> ObservedSky:
    """Project the sky seen by an observer onto a plane centred on center."""
    return ObservedSky(context.utc_dt, context.where, StereographicProjection(center), catalogue)


def run(
    query: QueryInput,
    catalogue: StarCatalogue,
    center: HorizontalCoordinates = ZENITH,
) -> ObservedSky:
    """Top-level entry point: takes a QueryInput and returns an ObservedSky.

    Args:
        query: User input (position, local time string).
        catalogue: Stars and asterisms to project.
        center: Direction at the center of the chart. Defaults to the zenith.

    Returns:
        Fully computed ObservedSky.
    """
    context = resolve_observer(query)
    logger.info("Observer %s at %s (%s)", context.where, context.utc_dt, context.tz_name)
    return compute_observed_sky(context, catalogue, center)
