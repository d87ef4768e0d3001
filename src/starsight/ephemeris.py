"""Celestial object models: low-order orbital series for the Sun, the Moon and the planets.

Every model is a fixed parameter set evaluated by ``at(days_since_j2010, conversion)``;
models hold no mutable state and can be evaluated concurrently. Magnitudes and
angular sizes are stored in single precision.
"""

import math
from enum import Enum
from typing import Protocol, TypeVar

import numpy as np

from starsight.angles import TAU, check_argument, normalize_positive, of_arcsec, of_deg
from starsight.conversions import EclipticToEquatorialConversion
from starsight.coordinates import EclipticCoordinates
from starsight.models import CelestialObject, Moon, Planet, Sun

O = TypeVar("O", bound=CelestialObject, covariant=True)

_DAYS_PER_TROPICAL_YEAR = 365.242191


def _single(value: float) -> float:
    """Round to single precision."""
    return float(np.float32(value))


class CelestialObjectModel(Protocol[O]):
    def at(self, days_since_j2010: float, conversion: EclipticToEquatorialConversion) -> O:
        ...


class SunModel:
    """Sun position from the mean anomaly and the equation of center."""

    LONGITUDE_J2010 = of_deg(279.557208)
    LONGITUDE_PERIGEE = of_deg(283.112438)
    ECCENTRICITY = 0.016705
    ANGULAR_SIZE_AT_1AU = of_deg(0.533128)

    def at(self, days_since_j2010: float, conversion: EclipticToEquatorialConversion) -> Sun:
        e = self.ECCENTRICITY
        mean_anomaly = (TAU / _DAYS_PER_TROPICAL_YEAR) * days_since_j2010 + (
            self.LONGITUDE_J2010 - self.LONGITUDE_PERIGEE
        )
        true_anomaly = mean_anomaly + 2 * e * math.sin(mean_anomaly)
        ecliptic = EclipticCoordinates.of(
            normalize_positive(true_anomaly + self.LONGITUDE_PERIGEE), 0.0
        )
        angular_size = self.ANGULAR_SIZE_AT_1AU * (
            (1 + e * math.cos(true_anomaly)) / (1 - e * e)
        )
        return Sun(
            equatorial_pos=conversion.apply(ecliptic),
            ecliptic_pos=ecliptic,
            angular_size=_single(angular_size),
            mean_anomaly=_single(mean_anomaly),
        )


class MoonModel:
    """Moon position: mean orbit corrected by a fixed chain of periodic terms.

    The Moon depends on the Sun's mean anomaly and ecliptic longitude at the
    same instant, so the Sun model is evaluated first.
    """

    MEAN_LONGITUDE = of_deg(91.929336)
    PERIGEE_LONGITUDE = of_deg(130.143076)
    NODE_LONGITUDE = of_deg(291.682547)
    INCLINATION = of_deg(5.145396)
    ECCENTRICITY = 0.0549
    ANGULAR_SIZE_AT_MEAN_DISTANCE = of_deg(0.5181)

    _DAILY_MOTION = of_deg(13.1763966)
    _PERIGEE_DAILY_MOTION = of_deg(0.1114041)
    _EVECTION = of_deg(1.2739)
    _ANNUAL_EQUATION = of_deg(0.1858)
    _THIRD_CORRECTION = of_deg(0.37)
    _EQUATION_OF_CENTER = of_deg(6.2886)
    _FOURTH_CORRECTION = of_deg(0.214)
    _VARIATION = of_deg(0.6583)
    _NODE_DAILY_MOTION = of_deg(0.0529539)
    _NODE_CORRECTION = of_deg(0.16)

    _COS_I = math.cos(INCLINATION)
    _SIN_I = math.sin(INCLINATION)

    def __init__(self, sun_model: SunModel | None = None):
        self._sun_model = sun_model or SunModel()

    def at(self, days_since_j2010: float, conversion: EclipticToEquatorialConversion) -> Moon:
        d = days_since_j2010
        sun = self._sun_model.at(d, conversion)
        sun_lon = sun.ecliptic_pos.lon
        sin_sun_anomaly = math.sin(sun.mean_anomaly)

        mean_lon = self._DAILY_MOTION * d + self.MEAN_LONGITUDE
        mean_anomaly = mean_lon - self._PERIGEE_DAILY_MOTION * d - self.PERIGEE_LONGITUDE

        evection = self._EVECTION * math.sin(2 * (mean_lon - sun_lon) - mean_anomaly)
        annual_equation = self._ANNUAL_EQUATION * sin_sun_anomaly
        third = self._THIRD_CORRECTION * sin_sun_anomaly
        corrected_anomaly = mean_anomaly + evection - annual_equation - third
        center = self._EQUATION_OF_CENTER * math.sin(corrected_anomaly)
        fourth = self._FOURTH_CORRECTION * math.sin(2 * corrected_anomaly)
        corrected_lon = mean_lon + evection + center - annual_equation + fourth
        variation = self._VARIATION * math.sin(2 * (corrected_lon - sun_lon))
        true_lon = corrected_lon + variation

        node = self.NODE_LONGITUDE - self._NODE_DAILY_MOTION * d
        corrected_node = node - self._NODE_CORRECTION * sin_sun_anomaly

        from_node = true_lon - corrected_node
        lam = normalize_positive(
            math.atan2(math.sin(from_node) * self._COS_I, math.cos(from_node))
            + corrected_node
        )
        beta = math.asin(math.sin(from_node) * self._SIN_I)

        phase = (1 - math.cos(true_lon - sun_lon)) / 2
        e = self.ECCENTRICITY
        distance = (1 - e * e) / (1 + e * math.cos(corrected_anomaly + center))

        ecliptic = EclipticCoordinates.of(lam, beta)
        return Moon(
            equatorial_pos=conversion.apply(ecliptic),
            ecliptic_pos=ecliptic,
            angular_size=_single(self.ANGULAR_SIZE_AT_MEAN_DISTANCE / distance),
            magnitude=0.0,
            phase=_single(phase),
        )


class PlanetModel(Enum):
    """Orbital elements of the eight planets at J2010.

    Columns: name, revolution period (tropical years), longitude at epoch (deg),
    longitude at perihelion (deg), eccentricity, semi-major axis (AU),
    inclination (deg), longitude of the ascending node (deg), angular size at
    1 AU (arcsec), magnitude at 1 AU.
    """

    MERCURY = ("Mercury", 0.24085, 75.5671, 77.612, 0.205627, 0.387098, 7.0051, 48.449, 6.74, -0.42)
    VENUS = ("Venus", 0.615207, 272.30044, 131.54, 0.006812, 0.723329, 3.3947, 76.769, 16.92, -4.40)
    EARTH = ("Earth", 0.999996, 99.556772, 103.2055, 0.016671, 0.999985, 0, 0, 0, 0)
    MARS = ("Mars", 1.880765, 109.09646, 336.217, 0.093348, 1.523689, 1.8497, 49.632, 9.36, -1.52)
    JUPITER = ("Jupiter", 11.857911, 337.917132, 14.6633, 0.048907, 5.20278, 1.3035, 100.595, 196.74, -9.40)
    SATURN = ("Saturn", 29.310579, 172.398316, 89.567, 0.053853, 9.51134, 2.4873, 113.752, 165.60, -8.88)
    URANUS = ("Uranus", 84.039492, 271.063148, 172.884833, 0.046321, 19.21814, 0.773059, 73.926961, 65.80, -7.19)
    NEPTUNE = ("Neptune", 165.84539, 326.895127, 23.07, 0.010483, 30.1985, 1.7673, 131.879, 62.20, -6.87)

    def __init__(
        self,
        planet_name: str,
        period: float,
        lon_epoch: float,
        lon_perihelion: float,
        eccentricity: float,
        semi_major_axis: float,
        inclination: float,
        lon_node: float,
        angular_size: float,
        magnitude: float,
    ):
        self.planet_name = planet_name
        self.period = period
        self.lon_epoch = of_deg(lon_epoch)
        self.lon_perihelion = of_deg(lon_perihelion)
        self.eccentricity = eccentricity
        self.semi_major_axis = semi_major_axis
        self.inclination = of_deg(inclination)
        self.lon_node = of_deg(lon_node)
        self.angular_size_1au = of_arcsec(angular_size)
        self.magnitude_1au = magnitude

    @property
    def is_inferior(self) -> bool:
        """Whether the orbit lies inside Earth's."""
        return self in (PlanetModel.MERCURY, PlanetModel.VENUS)

    def _heliocentric(self, days_since_j2010: float) -> tuple[float, float]:
        """Heliocentric radius (AU) and longitude (rad) in the orbital plane."""
        e = self.eccentricity
        mean_anomaly = (TAU / _DAYS_PER_TROPICAL_YEAR) * (days_since_j2010 / self.period) + (
            self.lon_epoch - self.lon_perihelion
        )
        true_anomaly = mean_anomaly + 2 * e * math.sin(mean_anomaly)
        radius = self.semi_major_axis * (1 - e * e) / (1 + e * math.cos(true_anomaly))
        return radius, true_anomaly + self.lon_perihelion

    def at(self, days_since_j2010: float, conversion: EclipticToEquatorialConversion) -> Planet:
        check_argument(self is not PlanetModel.EARTH, "Earth has no geocentric position")
        r, l = self._heliocentric(days_since_j2010)
        earth_r, earth_l = PlanetModel.EARTH._heliocentric(days_since_j2010)

        psi = math.asin(math.sin(l - self.lon_node) * math.sin(self.inclination))
        cos_psi = math.cos(psi)
        proj_r = r * cos_psi
        proj_l = (
            math.atan2(
                math.sin(l - self.lon_node) * math.cos(self.inclination),
                math.cos(l - self.lon_node),
            )
            + self.lon_node
        )

        if self.is_inferior:
            lam = (
                math.pi
                + earth_l
                + math.atan2(
                    proj_r * math.sin(earth_l - proj_l),
                    earth_r - proj_r * math.cos(earth_l - proj_l),
                )
            )
        else:
            lam = proj_l + math.atan2(
                earth_r * math.sin(proj_l - earth_l),
                proj_r - earth_r * math.cos(proj_l - earth_l),
            )
        lam = normalize_positive(lam)
        beta = math.atan(
            proj_r * math.tan(psi) * math.sin(lam - proj_l)
            / (earth_r * math.sin(proj_l - earth_l))
        )

        distance = math.sqrt(
            earth_r * earth_r + r * r - 2 * earth_r * r * math.cos(l - earth_l) * cos_psi
        )
        phase = (1 + math.cos(lam - l)) / 2
        magnitude = self.magnitude_1au + 5 * math.log10(r * distance / math.sqrt(phase))

        return Planet(
            name=self.planet_name,
            equatorial_pos=conversion.apply(EclipticCoordinates.of(lam, beta)),
            angular_size=_single(self.angular_size_1au / distance),
            magnitude=_single(magnitude),
        )


ALL_PLANETS: tuple[PlanetModel, ...] = tuple(PlanetModel)
