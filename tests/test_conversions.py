import math

import pytest

from conftest import utc, wrapped_difference
from starsight.angles import of_deg, of_dms, of_hr
from starsight.conversions import (
    EclipticToEquatorialConversion,
    EquatorialToHorizontalConversion,
    StereographicProjection,
)
from starsight.coordinates import (
    CartesianCoordinates,
    EclipticCoordinates,
    EquatorialCoordinates,
    GeographicCoordinates,
    HorizontalCoordinates,
)
from starsight.epoch import sidereal_local

J2000 = utc(2000, 1, 1, 12)


class TestEclipticToEquatorial:
    def test_vernal_equinox_is_fixed(self):
        equ = EclipticToEquatorialConversion(J2000).apply(EclipticCoordinates.of(0.0, 0.0))
        assert equ.ra == pytest.approx(0.0, abs=1e-12)
        assert equ.dec == pytest.approx(0.0, abs=1e-12)

    def test_summer_solstice_declination_is_obliquity(self):
        conversion = EclipticToEquatorialConversion(J2000)
        equ = conversion(EclipticCoordinates.of(math.pi / 2, 0.0))
        assert equ.ra == pytest.approx(math.pi / 2)
        assert equ.dec == pytest.approx(of_dms(23, 26, 21.45), abs=1e-9)

    def test_right_ascension_is_normalized(self):
        equ = EclipticToEquatorialConversion(J2000).apply(EclipticCoordinates.of(of_deg(300.0), 0.1))
        assert 0.0 <= equ.ra < 2 * math.pi
        assert equ.ra_deg > 180.0


class TestEquatorialToHorizontal:
    def test_textbook_example(self):
        # Hour angle 5h51m44s, declination 23°13'10", latitude 52°N
        when = utc(2020, 1, 1)
        where = GeographicCoordinates.of_deg(0.0, 52.0)
        hour_angle = of_hr(5 + 51 / 60 + 44 / 3600)
        ra = (sidereal_local(when, where) - hour_angle) % (2 * math.pi)
        equ = EquatorialCoordinates.of(ra, of_dms(23, 13, 10))

        hor = EquatorialToHorizontalConversion(when, where).apply(equ)

        assert hor.alt_deg == pytest.approx(19.334345, abs=1e-4)
        assert hor.az_deg == pytest.approx(283.271027, abs=1e-4)

    def test_object_on_meridian_culminates_south(self):
        when = utc(2020, 1, 1)
        where = GeographicCoordinates.of_deg(6.57, 46.52)
        equ = EquatorialCoordinates.of(sidereal_local(when, where), 0.0)
        hor = EquatorialToHorizontalConversion(when, where)(equ)
        assert hor.az_deg == pytest.approx(180.0, abs=1e-9)
        assert hor.alt_deg == pytest.approx(90.0 - 46.52, abs=1e-9)

    def test_azimuth_is_normalized(self, rng):
        when = utc(2003, 9, 1)
        where = GeographicCoordinates.of_deg(-71.0, -33.0)
        conversion = EquatorialToHorizontalConversion(when, where)
        for ra, dec in zip(rng.uniform(0, 2 * math.pi, 100), rng.uniform(-1.5, 1.5, 100)):
            hor = conversion.apply(EquatorialCoordinates.of(float(ra), float(dec)))
            assert 0.0 <= hor.az < 2 * math.pi


class TestStereographicProjection:
    def test_center_maps_to_origin(self):
        center = HorizontalCoordinates.of_deg(45.0, 45.0)
        xy = StereographicProjection(center).apply(center)
        assert xy.x == pytest.approx(0.0, abs=1e-12)
        assert xy.y == pytest.approx(0.0, abs=1e-12)

    def test_origin_maps_back_to_center(self):
        center = HorizontalCoordinates.of_deg(45.0, 45.0)
        projection = StereographicProjection(center)
        assert projection.inverse_apply(CartesianCoordinates.of(0.0, 0.0)) is center
        assert projection.center is center

    def test_round_trip(self, rng):
        centers = [
            HorizontalCoordinates.of_deg(0.0, 90.0),
            HorizontalCoordinates.of_deg(180.0, 0.0),
            HorizontalCoordinates.of_deg(277.0, -35.0),
        ]
        for center in centers:
            projection = StereographicProjection(center)
            for az, alt in zip(rng.uniform(0, 2 * math.pi, 200), rng.uniform(-1.4, 1.4, 200)):
                hor = HorizontalCoordinates.of(float(az), float(alt))
                if hor.angular_distance_to(center) > 2.9:
                    continue
                back = projection.inverse_apply(projection.apply(hor))
                assert back.alt == pytest.approx(hor.alt, abs=1e-10)
                assert wrapped_difference(back.az, hor.az) == pytest.approx(0.0, abs=1e-10)

    def test_higher_altitude_projects_upwards(self):
        projection = StereographicProjection(HorizontalCoordinates.of_deg(180.0, 20.0))
        xy = projection.apply(HorizontalCoordinates.of_deg(180.0, 40.0))
        assert xy.x == pytest.approx(0.0, abs=1e-12)
        assert xy.y > 0.0

    def test_horizon_circle_for_zenith_center(self):
        projection = StereographicProjection(HorizontalCoordinates.of_deg(0.0, 90.0))
        horizon = HorizontalCoordinates.of(0.0, 0.0)
        center = projection.circle_center_for_parallel(horizon)
        assert center.x == 0.0
        assert center.y == pytest.approx(0.0, abs=1e-12)
        assert projection.circle_radius_for_parallel(horizon) == pytest.approx(1.0)
        east = projection.apply(HorizontalCoordinates.of_deg(90.0, 0.0))
        assert east.dist(center) == pytest.approx(1.0)

    def test_apply_to_angle(self):
        projection = StereographicProjection(HorizontalCoordinates.of_deg(0.0, 90.0))
        assert projection.apply_to_angle(math.pi) == pytest.approx(2.0)
        assert projection.apply_to_angle(0.0) == 0.0

    def test_str(self):
        projection = StereographicProjection(HorizontalCoordinates.of_deg(90.0, 45.0))
        assert str(projection) == "StereographicProjection(center=(az=90.0000°, alt=45.0000°))"


@pytest.mark.parametrize(
    "make",
    [
        lambda: EclipticToEquatorialConversion(J2000),
        lambda: EquatorialToHorizontalConversion(J2000, GeographicCoordinates.of_deg(0.0, 0.0)),
        lambda: StereographicProjection(HorizontalCoordinates.of(0.0, 0.0)),
    ],
)
def test_conversions_refuse_equality_and_hashing(make):
    a = make()
    with pytest.raises(TypeError):
        a == a  # noqa: B015
    with pytest.raises(TypeError):
        hash(a)
