from datetime import datetime

import numpy as np
import pytest

from conftest import utc
from starsight import compute
from starsight.catalogue import StarCatalogue
from starsight.compute import (
    ZENITH,
    ObservedSky,
    TimezoneError,
    compute_observed_sky,
    resolve_observer,
    run,
)
from starsight.conversions import EquatorialToHorizontalConversion, StereographicProjection
from starsight.coordinates import (
    CartesianCoordinates,
    EquatorialCoordinates,
    GeographicCoordinates,
)
from starsight.models import QueryInput, Star

MOMENT = utc(2020, 2, 17, 20)
OBSERVER = GeographicCoordinates.of_deg(6.57, 46.52)


@pytest.fixture
def sky(catalogue: StarCatalogue) -> ObservedSky:
    return ObservedSky(MOMENT, OBSERVER, StereographicProjection(ZENITH), catalogue)


class TestObservedSky:
    def test_planets_exclude_earth(self, sky):
        assert [p.name for p in sky.planets] == [
            "Mercury", "Venus", "Mars", "Jupiter", "Saturn", "Uranus", "Neptune",
        ]
        assert sky.planet_positions.shape == (14,)

    def test_star_positions_are_packed_in_catalogue_order(self, sky, catalogue):
        assert sky.stars == catalogue.stars
        assert sky.star_positions.shape == (2 * len(catalogue.stars),)
        to_horizontal = EquatorialToHorizontalConversion(MOMENT, OBSERVER)
        for i, star in enumerate(sky.stars):
            expected = sky.projection.apply(to_horizontal.apply(star.equatorial_pos))
            assert sky.star_positions[2 * i] == pytest.approx(expected.x, abs=1e-12)
            assert sky.star_positions[2 * i + 1] == pytest.approx(expected.y, abs=1e-12)

    def test_positions_are_read_only(self, sky):
        with pytest.raises(ValueError):
            sky.star_positions[0] = 0.0
        with pytest.raises(ValueError):
            sky.planet_positions[0] = 0.0

    def test_asterisms_come_from_the_catalogue(self, sky, catalogue):
        orion = catalogue.asterisms[0]
        assert sky.asterisms == catalogue.asterisms
        assert sky.asterism_indices(orion) == catalogue.asterism_indices(orion)

    def test_objects_in_query_order(self, sky):
        objects = [obj for obj, _ in sky.objects()]
        assert objects[0] is sky.sun
        assert objects[1] is sky.moon
        assert objects[2:9] == list(sky.planets)
        assert objects[9:] == list(sky.stars)

    def test_closest_object_at_exact_position(self, sky):
        assert sky.object_closest_to(sky.sun_position, 0.0) is sky.sun
        assert sky.object_closest_to(sky.moon_position, 1e-9) is sky.moon
        for obj, point in sky.objects():
            assert sky.object_closest_to(point, 1e-12) is obj

    def test_closest_object_out_of_reach(self, sky):
        assert sky.object_closest_to(CartesianCoordinates.of(100.0, 100.0), 1.0) is None

    def test_negative_max_distance(self, sky):
        with pytest.raises(ValueError):
            sky.object_closest_to(CartesianCoordinates.of(0.0, 0.0), -0.1)

    def test_ties_go_to_the_first_star(self):
        pos = EquatorialCoordinates.of(1.0, 0.3)
        first, second = (
            Star(name=name, equatorial_pos=pos, magnitude=1.0, hipparcos_id=1, color_index=0.0)
            for name in ("first", "second")
        )
        sky = ObservedSky(
            MOMENT, OBSERVER, StereographicProjection(ZENITH), StarCatalogue([first, second], [])
        )
        x, y = sky.star_positions[:2]
        assert sky.object_closest_to(CartesianCoordinates.of(float(x), float(y)), 1e-6) is first

    def test_locate_recovers_horizontal_position(self, sky):
        expected = EquatorialToHorizontalConversion(MOMENT, OBSERVER).apply(sky.sun.equatorial_pos)
        located = sky.locate(sky.sun)
        assert located.alt == pytest.approx(expected.alt, abs=1e-9)
        assert located.az == pytest.approx(expected.az, abs=1e-9)

    def test_locate_unknown_object(self, sky):
        stranger = Star(
            name="stranger",
            equatorial_pos=EquatorialCoordinates.of(0.0, 0.0),
            magnitude=1.0,
            hipparcos_id=1,
            color_index=0.0,
        )
        assert sky.locate(stranger) is None

    def test_empty_catalogue(self):
        sky = ObservedSky(MOMENT, OBSERVER, StereographicProjection(ZENITH), StarCatalogue([], []))
        assert sky.star_positions.shape == (0,)
        assert len(list(sky.objects())) == 9

    def test_sun_is_below_the_horizon_at_night(self, sky):
        # Zenith-centred: the horizon is the unit circle
        assert np.hypot(sky.sun_position.x, sky.sun_position.y) > 1.0


class TestResolveObserver:
    def test_local_time_to_utc(self):
        context = resolve_observer(QueryInput(lat=46.52, lng=6.57, when="2020-02-17 21:00"))
        assert context.tz_name == "Europe/Zurich"
        assert context.utc_dt == utc(2020, 2, 17, 20)
        assert context.where.lat_deg == 46.52
        assert context.where.lon_deg == 6.57

    def test_summer_time(self):
        context = resolve_observer(QueryInput(lat=46.52, lng=6.57, when="2020-07-01 22:30"))
        assert context.utc_dt == utc(2020, 7, 1, 20, 30)

    def test_invalid_position(self):
        with pytest.raises(ValueError):
            resolve_observer(QueryInput(lat=95.0, lng=6.57, when="2020-02-17 21:00"))

    def test_invalid_time(self):
        with pytest.raises(ValueError):
            resolve_observer(QueryInput(lat=46.52, lng=6.57, when="17/02/2020 21h"))

    def test_no_timezone(self, monkeypatch):
        class NoTimezone:
            def timezone_at(self, lat: float, lng: float) -> None:
                return None

        monkeypatch.setattr(compute, "_timezone_finder", lambda: NoTimezone())
        with pytest.raises(TimezoneError, match="Timezone not found"):
            resolve_observer(QueryInput(lat=0.0, lng=-30.0, when="2020-02-17 21:00"))


def test_run(catalogue):
    sky = run(QueryInput(lat=46.52, lng=6.57, when="2020-02-17 21:00"), catalogue)
    assert isinstance(sky, ObservedSky)
    assert sky.stars == catalogue.stars
    assert sky.projection.center is ZENITH


def test_compute_observed_sky_uses_context(catalogue):
    context = resolve_observer(QueryInput(lat=46.52, lng=6.57, when="2020-02-17 21:00"))
    sky = compute_observed_sky(context, catalogue)
    reference = ObservedSky(
        datetime(2020, 2, 17, 20), OBSERVER, StereographicProjection(ZENITH), catalogue
    )
    assert sky.sun_position.x == pytest.approx(reference.sun_position.x)
    assert sky.sun_position.y == pytest.approx(reference.sun_position.y)
