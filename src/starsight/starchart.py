"""CLI entry point for star chart generation.

Usage:
    starsight-chart --lat 46.52 --lon 6.57 --when "2020-02-17 21:00"

Prints the Sun's rise/set times for the observer and the path of the saved PNG.
"""

import argparse
import logging
import sys
from pathlib import Path

from pytz.exceptions import InvalidTimeError

from starsight.angles import of_deg
from starsight.catalogue import (
    CatalogueFormatError,
    StarCatalogue,
    load_asterisms,
    load_hyg_database,
)
from starsight.compute import TimezoneError, compute_observed_sky, resolve_observer
from starsight.config import LANGUAGES, Settings, get_settings
from starsight.coordinates import HorizontalCoordinates
from starsight.i18n import t
from starsight.models import ObserverContext, QueryInput
from starsight.renderers.static import save_static_chart
from starsight.riseset import NEVER_RISES, NEVER_SETS, sun_times, to_local

logger = logging.getLogger(__name__)


def load_catalogue(settings: Settings) -> StarCatalogue:
    """Star catalogue and asterisms from the configured resource files."""
    builder = StarCatalogue.Builder()
    with settings.star_catalogue_path.open("rb") as f:
        builder.load_from(f, load_hyg_database)
    with settings.asterisms_path.open("rb") as f:
        builder.load_from(f, load_asterisms)
    return builder.build()


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="starsight-chart", description="Draw the sky seen from a place at a local time."
    )
    parser.add_argument("--lat", type=float, required=True, help="Latitude in degrees")
    parser.add_argument("--lon", type=float, required=True, help="Longitude in degrees")
    parser.add_argument(
        "--when", required=True, help='Local time at the observer, "YYYY-MM-DD HH:MM"'
    )
    parser.add_argument(
        "--center-az", type=float, default=0.0, help="Azimuth of the chart center in degrees"
    )
    parser.add_argument(
        "--center-alt", type=float, default=90.0, help="Altitude of the chart center in degrees"
    )
    parser.add_argument(
        "--fov", type=float, default=180.0, help="Field of view across the chart in degrees"
    )
    parser.add_argument("--output", type=Path, default=None, help="PNG file to write")
    parser.add_argument("--lang", choices=LANGUAGES, default=None, help="Label language")
    return parser.parse_args(argv)


def _sun_lines(context: ObserverContext, lang: str) -> list[str]:
    """Sunrise, sunset and solar zenith on the observer's date, in local time."""
    day = context.utc_dt.date()
    times = sun_times(context.where, day)
    lines = []
    for key, clock in (
        ("sunrise", times.rising),
        ("sunset", times.setting),
        ("sun_zenith", times.zenith),
    ):
        if clock == NEVER_RISES:
            text = t("never_rises", lang)
        elif clock == NEVER_SETS:
            text = t("never_sets", lang)
        else:
            text = to_local(day, clock, context.where).strftime("%H:%M:%S %Z")
        lines.append(f"{t(key, lang)}: {text}")
    return lines


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = _parse_args(argv)
    lang = args.lang or settings.lang

    try:
        catalogue = load_catalogue(settings)
    except (OSError, CatalogueFormatError) as e:
        logger.error("Catalogue loading failed: %s", e)
        print(t("error_catalogue", lang).format(error=e), file=sys.stderr)
        return 1

    query = QueryInput(lat=args.lat, lng=args.lon, when=args.when)
    try:
        context = resolve_observer(query)
    except TimezoneError as e:
        print(t("error_timezone", lang).format(error=e), file=sys.stderr)
        return 1
    except (ValueError, InvalidTimeError) as e:
        print(t("error_input", lang).format(error=e), file=sys.stderr)
        return 1

    center = HorizontalCoordinates.of_deg(args.center_az % 360.0, args.center_alt)
    sky = compute_observed_sky(context, catalogue, center)
    for line in _sun_lines(context, lang):
        print(line)

    extent = sky.projection.apply_to_angle(of_deg(args.fov)) / 2
    path = save_static_chart(sky, context, args.output, extent=extent, lang=lang)
    print(t("saved", lang).format(path=path))
    return 0


if __name__ == "__main__":
    sys.exit(main())
