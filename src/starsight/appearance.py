"""How sky objects look on a chart: black-body colors and magnitude-based sizes."""

import logging
import math
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path

from starsight.angles import ClosedInterval, check_in_interval, of_deg
from starsight.config import get_settings
from starsight.conversions import StereographicProjection

logger = logging.getLogger(__name__)

_TEMPERATURES = ClosedInterval.of(1000.0, 40000.0)
_MAGNITUDES = ClosedInterval.of(-2.0, 5.0)
_REFERENCE_SIZE = of_deg(0.5)


class BlackBodyColorTable:
    """Color of a black body by temperature, in 100 K steps.

    Built from Mitchell Charity's ``bbr_color.txt``: only the 10° observer rows
    are used, each giving a temperature first and an ``#rrggbb`` color last.
    """

    def __init__(self, colors: dict[int, str]):
        self._colors = dict(colors)

    @classmethod
    def parse(cls, lines: Iterable[str]) -> "BlackBodyColorTable":
        colors: dict[int, str] = {}
        for raw in lines:
            if raw.startswith("#"):
                continue
            tokens = raw.split()
            if len(tokens) < 3 or tokens[2] != "10deg":
                continue
            colors[int(tokens[0])] = tokens[-1]
        return cls(colors)

    @classmethod
    def load(cls, path: Path) -> "BlackBodyColorTable":
        with path.open(encoding="utf-8") as f:
            table = cls.parse(f)
        logger.info("Loaded %d black-body colors from %s", len(table), path)
        return table

    def __len__(self) -> int:
        return len(self._colors)

    def color_for(self, kelvin: float) -> str:
        """Hex color of the table temperature closest to kelvin.

        Raises:
            ValueError: If kelvin is outside [1000, 40000].
        """
        check_in_interval(_TEMPERATURES, kelvin)
        key = int(math.floor(kelvin / 100 + 0.5)) * 100
        return self._colors[key]


@lru_cache(maxsize=1)
def default_color_table() -> BlackBodyColorTable:
    """Color table from the configured resources directory, loaded once."""
    return BlackBodyColorTable.load(get_settings().color_table_path)


def object_diameter(magnitude: float, projection: StereographicProjection) -> float:
    """Plane diameter of a disc for an object of the given magnitude.

    Magnitudes are clipped to [-2, 5]; a magnitude -2 object gets the projected
    size of a 0.5° disc, fainter ones proportionally less.
    """
    m = _MAGNITUDES.clip(magnitude)
    return (99 - 17 * m) / 140 * projection.apply_to_angle(_REFERENCE_SIZE)
