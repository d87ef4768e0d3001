"""Star and asterism catalogue, with loaders for the HYG database and asterism files."""

import logging
from collections.abc import Callable, Iterable
from typing import BinaryIO, TextIO

import numpy as np
import pandas as pd

from starsight.angles import check_argument
from starsight.coordinates import EquatorialCoordinates
from starsight.models import Asterism, Star

logger = logging.getLogger(__name__)

_ENCODING = "ascii"

CatalogueStream = BinaryIO | TextIO

# Column positions in the HYG v3 CSV (header row included in the file)
_HYG_HIP = 1
_HYG_PROPER = 6
_HYG_MAG = 13
_HYG_CI = 16
_HYG_RARAD = 23
_HYG_DECRAD = 24
_HYG_BAYER = 27
_HYG_CON = 29


class CatalogueFormatError(ValueError):
    """Catalogue data could not be parsed."""


class StarCatalogue:
    """Immutable list of stars plus the asterisms drawn between them.

    The position of each asterism star in the star list is resolved once, at
    construction, in the asterism's own order.
    """

    def __init__(self, stars: Iterable[Star], asterisms: Iterable[Asterism]):
        self._stars = tuple(stars)
        self._asterisms = tuple(asterisms)

        first_index: dict[Star, int] = {}
        for i, star in enumerate(self._stars):
            first_index.setdefault(star, i)

        self._indices: dict[Asterism, tuple[int, ...]] = {}
        for asterism in self._asterisms:
            for star in asterism.stars:
                check_argument(
                    star in first_index,
                    f"asterism star not in catalogue: {star.name} (HIP {star.hipparcos_id})",
                )
            self._indices[asterism] = tuple(first_index[s] for s in asterism.stars)

    @property
    def stars(self) -> tuple[Star, ...]:
        return self._stars

    @property
    def asterisms(self) -> tuple[Asterism, ...]:
        return self._asterisms

    def asterism_indices(self, asterism: Asterism) -> tuple[int, ...]:
        """Positions of the asterism's stars in stars, in the asterism's order.

        Raises:
            ValueError: If the asterism does not belong to this catalogue.
        """
        indices = self._indices.get(asterism)
        if indices is None:
            raise ValueError("asterism not in catalogue")
        return indices

    def __len__(self) -> int:
        return len(self._stars)

    class Builder:
        """Accumulates stars and asterisms; ``build()`` checks them together."""

        def __init__(self) -> None:
            self._stars: list[Star] = []
            self._asterisms: list[Asterism] = []

        def add_star(self, star: Star) -> "StarCatalogue.Builder":
            self._stars.append(star)
            return self

        def add_asterism(self, asterism: Asterism) -> "StarCatalogue.Builder":
            self._asterisms.append(asterism)
            return self

        @property
        def stars(self) -> tuple[Star, ...]:
            return tuple(self._stars)

        @property
        def asterisms(self) -> tuple[Asterism, ...]:
            return tuple(self._asterisms)

        def load_from(
            self,
            stream: CatalogueStream,
            loader: "Callable[[CatalogueStream, StarCatalogue.Builder], None]",
        ) -> "StarCatalogue.Builder":
            loader(stream, self)
            return self

        def build(self) -> "StarCatalogue":
            return StarCatalogue(self._stars, self._asterisms)


def _star_name(proper: str, bayer: str, con: str) -> str:
    if proper:
        return proper
    return f"{bayer or '?'} {con}"


def _number(value: str) -> float:
    return float(value) if value else 0.0


def load_hyg_database(stream: CatalogueStream, builder: StarCatalogue.Builder) -> None:
    """Add every star of a HYG database CSV to builder, in file order.

    stream may be text or ASCII bytes. Empty Hipparcos id, magnitude or color
    index fields are read as 0. Magnitude and color index are kept in single
    precision.

    Raises:
        CatalogueFormatError: On a malformed row or an out-of-range value.
    """
    try:
        df = pd.read_csv(stream, dtype=str, keep_default_na=False, encoding=_ENCODING)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise CatalogueFormatError(f"unreadable star catalogue: {e}") from e

    if df.shape[1] <= _HYG_CON:
        raise CatalogueFormatError(
            f"star catalogue has {df.shape[1]} columns, expected at least {_HYG_CON + 1}"
        )

    count = 0
    for line, row in enumerate(df.itertuples(index=False, name=None), start=2):
        try:
            star = Star(
                hipparcos_id=int(_number(row[_HYG_HIP])),
                name=_star_name(row[_HYG_PROPER], row[_HYG_BAYER], row[_HYG_CON]),
                equatorial_pos=EquatorialCoordinates.of(
                    float(row[_HYG_RARAD]), float(row[_HYG_DECRAD])
                ),
                magnitude=float(np.float32(_number(row[_HYG_MAG]))),
                color_index=float(np.float32(_number(row[_HYG_CI]))),
            )
        except ValueError as e:
            raise CatalogueFormatError(f"star catalogue line {line}: {e}") from e
        builder.add_star(star)
        count += 1

    logger.info("Loaded %d stars", count)


def load_asterisms(stream: CatalogueStream, builder: StarCatalogue.Builder) -> None:
    """Add the asterisms of a comma-separated Hipparcos id file to builder.

    stream may be text or ASCII bytes. One asterism per line; a blank line ends
    the list. Ids are resolved against the stars already in builder (the last
    star with a given id wins).

    Raises:
        CatalogueFormatError: On a non-numeric id or an id with no matching star.
    """
    by_hip = {star.hipparcos_id: star for star in builder.stars}

    count = 0
    for line, raw in enumerate(stream, start=1):
        if isinstance(raw, bytes):
            try:
                raw = raw.decode(_ENCODING)
            except UnicodeDecodeError as e:
                raise CatalogueFormatError(f"asterism line {line}: {e}") from e
        text = raw.strip()
        if not text:
            break
        stars: list[Star] = []
        for token in text.split(","):
            try:
                hip = int(token)
            except ValueError as e:
                raise CatalogueFormatError(f"asterism line {line}: bad id {token!r}") from e
            star = by_hip.get(hip)
            if star is None:
                raise CatalogueFormatError(f"asterism line {line}: unknown star HIP {hip}")
            stars.append(star)
        builder.add_asterism(Asterism(tuple(stars)))
        count += 1

    logger.info("Loaded %d asterisms", count)
