"""Global pytest configuration and shared catalogue fixtures."""

import io
import math
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import matplotlib
import numpy as np
import pytest
import pytz

from starsight.appearance import default_color_table
from starsight.catalogue import StarCatalogue, load_asterisms, load_hyg_database
from starsight.config import get_settings

matplotlib.use("Agg")

HYG_COLUMNS = (
    "id,hip,hd,hr,gl,bf,proper,ra,dec,dist,pmra,pmdec,rv,mag,absmag,spect,ci,"
    "x,y,z,vx,vy,vz,rarad,decrad,pmrarad,pmdecrad,bayer,flam,con,comp,"
    "comp_primary,base,lum,var,var_min,var_max"
).split(",")


def hyg_row(**values: object) -> str:
    """One HYG CSV line; columns not given are left empty."""
    return ",".join(str(values.get(column, "")) for column in HYG_COLUMNS)


def hyg_text(*rows: str) -> str:
    return "\n".join([",".join(HYG_COLUMNS), *rows]) + "\n"


BETELGEUSE = hyg_row(
    id=27919, hip=27989, proper="Betelgeuse", mag=0.45, ci=1.500,
    rarad=1.5497291183713153, decrad=0.12927763169419373, bayer="Alp", flam=58, con="Ori",
)
RIGEL = hyg_row(
    id=24378, hip=24436, proper="Rigel", mag=0.18, ci=-0.030,
    rarad=1.3724303693276385, decrad=-0.143145630755865, bayer="Bet", flam=19, con="Ori",
)
BELLATRIX = hyg_row(
    id=25273, hip=25336, proper="Bellatrix", mag=1.64, ci=-0.224,
    rarad=1.4186520, decrad=0.1108280, bayer="Gam", flam=24, con="Ori",
)
TAU_PHE = hyg_row(
    id=88, hip=88, proper="", mag=5.71, ci=1.090,
    rarad=0.004696959812148889, decrad=-0.8518930353430763, bayer="Tau", con="Phe",
)

ASTERISMS = "27989,25336,24436\n24436,88\n\n99999\n"


def bbr_text(step: int = 100) -> str:
    """Black-body table in the bbr_color.txt layout, one 2deg and one 10deg row per temperature."""
    lines = [
        "# Blackbody color datafile (bbr_color.txt)",
        "#  K     CMF     x      y      r      g      b    R   G   B   #rrggbb",
    ]
    for kelvin in range(1000, 40001, step):
        shade = (kelvin // 100) % 256
        lines.append(f"{kelvin:6d} K   2deg  0.6528 0.3444  1.0000 0.0337 0.0000  255  51   0  #ff33{shade:02x}")
        lines.append(f"{kelvin:6d} K  10deg  0.6482 0.3434  1.0000 0.0401 0.0000  255  56   0  #{shade:02x}3800")
    return "\n".join(lines) + "\n"


@pytest.fixture(autouse=True)
def clear_cached_settings() -> None:
    """Settings and the default color table are read once per process; reset them per test."""
    get_settings.cache_clear()
    default_color_table.cache_clear()
    yield
    get_settings.cache_clear()
    default_color_table.cache_clear()


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded NumPy generator for property-style sampling."""
    return np.random.default_rng(1337)


@pytest.fixture
def env_vars(monkeypatch: pytest.MonkeyPatch) -> Callable[[dict[str, str]], None]:
    """Temporarily set environment variables for the duration of a test."""

    def _apply(values: dict[str, str]) -> None:
        for key, value in values.items():
            monkeypatch.setenv(key, value)

    return _apply


@pytest.fixture
def catalogue() -> StarCatalogue:
    """Betelgeuse, Bellatrix, Rigel and Tau Phe, with two asterisms."""
    return (
        StarCatalogue.Builder()
        .load_from(io.StringIO(hyg_text(BETELGEUSE, RIGEL, BELLATRIX, TAU_PHE)), load_hyg_database)
        .load_from(io.StringIO(ASTERISMS), load_asterisms)
        .build()
    )


@pytest.fixture
def resources_dir(tmp_path: Path, env_vars) -> Path:
    """A resources directory holding all data files, configured through the environment."""
    resources = tmp_path / "resources"
    resources.mkdir()
    (resources / "hygdata_v3.csv").write_text(
        hyg_text(BETELGEUSE, RIGEL, BELLATRIX, TAU_PHE), encoding="utf-8"
    )
    (resources / "asterisms.txt").write_text(ASTERISMS, encoding="utf-8")
    (resources / "bbr_color.txt").write_text(bbr_text(), encoding="utf-8")
    env_vars(
        {
            "STARSIGHT_RESOURCES_DIR": str(resources),
            "STARSIGHT_RESULTS_DIR": str(tmp_path / "results"),
        }
    )
    return resources


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=pytz.utc)


def wrapped_difference(a: float, b: float) -> float:
    """Signed difference a - b of two angles, in (-π, π]."""
    return (a - b + math.pi) % (2 * math.pi) - math.pi
