"""Matplotlib static PNG renderer."""

import math
from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection, PatchCollection
from matplotlib.figure import Figure
from matplotlib.patches import Circle

from starsight.appearance import (
    BlackBodyColorTable,
    default_color_table,
    object_diameter,
)
from starsight.compute import ObservedSky
from starsight.config import get_settings
from starsight.coordinates import CardinalPoint, HorizontalCoordinates
from starsight.i18n import octant_label, t
from starsight.models import ObserverContext

_BG = "black"
_LINE_COLOR = "#7ec8e3"
_HORIZON_COLOR = "#c9a96e"
_SUN_COLOR = "#ffd84d"
_MOON_COLOR = "#e0e0e0"
_PLANET_COLOR = "#f7c58f"

_HORIZON = HorizontalCoordinates.of(0.0, 0.0)
_EDGE_TOLERANCE = 1e-9


def _horizon_patch(sky: ObservedSky) -> Circle | None:
    """Projected horizon as a circle, or None when it projects to a straight line."""
    projection = sky.projection
    if abs(math.sin(projection.center.alt)) < 1e-12:
        return None
    c = projection.circle_center_for_parallel(_HORIZON)
    r = projection.circle_radius_for_parallel(_HORIZON)
    return Circle((c.x, c.y), abs(r), fill=False, edgecolor=_HORIZON_COLOR, linewidth=1.0)


def render_static_chart(
    sky: ObservedSky,
    extent: float = 1.0,
    chart_size: int = 10,
    lang: str = "en",
    color_table: BlackBodyColorTable | None = None,
    title: str | None = None,
) -> Figure:
    """Render an ObservedSky as a static matplotlib image.

    Args:
        sky: Fully computed sky.
        extent: Half-width of the plotted square of the projection plane.
        chart_size: Output image size in inches.
        lang: Language code for the cardinal labels.
        color_table: Star colors. The configured default table if None.
        title: Optional figure title.

    Returns:
        matplotlib Figure object.
    """
    table = color_table or default_color_table()
    projection = sky.projection

    fig, ax = plt.subplots(figsize=(chart_size, chart_size))
    fig.patch.set_facecolor(_BG)
    ax.set_facecolor(_BG)
    ax.set_aspect("equal")

    star_xy = sky.star_positions.reshape(-1, 2)
    segments = []
    for asterism in sky.asterisms:
        points = star_xy[list(sky.asterism_indices(asterism))]
        segments.extend(zip(points[:-1], points[1:]))
    ax.add_collection(
        LineCollection(segments, colors=_LINE_COLOR, linewidths=0.5, alpha=0.6, zorder=1)
    )

    stars = PatchCollection(
        [
            Circle((x, y), object_diameter(s.magnitude, projection) / 2)
            for s, (x, y) in zip(sky.stars, star_xy)
        ],
        facecolors=[table.color_for(s.color_temperature) for s in sky.stars],
        edgecolors="none",
        zorder=2,
    )
    ax.add_collection(stars)

    planet_xy = sky.planet_positions.reshape(-1, 2)
    planets = PatchCollection(
        [
            Circle((x, y), object_diameter(p.magnitude, projection) / 2)
            for p, (x, y) in zip(sky.planets, planet_xy)
        ],
        facecolors=_PLANET_COLOR,
        edgecolors="none",
        zorder=3,
    )
    ax.add_collection(planets)
    for p, (x, y) in zip(sky.planets, planet_xy):
        ax.annotate(p.name, (x, y), xytext=(4, 4), textcoords="offset points",
                    color=_PLANET_COLOR, fontsize=7, zorder=3)

    # Sun and Moon are drawn at their true projected size
    for obj, pos, color in (
        (sky.sun, sky.sun_position, _SUN_COLOR),
        (sky.moon, sky.moon_position, _MOON_COLOR),
    ):
        radius = projection.apply_to_angle(obj.angular_size) / 2
        ax.add_patch(Circle((pos.x, pos.y), radius, color=color, zorder=4))
        ax.annotate(obj.info(), (pos.x, pos.y), xytext=(6, 6), textcoords="offset points",
                    color=color, fontsize=8, zorder=4)

    horizon = _horizon_patch(sky)
    if horizon is not None:
        ax.add_patch(horizon)
        clip = Circle(horizon.center, horizon.radius, transform=ax.transData)
        for artist in (*ax.collections, *ax.patches, *ax.texts):
            if artist is not horizon:
                artist.set_clip_path(clip)
    else:
        ax.axhline(0.0, color=_HORIZON_COLOR, linewidth=1.0)

    for point in CardinalPoint:
        hor = HorizontalCoordinates.of_deg(point.az_deg, 0.0)
        # the antipode of the center has no image
        if hor.angular_distance_to(projection.center) > math.pi - 1e-9:
            continue
        xy = projection.apply(hor)
        if max(abs(xy.x), abs(xy.y)) <= extent + _EDGE_TOLERANCE:
            ax.text(xy.x, xy.y, octant_label(hor, lang), color=_HORIZON_COLOR,
                    ha="center", va="center", fontsize=10, zorder=5)

    ax.set_xlim(-extent, extent)
    ax.set_ylim(-extent, extent)
    ax.axis("off")
    if title:
        ax.set_title(title, color=_HORIZON_COLOR)

    return fig


def default_output_path(context: ObserverContext) -> Path:
    """results/<lat>_<lon>__<YYYY_MM_DD_HH_MM>.png under the configured results directory."""
    when_str = context.utc_dt.strftime("%Y_%m_%d_%H_%M")
    where = f"{context.where.lat_deg:.4f}_{context.where.lon_deg:.4f}"
    return get_settings().results_dir / f"{where}__{when_str}.png"


def save_static_chart(
    sky: ObservedSky,
    context: ObserverContext,
    output_path: Path | None = None,
    extent: float = 1.0,
    lang: str = "en",
    color_table: BlackBodyColorTable | None = None,
) -> Path:
    """Save an ObservedSky as a PNG file.

    Args:
        sky: Fully computed sky.
        context: Observer the sky was computed for, used for the title and file name.
        output_path: Destination path. Auto-generated under results/ if None.
        extent: Half-width of the plotted square of the projection plane.
        lang: Language code for labels.
        color_table: Star colors. The configured default table if None.

    Returns:
        Path to the saved file.
    """
    if output_path is None:
        output_path = default_output_path(context)

    title = t("chart_title", lang).format(
        when=context.utc_dt.strftime("%Y-%m-%d %H:%M UTC"), where=str(context.where)
    )
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = render_static_chart(sky, extent=extent, lang=lang, color_table=color_table, title=title)
    fig.savefig(output_path, facecolor=_BG)
    plt.close(fig)
    return output_path
