"""Simple two-language (en/fr) translation helper."""

from starsight.coordinates import HorizontalCoordinates

_STRINGS: dict[str, dict[str, str]] = {
    "north": {
        "en": "N",
        "fr": "N",
    },
    "east": {
        "en": "E",
        "fr": "E",
    },
    "south": {
        "en": "S",
        "fr": "S",
    },
    "west": {
        "en": "W",
        "fr": "O",
    },
    "chart_title": {
        "en": "Sky at {when} from {where}",
        "fr": "Ciel le {when} depuis {where}",
    },
    "sunrise": {
        "en": "Sunrise",
        "fr": "Lever du Soleil",
    },
    "sunset": {
        "en": "Sunset",
        "fr": "Coucher du Soleil",
    },
    "sun_zenith": {
        "en": "Sun at zenith",
        "fr": "Soleil au zénith",
    },
    "never_rises": {
        "en": "never rises",
        "fr": "ne se lève pas",
    },
    "never_sets": {
        "en": "never sets",
        "fr": "ne se couche pas",
    },
    "saved": {
        "en": "Saved: {path}",
        "fr": "Enregistré : {path}",
    },
    "error_timezone": {
        "en": "No timezone found for this position. ({error})",
        "fr": "Aucun fuseau horaire pour cette position. ({error})",
    },
    "error_input": {
        "en": "Invalid position or time. ({error})",
        "fr": "Position ou heure invalide. ({error})",
    },
    "error_catalogue": {
        "en": "Cannot load the star catalogue. ({error})",
        "fr": "Impossible de charger le catalogue d'étoiles. ({error})",
    },
}


def t(key: str, lang: str) -> str:
    """Return the translated string for key in lang.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(lang) or entry.get("en") or key


def octant_label(hor: HorizontalCoordinates, lang: str) -> str:
    """Translated label of the 45° sector containing hor's azimuth, e.g. "NW" or "NO"."""
    return hor.az_octant_name(t("north", lang), t("east", lang), t("south", lang), t("west", lang))
