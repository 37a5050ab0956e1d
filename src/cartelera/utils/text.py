"""Text normalization utilities for film titles, dates and durations."""

import re
from datetime import date

# Lower-case accented vowels and ñ folded to plain Latin letters.
_ACCENT_TABLE = str.maketrans(
    {
        **dict.fromkeys("áàäâ", "a"),
        **dict.fromkeys("éèëê", "e"),
        **dict.fromkeys("íìïî", "i"),
        **dict.fromkeys("óòöô", "o"),
        **dict.fromkeys("úùüû", "u"),
        "ñ": "n",
    }
)

# Markers that cinemas attach to a title for special screenings.
# Each pattern captures the marker text in group 1.
SPECIAL_EDITION_PATTERNS = [
    re.compile(r"^(CLUB\s+[^:]+?)\s*:\s*", re.IGNORECASE),
    re.compile(r"\s*\((\d+\s*[ºª°]?\s*aniversario)\)", re.IGNORECASE),
    re.compile(r"\s*\((\d+(?:st|nd|rd|th)\s+anniversary)\)", re.IGNORECASE),
    re.compile(r"\s+(4K)\s*$", re.IGNORECASE),
]


def clean_text(text: str | None) -> str:
    """Collapse whitespace runs and trim."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def sanitize_title(title: str) -> str:
    """
    Build the comparison key for a film title.

    Lower-cases, removes ``:``, ``,`` and ``.``, folds accented vowels and ñ,
    collapses whitespace and trims. Applying it twice gives the same result.

    Examples:
        "Misión: Imposible" → "mision imposible"
        "El Niño, 2." → "el nino 2"
    """
    title = title.lower()
    title = re.sub(r"[:,.]", "", title)
    title = title.translate(_ACCENT_TABLE)
    return clean_text(title)


def slugify(title: str) -> str:
    """
    Convert a title to the id used as upsert key.

    Args:
        title: Display title

    Returns:
        Sanitized title with whitespace runs replaced by hyphens
    """
    return re.sub(r"\s+", "-", sanitize_title(title))


def format_duration(minutes: int) -> str:
    """Format minutes as "2h 5m", dropping the minutes part when zero."""
    if isinstance(minutes, bool) or not isinstance(minutes, int):
        raise ValueError(f"Duration must be an integer number of minutes, got {minutes!r}")

    hours, rest = divmod(minutes, 60)
    if rest == 0:
        return f"{hours}h"
    return f"{hours}h {rest}m"


def split_special_edition(title: str) -> tuple[str, str | None]:
    """
    Separate special-edition markers from a film title.

    Examples:
        "CLUB VOSE: Dune" → ("Dune", "CLUB VOSE")
        "Titanic (25º aniversario)" → ("Titanic", "25º aniversario")
        "Akira 4K" → ("Akira", "4K")
        "Dune" → ("Dune", None)

    Returns:
        Tuple of the display title and the markers joined with ", " (or None)
    """
    title = clean_text(title)
    markers: list[str] = []

    for pattern in SPECIAL_EDITION_PATTERNS:
        match = pattern.search(title)
        if not match:
            continue
        markers.append(clean_text(match.group(1)))
        title = clean_text(f"{title[:match.start()]} {title[match.end():]}")

    return title, ", ".join(markers) if markers else None


def parse_local_date(text: str | None) -> str | None:
    """Convert a "DD/MM/YYYY" token to an ISO date, or None if there is none."""
    if not text:
        return None

    match = re.search(r"\b(\d{1,2})/(\d{1,2})/(\d{4})\b", text)
    if not match:
        return None

    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def normalise_time(text: str | None) -> str | None:
    """Extract an "HH:MM" time from text like "9:05" or "21.30h"."""
    if not text:
        return None

    match = re.search(r"\b(\d{1,2})[:.](\d{2})\b", text)
    if not match:
        return None

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return f"{hour:02d}:{minute:02d}"


def parse_minutes(text: str | None) -> int | None:
    """Read a running time such as "120 min." as an integer."""
    if not text:
        return None
    match = re.search(r"\d+", text)
    return int(match.group()) if match else None
