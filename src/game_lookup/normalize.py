"""CatalogRecord -> DisplayRecord.

Pure functions only: the output depends on the record (and the image size
table) and nothing else. Every missing value becomes NOT_AVAILABLE, except
images and empty genre lists, which become a single space so the note
template still renders.
"""

import math
import re
from datetime import datetime, timezone

from .models import (
    BLANK,
    IMAGE_SIZES,
    IMAGE_SOURCE_TOKEN,
    NOT_AVAILABLE,
    PLOT_MAX_LENGTH,
    PLOT_PLACEHOLDER,
    CatalogRecord,
    DisplayRecord,
)

_ILLEGAL_FILENAME_CHARS = re.compile(r'[\\,#%&{}/*<>$":@.]')


def sanitize_title(name: str) -> str:
    """Strip characters that are illegal or awkward in note file names."""
    return _ILLEGAL_FILENAME_CHARS.sub("", name)


def format_list(items: list[str]) -> str:
    if not items:
        return BLANK
    if len(items) == 1:
        return items[0].strip()
    return ", ".join(item.strip() for item in items)


def upgrade_image_url(
    url: str | None,
    size: str,
    source_token: str = IMAGE_SOURCE_TOKEN,
) -> str:
    """Swap the first size token in an IGDB image URL and add the scheme.

    ``//images.igdb.com/igdb/image/upload/t_thumb/co1wyy.jpg`` with size
    ``cover_big`` becomes
    ``https://images.igdb.com/igdb/image/upload/t_cover_big/co1wyy.jpg``.
    """
    if not url:
        return BLANK
    url = url.replace(source_token, size, 1)
    if url.startswith("//"):
        url = "https:" + url
    return url


def release_year(epoch_seconds: int | None) -> str:
    """Calendar year (UTC) of a release timestamp, or NOT_AVAILABLE."""
    if not epoch_seconds:
        return NOT_AVAILABLE
    try:
        return str(datetime.fromtimestamp(epoch_seconds, tz=timezone.utc).year)
    except (ValueError, OverflowError, OSError):
        # Outside the range datetime can represent
        return NOT_AVAILABLE


def truncate_text(text: str, max_length: int = PLOT_MAX_LENGTH) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length].strip() + "..."


def format_plot(storyline: str | None, summary: str | None) -> str:
    """Quoted plot text: storyline, else summary, else the placeholder."""
    for text in (storyline, summary):
        if text and text.strip():
            flat = re.sub(r'["\r\n]+', " ", text)
            flat = truncate_text(flat).replace('"', '\\"')
            return f'"{flat}"'
    return PLOT_PLACEHOLDER


def format_rating(rating: float | None) -> str:
    # Half-up, so 72.5 -> 73 (round() would give 72)
    if rating is None or not math.isfinite(rating):
        return NOT_AVAILABLE
    return str(math.floor(rating + 0.5))


def format_platforms(platforms: list[str] | None) -> str:
    if not platforms:
        return NOT_AVAILABLE
    return ", ".join(p.strip() for p in platforms)


def suggestion_label(record: CatalogRecord) -> str:
    """Chooser line for a candidate: ``Name (Year)``."""
    year = release_year(record.first_release_date)
    if year == NOT_AVAILABLE:
        year = "Unknown"
    return f"{record.name or NOT_AVAILABLE} ({year})"


def normalize(
    record: CatalogRecord,
    image_sizes: dict[str, str] | None = None,
    source_token: str = IMAGE_SOURCE_TOKEN,
) -> DisplayRecord:
    """Map one catalog record to its display fields."""
    sizes = {**IMAGE_SIZES, **(image_sizes or {})}

    developer = next(
        (c for c in (record.involved_companies or []) if c.developer),
        None,
    )
    company = developer.company if developer else None

    return DisplayRecord(
        title_sanitized=sanitize_title(record.name or ""),
        genres=format_list(record.genres) if record.genres is not None else NOT_AVAILABLE,
        developer_name=(company.name if company and company.name else NOT_AVAILABLE),
        developer_logo=upgrade_image_url(
            company.logo_url if company else None, sizes["logo"], source_token,
        ),
        thumbnail=upgrade_image_url(record.cover_url, sizes["cover"], source_token),
        release_year=release_year(record.first_release_date),
        plot=format_plot(record.storyline, record.summary),
        rating=format_rating(record.rating),
        platforms=format_platforms(record.platforms),
    )
