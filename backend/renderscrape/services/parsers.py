"""Text and number parsers used on store listing pages.

Every function takes plain strings and returns an optional typed value, so
they can be exercised without a browser or a DOM.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Optional

# " - Apps on Google Play" and its Spanish counterpart, plus anything after it.
_STORE_SUFFIX_PATTERN = re.compile(
    r"\s*-\s*(?:Apps?\s+on|Aplicaciones\s+en)\s+Google\s+Play.*$",
    re.IGNORECASE,
)

_SIZE_WH_PATTERN = re.compile(r"=w\d+-h\d+")
_SIZE_S_PATTERN = re.compile(r"=s\d+")

_DECIMAL_PATTERN = re.compile(r"(\d+\.?\d*)")
_PRICE_PATTERN = re.compile(r"\$?(\d+\.?\d*)")
_FREE_MARKERS = ("gratis", "free")

_COMPACT_COUNT_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*([MK])\s*\+", re.IGNORECASE)
_FULL_COUNT_PATTERN = re.compile(r"([\d,]+)\s*\+")
_COUNT_MULTIPLIERS = {"M": 1_000_000, "K": 1_000}
FULL_COUNT_MINIMUM = 1000


def strip_store_suffix(name: str) -> str:
    """Remove a trailing store-branding suffix such as " - Apps on Google Play"."""
    return _STORE_SUFFIX_PATTERN.sub("", name)


def rewrite_image_size(url: str, width: int, height: int, square: int) -> str:
    """Ask the image host for a canonical render size.

    ``=w<N>-h<N>`` becomes ``=w{width}-h{height}`` and ``=s<N>`` becomes
    ``=s{square}``. Only the first occurrence of each is rewritten, and an
    already-canonical URL comes back unchanged.
    """
    url = _SIZE_WH_PATTERN.sub(f"=w{width}-h{height}", url, count=1)
    return _SIZE_S_PATTERN.sub(f"=s{square}", url, count=1)


def parse_rating(text: Optional[str]) -> Optional[float]:
    """Return the first decimal number in ``text``."""
    if not text:
        return None
    match = _DECIMAL_PATTERN.search(text)
    if not match:
        return None
    return float(match.group(1))


def is_free_marker(text: str) -> bool:
    lowered = text.lower()
    return any(marker in lowered for marker in _FREE_MARKERS)


def parse_price(text: Optional[str]) -> float:
    """Parse a listing price; anything that is not a readable amount counts as free.

    >>> parse_price("Gratis")
    0.0
    >>> parse_price("$4.99")
    4.99
    """
    if text is None:
        return 0.0
    text = text.strip()
    if is_free_marker(text):
        return 0.0
    match = _PRICE_PATTERN.search(text)
    if not match:
        return 0.0
    return float(match.group(1))


def parse_install_count(text: Optional[str]) -> Optional[int]:
    """Find an install count like "10M+", "500K+" or "1,000,000+" in ``text``.

    The first compact count wins. Without one, the first separator-grouped
    number followed by "+" is used, but only when it exceeds 1000. Text that
    holds both a compact count and an unrelated "+" number is resolved purely
    by which pattern matches; there is no further context check.
    """
    if not text:
        return None

    compact = _COMPACT_COUNT_PATTERN.search(text)
    if compact:
        number = Decimal(compact.group(1))
        return int(number * _COUNT_MULTIPLIERS[compact.group(2).upper()])

    full = _FULL_COUNT_PATTERN.search(text)
    if full:
        digits = full.group(1).replace(",", "")
        if digits:
            value = int(digits)
            if value > FULL_COUNT_MINIMUM:
                return value
    return None
