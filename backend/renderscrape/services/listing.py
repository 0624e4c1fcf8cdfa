"""Google Play listing extraction."""

from __future__ import annotations

import logging
from typing import Any, List, Optional
from urllib.parse import urljoin

from bs4 import Tag

from renderscrape.schemas import ListingRecord
from renderscrape.services.extraction import (
    Advanced,
    ExtractionPlan,
    attribute_value,
    element_text,
    extract,
    select_first,
)
from renderscrape.services.parsers import (
    parse_install_count,
    parse_price,
    parse_rating,
    rewrite_image_size,
    strip_store_suffix,
)

logger = logging.getLogger(__name__)

LISTING_PLAN = ExtractionPlan(
    [
        ("rating", Advanced('[itemprop="ratingValue"], .TT9eCd')),
    ]
)

NAME_SELECTORS = ("h1", '[itemprop="name"]')
ABOUT_MARKERS = ("About this app", "Acerca de esta app")
DESCRIPTION_CONTAINER_SELECTOR = 'div.bARER, div[class*="bARER"]'
ICON_SELECTOR = 'img[alt*="Icon"], img[itemprop="image"]'
SCREENSHOT_SELECTOR = 'img[alt*="Screenshot"], img[alt*="screenshot"]'
CAROUSEL_SELECTOR = '[role="list"], .screenshot-carousel'
PRICE_SELECTOR = '[itemprop="price"], .VfPpkd-StrnGf-rymPhb'
PUBLISHER_SELECTORS = (
    'a[href*="/store/apps/developer"]',
    'a[itemprop="author"]',
    '[itemprop="author"]',
    ".VfPpkd-StrnGf-rymPhb a",
    ".VfPpkd-StrnGf-rymPhb-ibnC6b a",
)
IMAGE_HOST = "googleusercontent.com"
REJECTED_IMAGE_MARKERS = ("icon", "logo")


def _image_source(img: Tag, base_url: Optional[str]) -> Optional[str]:
    src = attribute_value(img, "src") or attribute_value(img, "data-src")
    if not src:
        return None
    return urljoin(base_url, src) if base_url else src


def extract_name(document: Any) -> Optional[str]:
    """Trimmed text of the first name candidate that has any; markup is never returned."""
    for selector in NAME_SELECTORS:
        element = select_first(document, selector)
        if element is not None:
            text = element_text(element)
            if text:
                return text
    return None


def extract_description(document: Any) -> Optional[str]:
    """Collect the "About this app" section.

    Sibling blocks after the heading are joined up to the next ``h2``. The
    combined text of the known description containers replaces that when it
    is strictly longer; equal lengths keep the heading walk. The heuristic
    depends on the current page layout.
    """
    heading = None
    for h2 in document.find_all("h2"):
        text = h2.get_text()
        if any(marker in text for marker in ABOUT_MARKERS):
            heading = h2
            break
    if heading is None:
        return None

    description = ""
    for sibling in heading.find_next_siblings():
        if sibling.name == "h2":
            break
        if sibling.get_text():
            description += element_text(sibling) + "\n\n"

    containers = document.select(DESCRIPTION_CONTAINER_SELECTOR)
    if containers:
        combined = "".join(element_text(div) + "\n\n" for div in containers)
        if len(combined) > len(description):
            description = combined

    return description.strip()


def extract_icon_url(document: Any, base_url: Optional[str] = None) -> Optional[str]:
    icon = select_first(document, ICON_SELECTOR)
    if icon is None:
        return None
    src = _image_source(icon, base_url)
    if not src:
        return None
    return rewrite_image_size(src, 512, 512, 512)


def _accept_screenshot(src: Optional[str]) -> bool:
    if not src or IMAGE_HOST not in src:
        return False
    return not any(marker in src for marker in REJECTED_IMAGE_MARKERS)


def extract_screenshot_urls(document: Any, base_url: Optional[str] = None) -> List[str]:
    """Screenshot URLs from alt-tagged images and carousels, deduplicated in first-seen order."""
    candidates: List[Tag] = list(document.select(SCREENSHOT_SELECTOR))
    for carousel in document.select(CAROUSEL_SELECTOR):
        candidates.extend(carousel.find_all("img"))

    screenshots: List[str] = []
    for img in candidates:
        src = _image_source(img, base_url)
        if not _accept_screenshot(src):
            continue
        src = rewrite_image_size(src, 720, 1280, 720)
        if src not in screenshots:
            screenshots.append(src)
    return screenshots


def extract_price(document: Any) -> float:
    price = select_first(document, PRICE_SELECTOR)
    if price is None:
        return 0.0
    return parse_price(price.get_text())


def extract_publisher(document: Any) -> Optional[str]:
    for selector in PUBLISHER_SELECTORS:
        element = select_first(document, selector)
        if element is None:
            continue
        text = element_text(element)
        if len(text) > 2:
            return text
    return None


def extract_listing(document: Any, base_url: Optional[str] = None) -> ListingRecord:
    """Build a :class:`ListingRecord` from a fully rendered listing page.

    Args:
        document: Parsed page (see ``parse_document``).
        base_url: Final page URL, used to resolve relative image sources.

    Returns:
        ListingRecord: Fields that could not be found stay unset, except
        ``screenshot_urls`` (empty list) and ``price`` (0, i.e. free).
    """
    raw = extract(document, LISTING_PLAN)
    record = ListingRecord()

    name = extract_name(document)
    if name:
        record.name = strip_store_suffix(name)

    record.description = extract_description(document)
    record.icon_url = extract_icon_url(document, base_url)
    record.screenshot_urls = extract_screenshot_urls(document, base_url)

    rating = raw.get("rating")
    if isinstance(rating, str):
        record.rating = parse_rating(rating)

    record.price = extract_price(document)
    record.publisher = extract_publisher(document)

    body = document.body or document
    record.play_store_downloads = parse_install_count(body.get_text())

    logger.debug(
        "Extracted listing name=%r screenshots=%d downloads=%s",
        record.name,
        len(record.screenshot_urls),
        record.play_store_downloads,
    )
    return record
