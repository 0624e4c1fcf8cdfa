"""Whole-page data collected alongside generic extraction."""

from __future__ import annotations

from typing import Any, Dict, List

_IMAGES_SCRIPT = """() => Array.from(document.querySelectorAll('img')).map(img => ({
    src: img.src || img.getAttribute('data-src') || '',
    alt: img.alt || '',
    width: img.naturalWidth,
    height: img.naturalHeight,
}))"""

_LINKS_SCRIPT = """() => Array.from(document.querySelectorAll('a[href]')).map(link => ({
    href: link.getAttribute('href') || '',
    text: (link.textContent || '').trim(),
    title: link.getAttribute('title') || '',
}))"""


async def harvest_images(page: Any) -> List[Dict[str, Any]]:
    """Return every image with a real source; inline ``data:`` images are skipped."""
    raw = await page.evaluate(_IMAGES_SCRIPT)
    images: List[Dict[str, Any]] = []
    for item in raw or []:
        src = str(item.get("src") or "")
        if not src or src.startswith("data:"):
            continue
        images.append(
            {
                "src": src,
                "alt": item.get("alt") or "",
                "width": item.get("width") or 0,
                "height": item.get("height") or 0,
            }
        )
    return images


async def harvest_links(page: Any) -> List[Dict[str, str]]:
    """Return every anchor's target, text and title, except ``javascript:`` links."""
    raw = await page.evaluate(_LINKS_SCRIPT)
    links: List[Dict[str, str]] = []
    for item in raw or []:
        href = str(item.get("href") or "")
        if not href or href.startswith("javascript:"):
            continue
        links.append({"href": href, "text": item.get("text") or "", "title": item.get("title") or ""})
    return links


async def page_info(page: Any, max_chars: int) -> Dict[str, str]:
    """Title, final URL and the leading ``max_chars`` of the rendered HTML."""
    html = await page.content()
    if max_chars > 0:
        html = html[:max_chars]
    return {"title": await page.title(), "url": page.url, "html": html}
