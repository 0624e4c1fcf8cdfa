"""Screenshot and PDF capture of rendered pages."""

from __future__ import annotations

import base64
import logging
from typing import Any

from renderscrape.errors import InputError

logger = logging.getLogger(__name__)

PDF_FORMATS = {"letter", "legal", "tabloid", "ledger", "a0", "a1", "a2", "a3", "a4", "a5", "a6"}


async def capture_screenshot(page: Any, full_page: bool = False) -> str:
    """Capture the page as PNG and return it as a ``data:`` URI."""
    png_bytes = await page.screenshot(full_page=full_page, type="png")
    logger.info("Captured screenshot (%d bytes, full_page=%s)", len(png_bytes), full_page)
    encoded_png = base64.b64encode(png_bytes).decode("utf-8")
    return f"data:image/png;base64,{encoded_png}"


def validate_pdf_format(paper_format: str) -> str:
    """Return ``paper_format`` if Chromium knows the paper size.

    Raises:
        InputError: When ``paper_format`` is not a known paper size.
    """
    if paper_format.lower() not in PDF_FORMATS:
        raise InputError(f"Unsupported PDF format '{paper_format}'")
    return paper_format


async def render_pdf(page: Any, paper_format: str = "A4") -> bytes:
    """Print the page to PDF with backgrounds."""
    pdf_bytes = await page.pdf(format=paper_format, print_background=True)
    logger.info("Rendered PDF (%d bytes, format=%s)", len(pdf_bytes), paper_format)
    return pdf_bytes
