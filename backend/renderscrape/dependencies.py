"""FastAPI dependency helpers."""

from renderscrape.errors import InputError
from renderscrape.services.page_manager import PageManager, page_manager


def get_page_manager() -> PageManager:
    """Return the process-wide page manager.

    Tests override this dependency to run routes against a fake browser.
    """
    return page_manager


def require_url(url: str | None) -> str:
    """Return the trimmed target URL.

    Raises:
        InputError: When the URL is missing or blank.
    """
    if url is None or not url.strip():
        raise InputError("URL is required")
    return url.strip()
