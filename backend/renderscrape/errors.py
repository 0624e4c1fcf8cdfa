"""Exceptions raised by the scraping core."""


class ScrapeError(Exception):
    """Base class for failures reported to API callers."""

    status_code = 500


class InputError(ScrapeError):
    """Raised when a request is missing required input or is malformed."""

    status_code = 400


class BrowserUnavailable(ScrapeError):
    """Raised when the shared browser cannot be started."""


class NavigationTimeout(ScrapeError):
    """Raised when a page does not reach its ready condition in time."""


class ExtractionRuntimeError(ScrapeError):
    """Raised for any other fault while loading or evaluating a page."""
