"""Playwright page lifecycle shared by every request handler."""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Optional, Tuple, TypeVar

from playwright.async_api import Browser, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from renderscrape.config import Config, config
from renderscrape.errors import BrowserUnavailable, ExtractionRuntimeError, NavigationTimeout

logger = logging.getLogger(__name__)

T = TypeVar("T")
Launcher = Callable[[], Awaitable[Tuple[Any, Any]]]


def _parse_positive_int(value: Any) -> Optional[int]:
    """Return a positive integer parsed from ``value`` or ``None`` if invalid."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and value > 0:
        return int(value)
    if isinstance(value, str) and value.strip():
        try:
            parsed = int(float(value))
            return parsed if parsed > 0 else None
        except ValueError:
            return None
    return None


@dataclass
class PageSession:
    """A browser context and its page, owned by exactly one request."""

    context: Any
    page: Any
    released: bool = False


async def launch_chromium() -> Tuple[Playwright, Browser]:
    """Start Playwright and launch the configured headless Chromium."""
    playwright = await async_playwright().start()
    try:
        browser = await playwright.chromium.launch(
            headless=config.BROWSER_HEADLESS,
            args=config.BROWSER_LAUNCH_ARGS,
        )
    except Exception:
        await playwright.stop()
        raise
    return playwright, browser


class PageManager:
    """Owner of the single shared browser and the per-request pages opened on it.

    The browser is started lazily on first use. Concurrent first callers all
    wait on the same initialisation instead of launching their own browser.
    Every page lives in its own browser context so concurrent requests never
    share cookies, storage or viewport state.
    """

    def __init__(self, launcher: Optional[Launcher] = None) -> None:
        """Set up the initialisation lock; nothing is launched yet."""
        self._launcher = launcher or launch_chromium
        self._lock = asyncio.Lock()
        self._playwright: Any = None
        self._browser: Any = None

    @property
    def is_initialized(self) -> bool:
        return self._browser is not None

    async def start(self) -> None:
        """Eagerly start the browser, e.g. from the application lifespan."""
        await self._ensure_browser()

    async def shutdown(self) -> None:
        """Release Playwright resources."""
        async with self._lock:
            await self._close_browser_unlocked()

    async def _close_browser_unlocked(self) -> None:
        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception:  # pragma: no cover - best effort cleanup
                logger.debug("Failed to close Playwright browser", exc_info=True)
            finally:
                self._browser = None
        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception:  # pragma: no cover - best effort cleanup
                logger.debug("Failed to stop Playwright runtime", exc_info=True)
            finally:
                self._playwright = None
        logger.info("Playwright browser shut down")

    async def _ensure_browser(self) -> Any:
        if self._browser is not None:
            return self._browser
        async with self._lock:
            if self._browser is not None:
                return self._browser
            logger.info("Starting Playwright headless browser instance")
            try:
                playwright, browser = await self._launcher()
            except Exception as exc:
                logger.exception("Failed to initialise Playwright browser")
                raise BrowserUnavailable(f"Browser initialisation failed: {exc}") from exc
            self._playwright = playwright
            self._browser = browser
            logger.info("Browser initialized successfully")
            return browser

    async def acquire_page(self, viewport: Optional[Dict[str, int]] = None) -> PageSession:
        """Open a fresh context and page on the shared browser.

        Args:
            viewport: Optional ``{"width", "height"}`` override for this page.

        Returns:
            PageSession: The new session; the caller must release it.

        Raises:
            BrowserUnavailable: When the browser cannot be started.
            ExtractionRuntimeError: When the context or page cannot be opened.
        """
        browser = await self._ensure_browser()
        try:
            context = await browser.new_context(
                viewport=viewport or {"width": config.VIEWPORT_WIDTH, "height": config.VIEWPORT_HEIGHT},
                user_agent=config.BROWSER_USER_AGENT,
            )
        except PlaywrightError as exc:
            raise ExtractionRuntimeError(str(exc)) from exc

        session = PageSession(context=context, page=None)
        try:
            session.page = await context.new_page()
        except PlaywrightError as exc:
            await self.release(session)
            raise ExtractionRuntimeError(str(exc)) from exc
        return session

    async def release(self, session: PageSession) -> None:
        """Close the session's context. Failures are logged, never raised."""
        if session.released:
            return
        session.released = True
        try:
            await session.context.close()
        except Exception:
            logger.debug("Failed to close Playwright context", exc_info=True)

    @asynccontextmanager
    async def session(self, viewport: Optional[Dict[str, int]] = None) -> AsyncIterator[PageSession]:
        """Scope a page to a ``async with`` block and translate Playwright errors."""
        session = await self.acquire_page(viewport)
        try:
            yield session
        except PlaywrightTimeoutError as exc:
            raise NavigationTimeout(str(exc)) from exc
        except PlaywrightError as exc:
            raise ExtractionRuntimeError(str(exc)) from exc
        finally:
            await self.release(session)

    async def with_page(
        self,
        fn: Callable[[PageSession], Awaitable[T]],
        viewport: Optional[Dict[str, int]] = None,
    ) -> T:
        """Run ``fn`` against a freshly acquired page and always release it."""
        async with self.session(viewport=viewport) as session:
            return await fn(session)

    async def navigate(
        self,
        session: PageSession,
        url: str,
        *,
        timeout_ms: Any = None,
        wait_until: Optional[str] = None,
        settle_ms: Optional[int] = None,
        wait_for_selector: Optional[str] = None,
    ) -> Optional[int]:
        """Load ``url`` and wait for late content to render.

        After the ready condition is reached the page either waits for
        ``wait_for_selector`` or sleeps the settle delay. The delay is a
        heuristic; pages that render slower than it yield partial data.

        Returns:
            Optional[int]: The HTTP status of the main response, if any.

        Raises:
            NavigationTimeout: When the ready condition or selector is not
                reached within ``timeout_ms``.
            ExtractionRuntimeError: For any other navigation failure.
        """
        timeout = _parse_positive_int(timeout_ms) or config.NAVIGATION_TIMEOUT_MS
        ready = Config.normalize_wait_until(wait_until) or config.NAVIGATION_WAIT_UNTIL
        settle = config.SETTLE_DELAY_MS if settle_ms is None else settle_ms
        page = session.page

        try:
            navigation_start = time.perf_counter()
            response = await page.goto(url, wait_until=ready, timeout=timeout)
            navigation_duration = int((time.perf_counter() - navigation_start) * 1000)
            status_code = response.status if response else None
            logger.info(
                "Navigated to %s (status=%s, wait_until=%s, duration=%sms)", url, status_code, ready, navigation_duration
            )

            if wait_for_selector:
                await page.wait_for_selector(wait_for_selector, timeout=timeout)
            elif settle > 0:
                await page.wait_for_timeout(settle)
        except PlaywrightTimeoutError as exc:
            logger.warning("Navigation to %s timed out after %sms", url, timeout)
            raise NavigationTimeout(f"Navigation to {url} timed out after {timeout}ms") from exc
        except PlaywrightError as exc:
            logger.warning("Navigation to %s failed", url, exc_info=exc)
            raise ExtractionRuntimeError(str(exc)) from exc

        return status_code


page_manager = PageManager()
