"""Listing and generic extraction endpoints."""

import logging

from fastapi import APIRouter, Depends

from renderscrape.config import config
from renderscrape.dependencies import get_page_manager, require_url
from renderscrape.schemas import ErrorResponse, GenericScrapeRequest, GenericScrapeResponse, ScrapeRequest, ScrapeResponse
from renderscrape.services.extraction import build_plan, extract, parse_document
from renderscrape.services.harvest import harvest_images, harvest_links, page_info
from renderscrape.services.listing import extract_listing
from renderscrape.services.page_manager import PageManager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Scraping"], responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})


@router.post("/scrape", response_model=ScrapeResponse)
async def scrape_listing(request: ScrapeRequest, manager: PageManager = Depends(get_page_manager)):
    """Extract app metadata from a Google Play listing page.

    Args:
        request: Body carrying the listing URL.
        manager: Page manager that owns the shared browser.

    Returns:
        ScrapeResponse: The listing record with unknown fields omitted.

    Raises:
        InputError: When the URL is missing.
        ScrapeError: When the page cannot be loaded or read.
    """
    url = require_url(request.url)

    async with manager.session() as session:
        await manager.navigate(session, url, settle_ms=config.LISTING_SETTLE_DELAY_MS)
        html = await session.page.content()
        final_url = session.page.url

    record = extract_listing(parse_document(html), base_url=final_url)
    logger.info("Scraped listing %s (name=%r)", url, record.name)
    return ScrapeResponse(data=record.to_payload())


@router.post("/scrape-generic", response_model=GenericScrapeResponse)
async def scrape_generic(request: GenericScrapeRequest, manager: PageManager = Depends(get_page_manager)):
    """Extract fields from any page using caller-supplied selectors.

    Without ``selectors`` the response carries the page title, final URL and
    the beginning of the rendered HTML instead.

    Args:
        request: URL, optional selector plan, wait options and harvest flags.
        manager: Page manager that owns the shared browser.

    Returns:
        GenericScrapeResponse: Extracted data plus the requested URL.
    """
    url = require_url(request.url)
    plan = build_plan(request.selectors) if request.selectors is not None else None
    viewport = request.viewport.model_dump() if request.viewport else None

    async with manager.session(viewport=viewport) as session:
        await manager.navigate(
            session,
            url,
            timeout_ms=request.timeout,
            wait_until=request.wait_for,
            wait_for_selector=request.wait_for_selector,
        )
        page = session.page

        if plan is not None:
            data = extract(parse_document(await page.content()), plan)
        else:
            data = await page_info(page, config.MAX_HTML_CHARS)

        if request.extract_images:
            data["images"] = await harvest_images(page)
        if request.extract_links:
            data["links"] = await harvest_links(page)

    return GenericScrapeResponse(data=data, url=url)
