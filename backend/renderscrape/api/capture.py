"""Screenshot and PDF endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from renderscrape.dependencies import get_page_manager, require_url
from renderscrape.schemas import ErrorResponse, PdfRequest, ScreenshotRequest, ScreenshotResponse
from renderscrape.services.capture import capture_screenshot, render_pdf, validate_pdf_format
from renderscrape.services.page_manager import PageManager

router = APIRouter(tags=["Capture"], responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})


@router.post("/screenshot", response_model=ScreenshotResponse)
async def screenshot(request: ScreenshotRequest, manager: PageManager = Depends(get_page_manager)):
    """Return a PNG screenshot of the page as a data URI.

    Args:
        request: URL, viewport size and whether to capture the full page.
        manager: Page manager that owns the shared browser.

    Returns:
        ScreenshotResponse: The encoded screenshot and the requested URL.
    """
    url = require_url(request.url)

    async with manager.session(viewport={"width": request.width, "height": request.height}) as session:
        await manager.navigate(session, url)
        image = await capture_screenshot(session.page, full_page=request.full_page)

    return ScreenshotResponse(screenshot=image, url=url)


@router.post("/pdf")
async def pdf(request: PdfRequest, manager: PageManager = Depends(get_page_manager)):
    """Render the page to PDF and return it as a download.

    Args:
        request: URL and paper format.
        manager: Page manager that owns the shared browser.

    Returns:
        Response: Raw PDF bytes with attachment headers.
    """
    url = require_url(request.url)
    paper_format = validate_pdf_format(request.format)

    async with manager.session() as session:
        await manager.navigate(session, url)
        pdf_bytes = await render_pdf(session.page, paper_format)

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="page.pdf"'},
    )
