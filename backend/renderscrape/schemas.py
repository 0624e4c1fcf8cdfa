"""Pydantic schemas."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# ==================== Requests ====================


class ScrapeRequest(BaseModel):
    """Request body for store listing extraction."""

    url: Optional[str] = None


class Viewport(BaseModel):
    """Browser viewport size in CSS pixels."""

    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)


class GenericScrapeRequest(BaseModel):
    """Request body for selector-driven extraction from any page."""

    model_config = ConfigDict(populate_by_name=True)

    url: Optional[str] = None
    viewport: Optional[Viewport] = None
    selectors: Optional[Dict[str, Any]] = Field(None, description="Field name to selector definition.")
    wait_for: Optional[str] = Field(None, alias="waitFor", description="Navigation ready condition.")
    timeout: int = Field(30000, gt=0, description="Navigation timeout in milliseconds.")
    wait_for_selector: Optional[str] = Field(None, alias="waitForSelector")
    extract_images: bool = Field(False, alias="extractImages")
    extract_links: bool = Field(False, alias="extractLinks")


class ScreenshotRequest(BaseModel):
    """Request body for a PNG screenshot."""

    model_config = ConfigDict(populate_by_name=True)

    url: Optional[str] = None
    full_page: bool = Field(False, alias="fullPage")
    width: int = Field(1920, gt=0)
    height: int = Field(1080, gt=0)


class PdfRequest(BaseModel):
    """Request body for a PDF render."""

    url: Optional[str] = None
    format: str = "A4"


# ==================== Results ====================


class ListingRecord(BaseModel):
    """Metadata read from a store listing page.

    Unset optional fields are dropped when the record is serialised.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    icon_url: Optional[str] = None
    screenshot_urls: List[str] = Field(default_factory=list)
    rating: Optional[float] = None
    price: float = 0
    publisher: Optional[str] = None
    play_store_downloads: Optional[int] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ScrapeResponse(BaseModel):
    """Successful listing extraction."""

    success: bool = True
    data: Dict[str, Any]


class GenericScrapeResponse(BaseModel):
    """Successful generic extraction."""

    success: bool = True
    data: Dict[str, Any]
    url: str


class ScreenshotResponse(BaseModel):
    """Screenshot encoded as a PNG data URI."""

    success: bool = True
    screenshot: str
    url: str


class ErrorResponse(BaseModel):
    """Body returned for every failed request."""

    success: bool = False
    error: str


class HealthResponse(BaseModel):
    """Browser status and the list of available endpoints."""

    status: str
    browser: str
    endpoints: List[str]
