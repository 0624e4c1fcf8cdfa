"""Tests for the HTTP routes, run against a fake browser."""

import base64

import pytest
from fakes import FakeBrowser, FakeLauncher, FakePage, load_fixture
from fastapi.testclient import TestClient
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from renderscrape.config import config
from renderscrape.dependencies import get_page_manager
from renderscrape.main import app
from renderscrape.services.page_manager import PageManager


@pytest.fixture
def fake_page():
    return FakePage()


@pytest.fixture
def fake_browser(fake_page):
    return FakeBrowser(lambda: fake_page)


@pytest.fixture
def client(fake_browser):
    manager = PageManager(launcher=FakeLauncher(fake_browser))
    app.dependency_overrides[get_page_manager] = lambda: manager
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_before_first_request(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["browser"] == "not initialized"
    assert "POST /scrape - Scrape Play Store apps" in data["endpoints"]


def test_health_after_first_request(client):
    client.post("/screenshot", json={"url": "https://example.com"})
    assert client.get("/health").json()["browser"] == "initialized"


@pytest.mark.parametrize("path", ["/scrape", "/scrape-generic", "/screenshot", "/pdf"])
def test_missing_url_is_bad_request(client, fake_browser, path):
    response = client.post(path, json={})
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "URL is required"}
    assert fake_browser.contexts == []


def test_scrape_listing(client, fake_page, fake_browser):
    fake_page.html = load_fixture("listing.html")

    response = client.post("/scrape", json={"url": "https://play.google.com/store/apps/details?id=notes"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["name"] == "Super Notes"
    assert body["data"]["play_store_downloads"] == 10_000_000
    assert body["data"]["price"] == 0
    assert len(body["data"]["screenshot_urls"]) == 2
    assert fake_page.timeouts == [config.LISTING_SETTLE_DELAY_MS]
    assert fake_browser.contexts[0].close_calls == 1


def test_scrape_omits_missing_fields(client, fake_page):
    fake_page.html = "<html><body><p>Not a listing</p></body></html>"

    data = client.post("/scrape", json={"url": "https://example.com"}).json()["data"]

    assert data == {"screenshot_urls": [], "price": 0}


def test_scrape_navigation_timeout_releases_page(client, fake_page, fake_browser):
    fake_page.goto_error = PlaywrightTimeoutError("Timeout 30000ms exceeded.")

    response = client.post("/scrape", json={"url": "https://slow.example.com"})

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert "timed out" in body["error"]
    assert fake_browser.contexts[0].close_calls == 1


def test_generic_with_selectors(client, fake_page):
    fake_page.html = (
        "<html><body><h1> Title </h1><a class='buy' href='/buy'>Buy</a>"
        "<div id='desc'><b>Bold</b> text</div></body></html>"
    )

    response = client.post(
        "/scrape-generic",
        json={
            "url": "https://shop.example.com/item",
            "selectors": {
                "title": "h1",
                "price": [".price", ".cost"],
                "link": {"selector": "a.buy", "attribute": "href"},
                "desc": {"selector": "#desc", "html": True},
            },
            "waitFor": "domcontentloaded",
            "timeout": 5000,
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body == {
        "success": True,
        "data": {"title": "Title", "link": "/buy", "desc": "<b>Bold</b> text"},
        "url": "https://shop.example.com/item",
    }
    assert fake_page.goto_calls == [("https://shop.example.com/item", "domcontentloaded", 5000)]


def test_generic_without_selectors_returns_page_info(client, fake_page):
    fake_page.html = "<html><body>" + "x" * (config.MAX_HTML_CHARS * 2) + "</body></html>"

    body = client.post("/scrape-generic", json={"url": "https://example.com/"}).json()

    assert body["data"]["title"] == "Example"
    assert body["data"]["url"] == "https://example.com/"
    assert len(body["data"]["html"]) == config.MAX_HTML_CHARS


def test_generic_harvests_images_and_links(client, fake_page):
    fake_page.evaluate_results = [
        [
            {"src": "https://example.com/a.png", "alt": "A", "width": 10, "height": 20},
            {"src": "data:image/png;base64,AAAA", "alt": "", "width": 1, "height": 1},
        ],
        [
            {"href": "/about", "text": "About", "title": ""},
            {"href": "javascript:void(0)", "text": "Menu", "title": ""},
        ],
    ]

    body = client.post(
        "/scrape-generic",
        json={"url": "https://example.com", "selectors": {}, "extractImages": True, "extractLinks": True},
    ).json()

    assert body["data"] == {
        "images": [{"src": "https://example.com/a.png", "alt": "A", "width": 10, "height": 20}],
        "links": [{"href": "/about", "text": "About", "title": ""}],
    }


def test_generic_wait_for_selector(client, fake_page):
    client.post("/scrape-generic", json={"url": "https://example.com", "waitForSelector": "#ready", "timeout": 7000})

    assert fake_page.selector_waits == [("#ready", 7000)]
    assert fake_page.timeouts == []


def test_generic_custom_viewport(client, fake_browser):
    client.post("/scrape-generic", json={"url": "https://example.com", "viewport": {"width": 390, "height": 844}})

    assert fake_browser.contexts[0].options["viewport"] == {"width": 390, "height": 844}


def test_generic_malformed_selectors(client, fake_browser):
    response = client.post("/scrape-generic", json={"url": "https://example.com", "selectors": {"a": 5}})

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert fake_browser.contexts == []


def test_screenshot(client, fake_page, fake_browser):
    response = client.post(
        "/screenshot", json={"url": "https://example.com", "fullPage": True, "width": 1280, "height": 720}
    )

    assert response.status_code == 200
    body = response.json()
    prefix = "data:image/png;base64,"
    assert body["screenshot"].startswith(prefix)
    assert base64.b64decode(body["screenshot"][len(prefix) :]) == b"\x89PNG-fake"
    assert fake_page.screenshot_calls == [{"full_page": True, "type": "png"}]
    assert fake_browser.contexts[0].options["viewport"] == {"width": 1280, "height": 720}


def test_pdf(client, fake_page):
    response = client.post("/pdf", json={"url": "https://example.com", "format": "Letter"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["content-disposition"] == 'attachment; filename="page.pdf"'
    assert response.content == b"%PDF-1.4 fake"
    assert fake_page.pdf_calls == [{"format": "Letter", "print_background": True}]


def test_pdf_unknown_format(client, fake_browser):
    response = client.post("/pdf", json={"url": "https://example.com", "format": "Napkin"})

    assert response.status_code == 400
    assert fake_browser.contexts == []


def test_browser_unavailable_is_server_error(fake_browser):
    manager = PageManager(launcher=FakeLauncher(fake_browser, error=RuntimeError("chromium missing")))
    app.dependency_overrides[get_page_manager] = lambda: manager
    try:
        response = TestClient(app).post("/scrape", json={"url": "https://example.com"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json()["success"] is False
    assert "chromium missing" in response.json()["error"]
