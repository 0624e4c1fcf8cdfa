"""Shared fixtures."""

import pytest
from fakes import FakeBrowser, FakeLauncher, FakePage

from renderscrape.services.page_manager import PageManager


@pytest.fixture
def page() -> FakePage:
    return FakePage()


@pytest.fixture
def browser(page: FakePage) -> FakeBrowser:
    return FakeBrowser(lambda: page)


@pytest.fixture
def launcher(browser: FakeBrowser) -> FakeLauncher:
    return FakeLauncher(browser)


@pytest.fixture
def manager(launcher: FakeLauncher) -> PageManager:
    return PageManager(launcher=launcher)
