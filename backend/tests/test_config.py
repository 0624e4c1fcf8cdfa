"""Tests for configuration loading."""

import pytest

from renderscrape.config import Config, load_config


@pytest.mark.parametrize(
    "value, expected",
    [
        ("networkidle2", "networkidle"),
        ("networkidle0", "networkidle"),
        ("DOMContentLoaded", "domcontentloaded"),
        ("load", "load"),
        ("eventually", None),
        (None, None),
    ],
)
def test_normalize_wait_until(value, expected):
    assert Config.normalize_wait_until(value) == expected


def test_defaults(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    cfg = Config({})
    assert cfg.PORT == 3000
    assert cfg.NAVIGATION_TIMEOUT_MS == 30000
    assert cfg.NAVIGATION_WAIT_UNTIL == "networkidle"
    assert cfg.SETTLE_DELAY_MS == 2000
    assert cfg.LISTING_SETTLE_DELAY_MS == 3000
    assert (cfg.VIEWPORT_WIDTH, cfg.VIEWPORT_HEIGHT) == (1920, 1080)
    assert "--no-sandbox" in cfg.BROWSER_LAUNCH_ARGS
    assert cfg.MAX_HTML_CHARS == 10000


def test_load_from_file(tmp_path, monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    path = tmp_path / "service.toml"
    path.write_text(
        '[server]\nport = 8080\n\n[navigation]\nwait_until = "networkidle2"\nsettle_delay_ms = 500\n\n'
        "[browser.viewport]\nwidth = 1280\nheight = 800\n",
        encoding="utf-8",
    )

    cfg = load_config(path)

    assert cfg.PORT == 8080
    assert cfg.NAVIGATION_WAIT_UNTIL == "networkidle"
    assert cfg.SETTLE_DELAY_MS == 500
    assert (cfg.VIEWPORT_WIDTH, cfg.VIEWPORT_HEIGHT) == (1280, 800)


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("BROWSER_HEADLESS", "false")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    cfg = Config({"server": {"port": 3000}})

    assert cfg.PORT == 9000
    assert cfg.BROWSER_HEADLESS is False
    assert cfg.LOG_LEVEL == "DEBUG"


def test_missing_explicit_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.toml")
