"""Tests for environment-driven settings and the engine config value."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from friendcheck.checker.models import DEFAULT_PAGES, CheckerConfig
from friendcheck.config import Settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "FRIENDCHECK_LINK_PAGE",
        "FRIENDCHECK_BACKLINKS",
        "FRIENDCHECK_OLD_LINKS",
        "FRIENDCHECK_PAGES",
        "FRIENDCHECK_IGNORE",
        "FRIENDCHECK_CONCURRENCY",
        "FRIENDCHECK_TIMEOUT",
        "FRIENDCHECK_FOLLOW_REDIRECTS",
        "FRIENDCHECK_EXPORT_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    s = Settings()
    assert s.link_page == ""
    assert s.back_links == ()
    assert s.ignore == ("hexo.io",)
    assert s.pages == DEFAULT_PAGES
    assert s.concurrency == 100
    assert s.request_timeout == 12.0
    assert s.follow_redirects is False
    assert s.export_path is None


def test_reads_environment(clean_env):
    clean_env.setenv("FRIENDCHECK_LINK_PAGE", "https://owner.example/link")
    clean_env.setenv("FRIENDCHECK_BACKLINKS", "owner.example, www.owner.example")
    clean_env.setenv("FRIENDCHECK_OLD_LINKS", "old.example")
    clean_env.setenv("FRIENDCHECK_PAGES", "links,friends,")
    clean_env.setenv("FRIENDCHECK_CONCURRENCY", "8")
    clean_env.setenv("FRIENDCHECK_TIMEOUT", "3.5")
    clean_env.setenv("FRIENDCHECK_FOLLOW_REDIRECTS", "yes")
    clean_env.setenv("FRIENDCHECK_EXPORT_PATH", "public/friend.json")

    s = Settings()

    assert s.link_page == "https://owner.example/link"
    assert s.back_links == ("owner.example", "www.owner.example")
    assert s.old_links == ("old.example",)
    assert s.pages == ("links", "friends")
    assert s.concurrency == 8
    assert s.request_timeout == 3.5
    assert s.follow_redirects is True
    assert s.export_path == Path("public/friend.json")


def test_checker_config_from_settings(clean_env):
    clean_env.setenv("FRIENDCHECK_BACKLINKS", "owner.example")
    config = Settings().checker_config()

    assert isinstance(config, CheckerConfig)
    assert config.back_links == ("owner.example",)
    assert config.pages == DEFAULT_PAGES
    assert config.timeout == 12.0


def test_checker_config_requires_backlinks(clean_env):
    with pytest.raises(ValueError, match="backlink"):
        Settings().checker_config()


class TestCheckerConfig:
    def test_is_immutable(self) -> None:
        config = CheckerConfig(back_links=("owner.example",))
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.concurrency = 5  # type: ignore[misc]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"pages": ()},
            {"concurrency": 0},
            {"timeout": 0},
            {"back_links": ("",)},
            {"back_links": ("owner.example", "  ")},
            {"old_links": ("",)},
            {"pages": ("links", "")},
        ],
    )
    def test_rejects_unusable_values(self, kwargs) -> None:
        with pytest.raises(ValueError):
            CheckerConfig(**{"back_links": ("owner.example",), **kwargs})

    def test_default_probe_order_ends_with_common_names(self) -> None:
        assert DEFAULT_PAGES[0] == "2bfriends"
        assert DEFAULT_PAGES[-1] == "links"
