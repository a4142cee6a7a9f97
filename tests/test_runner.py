"""End-to-end tests for a full check run (pool + prober + report).

All HTTP traffic is mocked with ``respx``.
"""

from __future__ import annotations

import httpx
import respx

from friendcheck.checker.models import CheckerConfig, Link, ProgressEvent, ResultType
from friendcheck.checker.runner import check_link, check_links

_CONFIG = CheckerConfig(
    pages=("links", "friends"),
    back_links=("owner.example",),
    old_links=("old-owner.example",),
    concurrency=2,
)

_LINKS = [
    Link(name="Good", url="https://good.example"),
    Link(name="Stale", url="https://stale.example/"),
    Link(name="Down", url="https://down.example/"),
    Link(name="Quiet", url="https://quiet.example/"),
]


def _mock_sites(router=respx) -> None:
    router.get("https://good.example/links").mock(
        return_value=httpx.Response(200, text='<a href="https://owner.example">me</a>')
    )
    router.get("https://stale.example/links").mock(return_value=httpx.Response(404))
    router.get("https://stale.example/friends").mock(
        return_value=httpx.Response(200, text='<a href="https://old-owner.example">me</a>')
    )
    router.get("https://down.example/links").mock(side_effect=httpx.ConnectError)
    router.get("https://down.example/friends").mock(side_effect=httpx.ConnectError)
    router.get("https://quiet.example/links").mock(return_value=httpx.Response(200, text="hi"))
    router.get("https://quiet.example/friends").mock(return_value=httpx.Response(200, text="hi"))


class TestCheckLinks:
    async def test_classifies_every_link(self) -> None:
        with respx.mock:
            _mock_sites()
            report = await check_links(_LINKS, _CONFIG)

        assert len(report) == len(_LINKS)
        assert [r.link.name for r in report.success] == ["Good"]
        assert report.success[0].page == "https://good.example/links"
        assert [r.link.name for r in report.old] == ["Stale"]
        assert report.old[0].detected_old_domain == "old-owner.example"
        assert [r.link.name for r in report.fail] == ["Down"]
        assert list(report.fail[0].error_codes) == ["ECONNREFUSED"]
        assert [r.link.name for r in report.not_found] == ["Quiet"]
        assert report.update_time.endswith("Z")

    async def test_progress_accounting_is_exact(self) -> None:
        events: list[ProgressEvent] = []
        with respx.mock:
            _mock_sites()
            await check_links(_LINKS, _CONFIG, on_progress=events.append)

        total = len(_LINKS) * len(_CONFIG.pages)
        assert len(events) == total
        assert [e.probes_done for e in events] == list(range(1, total + 1))
        assert all(e.probes_total == total for e in events)
        assert all(e.total_links == len(_LINKS) for e in events)
        assert events[-1].percent == 100
        # The Good link short-circuits on its first page: one padded event.
        assert sum(1 for e in events if e.url == "") == 1

    async def test_reruns_classify_identically(self) -> None:
        with respx.mock:
            _mock_sites()
            first = await check_links(_LINKS, _CONFIG)
            second = await check_links(_LINKS, _CONFIG)

        def by_name(report):
            return {r.link.name: r.type for t in ResultType for r in report.category(t)}

        assert by_name(first) == by_name(second)

    async def test_uses_injected_client_and_leaves_it_open(self) -> None:
        with respx.mock(assert_all_called=False) as router:
            _mock_sites(router)
            async with httpx.AsyncClient() as client:
                report = await check_links(_LINKS[:1], _CONFIG, client=client)
                assert not client.is_closed

        assert len(report.success) == 1

    async def test_empty_link_list(self) -> None:
        report = await check_links([], _CONFIG)
        assert len(report) == 0
        assert report.update_time


async def test_check_link_single() -> None:
    with respx.mock(assert_all_called=False) as router:
        _mock_sites(router)
        result = await check_link(_LINKS[3], _CONFIG)

    assert result.type is ResultType.NOT_FOUND
    assert result.attempted_url == "https://quiet.example/friends"
