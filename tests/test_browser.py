from __future__ import annotations

import logging

import pytest

from pyquerystate.browser import MemoryBrowser, SearchParams
from pyquerystate.exceptions import BrowserUnavailableError
from pyquerystate.models.location import HistoryEntry


def test_search_params_reads_like_urlsearchparams() -> None:
    params = SearchParams("?a=1&b=x+y&a=2&empty=")

    assert params.get("a") == "1"
    assert params.get_all("a") == ["1", "2"]
    assert params.get("b") == "x y"
    assert params.get("empty") == ""
    assert params.get("missing") is None
    assert params.has("empty")
    assert list(params.entries()) == [("a", "1"), ("b", "x y"), ("a", "2"), ("empty", "")]


def test_search_params_set_replaces_first_and_drops_duplicates() -> None:
    params = SearchParams("a=1&b=2&a=3")

    params.set("a", "9")
    assert params.to_string() == "a=9&b=2"

    params.set("c", "new")
    assert params.to_string() == "a=9&b=2&c=new"

    params.delete("b")
    assert str(params) == "a=9&c=new"


def test_search_params_escapes_percent_signs_once_more() -> None:
    params = SearchParams()
    params.set("q", "a%20b")

    assert params.to_string() == "q=a%2520b"
    assert SearchParams(params.to_string()).get("q") == "a%20b"


def test_push_state_adds_entry_without_popstate() -> None:
    browser = MemoryBrowser("/search?q=a")
    fired: list[HistoryEntry] = []
    browser.add_popstate_listener(fired.append)

    browser.push_state({}, "/search?q=b")

    assert fired == []
    assert browser.length == 2
    assert browser.location.pathname == "/search"
    assert browser.location.search == "q=b"


def test_back_and_forward_fire_popstate() -> None:
    browser = MemoryBrowser("/")
    fired: list[str] = []
    browser.add_popstate_listener(lambda entry: fired.append(entry.location.href))

    browser.push_state({}, "/?q=1")
    browser.push_state({}, "/?q=2")
    browser.back()
    browser.back()
    browser.back()
    browser.forward()

    assert fired == ["/?q=1", "/", "/?q=1"]
    assert browser.location.href == "/?q=1"


def test_push_after_back_discards_forward_entries() -> None:
    browser = MemoryBrowser("/")
    browser.push_state({}, "/?q=1")
    browser.push_state({}, "/?q=2")
    browser.back()

    browser.push_state({}, "/?q=3")
    browser.forward()

    assert browser.length == 3
    assert browser.location.href == "/?q=3"


def test_replace_state_keeps_history_length() -> None:
    browser = MemoryBrowser("/page")
    browser.replace_state({"k": 1}, "?q=1")

    assert browser.length == 1
    assert browser.location.href == "/page?q=1"
    assert browser.entries[0].state == {"k": 1}


def test_failing_popstate_listener_is_logged_and_others_run(caplog: pytest.LogCaptureFixture) -> None:
    browser = MemoryBrowser("/")
    seen: list[str] = []

    def _broken(entry: HistoryEntry) -> None:
        raise ValueError("bad listener")

    browser.add_popstate_listener(_broken)
    browser.add_popstate_listener(lambda entry: seen.append(entry.location.href))
    browser.push_state({}, "/?x=1")

    with caplog.at_level(logging.WARNING, logger="pyquerystate.browser"):
        browser.back()

    assert seen == ["/"]
    assert any("popstate listener failed" in record.getMessage() for record in caplog.records)


def test_listeners_are_deduplicated_and_removable() -> None:
    browser = MemoryBrowser("/")
    fired: list[HistoryEntry] = []

    browser.add_popstate_listener(fired.append)
    browser.add_popstate_listener(fired.append)
    assert browser.listener_count == 1

    browser.remove_popstate_listener(fired.append)
    browser.remove_popstate_listener(fired.append)
    assert browser.listener_count == 0


def test_detached_browser_raises_unavailable() -> None:
    browser = MemoryBrowser("/?q=1")
    browser.detach()

    with pytest.raises(BrowserUnavailableError):
        _ = browser.location
    with pytest.raises(BrowserUnavailableError):
        browser.push_state({}, "/?q=2")

    browser.attach()
    assert browser.search_params().get("q") == "1"
