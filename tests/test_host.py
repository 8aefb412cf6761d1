from __future__ import annotations

from typing import Any

from aiohttp.test_utils import make_mocked_request

from pyquerystate.browser import MemoryBrowser
from pyquerystate.host import QueryStateHost, default_host, release_query_state, use_query_state
from pyquerystate.params import params_from_request
from pyquerystate.state.store import SignalStore


def test_use_query_state_returns_value_and_setter() -> None:
    browser = MemoryBrowser("/")
    with QueryStateHost(store=SignalStore(), browser=browser) as host:
        value, set_value = host.use_query_state("q", None, "")
        assert value == ""

        set_value("hello")

        assert browser.location.href == "/?q=hello"
        later_value, _ = host.use_query_state("q", None, "")
        assert later_value == "hello"


def test_setter_accepts_updater_function() -> None:
    browser = MemoryBrowser("/?n=3")
    host = QueryStateHost(store=SignalStore(), browser=browser)

    value, set_value = host.use_query_state("n", None, 0)
    assert value == 3

    assert set_value(lambda n: n * 2) == 6
    assert browser.location.href == "/?n=6"
    host.close()


def test_close_releases_every_binding() -> None:
    store = SignalStore()
    browser = MemoryBrowser("/")
    host = QueryStateHost(store=store, browser=browser)

    host.bind("a", None, "")
    host.bind("b", None, "")
    assert browser.listener_count == 2

    host.close()

    assert browser.listener_count == 0
    assert host.bindings == []
    assert store.get("a") is not None


def test_unbind_releases_single_binding() -> None:
    browser = MemoryBrowser("/")
    host = QueryStateHost(store=SignalStore(), browser=browser)
    kept = host.bind("q", None, "")
    dropped = host.bind("q", None, "")

    host.unbind(dropped)

    assert host.bindings == [kept]
    assert browser.listener_count == 1
    host.close()


def test_on_change_hook_receives_updates() -> None:
    browser = MemoryBrowser("/")
    renders: list[Any] = []
    with QueryStateHost(store=SignalStore(), browser=browser) as host:
        _, set_value = host.use_query_state("q", None, "", on_change=renders.append)

        set_value("x")
        browser.back()

    assert renders == ["x", ""]


def test_server_request_params_seed_a_browserless_host() -> None:
    request = make_mocked_request("GET", "/list?page=4")
    with QueryStateHost(store=SignalStore()) as host:
        value, set_value = use_query_state("page", params_from_request(request), 1, host=host)

        assert value == 4
        assert set_value(5) == 5
        assert host.store.get("page").value == 5


def test_module_level_entry_point_uses_default_host() -> None:
    value, _ = use_query_state("module-level-entry", {"module-level-entry": "true"}, False)

    assert value is True
    assert any(binding.name == "module-level-entry" for binding in default_host().bindings)
    default_host().close()


def test_repeated_calls_reuse_the_live_binding() -> None:
    browser = MemoryBrowser("/")
    host = QueryStateHost(store=SignalStore(), browser=browser)

    for _ in range(100):
        value, set_value = host.use_query_state("q", None, "")

    assert len(host.bindings) == 1
    assert host.store.get("q").subscriber_count == 1
    assert browser.listener_count == 1

    set_value("x")
    value, _ = host.use_query_state("q", None, "")
    assert value == "x"
    host.close()


def test_release_detaches_the_binding_for_a_name() -> None:
    browser = MemoryBrowser("/")
    renders: list[Any] = []
    host = QueryStateHost(store=SignalStore(), browser=browser)
    host.use_query_state("q", None, "", on_change=renders.append)
    host.use_query_state("q", None, "")
    assert len(host.bindings) == 2

    host.release("q", on_change=renders.append)
    host.release("q", on_change=renders.append)

    assert len(host.bindings) == 1
    assert browser.listener_count == 1

    host.use_query_state("q", None, "", on_change=renders.append)
    assert len(host.bindings) == 2
    host.close()
    assert browser.listener_count == 0


def test_module_level_release_uses_default_host() -> None:
    use_query_state("module-level-release", None, "")
    use_query_state("module-level-release", None, "")
    assert sum(b.name == "module-level-release" for b in default_host().bindings) == 1

    release_query_state("module-level-release")

    assert not any(b.name == "module-level-release" for b in default_host().bindings)
