"""
End-to-end adapter tests against the packaged fixtures.

Local driver runs serve fixtures through set_content; hyper driver runs
serve the same markup from fake URLs through goto.
"""

import asyncio
import time
from pathlib import Path

import pytest
from playwright.async_api import Error as PlaywrightError

from qa_scraper.exceptions import LoginFailedError
from qa_scraper.scraper.driver import DriverMode, HtmlTarget, RouteKey
from qa_scraper.scraper.quora import QuoraAdapter
from qa_scraper.scraper.runner import run_workflow
from qa_scraper.scraper.routes import QUORA_FIXTURES, SiteRoutes, create_quora_routes
from qa_scraper.scraper.selectors import QUORA_SELECTORS as S
from tests.conftest import FakePage, append_items, fixture_html


def local_routes(login="login_form_enabled.html", search="search_form.html", questions="questions.html"):
    return SiteRoutes({
        RouteKey.LOGIN: lambda p: HtmlTarget(str(QUORA_FIXTURES / login)),
        RouteKey.SEARCH: lambda p: HtmlTarget(str(QUORA_FIXTURES / search)),
        RouteKey.QUESTIONS: lambda p: HtmlTarget(str(QUORA_FIXTURES / questions)),
    })


def make_adapter(settings, driver=DriverMode.LOCAL, routes=None):
    return QuoraAdapter("me@example.com", "secret", driver=driver, settings=settings, routes=routes)


# Login

def test_login_skipped_when_no_form(fast_settings):
    adapter = make_adapter(fast_settings, routes=local_routes(login="no_login_form.html"))
    page = FakePage()

    assert asyncio.run(adapter.ensure_logged_in(page)) is True
    assert page.typed == []
    assert page.clicked == []


def test_login_times_out_on_disabled_submit(fast_settings):
    adapter = make_adapter(fast_settings, routes=local_routes(login="login_form.html"))
    page = FakePage()

    assert asyncio.run(adapter.ensure_logged_in(page)) is False
    assert page.typed == ["me@example.com", "secret"]
    assert page.clicked == []


def test_local_login_types_and_submits(fast_settings):
    adapter = make_adapter(fast_settings)
    page = FakePage()

    assert asyncio.run(adapter.ensure_logged_in(page)) is True
    assert page.typed == ["me@example.com", "secret"]
    assert len(page.clicked) == 1
    assert page.clicked[0].name == "button"


def test_hyper_login_verifies_form_is_gone(fast_settings):
    adapter = make_adapter(fast_settings, driver=DriverMode.HYPER)
    page = FakePage(routes={"https://www.quora.com/login": fixture_html("login_form_enabled.html")})

    def submit(p, tag):
        p.load(fixture_html("no_login_form.html"), url="https://www.quora.com/")

    page.on_click = submit

    assert asyncio.run(adapter.ensure_logged_in(page)) is True
    assert page.visited == ["https://www.quora.com/login"]


def test_hyper_login_fails_when_form_remains(fast_settings):
    adapter = make_adapter(fast_settings, driver=DriverMode.HYPER)
    page = FakePage(routes={"https://www.quora.com/login": fixture_html("login_form_enabled.html")})

    assert asyncio.run(adapter.ensure_logged_in(page)) is False
    assert len(page.clicked) == 1


# Search

def test_search_clicks_exact_topic_suggestion(fast_settings):
    adapter = make_adapter(fast_settings)
    page = FakePage(url="https://www.quora.com/")

    assert asyncio.run(adapter.search(page, "Growth Hacking")) is True
    assert page.typed == ["Growth Hacking"]
    assert len(page.clicked) == 1
    assert "Topic: Growth" in page.clicked[0].get_text()
    assert page.pressed == []


def test_search_falls_back_to_keyboard(fast_settings):
    adapter = make_adapter(fast_settings)
    page = FakePage(url="https://www.quora.com/")

    assert asyncio.run(adapter.search(page, "Startup Funding")) is True
    assert page.clicked == []
    assert page.pressed == ['ArrowDown', 'Enter']


def test_search_falls_back_to_suggestion_href(fast_settings):
    adapter = make_adapter(fast_settings)
    page = FakePage(url="https://www.quora.com/")
    page.click_fails = True
    page.dispatch_fails = True

    async def failing_press(key):
        raise PlaywrightError("no suggestion highlighted")

    # typing still works, accepting a suggestion with the keyboard does not
    page.keyboard.press = failing_press

    assert asyncio.run(adapter.search(page, "Growth Hacking")) is True
    assert page.visited == ["https://www.quora.com/#topic-growth-hacking"]


def test_search_href_fallback_does_not_wait_out_redirect_timeout(fast_settings):
    fast_settings['timeouts']['redirect'] = 3000
    adapter = make_adapter(fast_settings)
    page = FakePage(url="https://www.quora.com/")
    page.click_fails = True
    page.dispatch_fails = True

    async def failing_press(key):
        raise PlaywrightError("no suggestion highlighted")

    page.keyboard.press = failing_press

    started = time.monotonic()
    assert asyncio.run(adapter.search(page, "Growth Hacking")) is True
    assert time.monotonic() - started < 1


def test_search_without_form_returns_false(fast_settings):
    adapter = make_adapter(fast_settings, routes=local_routes(search="no_login_form.html"))
    page = FakePage()

    assert asyncio.run(adapter.search(page, "Growth Hacking")) is False
    assert page.typed == []


def test_search_without_suggestions_is_soft(fast_settings):
    page = FakePage(
        '<div class="q-box"><input type="text" enterkeyhint="search"></div>',
        url="https://www.quora.com/"
    )
    adapter = make_adapter(fast_settings, driver=DriverMode.HYPER)

    assert asyncio.run(adapter.search(page, "Growth Hacking")) is True
    assert page.clicked == []
    assert page.pressed == []


# Collection

def test_collect_returns_unique_questions_and_exhausts(fast_settings):
    adapter = make_adapter(fast_settings)
    page = FakePage()

    results = asyncio.run(adapter.collect_questions(page, "Growth Hacking", 10))

    assert [r.question for r in results] == [
        "What is growth hacking and how does it work?",
        "How do early-stage startups find funding?",
        "Which Artificial Intelligence Startups are growing fastest?",
    ]
    assert len({r.url for r in results}) == 3
    assert results[0].matched_keywords == ["Growth Hacking"]
    assert results[1].matched_keywords == ["Growth Hacking", "funding"]
    assert results[2].matched_keywords == ["Growth Hacking", "artificial intelligence startups"]
    # toggles are expanded every round, and the loop ends on idle rounds
    assert len(page.dispatched) >= 2
    assert len(page.scrolls) >= fast_settings['collection']['max_idle_rounds']


def test_collect_respects_limit(fast_settings):
    adapter = make_adapter(fast_settings)
    results = asyncio.run(adapter.collect_questions(FakePage(), "Growth Hacking", 2))
    assert len(results) == 2


def test_collect_zero_limit_does_not_touch_page(fast_settings):
    adapter = make_adapter(fast_settings)
    page = FakePage()
    assert asyncio.run(adapter.collect_questions(page, "Growth Hacking", 0)) == []
    assert page.navigations == 0


def test_collect_returns_empty_when_no_questions_appear(fast_settings):
    adapter = make_adapter(fast_settings, routes=local_routes(questions="no_login_form.html"))
    page = FakePage()
    assert asyncio.run(adapter.collect_questions(page, "Growth Hacking", 5)) == []
    assert page.scrolls == []


def test_collect_follows_lazy_loading(fast_settings):
    html = fixture_html("questions.html")
    page = FakePage(routes={"https://www.quora.com/topic/Growth-Hacking": html})
    page.on_scroll = lambda p, n: append_items(p, 2) if n <= 2 else None
    adapter = make_adapter(fast_settings, driver=DriverMode.HYPER)

    async def run():
        await page.goto("https://www.quora.com/topic/Growth-Hacking")
        return await adapter.collect_questions(page, "Growth Hacking", 6)

    results = asyncio.run(run())
    assert len(results) == 6
    assert len({r.url for r in results}) == 6
    assert results[-1].question.startswith("Lazy question")


def test_default_routes_are_packaged_fixtures():
    routes = create_quora_routes(DriverMode.LOCAL)
    for key in RouteKey:
        target = routes.resolve(key)
        assert isinstance(target, HtmlTarget)
        assert Path(target.path).exists()


def test_selectors_match_fixtures():
    from qa_scraper.utils.dom import count_matches, parse_document
    doc = parse_document(fixture_html("questions.html"))
    assert count_matches(S.question_card, doc) == 2


def test_workflow_aborts_when_submit_never_enables(fast_settings):
    adapter = make_adapter(fast_settings, routes=local_routes(login="login_form.html"))
    page = FakePage()

    with pytest.raises(LoginFailedError, match=r"\[quora\] login failed"):
        asyncio.run(run_workflow(adapter, page, "Growth Hacking", 5))
    assert page.clicked == []
    assert page.scrolls == []
