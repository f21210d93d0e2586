import asyncio
import logging
from typing import Any, Dict, List, Optional, Union

from playwright.async_api import Page, Error as PlaywrightError  # type: ignore

from ..constants import KEYWORDS
from ..utils.actions import (
    click_first_matching, click_with_fallback, count_elements, expand_truncated_text,
    extract_batch, focus_and_type, navigate, pause, press_keys, scroll_viewport, snapshot
)
from ..utils.dom import (
    count_matches, has_login_form, has_questions, has_search_form, is_submit_enabled,
    resolve_suggestion_href
)
from ..utils.text_processor import TextProcessor
from ..utils.waits import wait_for_condition, wait_for_redirect_and_ready
from .base import BaseSiteAdapter, Capability, CollectionState, QuestionRecord
from .config import section
from .driver import DriverMode, RouteKey, load_target, policy_for
from .routes import SiteRoutes, create_quora_routes
from .selectors import QUORA_SELECTORS, SelectorSet


class QuoraAdapter(BaseSiteAdapter):
    """
    Quora adapter: log in, pick a topic from the search suggestions and page
    through the topic's lazily loaded question list.

    All waits are bounded by ``settings['timeouts']``; the pagination loop is
    paced by ``settings['collection']``.
    """

    name = 'quora'
    capabilities = frozenset({Capability.LOGIN, Capability.SEARCH, Capability.COLLECT_QUESTIONS})

    def __init__(self, email: str, password: str, driver: Union[str, DriverMode] = DriverMode.LOCAL,
                 settings: Optional[Dict[str, Any]] = None, logger: Optional[logging.Logger] = None,
                 selectors: SelectorSet = QUORA_SELECTORS, routes: Optional[SiteRoutes] = None):
        super().__init__(logger)
        self.email = email
        self.password = password
        self.driver = DriverMode.parse(driver)
        self.policy = policy_for(self.driver)
        self.selectors = selectors
        self.routes = routes or create_quora_routes(self.driver)
        self.timeouts = section(settings, 'timeouts')
        self.collection = section(settings, 'collection')
        self.typing_delay = section(settings, 'typing')['delay_ms']
        self.keywords = list((settings or {}).get('keywords', KEYWORDS))
        self.logger.debug(f"[{self.name}] selectors v{selectors.version}, driver={self.driver.value}")

    async def _login_form_present(self, page: Page) -> bool:
        s = self.selectors
        return has_login_form(s.email_input, s.password_input, s.submit_control, await snapshot(page))

    async def _click_submit(self, page: Page) -> bool:
        handle = await page.query_selector(self.selectors.submit_control)
        if handle is None:
            return False
        return await click_with_fallback(handle, self.timeouts['click'], logger=self.logger)

    async def ensure_logged_in(self, page: Page) -> bool:
        """
        Make sure the session is authenticated.

        Returns:
            True if already logged in or the login went through, False otherwise
        """
        s = self.selectors
        t = self.timeouts
        await load_target(page, self.routes.resolve(RouteKey.LOGIN), timeout=t['page_load'])

        if not await self._login_form_present(page):
            self.logger.info(f"[{self.name}] already logged in")
            return True

        inputs_ready = await wait_for_condition(
            page,
            lambda doc: count_matches(s.email_input, doc) > 0 and count_matches(s.password_input, doc) > 0,
            t['login_inputs'], t['poll_interval']
        )
        if not inputs_ready:
            self.logger.error(f"[{self.name}] login inputs not found (timeout)")
            return False

        for selector, value in ((s.email_input, self.email), (s.password_input, self.password)):
            if not await focus_and_type(page, selector, value, t['element_visible'], self.typing_delay,
                                        logger=self.logger):
                self.logger.error(f"[{self.name}] login input not visible: {selector}")
                return False

        enabled = await wait_for_condition(
            page, lambda doc: is_submit_enabled(s.submit_control, doc),
            t['submit_enabled'], t['poll_interval']
        )
        if not enabled:
            self.logger.error(f"[{self.name}] submit button did not enable (timeout)")
            return False

        start_url = page.url
        tasks = [self._click_submit(page)]
        if self.policy.await_login_navigation:
            tasks.append(page.wait_for_url(lambda url: url != start_url, wait_until='networkidle',
                                           timeout=t['post_login_navigation']))
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        clicked = outcomes[0]
        if isinstance(clicked, BaseException):
            raise clicked
        if not clicked:
            self.logger.warning(f"[{self.name}] submit click did not go through")
        if len(outcomes) > 1 and isinstance(outcomes[1], PlaywrightError):
            self.logger.warning(f"[{self.name}] navigation after login did not occur (continuing)")

        if not self.policy.verify_login:
            self.logger.warning(f"[{self.name}] {self.driver.value} driver: skipping post-login DOM check")
            return True

        if await self._login_form_present(page):
            self.logger.error(f"[{self.name}] login form still present after submit")
            return False
        self.logger.info(f"[{self.name}] logged in")
        return True

    async def search(self, page: Page, topic: str) -> bool:
        """
        Search for a topic and open its page.

        Best-effort: only a missing search form or search input returns
        False. A topic that cannot be selected is logged and still returns
        True, the collection step then simply finds nothing.
        """
        s = self.selectors
        t = self.timeouts
        want = TextProcessor.topic_label(topic)

        if self.policy.load_route_pages:
            await load_target(page, self.routes.resolve(RouteKey.SEARCH), timeout=t['page_load'])

        if not await wait_for_condition(page, lambda doc: has_search_form(s.search_input, doc),
                                        t['search_form'], t['poll_interval']):
            self.logger.error(f"[{self.name}] search form not found")
            return False

        if not await focus_and_type(page, s.search_input, topic, t['element_visible'], self.typing_delay,
                                    logger=self.logger):
            self.logger.error(f"[{self.name}] search input handle missing")
            return False

        if not await wait_for_condition(page, lambda doc: count_matches(s.suggestion_item, doc) > 0,
                                        t['suggestions'], t['poll_interval']):
            self.logger.warning(f'[{self.name}] no suggestions appeared for "{topic}"')
            return True

        start_url = page.url
        clicked = await click_first_matching(page, s.suggestion_item, lambda text: text == want,
                                             t['click'], logger=self.logger)
        if clicked:
            self.logger.info(f'[{self.name}] clicked suggestion "{want}"')
        else:
            self.logger.debug(f'[{self.name}] no exact suggestion for "{want}", accepting highlighted entry')
            clicked = await press_keys(page, 'ArrowDown', 'Enter', logger=self.logger)

        if not clicked:
            href = resolve_suggestion_href(s.suggestion_item, want, await snapshot(page), base_url=page.url)
            if href:
                clicked = await navigate(page, href, t['redirect'], logger=self.logger)

        if clicked:
            await wait_for_redirect_and_ready(page, t['redirect'], ready_state_timeout_ms=t['ready_state'],
                                              start_url=start_url, logger=self.logger)
        else:
            self.logger.warning(f'[{self.name}] Topic suggestion not found for "{topic}" (want label: "{want}")')

        return True

    async def collect_questions(self, page: Page, topic: str, limit: int) -> List[QuestionRecord]:
        """
        Collect up to ``limit`` unique questions from the current topic page.

        Scrolling triggers lazy loading. The loop stops at the limit, when
        no question element is left, or after ``max_idle_rounds`` consecutive
        rounds without a new question.
        """
        s = self.selectors
        t = self.timeouts
        c = self.collection
        state = CollectionState(limit=max(0, limit))
        if state.full:
            return []

        if self.policy.load_route_pages:
            await load_target(page, self.routes.resolve(RouteKey.QUESTIONS, {'seed': topic}),
                              timeout=t['page_load'])

        if not await wait_for_condition(page, lambda doc: has_questions(s.question_item, doc),
                                        t['question_list'], t['poll_interval']):
            self.logger.error(f"[{self.name}] question list not found")
            return []

        idle_rounds = 0
        while not state.full:
            if await expand_truncated_text(page, s.question_card, logger=self.logger):
                await pause(c['expand_settle_ms'])

            for item in await extract_batch(page, s.question_item, s.title_fallbacks):
                if state.full:
                    break
                state.add(QuestionRecord(
                    question=item['question'],
                    url=item['url'],
                    matched_keywords=TextProcessor.merge_keywords(topic, item['question'], self.keywords)
                ))

            if state.full:
                break

            if len(state.results) == state.last_count:
                idle_rounds += 1
                await scroll_viewport(page, c['scroll_ratio'])
                await pause(c['no_progress_pause_ms'])
                rendered = await count_elements(page, s.question_item)
                if rendered == 0 or idle_rounds >= c['max_idle_rounds']:
                    self.logger.info(f"[{self.name}] question list exhausted after {len(state.results)} item(s)")
                    break
            else:
                state.last_count = len(state.results)
                idle_rounds = 0
                self.logger.debug(f"[{self.name}] collected {state.last_count}/{limit}")

            await scroll_viewport(page, c['scroll_ratio'])
            await pause(c['scroll_pause_ms'])

        return state.results[:limit]
