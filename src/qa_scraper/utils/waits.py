"""
Bounded waits against a live page.

Third-party page readiness can only be approximated, so these helpers
layer several best-effort signals and never raise on a timeout.
"""

import asyncio
import logging
from typing import Callable, Optional, Sequence

from bs4 import BeautifulSoup
from playwright.async_api import Page, Error as PlaywrightError  # type: ignore

from ..constants import TIMEOUTS
from .actions import snapshot

_logger = logging.getLogger(__name__)

READY_STATE_SCRIPT = "() => document.readyState === 'complete'"


async def wait_for_condition(page: Page, predicate: Callable[[BeautifulSoup], bool],
                             timeout_ms: int, poll_interval_ms: int = None) -> bool:
    """
    Poll a pure predicate against snapshots of the page.

    Returns True on the first snapshot satisfying it and False once
    ``timeout_ms`` has elapsed. The predicate is always checked at least once.
    """
    interval = (poll_interval_ms or TIMEOUTS['poll_interval']) / 1000
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_ms / 1000

    while True:
        if predicate(await snapshot(page)):
            return True
        remaining = deadline - loop.time()
        if remaining <= 0:
            return False
        await asyncio.sleep(min(interval, remaining))


async def _first_success(*aws) -> bool:
    """Run awaitables together; True as soon as one finishes without error."""
    pending = {asyncio.ensure_future(aw) for aw in aws}
    try:
        while pending:
            done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                if task.exception() is None:
                    return True
        return False
    finally:
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)


async def wait_for_redirect_and_ready(page: Page, timeout_ms: int = None,
                                      ready_selectors: Optional[Sequence[str]] = None,
                                      ready_state_timeout_ms: int = None,
                                      start_url: Optional[str] = None,
                                      logger: Optional[logging.Logger] = None) -> None:
    """
    Wait for a navigation to settle.

    1. Race "URL differs from the starting URL" against "main frame
       navigated"; either one satisfies the wait.
    2. If ready selectors are given, wait for the first that becomes
       visible, each with a share of the budget, and stop there.
    3. Otherwise wait for ``document.readyState == 'complete'``.

    ``start_url`` is the URL before the triggering action; it defaults to
    the current URL, which misses a navigation that already finished.

    Every step is best-effort: failures are logged and tolerated.
    """
    log = logger or _logger
    timeout = timeout_ms or TIMEOUTS['redirect']
    start_url = start_url or page.url

    navigated = await _first_success(
        page.wait_for_url(lambda url: url != start_url, wait_until='domcontentloaded', timeout=timeout),
        page.wait_for_event('framenavigated', predicate=lambda frame: frame == page.main_frame,
                            timeout=timeout),
    )
    if not navigated:
        log.debug(f"No navigation observed from {start_url} within {timeout}ms (continuing)")

    if ready_selectors:
        share = max(1000, timeout // len(ready_selectors))
        for selector in ready_selectors:
            try:
                await page.wait_for_selector(selector, state='visible', timeout=share)
                return
            except PlaywrightError:
                log.warning(f'Selector "{selector}" not found (continuing)')

    try:
        await page.wait_for_function(READY_STATE_SCRIPT,
                                     timeout=ready_state_timeout_ms or TIMEOUTS['ready_state'])
    except PlaywrightError:
        log.warning("readyState did not reach 'complete' (continuing)")
