"""
Page actions that need a live Playwright page.

Each action wraps a pure predicate from ``dom`` in a bounded wait or a
click/type policy. Expected outcomes such as "element not found" or
"timed out" come back as False, 0 or an empty list; only programming errors
propagate.
"""

import asyncio
import logging
from typing import Callable, Dict, Iterable, List, Optional

from bs4 import BeautifulSoup
from playwright.async_api import ElementHandle, Page, Error as PlaywrightError  # type: ignore

from ..constants import EXPAND_MARKER, TIMEOUTS, TYPING_DELAY_MS
from .dom import extract_question_batch, parse_document
from .text_processor import TextProcessor

_logger = logging.getLogger(__name__)

SCROLL_SCRIPT = "(ratio) => window.scrollBy(0, Math.floor(window.innerHeight * ratio))"


async def pause(ms: int) -> None:
    await asyncio.sleep(ms / 1000)


async def snapshot(page: Page) -> BeautifulSoup:
    """Parse the current document; an unreadable page yields an empty document."""
    try:
        html = await page.content()
    except PlaywrightError as e:
        _logger.debug(f"Could not read page content: {e}")
        html = ""
    return parse_document(html)


async def focus_and_type(page: Page, selector: str, text: str,
                         visible_timeout_ms: int = None,
                         delay_ms: int = TYPING_DELAY_MS,
                         logger: Optional[logging.Logger] = None) -> bool:
    """
    Focus the element and type text key by key.

    Waits up to ``visible_timeout_ms`` for the element to become visible and
    returns False if it never does.
    """
    log = logger or _logger
    timeout = visible_timeout_ms or TIMEOUTS['element_visible']
    try:
        handle = await page.wait_for_selector(selector, state='visible', timeout=timeout)
    except PlaywrightError:
        log.debug(f"Element not visible for typing: {selector}")
        return False
    if handle is None:
        return False

    await handle.focus()
    await page.keyboard.type(text, delay=delay_ms)
    return True


async def click_with_fallback(handle: ElementHandle, timeout_ms: int = None,
                              logger: Optional[logging.Logger] = None) -> bool:
    """Native click first, then a synthesized bubbling click event."""
    log = logger or _logger
    try:
        await handle.click(timeout=timeout_ms or TIMEOUTS['click'])
        return True
    except PlaywrightError as e:
        log.debug(f"Native click failed, dispatching click event instead: {e}")

    try:
        await handle.dispatch_event('click')
        return True
    except PlaywrightError as e:
        log.debug(f"Synthesized click failed: {e}")
        return False


async def click_first_matching(page: Page, selector: str, match: Callable[[str], bool],
                               timeout_ms: int = None,
                               logger: Optional[logging.Logger] = None) -> bool:
    """
    Click the first element whose normalized text satisfies ``match``.

    The element is scrolled into view before clicking. Returns False when
    nothing matches or no click path worked.
    """
    log = logger or _logger
    for handle in await page.query_selector_all(selector):
        try:
            text = await handle.inner_text()
        except PlaywrightError:
            continue
        if not match(TextProcessor.normalize_text(text)):
            continue

        try:
            await handle.scroll_into_view_if_needed(timeout=timeout_ms or TIMEOUTS['click'])
        except PlaywrightError as e:
            log.debug(f"scroll_into_view_if_needed failed (continuing): {e}")
        return await click_with_fallback(handle, timeout_ms, logger=log)
    return False


def _descendants(selector: str) -> str:
    return ", ".join(f"{part.strip()} *" for part in selector.split(",") if part.strip())


def _marker_in_children(inner_html: str, marker: str) -> bool:
    children = parse_document(inner_html).find_all(True)
    return any(TextProcessor.normalize_text(child.get_text()) == marker for child in children)


async def expand_truncated_text(page: Page, card_selector: str, marker: str = EXPAND_MARKER,
                                logger: Optional[logging.Logger] = None) -> int:
    """
    Click every "(more)" style toggle under the question cards.

    Only the innermost element carrying the marker is clicked so a wrapped
    toggle is not fired twice; child markup without the marker, such as an
    icon, does not disqualify a toggle. Returns the number of clicks.
    """
    log = logger or _logger
    candidates = _descendants(card_selector)

    doc = await snapshot(page)
    if not any(TextProcessor.normalize_text(el.get_text()) == marker for el in doc.select(candidates)):
        return 0

    clicked = 0
    for handle in await page.query_selector_all(candidates):
        try:
            if TextProcessor.normalize_text(await handle.text_content()) != marker:
                continue
            if _marker_in_children(await handle.inner_html(), marker):
                continue
            await handle.dispatch_event('click')
            clicked += 1
        except PlaywrightError as e:
            log.debug(f"Could not expand toggle: {e}")
    if clicked:
        log.debug(f"Expanded {clicked} truncated card(s)")
    return clicked


async def extract_batch(page: Page, item_selector: str,
                        title_fallbacks: Iterable[str] = ()) -> List[Dict[str, str]]:
    """Complete ``{question, url}`` pairs currently rendered on the page."""
    doc = await snapshot(page)
    return extract_question_batch(item_selector, doc, title_fallbacks, base_url=page.url)


async def scroll_viewport(page: Page, ratio: float) -> None:
    await page.evaluate(SCROLL_SCRIPT, ratio)


async def count_elements(page: Page, selector: str) -> int:
    return len(await page.query_selector_all(selector))


async def press_keys(page: Page, *keys: str, logger: Optional[logging.Logger] = None) -> bool:
    """Press keys in order; False if the keyboard could not be driven."""
    log = logger or _logger
    try:
        for key in keys:
            await page.keyboard.press(key)
        return True
    except PlaywrightError as e:
        log.debug(f"Key press failed: {e}")
        return False


async def navigate(page: Page, url: str, timeout_ms: int = None,
                   logger: Optional[logging.Logger] = None) -> bool:
    """Explicit navigation; False instead of raising on a failed load."""
    log = logger or _logger
    try:
        await page.goto(url, wait_until='domcontentloaded', timeout=timeout_ms or TIMEOUTS['redirect'])
        return True
    except PlaywrightError as e:
        log.warning(f"Navigation to {url} failed: {e}")
        return False
