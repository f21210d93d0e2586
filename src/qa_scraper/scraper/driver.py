"""
Driver modes, navigation targets and per-mode behaviour policies.

The driver mode only decides which targets are reachable and which policy
the adapter follows; adapter logic itself never branches on the mode.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Union

from playwright.async_api import Page, TimeoutError as PlaywrightTimeoutError  # type: ignore
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type  # type: ignore

from ..constants import TIMEOUTS

logger = logging.getLogger(__name__)


class DriverMode(str, Enum):
    LOCAL = 'local'
    HYPER = 'hyper'

    @classmethod
    def parse(cls, value: Union[str, 'DriverMode']) -> 'DriverMode':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown driver: {value!r} (expected one of {[m.value for m in cls]})")


class RouteKey(str, Enum):
    LOGIN = 'LOGIN'
    SEARCH = 'SEARCH'
    QUESTIONS = 'QUESTIONS'


@dataclass(frozen=True)
class UrlTarget:
    """Live navigation to a URL."""
    url: str
    kind: str = 'url'


@dataclass(frozen=True)
class HtmlTarget:
    """Static content injected from a local HTML file."""
    path: str
    kind: str = 'html'


Target = Union[UrlTarget, HtmlTarget]


@dataclass(frozen=True)
class DriverPolicy:
    """
    Behaviour switches fixed once per driver mode.

    Static fixtures cannot simulate a server-side session change, so the
    local mode skips post-submit verification and navigation waits. It also
    cannot follow links between fixtures, so each step loads its own route
    page instead.
    """
    verify_login: bool
    await_login_navigation: bool
    load_route_pages: bool


DRIVER_POLICIES = {
    DriverMode.LOCAL: DriverPolicy(verify_login=False, await_login_navigation=False, load_route_pages=True),
    DriverMode.HYPER: DriverPolicy(verify_login=True, await_login_navigation=True, load_route_pages=False),
}


def policy_for(mode: Union[str, DriverMode]) -> DriverPolicy:
    return DRIVER_POLICIES[DriverMode.parse(mode)]


@retry(
    stop=stop_after_attempt(2),
    wait=wait_exponential(multiplier=1, min=2, max=8),
    retry=retry_if_exception_type((PlaywrightTimeoutError,)),
    reraise=True
)
async def _goto(page: Page, url: str, timeout: int) -> None:
    await page.goto(url, wait_until='domcontentloaded', timeout=timeout)


async def load_target(page: Page, target: Target, timeout: int = None) -> None:
    """Navigate to a URL target or inject the markup of an HTML target."""
    timeout = timeout or TIMEOUTS['page_load']
    if isinstance(target, UrlTarget):
        logger.debug(f"Navigating to {target.url}")
        await _goto(page, target.url, timeout)
    else:
        logger.debug(f"Loading local content from {target.path}")
        html = Path(target.path).read_text(encoding='utf-8')
        await page.set_content(html, wait_until='domcontentloaded', timeout=timeout)
