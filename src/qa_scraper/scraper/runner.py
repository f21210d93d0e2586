import logging
from typing import List, Optional

from playwright.async_api import Page  # type: ignore

from ..exceptions import LoginFailedError
from .base import BaseSiteAdapter, Capability, QuestionRecord

_logger = logging.getLogger(__name__)


async def run_workflow(adapter: BaseSiteAdapter, page: Page, topic: str, limit: int,
                       logger: Optional[logging.Logger] = None) -> Optional[List[QuestionRecord]]:
    """
    Run login -> search -> collect for whatever the adapter declares.

    Returns:
        The collected questions, or None when the adapter cannot collect
        (as opposed to [] when it collected nothing)

    Raises:
        LoginFailedError: If the adapter declares login and it fails
    """
    log = logger or _logger

    if adapter.has_capability(Capability.LOGIN):
        if not await adapter.operation(Capability.LOGIN)(page):
            log.error(f"[{adapter.name}] login failed")
            raise LoginFailedError(adapter.name)

    if adapter.has_capability(Capability.SEARCH):
        found = await adapter.operation(Capability.SEARCH)(page, topic)
        if not found:
            log.warning(f'[{adapter.name}] search for "{topic}" failed (continuing)')

    if adapter.has_capability(Capability.COLLECT_QUESTIONS):
        results = await adapter.operation(Capability.COLLECT_QUESTIONS)(page, topic, limit)
        log.info(f"[{adapter.name}] collected {len(results)} question(s) for \"{topic}\"")
        return results

    log.info(f"[{adapter.name}] adapter does not collect questions")
    return None
