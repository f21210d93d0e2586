import logging
import os
from typing import Any, Callable, Dict, Optional, Union

from ..exceptions import UnknownSiteError
from .base import BaseSiteAdapter
from .driver import DriverMode
from .quora import QuoraAdapter
from .selectors import SELECTOR_SETS


def _create_quora(driver: DriverMode, settings: Optional[Dict[str, Any]],
                  logger: Optional[logging.Logger]) -> BaseSiteAdapter:
    return QuoraAdapter(
        email=os.getenv('QUORA_EMAIL', ''),
        password=os.getenv('QUORA_PASS', ''),
        driver=driver,
        settings=settings,
        logger=logger,
        selectors=SELECTOR_SETS['quora']
    )


ADAPTERS: Dict[str, Callable[..., BaseSiteAdapter]] = {
    'quora': _create_quora,
}


def get_adapter(name: str, driver: Union[str, DriverMode], settings: Optional[Dict[str, Any]] = None,
                logger: Optional[logging.Logger] = None) -> BaseSiteAdapter:
    """Build the adapter registered under ``name``; UnknownSiteError otherwise."""
    factory = ADAPTERS.get((name or '').strip().lower())
    if factory is None:
        raise UnknownSiteError(name)
    return factory(DriverMode.parse(driver), settings, logger)
