"""
Route tables: (driver mode, route key) -> Target.

Remote sessions reach the live site; the local driver is served packaged
HTML fixtures so the whole workflow can run offline.
"""

import re
from pathlib import Path
from typing import Callable, Dict, Optional, Union
from urllib.parse import quote

from ..exceptions import UnknownRouteError
from .driver import DriverMode, HtmlTarget, RouteKey, Target, UrlTarget

FIXTURES_DIR = Path(__file__).resolve().parent.parent / "fixtures"

Params = Optional[Dict[str, str]]
RouteFn = Callable[[Params], Target]


def slug(text: str) -> str:
    return re.sub(r'\s+', '-', text.strip())


class SiteRoutes:
    """Resolves route keys for one site under one driver mode."""

    def __init__(self, table: Dict[RouteKey, RouteFn]):
        self._table = table

    def resolve(self, key: Union[str, RouteKey], params: Params = None) -> Target:
        try:
            route_key = RouteKey(key)
        except ValueError:
            raise UnknownRouteError(str(key))
        fn = self._table.get(route_key)
        if fn is None:
            raise UnknownRouteError(route_key.value)
        return fn(params)


QUORA_BASE_URL = "https://www.quora.com"
QUORA_FIXTURES = FIXTURES_DIR / "quora"


def _quora_topic_url(params: Params) -> Target:
    seed = (params or {}).get('seed', 'Growth Hacking')
    return UrlTarget(f"{QUORA_BASE_URL}/topic/{quote(slug(seed))}")


QUORA_ROUTES: Dict[DriverMode, Dict[RouteKey, RouteFn]] = {
    DriverMode.HYPER: {
        RouteKey.LOGIN: lambda p: UrlTarget(f"{QUORA_BASE_URL}/login"),
        RouteKey.SEARCH: lambda p: UrlTarget(QUORA_BASE_URL),
        RouteKey.QUESTIONS: _quora_topic_url,
    },
    DriverMode.LOCAL: {
        RouteKey.LOGIN: lambda p: HtmlTarget(str(QUORA_FIXTURES / "login_form_enabled.html")),
        RouteKey.SEARCH: lambda p: HtmlTarget(str(QUORA_FIXTURES / "search_form.html")),
        RouteKey.QUESTIONS: lambda p: HtmlTarget(str(QUORA_FIXTURES / "questions.html")),
    },
}


def create_quora_routes(driver: Union[str, DriverMode]) -> SiteRoutes:
    return SiteRoutes(QUORA_ROUTES[DriverMode.parse(driver)])
