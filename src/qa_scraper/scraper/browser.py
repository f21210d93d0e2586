"""
Browser session lifecycle.

Two modes share one interface: a Chromium launched locally by Playwright,
or a hosted Hyperbrowser session reached over a CDP websocket. The session
is an async context manager and releases the browser, the hosted session
and Playwright itself independently on every exit path.
"""

import logging
import os
from typing import Any, Dict, Optional, Union

import aiohttp  # type: ignore
from playwright.async_api import Browser, Page, Playwright, async_playwright  # type: ignore

from ..constants import HYPERBROWSER
from ..exceptions import ConfigError, MissingCredentialError
from .driver import DriverMode


def build_proxy(host: Optional[str], port: Optional[Union[str, int]],
                username: Optional[str] = None, password: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Proxy settings, or None unless both host and port are set.

    Raises:
        ConfigError: If the port is not a number in 1-65535
    """
    if not host or not port:
        return None
    try:
        port_number = int(port)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid proxy port: {port!r}")
    if not 0 < port_number < 65536:
        raise ConfigError(f"Invalid proxy port: {port!r}")
    proxy = {'host': host, 'port': port_number}
    if username and password:
        proxy['username'] = username
        proxy['password'] = password
    return proxy


class HyperbrowserClient:
    """Minimal client for the Hyperbrowser session REST API."""

    def __init__(self, api_key: str, api_base: str = HYPERBROWSER['api_base'],
                 timeout: int = HYPERBROWSER['request_timeout']):
        self.api_key = api_key
        self.api_base = api_base.rstrip('/')
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    def _headers(self) -> Dict[str, str]:
        return {'x-api-key': self.api_key, 'Content-Type': 'application/json'}

    async def create_session(self, params: Dict[str, Any]) -> Dict[str, Any]:
        async with aiohttp.ClientSession(timeout=self.timeout) as http:
            async with http.post(f"{self.api_base}/session", json=params, headers=self._headers()) as response:
                response.raise_for_status()
                return await response.json()

    async def stop_session(self, session_id: str) -> None:
        async with aiohttp.ClientSession(timeout=self.timeout) as http:
            async with http.put(f"{self.api_base}/session/{session_id}/stop", headers=self._headers()) as response:
                response.raise_for_status()


class BrowserSession:
    def __init__(self, driver: Union[str, DriverMode], headless: bool = False,
                 proxy: Optional[Dict[str, Any]] = None, api_key: Optional[str] = None,
                 logger: Optional[logging.Logger] = None):
        self.driver = DriverMode.parse(driver)
        self.headless = headless
        self.proxy = proxy
        self.api_key = api_key
        self.logger = logger or logging.getLogger(__name__)
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.remote_session: Optional[Dict[str, Any]] = None
        self.client: Optional[HyperbrowserClient] = None

    def _playwright_proxy(self) -> Optional[Dict[str, str]]:
        if not self.proxy:
            return None
        settings = {'server': f"http://{self.proxy['host']}:{self.proxy['port']}"}
        if self.proxy.get('username'):
            settings['username'] = self.proxy['username']
            settings['password'] = self.proxy.get('password', '')
        return settings

    def _session_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            'mode': 'headless' if self.headless else 'headed',
            'useStealth': True,
            'enableWebRecording': True,
        }
        if self.proxy:
            params['useProxy'] = True
            params['proxyServer'] = f"{self.proxy['host']}:{self.proxy['port']}"
            if self.proxy.get('username'):
                params['proxyServerUsername'] = self.proxy['username']
                params['proxyServerPassword'] = self.proxy.get('password', '')
        return params

    async def start(self) -> Browser:
        """
        Launch or connect the browser.

        Raises:
            MissingCredentialError: In hyper mode without HYPERBROWSER_API_KEY
        """
        if self.driver is DriverMode.HYPER:
            api_key = self.api_key or os.getenv('HYPERBROWSER_API_KEY')
            if not api_key:
                self.logger.error("HYPERBROWSER_API_KEY is not set")
                raise MissingCredentialError("HYPERBROWSER_API_KEY is required for hyper driver")
            self.client = HyperbrowserClient(api_key)

        self.playwright = await async_playwright().start()

        if self.driver is DriverMode.LOCAL:
            self.browser = await self.playwright.chromium.launch(
                headless=self.headless,
                proxy=self._playwright_proxy()
            )
            self.logger.info(f"Local browser launched (headless={self.headless})")
            return self.browser

        self.remote_session = await self.client.create_session(self._session_params())
        live_url = self.remote_session.get('liveUrl')
        if live_url:
            self.logger.info(f"Hyperbrowser live view URL: {live_url}")
        self.browser = await self.playwright.chromium.connect_over_cdp(self.remote_session['wsEndpoint'])
        self.logger.info(f"Connected to Hyperbrowser session {self.remote_session.get('id')}")
        return self.browser

    async def page(self) -> Page:
        """The first open page, or a new one."""
        contexts = self.browser.contexts
        if contexts and contexts[0].pages:
            return contexts[0].pages[0]
        context = contexts[0] if contexts else await self.browser.new_context(no_viewport=True)
        return await context.new_page()

    async def stop(self) -> None:
        """Release everything; each step is attempted even if an earlier one failed."""
        if self.browser:
            try:
                await self.browser.close()
                self.logger.info("Browser closed successfully")
            except Exception as e:
                self.logger.warning(f"Failed to close browser: {e}")
            self.browser = None

        if self.remote_session and self.client:
            try:
                await self.client.stop_session(self.remote_session['id'])
                self.logger.info(f"Hyperbrowser session {self.remote_session['id']} stopped")
            except Exception as e:
                self.logger.warning(f"Failed to stop HB session: {e}")
            self.remote_session = None

        if self.playwright:
            try:
                await self.playwright.stop()
            except Exception as e:
                self.logger.warning(f"Failed to stop Playwright: {e}")
            self.playwright = None

    async def __aenter__(self) -> 'BrowserSession':
        try:
            await self.start()
        except BaseException:
            await self.stop()
            raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()
