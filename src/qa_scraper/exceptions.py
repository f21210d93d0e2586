"""
Exception hierarchy for the Q&A topic scraper.

Only conditions that make continuing meaningless are raised: missing
credentials, a failed mandatory login, unknown sites or routes, and
capability misuse. Everything else is reported as a False/empty result.
"""


class ScraperError(Exception):
    """Base class for all scraper errors."""


class ConfigError(ScraperError):
    """The settings file is missing or malformed."""


class MissingCredentialError(ScraperError):
    """A required secret (API key, account credential) is not set."""


class LoginFailedError(ScraperError):
    """The adapter could not establish an authenticated session."""

    def __init__(self, site: str):
        super().__init__(f"[{site}] login failed")
        self.site = site


class UnknownSiteError(ScraperError):
    """No adapter is registered under the requested site name."""

    def __init__(self, site: str):
        super().__init__(f"Unknown site: {site}")
        self.site = site


class UnknownRouteError(ScraperError):
    """The route table has no entry for the requested key."""

    def __init__(self, key: str):
        super().__init__(f"Unknown route key: {key}")
        self.key = key


class CapabilityError(ScraperError):
    """An operation was requested that the adapter does not declare."""

    def __init__(self, site: str, missing):
        names = ", ".join(str(getattr(cap, 'value', cap)) for cap in missing)
        super().__init__(f"[{site}] missing capabilities: {names}")
        self.site = site
        self.missing = list(missing)


class StorageError(ScraperError):
    """Results could not be serialized to disk."""
