"""Per-calculation session state for the LCIA client."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from urllib.parse import urlsplit

# Placeholder shipped as the default key in older measure templates.
PLACEHOLDER_API_KEY = "[Contact NIST for custom key]"
TEST_API_KEY = "test_key"


def normalize_api_key(key: str) -> str:
    """Swap the documentation placeholder for the service's test key."""
    if key == PLACEHOLDER_API_KEY:
        return TEST_API_KEY
    return key


@dataclass(frozen=True)
class SessionState:
    """Endpoints, credentials and payload of one calculation.

    Only ``bearer_key`` ever changes, and only through :meth:`with_bearer_key`,
    which hands back a new state. ``request_body`` is fixed for the lifetime of
    the calculation so a refresh never alters what gets submitted.
    """

    submit_url: str
    refresh_url: str
    bearer_key: str = field(repr=False)
    refresh_key: str = field(repr=False)
    request_body: str = field(repr=False)

    def with_bearer_key(self, new_key: str) -> "SessionState":
        return replace(self, bearer_key=new_key)

    @property
    def submit_host(self) -> str:
        return urlsplit(self.submit_url).netloc

    def poll_url(self, location: str) -> str:
        """Absolute URL of a poll location returned by the submit redirect."""
        if urlsplit(location).scheme:
            return location
        if not location.startswith("/"):
            location = "/" + location
        return f"https://{self.submit_host}{location}"
