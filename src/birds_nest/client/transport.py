"""Single request/response exchange with the LCIA service over HTTPS."""

import logging
import warnings
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Protocol

import requests
from urllib3.exceptions import InsecureRequestWarning

logger = logging.getLogger(__name__)

DEFAULT_READ_TIMEOUT = 600.0


def json_headers(bearer_key: Optional[str] = None) -> Dict[str, str]:
    """Headers shared by every call to the service."""
    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
    }
    if bearer_key is not None:
        headers["Authorization"] = f"Bearer {bearer_key}"
    return headers


@dataclass(frozen=True)
class RawResponse:
    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str = ""


class Transport(Protocol):
    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[str] = None,
    ) -> RawResponse: ...


class HttpTransport:
    """Blocking HTTPS transport built on a ``requests.Session``.

    Redirects are never followed: the submit endpoint answers with a 3xx
    whose ``Location`` header is the poll path, and that answer must reach
    the caller untouched. There is no retry or backoff at this layer.

    Certificate verification is off by default because the configured
    endpoint is trusted implicitly. This is a known weakening; pass
    ``verify_tls=True`` to turn verification back on.
    """

    def __init__(
        self,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        verify_tls: bool = False,
        session: Optional[requests.Session] = None,
    ) -> None:
        if read_timeout <= 0:
            raise ValueError(f"read_timeout must be > 0, got {read_timeout}")
        self.read_timeout = read_timeout
        self.verify_tls = verify_tls
        self._session = session or requests.Session()
        if not verify_tls:
            logger.warning("TLS certificate verification is disabled for LCIA service requests")

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[str] = None,
    ) -> RawResponse:
        with warnings.catch_warnings():
            if not self.verify_tls:
                warnings.simplefilter("ignore", InsecureRequestWarning)
            response = self._session.request(
                method,
                url,
                headers=dict(headers),
                data=body.encode("utf-8") if body is not None else None,
                timeout=self.read_timeout,
                verify=self.verify_tls,
                allow_redirects=False,
            )
        logger.debug("%s %s -> %d", method, url, response.status_code)
        return RawResponse(
            status=response.status_code,
            headers=dict(response.headers),
            body=response.text,
        )

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
