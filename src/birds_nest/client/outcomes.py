"""Classification of raw service responses into a closed set of outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional


class OutcomeKind(str, Enum):
    REDIRECT = "redirect"
    UNAUTHORIZED = "unauthorized"
    BAD_REQUEST = "bad_request"
    SUCCESS = "success"
    ACCEPTED = "accepted"
    GONE = "gone"
    UNPROCESSABLE = "unprocessable"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class Outcome:
    """Result of one exchange with the service.

    ``location`` is set for REDIRECT, ``body`` for SUCCESS and BAD_REQUEST,
    ``info`` for TRANSPORT_ERROR. Values, not entities: two outcomes with the
    same fields are interchangeable.
    """

    kind: OutcomeKind
    location: Optional[str] = None
    body: Optional[str] = None
    info: Optional[str] = None

    @classmethod
    def redirect(cls, location: str) -> "Outcome":
        return cls(OutcomeKind.REDIRECT, location=location)

    @classmethod
    def unauthorized(cls) -> "Outcome":
        return cls(OutcomeKind.UNAUTHORIZED)

    @classmethod
    def bad_request(cls, body: str) -> "Outcome":
        return cls(OutcomeKind.BAD_REQUEST, body=body)

    @classmethod
    def success(cls, body: str) -> "Outcome":
        return cls(OutcomeKind.SUCCESS, body=body)

    @classmethod
    def accepted(cls) -> "Outcome":
        return cls(OutcomeKind.ACCEPTED)

    @classmethod
    def gone(cls) -> "Outcome":
        return cls(OutcomeKind.GONE)

    @classmethod
    def unprocessable(cls) -> "Outcome":
        return cls(OutcomeKind.UNPROCESSABLE)

    @classmethod
    def transport_error(cls, info: str) -> "Outcome":
        return cls(OutcomeKind.TRANSPORT_ERROR, info=info)

    @property
    def is_unauthorized(self) -> bool:
        return self.kind is OutcomeKind.UNAUTHORIZED


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def classify_submit(status: int, headers: Mapping[str, str], body: str) -> Outcome:
    """Classify the answer to a "start calculation" POST.

    A redirect is the success path: its ``Location`` header is where the
    result will be polled. A 3xx without ``Location`` cannot be followed and
    is reported as a transport error.
    """
    if 300 <= status < 400:
        location = _header(headers, "Location")
        if location:
            return Outcome.redirect(location)
        return Outcome.transport_error(f"HTTP {status} redirect without a Location header")
    if status == 401:
        return Outcome.unauthorized()
    if status == 400:
        return Outcome.bad_request(body)
    return Outcome.transport_error(f"HTTP {status}: {body}")


def classify_poll(status: int, headers: Mapping[str, str], body: str) -> Outcome:
    """Classify the answer to a result poll GET."""
    if status == 200:
        return Outcome.success(body)
    if status == 202:
        return Outcome.accepted()
    if status == 410:
        return Outcome.gone()
    if status == 422:
        return Outcome.unprocessable()
    if status == 401:
        return Outcome.unauthorized()
    return Outcome.transport_error(f"HTTP {status}: {body}")
