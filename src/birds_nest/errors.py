"""Exceptions raised by birds_nest."""

from __future__ import annotations

from typing import Any, List, Optional


class BirdsNestError(Exception):
    """Base exception for all birds_nest errors."""

    pass


class LciaClientError(BirdsNestError):
    """Unrecoverable failure while talking to the LCIA calculation service."""

    pass


class RefreshExhaustedError(LciaClientError):
    """Raised when the service keeps rejecting the credential after every refresh."""

    def __init__(self, attempts: int, stage: str = "request") -> None:
        self.attempts = attempts
        self.stage = stage
        super().__init__(
            f"Could not refresh API token: {stage} still unauthorized after {attempts} refresh attempts"
        )


class MalformedRefreshResponseError(LciaClientError):
    """Raised when a successful refresh response carries no access token."""

    def __init__(self, payload: Any) -> None:
        self.payload = payload
        super().__init__(f"Unexpected refresh response. Was: {payload}")


class UnexpectedOutcomeError(LciaClientError):
    """Raised when a dispatch site receives an outcome kind it cannot handle."""

    def __init__(self, outcome: Any, stage: str) -> None:
        self.outcome = outcome
        self.stage = stage
        super().__init__(f"Unexpected outcome {outcome!r} during {stage}")


class ModelInputError(BirdsNestError):
    """Raised when the building model or the simulation results cannot be used."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        self.path = path
        if path:
            message = f"{message}: {path}"
        super().__init__(message)


class ArgumentError(BirdsNestError):
    """Raised when measure arguments fail validation."""

    def __init__(self, messages: List[str]) -> None:
        self.messages = list(messages)
        super().__init__("; ".join(self.messages))
