"""Top-level LCIA calculation: submit, then poll, each guarded by refresh-and-retry."""

import logging
import time
from dataclasses import dataclass
from functools import partial
from typing import Callable, Optional

from birds_nest.client.calculation import poll, submit
from birds_nest.client.outcomes import OutcomeKind
from birds_nest.client.refresh import refresh_credential
from birds_nest.client.retry import DEFAULT_INTERVAL, DEFAULT_MAX_ATTEMPTS, try_with_refresh
from birds_nest.client.session import SessionState, normalize_api_key
from birds_nest.client.transport import DEFAULT_READ_TIMEOUT, HttpTransport, Transport
from birds_nest.errors import UnexpectedOutcomeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientConfig:
    api_url: str
    refresh_url: str
    api_key: str = ""
    refresh_token: str = ""
    poll_interval: float = DEFAULT_INTERVAL
    max_refresh_attempts: int = DEFAULT_MAX_ATTEMPTS
    read_timeout: float = DEFAULT_READ_TIMEOUT
    verify_tls: bool = False
    poll_deadline: Optional[float] = None

    def __post_init__(self) -> None:
        if self.poll_interval < 0:
            raise ValueError(f"poll_interval must be >= 0, got {self.poll_interval}")
        if self.max_refresh_attempts < 1:
            raise ValueError(f"max_refresh_attempts must be >= 1, got {self.max_refresh_attempts}")
        if self.poll_deadline is not None and self.poll_deadline <= 0:
            raise ValueError(f"poll_deadline must be > 0, got {self.poll_deadline}")

    @classmethod
    def from_settings(cls, settings) -> "ClientConfig":
        return cls(
            api_url=settings.api_url,
            refresh_url=settings.api_refresh_url,
            api_key=settings.api_key,
            refresh_token=settings.refresh_token,
            poll_interval=settings.poll_interval,
            max_refresh_attempts=settings.max_refresh_attempts,
            read_timeout=settings.read_timeout,
            verify_tls=settings.verify_tls,
            poll_deadline=settings.poll_deadline,
        )


class LciaClient:
    """Drives one calculation at a time against the BIRDS NEST service.

    Requests are strictly sequential: nothing is sent before the previous
    response has been classified. A session state is created per call to
    :meth:`calculate` and discarded when it returns.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[Transport] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self.transport = transport or HttpTransport(
            read_timeout=config.read_timeout,
            verify_tls=config.verify_tls,
        )
        self._sleep = sleep
        self._clock = clock

    def close(self) -> None:
        """Release the transport's connection pool, when it keeps one."""
        close = getattr(self.transport, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "LciaClient":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _refresh(self, state: SessionState) -> Optional[str]:
        return refresh_credential(self.transport, state)

    def calculate(self, request_body: str) -> Optional[str]:
        """Submit ``request_body`` and wait for the LCIA result.

        Returns the result JSON as an opaque string, or ``None`` when the
        calculation failed in a way that was logged and should simply skip
        downstream reporting.

        Raises:
            RefreshExhaustedError: the service kept answering 401.
            MalformedRefreshResponseError: the refresh endpoint broke contract.
        """
        logger.info("Connecting to Birds Nest API.")
        state = SessionState(
            submit_url=self.config.api_url,
            refresh_url=self.config.refresh_url,
            bearer_key=normalize_api_key(self.config.api_key),
            refresh_key=self.config.refresh_token,
            request_body=request_body,
        )

        submitted, state = try_with_refresh(
            partial(submit, self.transport),
            state,
            self._refresh,
            max_attempts=self.config.max_refresh_attempts,
            interval=self.config.poll_interval,
            sleep=self._sleep,
            stage="submit",
        )
        kind = submitted.kind
        if kind in (OutcomeKind.BAD_REQUEST, OutcomeKind.TRANSPORT_ERROR):
            logger.error("Could not complete request.")
            return None
        if kind is not OutcomeKind.REDIRECT:
            # UNAUTHORIZED is consumed by try_with_refresh; the rest are poll-only answers.
            raise UnexpectedOutcomeError(submitted, "submit")
        location = submitted.location

        # A refresh while polling resumes at the same location; the job is never resubmitted.
        polled, _ = try_with_refresh(
            lambda s: poll(
                self.transport,
                s,
                location,
                interval=self.config.poll_interval,
                sleep=self._sleep,
                clock=self._clock,
                deadline=self.config.poll_deadline,
            ),
            state,
            self._refresh,
            max_attempts=self.config.max_refresh_attempts,
            interval=self.config.poll_interval,
            sleep=self._sleep,
            stage="poll",
        )
        kind = polled.kind
        if kind is OutcomeKind.SUCCESS:
            return polled.body
        if kind in (OutcomeKind.GONE, OutcomeKind.UNPROCESSABLE, OutcomeKind.TRANSPORT_ERROR):
            return None
        # UNAUTHORIZED is consumed by try_with_refresh; ACCEPTED never leaves poll;
        # REDIRECT and BAD_REQUEST are submit-only answers.
        raise UnexpectedOutcomeError(polled, "poll")
