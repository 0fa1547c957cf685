"""Submitting a calculation and polling for its result."""

import logging
import time
from typing import Callable, Optional

from requests.exceptions import RequestException

from birds_nest.client.outcomes import Outcome, OutcomeKind, classify_poll, classify_submit
from birds_nest.client.session import SessionState
from birds_nest.client.transport import Transport, json_headers
from birds_nest.errors import UnexpectedOutcomeError

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 5.0


def submit(transport: Transport, state: SessionState) -> Outcome:
    """POST the building payload and classify the answer.

    Each call starts a new remote job; the service does not promise that
    resubmitting is idempotent.
    """
    try:
        raw = transport.send(
            "POST",
            state.submit_url,
            json_headers(state.bearer_key),
            state.request_body,
        )
    except RequestException as exc:
        logger.error("Could not complete request! Error: %s", exc)
        return Outcome.transport_error(str(exc))

    outcome = classify_submit(raw.status, raw.headers, raw.body)
    kind = outcome.kind
    if kind is OutcomeKind.REDIRECT:
        logger.info("Birds Nest calculation successfully started.")
        return outcome
    if kind is OutcomeKind.UNAUTHORIZED:
        logger.info("Calculation request was not authorized.")
        return outcome
    if kind is OutcomeKind.BAD_REQUEST:
        logger.error("Calculation request was rejected: %s", outcome.body)
        return outcome
    if kind is OutcomeKind.TRANSPORT_ERROR:
        logger.error("Could not complete request! Response: %s", outcome.info)
        return outcome
    # SUCCESS, ACCEPTED, GONE and UNPROCESSABLE are poll-only answers.
    raise UnexpectedOutcomeError(outcome, "submit")


def poll(
    transport: Transport,
    state: SessionState,
    location: str,
    *,
    interval: float = DEFAULT_POLL_INTERVAL,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
    deadline: Optional[float] = None,
) -> Outcome:
    """GET the result at ``location`` until the service gives a terminal answer.

    202 is the only answer that keeps the loop going. With ``deadline`` unset
    the loop is bounded only by the service; otherwise it gives up with a
    TRANSPORT_ERROR once another wait would go past ``deadline`` seconds.
    """
    url = state.poll_url(location)
    headers = json_headers(state.bearer_key)
    started = clock()

    while True:
        try:
            raw = transport.send("GET", url, headers)
        except RequestException as exc:
            logger.error("An error occurred, please try again. Error: %s", exc)
            return Outcome.transport_error(str(exc))

        outcome = classify_poll(raw.status, raw.headers, raw.body)
        kind = outcome.kind
        if kind is OutcomeKind.ACCEPTED:
            if deadline is not None and clock() - started + interval > deadline:
                logger.error("Calculation did not finish within %.1f seconds.", deadline)
                return Outcome.transport_error(f"poll deadline of {deadline}s exceeded")
            logger.info("Calculation still running, checking again in %g seconds", interval)
            sleep(interval)
            continue
        if kind is OutcomeKind.SUCCESS:
            logger.info("Calculation result retrieved.")
            return outcome
        if kind is OutcomeKind.GONE:
            logger.error("Calculation results already retrieved and removed. Try another request.")
            return outcome
        if kind is OutcomeKind.UNPROCESSABLE:
            logger.error("An error occurred during the calculation. Check inputs and try again.")
            return outcome
        if kind is OutcomeKind.UNAUTHORIZED:
            return outcome
        if kind is OutcomeKind.TRANSPORT_ERROR:
            logger.error("An error occurred, please try again. Error: %s", outcome.info)
            return outcome
        # REDIRECT and BAD_REQUEST are submit-only answers.
        raise UnexpectedOutcomeError(outcome, "poll")
