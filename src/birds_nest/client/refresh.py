"""Exchanging the refresh credential for a new bearer credential."""

import json
import logging
from typing import Optional

from requests.exceptions import RequestException

from birds_nest.client.session import SessionState
from birds_nest.client.transport import Transport, json_headers
from birds_nest.errors import MalformedRefreshResponseError

logger = logging.getLogger(__name__)


def refresh_credential(transport: Transport, state: SessionState) -> Optional[str]:
    """Ask the refresh endpoint for a new bearer key.

    Returns the new key, or ``None`` when the endpoint answers with a
    non-success status or cannot be reached; the caller decides whether to
    try again. The refresh token only ever travels in the body, never in an
    ``Authorization`` header.

    Raises:
        MalformedRefreshResponseError: the endpoint answered 2xx without an
            ``access`` field. That is a contract violation, not a transient
            condition.
    """
    logger.info("Attempting to refresh API token.")
    body = json.dumps({"refresh": state.refresh_key})
    try:
        raw = transport.send("POST", state.refresh_url, json_headers(), body)
    except RequestException as exc:
        logger.error("Could not refresh API token. Is the refresh URL correct and the refresh token valid? (%s)", exc)
        return None

    if not 200 <= raw.status < 300:
        logger.error("Could not refresh API token. Is the refresh URL correct and the refresh token valid?")
        return None

    try:
        payload = json.loads(raw.body)
    except ValueError as exc:
        logger.error("Unexpected refresh response. Was: %s", raw.body)
        raise MalformedRefreshResponseError(raw.body) from exc

    new_key = payload.get("access") if isinstance(payload, dict) else None
    if new_key is None:
        logger.error("Unexpected refresh response. Was: %s", payload)
        raise MalformedRefreshResponseError(payload)
    return str(new_key)
