"""Tests for the calculation submitter and result poller."""

import pytest
import requests

from birds_nest.client.calculation import poll, submit
from birds_nest.client.outcomes import OutcomeKind
from fakes import FakeClock, ScriptedTransport, response


def test_submit_sends_bearer_and_json_headers(session_state):
    """Test the exact shape of the start-calculation request."""
    transport = ScriptedTransport([response(302, Location="/jobs/abc123")])

    outcome = submit(transport, session_state)

    assert outcome.kind is OutcomeKind.REDIRECT
    assert outcome.location == "/jobs/abc123"
    (sent,) = transport.requests
    assert sent.method == "POST"
    assert sent.url == session_state.submit_url
    assert sent.headers == {
        "Authorization": "Bearer old-token",
        "Accept": "application/json",
        "Content-Type": "application/json",
    }
    assert sent.body == session_state.request_body


def test_submit_bad_request_keeps_body(session_state):
    """Test that a 400 is terminal and carries the service message."""
    transport = ScriptedTransport([response(400, "invalid zip")])

    outcome = submit(transport, session_state)

    assert outcome.kind is OutcomeKind.BAD_REQUEST
    assert outcome.body == "invalid zip"
    assert len(transport.requests) == 1


def test_submit_connection_failure_is_transport_error(session_state):
    """Test that network exceptions never escape the submitter."""
    transport = ScriptedTransport([requests.exceptions.ConnectionError("refused")])

    outcome = submit(transport, session_state)

    assert outcome.kind is OutcomeKind.TRANSPORT_ERROR
    assert "refused" in outcome.info


def test_poll_returns_body_after_accepted(session_state, recording_sleep):
    """Test that polling stops at the first 200 and returns its body verbatim."""
    transport = ScriptedTransport(
        [response(202), response(202), response(200, '{"result":42}')]
    )

    outcome = poll(transport, session_state, "/jobs/abc123", interval=5, sleep=recording_sleep)

    assert outcome.kind is OutcomeKind.SUCCESS
    assert outcome.body == '{"result":42}'
    assert len(transport.requests) == 3
    assert transport.responses == []


def test_poll_waits_interval_between_accepted_answers(session_state, recording_sleep):
    """Test that each 202 is followed by exactly one wait of the configured interval."""
    transport = ScriptedTransport([response(202), response(202), response(200, "{}")])

    poll(transport, session_state, "/jobs/abc123", interval=5, sleep=recording_sleep)

    assert recording_sleep.calls == [5, 5]


def test_poll_targets_submit_host_with_bearer(session_state, recording_sleep):
    """Test the poll request URL and headers."""
    transport = ScriptedTransport([response(200, "{}")])

    poll(transport, session_state, "/jobs/abc123", sleep=recording_sleep)

    (sent,) = transport.requests
    assert sent.method == "GET"
    assert sent.url == "https://birdsnest.example.org/jobs/abc123"
    assert sent.headers["Authorization"] == "Bearer old-token"
    assert sent.body is None


@pytest.mark.parametrize(
    "status, kind",
    [
        (410, OutcomeKind.GONE),
        (422, OutcomeKind.UNPROCESSABLE),
        (401, OutcomeKind.UNAUTHORIZED),
        (500, OutcomeKind.TRANSPORT_ERROR),
    ],
)
def test_poll_terminal_statuses_stop_polling(session_state, recording_sleep, status, kind):
    """Test that non-202 answers end the loop without another request."""
    transport = ScriptedTransport([response(status)])

    outcome = poll(transport, session_state, "/jobs/abc123", sleep=recording_sleep)

    assert outcome.kind is kind
    assert len(transport.requests) == 1
    assert recording_sleep.calls == []


def test_poll_deadline_bounds_the_loop(session_state, recording_sleep):
    """Test that a deadline turns an endless 202 stream into a transport error."""
    transport = ScriptedTransport([response(202)] * 10)
    clock = FakeClock(recording_sleep)

    outcome = poll(
        transport,
        session_state,
        "/jobs/abc123",
        interval=5,
        sleep=recording_sleep,
        clock=clock,
        deadline=12,
    )

    assert outcome.kind is OutcomeKind.TRANSPORT_ERROR
    assert "deadline" in outcome.info
    assert recording_sleep.calls == [5, 5]
    assert len(transport.requests) == 3


def test_poll_connection_failure_is_transport_error(session_state, recording_sleep):
    """Test that a timeout while polling is reported, not raised."""
    transport = ScriptedTransport([response(202), requests.exceptions.Timeout("read timed out")])

    outcome = poll(transport, session_state, "/jobs/abc123", sleep=recording_sleep)

    assert outcome.kind is OutcomeKind.TRANSPORT_ERROR
    assert len(transport.requests) == 2
