"""Tests for response classification and session state."""

import dataclasses

import pytest

from birds_nest.client.outcomes import Outcome, OutcomeKind, classify_poll, classify_submit
from birds_nest.client.session import SessionState, normalize_api_key


@pytest.mark.parametrize("status", [301, 302, 303, 307])
def test_submit_redirect_carries_location(status):
    """Test that any 3xx with a Location header is an accepted job."""
    outcome = classify_submit(status, {"Location": "/api/lcia/jobs/abc123"}, "")
    assert outcome == Outcome.redirect("/api/lcia/jobs/abc123")


def test_submit_location_header_is_case_insensitive():
    """Test that the Location header is found whatever its casing."""
    outcome = classify_submit(302, {"location": "/jobs/1"}, "")
    assert outcome.kind is OutcomeKind.REDIRECT
    assert outcome.location == "/jobs/1"


def test_submit_redirect_without_location_is_transport_error():
    """Test that an unfollowable redirect is not treated as success."""
    outcome = classify_submit(302, {}, "")
    assert outcome.kind is OutcomeKind.TRANSPORT_ERROR


def test_submit_status_table():
    """Test the non-redirect submit classifications."""
    assert classify_submit(401, {}, "").kind is OutcomeKind.UNAUTHORIZED
    assert classify_submit(400, {}, "invalid zip") == Outcome.bad_request("invalid zip")
    assert classify_submit(200, {}, "{}").kind is OutcomeKind.TRANSPORT_ERROR
    assert classify_submit(500, {}, "boom").kind is OutcomeKind.TRANSPORT_ERROR


def test_poll_status_table():
    """Test every poll classification."""
    assert classify_poll(200, {}, '{"result":42}') == Outcome.success('{"result":42}')
    assert classify_poll(202, {}, "").kind is OutcomeKind.ACCEPTED
    assert classify_poll(410, {}, "").kind is OutcomeKind.GONE
    assert classify_poll(422, {}, "").kind is OutcomeKind.UNPROCESSABLE
    assert classify_poll(401, {}, "").kind is OutcomeKind.UNAUTHORIZED
    assert classify_poll(503, {}, "busy").kind is OutcomeKind.TRANSPORT_ERROR


@pytest.mark.parametrize("status", [200, 202, 302, 400, 401, 410, 422, 500])
def test_classification_is_deterministic(status):
    """Test that the same response always yields the same outcome."""
    headers = {"Location": "/jobs/x"}
    assert classify_submit(status, headers, "body") == classify_submit(status, headers, "body")
    assert classify_poll(status, headers, "body") == classify_poll(status, headers, "body")


def test_with_bearer_key_returns_new_state(session_state):
    """Test that a refresh replaces only the bearer key."""
    updated = session_state.with_bearer_key("new-token-xyz")

    assert updated.bearer_key == "new-token-xyz"
    assert session_state.bearer_key == "old-token"
    assert updated.request_body == session_state.request_body
    assert updated.refresh_key == session_state.refresh_key


def test_session_state_is_immutable(session_state):
    """Test that fields cannot be reassigned in place."""
    with pytest.raises(dataclasses.FrozenInstanceError):
        session_state.bearer_key = "other"


def test_poll_url_uses_submit_host(session_state):
    """Test that relative locations resolve against the submit host over https."""
    assert session_state.poll_url("/jobs/abc123") == "https://birdsnest.example.org/jobs/abc123"
    assert session_state.poll_url("jobs/abc123") == "https://birdsnest.example.org/jobs/abc123"
    assert session_state.poll_url("https://other.example/jobs/1") == "https://other.example/jobs/1"


def test_credentials_are_hidden_from_repr():
    """Test that tokens do not leak into logs through repr."""
    state = SessionState("https://a/x", "https://a/r", "secret-bearer", "secret-refresh", "{}")
    assert "secret" not in repr(state)


def test_placeholder_key_is_swapped_for_test_key():
    """Test the documentation placeholder substitution."""
    assert normalize_api_key("[Contact NIST for custom key]") == "test_key"
    assert normalize_api_key("real-key") == "real-key"
