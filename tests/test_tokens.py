"""
Unit tests for the tokens module.
"""

import time
from datetime import timedelta

import jwt
import pytest

from fixturely.modules.tokens import (
    ExpiredTokenError,
    InvalidTokenError,
    TokenError,
    TokenFailure,
    TokenService,
    parse_expiry,
)

SECRET = "token-test-secret-with-at-least-32-bytes"


@pytest.fixture
def token_service():
    """Token service with the default lifetime."""
    return TokenService(SECRET)


def test_issue_then_verify_returns_payload(token_service):
    """Verification immediately after issuance returns the issued payload."""
    payload = {"id": 1, "email": "ama@example.com", "roles": ["fan"]}

    token = token_service.issue(payload)

    assert token_service.verify(token) == payload


@pytest.mark.parametrize(
    "payload",
    [
        {"aud": "web"},
        {"sub": 42},
        {"id": 1, "jti": 7},
        {"iss": ["fixturely"], "nbf": "tomorrow"},
    ],
)
def test_registered_claim_names_round_trip(token_service, payload):
    """Payload keys that share a JWT claim name are returned unchanged."""
    token = token_service.issue(payload)

    assert token_service.verify(token) == payload


def test_future_clock_is_consistent():
    """A clock ahead of wall time still verifies its own tokens."""
    service = TokenService(SECRET, clock=lambda: time.time() + 7200)

    token = service.issue({"id": 1}, "1h")

    assert service.verify(token) == {"id": 1}


def test_expiry_follows_injected_clock():
    """Advancing the injected clock past exp expires the token."""
    now = [1_700_000_000.0]
    service = TokenService(SECRET, clock=lambda: now[0])
    token = service.issue({"id": 1}, "10s")

    now[0] += 9
    assert service.verify(token) == {"id": 1}

    now[0] += 1
    with pytest.raises(ExpiredTokenError):
        service.verify(token)


def test_token_has_three_segments_and_expiry_claim(token_service):
    """Tokens are compact JWTs carrying iat and exp."""
    token = token_service.issue({"id": 1})

    assert token.count(".") == 2
    claims = jwt.decode(token, SECRET, algorithms=["HS256"])
    assert claims["id"] == 1
    assert claims["exp"] - claims["iat"] == 30 * 24 * 60 * 60


def test_issue_does_not_mutate_payload(token_service):
    """The caller's payload is left untouched."""
    payload = {"id": 7}

    token_service.issue(payload)

    assert payload == {"id": 7}


def test_issue_rejects_payload_with_exp(token_service):
    """A payload carrying its own expiry conflicts with expires_in."""
    with pytest.raises(ValueError):
        token_service.issue({"id": 1, "exp": 0})


def test_issue_rejects_non_mapping_payload(token_service):
    """Only mappings can be signed."""
    with pytest.raises(ValueError):
        token_service.issue(["id", 1])


def test_expired_token_after_short_lifetime(token_service):
    """A millisecond lifetime is expired a few milliseconds later."""
    token = token_service.issue({"id": 1}, "1ms")

    time.sleep(0.01)

    with pytest.raises(ExpiredTokenError):
        token_service.verify(token)


def test_expired_token_with_past_clock():
    """Tokens issued in the past expire once their lifetime elapsed."""
    service = TokenService(SECRET, clock=lambda: time.time() - 120)

    token = service.issue({"id": 1}, "1m")

    with pytest.raises(ExpiredTokenError):
        service.verify(token)


def test_token_valid_within_lifetime():
    """A token issued a minute ago with an hour lifetime is still valid."""
    service = TokenService(SECRET, clock=lambda: time.time() - 60)

    token = service.issue({"id": 1}, "1h")

    assert service.verify(token) == {"id": 1}


def test_altered_character_is_invalid(token_service):
    """Changing any character of the signed string invalidates it."""
    token = token_service.issue({"id": 1, "name": "Ama"})

    for index in (0, token.index(".") + 2, len(token) - 2):
        replacement = "A" if token[index] != "A" else "B"
        tampered = token[:index] + replacement + token[index + 1:]
        with pytest.raises(InvalidTokenError):
            token_service.verify(tampered)


def test_other_secret_is_invalid(token_service):
    """Tokens signed with another secret are rejected."""
    other = TokenService("another-secret-with-at-least-32-bytes!")
    token = other.issue({"id": 1})

    with pytest.raises(InvalidTokenError):
        token_service.verify(token)


def test_garbage_and_empty_tokens_are_invalid(token_service):
    """Strings that are not tokens are invalid, never expired."""
    for token in ("", "not-a-token", "a.b.c"):
        with pytest.raises(InvalidTokenError):
            token_service.verify(token)


def test_token_errors_share_base_class():
    """Callers can catch either failure through TokenError."""
    assert issubclass(InvalidTokenError, TokenError)
    assert issubclass(ExpiredTokenError, TokenError)


def test_check_reports_success(token_service):
    """check() returns the payload and strips a Bearer prefix."""
    token = token_service.issue({"id": "abc"})

    result = token_service.check(f"Bearer {token}")

    assert result.ok is True
    assert result.payload == {"id": "abc"}
    assert result.failure is None
    assert result.message is None


def test_check_reports_expired_kind():
    """check() distinguishes expired tokens."""
    service = TokenService(SECRET, clock=lambda: time.time() - 120)
    token = service.issue({"id": 1}, 1)

    result = service.check(token)

    assert result.ok is False
    assert result.failure is TokenFailure.EXPIRED
    assert result.message == "Token has expired"


def test_check_reports_invalid_kind(token_service):
    """check() distinguishes invalid tokens."""
    result = token_service.check("Bearer nonsense")

    assert result.ok is False
    assert result.failure is TokenFailure.INVALID
    assert result.message == "Invalid token"


def test_empty_secret_rejected():
    """A service cannot be built without a secret."""
    with pytest.raises(ValueError):
        TokenService("")


# Lifetime parsing


@pytest.mark.parametrize(
    "value, expected",
    [
        ("30days", timedelta(days=30)),
        ("2h", timedelta(hours=2)),
        ("15 minutes", timedelta(minutes=15)),
        ("1ms", timedelta(milliseconds=1)),
        ("2500", timedelta(milliseconds=2500)),
        ("1w", timedelta(weeks=1)),
        ("1.5h", timedelta(minutes=90)),
        (60, timedelta(seconds=60)),
        (timedelta(hours=1), timedelta(hours=1)),
    ],
)
def test_parse_expiry(value, expected):
    """Lifetimes accept numbers, timedeltas and duration strings."""
    assert parse_expiry(value) == expected


@pytest.mark.parametrize("value", ["forever", "10 fortnights", "", True, None])
def test_parse_expiry_rejects_unknown(value):
    """Unrecognized lifetimes are rejected."""
    with pytest.raises(ValueError):
        parse_expiry(value)


def test_issue_rejects_unknown_lifetime(token_service):
    """issue() validates its lifetime argument."""
    with pytest.raises(ValueError):
        token_service.issue({"id": 1}, "soon")
