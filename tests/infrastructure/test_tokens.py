"""Tests for fetch token signing."""

import pytest

from modefilter.domain.exceptions import InvalidTokenError
from modefilter.infrastructure.tokens import FetchTokenSigner


class FakeClock:
    """Settable time source."""

    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(1_700_000_000.0)


@pytest.fixture
def signer(clock: FakeClock) -> FetchTokenSigner:
    return FetchTokenSigner(secret="s3cret", ttl_seconds=60, clock=clock)


class TestFetchTokenSigner:
    """Tests for FetchTokenSigner."""

    def test_issue_and_verify(self, signer: FetchTokenSigner) -> None:
        token = signer.issue()

        assert token.startswith("1700000060.")
        signer.verify(token)

    def test_valid_until_expiry(self, signer: FetchTokenSigner, clock: FakeClock) -> None:
        token = signer.issue()
        clock.now += 60
        signer.verify(token)

    def test_expired(self, signer: FetchTokenSigner, clock: FakeClock) -> None:
        token = signer.issue()
        clock.now += 61

        with pytest.raises(InvalidTokenError) as exc_info:
            signer.verify(token)
        assert exc_info.value.reason == "expired"

    def test_other_secret_rejected(self, signer: FetchTokenSigner, clock: FakeClock) -> None:
        token = FetchTokenSigner(secret="other", ttl_seconds=60, clock=clock).issue()

        with pytest.raises(InvalidTokenError) as exc_info:
            signer.verify(token)
        assert exc_info.value.reason == "bad_signature"

    def test_extended_expiry_rejected(self, signer: FetchTokenSigner) -> None:
        """Rewriting the expiry breaks the signature."""
        expires, _, signature = signer.issue().partition(".")
        forged = f"{int(expires) + 3600}.{signature}"

        with pytest.raises(InvalidTokenError) as exc_info:
            signer.verify(forged)
        assert exc_info.value.reason == "bad_signature"

    @pytest.mark.parametrize(
        ("token", "reason"),
        [
            (None, "missing"),
            ("", "missing"),
            ("no-dot", "malformed"),
            ("abc.def", "malformed"),
            ("1700000060.", "malformed"),
        ],
    )
    def test_rejects_bad_tokens(
        self, signer: FetchTokenSigner, token: str | None, reason: str
    ) -> None:
        with pytest.raises(InvalidTokenError) as exc_info:
            signer.verify(token)
        assert exc_info.value.reason == reason
        assert exc_info.value.error_code == "INVALID_TOKEN"
