"""Fetch token signing.

The embed directive issues a signed, expiring token with every widget
shell; the fetch endpoint accepts only requests carrying a valid one.

Token format: ``<expires>.<hexdigest>`` where ``expires`` is a Unix
timestamp and ``hexdigest`` is HMAC-SHA256 over ``modefilter-fetch:<expires>``.
"""

import hashlib
import hmac
import time
from collections.abc import Callable

import structlog

from modefilter.domain.exceptions import InvalidTokenError
from modefilter.infrastructure.config import settings

logger = structlog.get_logger()

TOKEN_PURPOSE = "modefilter-fetch"


class FetchTokenSigner:
    """Issues and verifies fetch tokens.

    Example usage:
        signer = FetchTokenSigner(secret="s3cret", ttl_seconds=3600)
        token = signer.issue()
        signer.verify(token)  # raises InvalidTokenError if bad
    """

    def __init__(
        self,
        secret: str | None = None,
        ttl_seconds: int | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize signer.

        Args:
            secret: Signing secret. Defaults to settings.
            ttl_seconds: Token lifetime. Defaults to settings.
            clock: Time source returning Unix seconds.
        """
        self.secret = secret or settings.token_secret
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.token_ttl_seconds
        self._clock = clock

    def _digest(self, expires: int) -> str:
        return hmac.new(
            self.secret.encode(),
            f"{TOKEN_PURPOSE}:{expires}".encode(),
            hashlib.sha256,
        ).hexdigest()

    def issue(self) -> str:
        """Issue a new token.

        Returns:
            Token string valid for ``ttl_seconds``.
        """
        expires = int(self._clock()) + self.ttl_seconds
        return f"{expires}.{self._digest(expires)}"

    def verify(self, token: str | None) -> None:
        """Verify a token.

        Args:
            token: Token from the request.

        Raises:
            InvalidTokenError: If the token is missing, malformed, expired
                or carries a wrong signature.
        """
        if not token:
            raise InvalidTokenError("missing")

        expires_part, sep, signature = token.partition(".")
        if not sep or not expires_part.isdigit() or not signature:
            raise InvalidTokenError("malformed")

        expires = int(expires_part)
        # Constant-time comparison
        if not hmac.compare_digest(self._digest(expires), signature):
            logger.warning("fetch_token_signature_mismatch")
            raise InvalidTokenError("bad_signature")

        if expires < int(self._clock()):
            raise InvalidTokenError("expired")


_signer: FetchTokenSigner | None = None


def get_token_signer() -> FetchTokenSigner:
    """Get the process-wide token signer."""
    global _signer
    if _signer is None:
        _signer = FetchTokenSigner()
    return _signer
