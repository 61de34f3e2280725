"""Shared-secret admin authentication.

The admin password doubles as the bearer token handed out on login, so the
token is static for the process lifetime.
"""

import hmac
import logging

from pydantic import SecretStr

from produce_order_service.exceptions import InvalidCredentialsError, UnauthorizedError

logger = logging.getLogger(__name__)


class AdminGate:
    """Validates the admin password and the token derived from it."""

    def __init__(self, admin_password: SecretStr) -> None:
        """Initialize gate with the configured admin password.

        Args:
            admin_password: The configured shared secret

        Raises:
            ValueError: If the password is empty
        """
        if not admin_password.get_secret_value():
            raise ValueError("An admin password must be provided")

        self._secret = admin_password

    def login(self, password: str) -> str:
        """Exchange the admin password for a session token.

        Args:
            password: Password supplied by the caller

        Returns:
            str: The session token

        Raises:
            InvalidCredentialsError: If the password does not match
        """
        if not self._matches(password):
            logger.warning("Rejected admin login attempt")
            raise InvalidCredentialsError("Invalid password")

        return self._secret.get_secret_value()

    def validate(self, token: str) -> bool:
        """Check a presented token.

        Args:
            token: Token from the request

        Returns:
            bool: True if valid, False otherwise
        """
        return self._matches(token)

    def require(self, token: str | None) -> str:
        """Return the token if it is present and valid.

        Raises:
            UnauthorizedError: If the token is missing or invalid
        """
        if not token:
            raise UnauthorizedError("Missing admin token")
        if not self.validate(token):
            raise UnauthorizedError("Invalid admin token")
        return token

    def _matches(self, candidate: str) -> bool:
        # JSON strings may carry lone surrogates, which plain utf-8 refuses
        expected = self._secret.get_secret_value().encode("utf-8", "surrogatepass")
        return hmac.compare_digest(candidate.encode("utf-8", "surrogatepass"), expected)
