"""FastAPI dependencies for admin authentication.

Provides dependency injection functions for FastAPI endpoints to validate the admin token.
"""

from typing import Annotated

from fastapi import Header

from produce_order_service.auth.admin_gate import AdminGate


def get_admin_token_from_header(
    gate: AdminGate,
    x_admin_token: Annotated[str | None, Header()] = None,
) -> str:
    """Validate the X-Admin-Token header against the admin gate.

    Args:
        gate: AdminGate holding the configured secret
        x_admin_token: Token from X-Admin-Token header (injected by FastAPI)

    Returns:
        str: The validated token

    Raises:
        UnauthorizedError: If the token is missing or invalid
    """
    return gate.require(x_admin_token)
