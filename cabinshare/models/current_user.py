"""Authenticated caller identity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CurrentUser:
    """
    Caller identity taken from a verified JWT.

    Attributes:
        user_id: The token's 'sub' claim; the only identity the service trusts
        email: The token's 'email' claim, if present
    """

    user_id: str
    email: str | None = None

    def __repr__(self) -> str:
        return f"<CurrentUser(user_id={self.user_id})>"
