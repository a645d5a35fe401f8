"""Port: access-token issuance — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol


class TokenProvider(Protocol):
    """Issues a short-lived access token for the platform API."""

    async def get_token(self) -> str:
        """Return a token valid for at least the duration of one operation."""
        ...
