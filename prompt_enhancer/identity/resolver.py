"""IdentityResolver — abstract base for session/identity providers."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Identity:
    user_id: str
    email: Optional[str] = None


class IdentityResolver(ABC):
    @abstractmethod
    async def resolve(self, access_token: Optional[str]) -> Optional[Identity]:
        """Return the authenticated identity for this request, or None."""
        ...
