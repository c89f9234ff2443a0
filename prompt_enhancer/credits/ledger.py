"""CreditLedger — abstract base for per-user credit stores."""
from abc import ABC, abstractmethod

from prompt_enhancer.identity.resolver import Identity


class CreditLedger(ABC):
    @abstractmethod
    async def get_balance(self, identity: Identity) -> int:
        """Return the current balance. Raises LedgerError if the store is unavailable."""
        ...

    @abstractmethod
    async def decrement_one(self, identity: Identity) -> bool:
        """Atomically spend one credit.

        Returns False when no credit could be spent (balance already zero or
        a concurrent request got there first). Raises LedgerError on store failure.
        """
        ...
