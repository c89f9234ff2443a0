"""GenerationClient — abstract base for streaming text-generation backends."""
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator


class GenerationClient(ABC):
    @abstractmethod
    def generate_stream(self, prompt: str, system: str) -> AsyncIterator[str]:
        """Yield text fragments as the model produces them.

        The iterator is finite and single-use. Raises StreamingError when the
        backend fails part-way through.
        """
        ...
