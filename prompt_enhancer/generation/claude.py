"""ClaudeGenerationClient — Anthropic Claude streaming backend."""
from collections.abc import AsyncIterator

from anthropic import AnthropicError, AsyncAnthropic

from prompt_enhancer.constants import (
    ANTHROPIC_TEXT_DELTA,
    ANTHROPIC_TEXT_DELTA_EVENT,
    DEFAULT_GENERATION_MAX_TOKENS,
    DEFAULT_GENERATION_MODEL,
    DEFAULT_GENERATION_TEMPERATURE,
)
from prompt_enhancer.errors import StreamingError
from prompt_enhancer.generation.client import GenerationClient


class ClaudeGenerationClient(GenerationClient):

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_GENERATION_MODEL,
        max_tokens: int = DEFAULT_GENERATION_MAX_TOKENS,
        temperature: float = DEFAULT_GENERATION_TEMPERATURE,
    ) -> None:
        self._client = AsyncAnthropic(api_key=api_key)
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature

    async def generate_stream(self, prompt: str, system: str) -> AsyncIterator[str]:
        try:
            stream = await self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
                system=system,
                stream=True,
                messages=[
                    {
                        "role": "user",
                        "content": [{"type": "text", "text": prompt}],
                    }
                ],
            )
            async for event in stream:
                match event.type:
                    case kind if (
                        kind == ANTHROPIC_TEXT_DELTA_EVENT
                        and event.delta.type == ANTHROPIC_TEXT_DELTA
                    ):
                        yield event.delta.text
                    case _:
                        pass
        except AnthropicError as exc:
            raise StreamingError(str(exc)) from exc
