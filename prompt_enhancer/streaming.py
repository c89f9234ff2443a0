"""Stream events and their Server-Sent Events wire format."""
import json
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional, Union

from prompt_enhancer.constants import (
    EVENT_CHUNK,
    EVENT_COMPLETE,
    EVENT_ERROR,
    EVENT_TRANSCRIPTION_COMPLETE,
    SSE_DATA_PREFIX,
    SSE_EVENT_SEPARATOR,
)


@dataclass(frozen=True)
class ChunkEvent:
    content: str

    def to_dict(self) -> dict:
        return {"type": EVENT_CHUNK, "content": self.content}


@dataclass(frozen=True)
class CompleteEvent:
    credits_remaining: int

    def to_dict(self) -> dict:
        return {"type": EVENT_COMPLETE, "creditsRemaining": self.credits_remaining}


@dataclass(frozen=True)
class ErrorEvent:
    error: str

    def to_dict(self) -> dict:
        return {"type": EVENT_ERROR, "error": self.error}


@dataclass(frozen=True)
class TranscriptionCompleteEvent:
    transcription: str

    def to_dict(self) -> dict:
        return {"type": EVENT_TRANSCRIPTION_COMPLETE, "transcription": self.transcription}


StreamEvent = Union[ChunkEvent, CompleteEvent, ErrorEvent, TranscriptionCompleteEvent]
TerminalEvent = Union[CompleteEvent, ErrorEvent]


@dataclass(frozen=True)
class GenerationResult:
    text: str
    terminal: Optional[TerminalEvent]

    @property
    def succeeded(self) -> bool:
        return isinstance(self.terminal, CompleteEvent)


def encode_event(event: StreamEvent) -> str:
    return f"{SSE_DATA_PREFIX}{json.dumps(event.to_dict())}{SSE_EVENT_SEPARATOR}"


def event_from_dict(data: dict) -> StreamEvent:
    match data:
        case {"type": t, "content": str() as content} if t == EVENT_CHUNK:
            return ChunkEvent(content)
        case {"type": t, "creditsRemaining": int() as remaining} if t == EVENT_COMPLETE:
            return CompleteEvent(remaining)
        case {"type": t, "error": str() as error} if t == EVENT_ERROR:
            return ErrorEvent(error)
        case {"type": t, "transcription": str() as text} if t == EVENT_TRANSCRIPTION_COMPLETE:
            return TranscriptionCompleteEvent(text)
        case _:
            raise ValueError(f"Unrecognised stream event: {data!r}")


def decode_stream(body: str) -> list[StreamEvent]:
    """Parse a full SSE body back into events, ignoring non-data lines."""
    blocks = filter(None, (b.strip() for b in body.split(SSE_EVENT_SEPARATOR)))
    return [
        event_from_dict(json.loads(block[len(SSE_DATA_PREFIX):]))
        for block in blocks
        if block.startswith(SSE_DATA_PREFIX)
    ]


def collect_result(events: Iterable[StreamEvent]) -> GenerationResult:
    """Concatenate chunk events in order; the last complete/error event is the terminal."""
    parts: list[str] = []
    terminal: Optional[TerminalEvent] = None
    for event in events:
        match event:
            case ChunkEvent(content=content):
                parts.append(content)
            case CompleteEvent() | ErrorEvent():
                terminal = event
            case _:
                pass
    return GenerationResult(text="".join(parts), terminal=terminal)
