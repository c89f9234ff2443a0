from typing import Optional

import pytest

from prompt_enhancer.credits.ledger import CreditLedger
from prompt_enhancer.errors import LedgerError, StreamingError, TranscriptionError
from prompt_enhancer.generation.client import GenerationClient
from prompt_enhancer.identity.resolver import Identity, IdentityResolver
from prompt_enhancer.pipeline import GeneratePipeline
from prompt_enhancer.transcription.client import TranscriptionClient

VALID_TOKEN = "valid-token"
USER = Identity(user_id="user-1", email="user@example.com")


class FakeIdentityResolver(IdentityResolver):

    def __init__(self, identity: Optional[Identity] = USER) -> None:
        self.identity = identity
        self.calls: list[Optional[str]] = []

    async def resolve(self, access_token):
        self.calls.append(access_token)
        return self.identity if access_token == VALID_TOKEN else None


class FakeLedger(CreditLedger):

    def __init__(self, balance: int = 5) -> None:
        self.balance = balance
        self.reads = 0
        self.decrements = 0
        self.fail_read = False
        self.fail_decrement = False
        self.lose_race = False

    async def get_balance(self, identity):
        self.reads += 1
        if self.fail_read:
            raise LedgerError("connection refused")
        return self.balance

    async def decrement_one(self, identity):
        if self.fail_decrement:
            raise LedgerError("connection refused")
        if self.lose_race or self.balance <= 0:
            return False
        self.decrements += 1
        self.balance -= 1
        return True


class FakeGenerator(GenerationClient):

    def __init__(self, fragments=("Create ", "a ", "button"), fail_after: Optional[int] = None) -> None:
        self.fragments = list(fragments)
        self.fail_after = fail_after
        self.calls: list[tuple[str, str]] = []
        self.closed = False

    async def generate_stream(self, prompt, system):
        self.calls.append((prompt, system))
        try:
            for index, fragment in enumerate(self.fragments):
                if self.fail_after is not None and index == self.fail_after:
                    raise StreamingError("upstream went away")
                yield fragment
            if self.fail_after is not None and self.fail_after >= len(self.fragments):
                raise StreamingError("upstream went away")
        finally:
            self.closed = True


class FakeTranscriber(TranscriptionClient):

    def __init__(self, text: str = "make a button", fail: bool = False) -> None:
        self.text = text
        self.fail = fail
        self.calls: list[tuple[bytes, str, str]] = []

    async def transcribe(self, audio, mime_type, filename):
        self.calls.append((audio, mime_type, filename))
        if self.fail:
            raise TranscriptionError("service unavailable")
        return self.text


@pytest.fixture
def resolver():
    return FakeIdentityResolver()


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def transcriber():
    return FakeTranscriber()


@pytest.fixture
def pipeline(resolver, ledger, generator, transcriber):
    return GeneratePipeline(
        identity_resolver=resolver,
        ledger=ledger,
        generator=generator,
        transcriber=transcriber,
    )
