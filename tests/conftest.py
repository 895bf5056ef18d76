"""Shared fakes for BrainCore's collaborators."""

import asyncio

import pytest

from brain_service.agent_core import BrainCore
from brain_service.config import CompletionProfile
from brain_service.errors import WalletLookupError
from brain_service.memory_store import MemoryStore

WALLET = "9xQeWvG816bUx9EPjHmaT23yvVM2ZWbrrpZb9PusVFin"


class FakeCompletionClient:
    """Records every call and answers from a script."""

    def __init__(self, reply="Hi there", error=None, ready=True):
        self.reply = reply
        self.error = error
        self.ready = ready
        self.calls = []

    async def complete(self, system_prompt, history, new_message, max_tokens, temperature):
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "history": list(history),
                "new_message": new_message,
                "max_tokens": max_tokens,
                "temperature": temperature,
            }
        )
        # yield to the loop so concurrent turns can interleave
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        if callable(self.reply):
            return self.reply(new_message)
        return self.reply


class FakeSolanaGateway:
    def __init__(self, balance=1.5, fail=False):
        self.balance = balance
        self.fail = fail
        self.lookups = []

    async def get_balance(self, address):
        self.lookups.append(address)
        if self.fail:
            raise WalletLookupError("connection refused")
        return self.balance


@pytest.fixture
def profile():
    return CompletionProfile(
        model="claude-test",
        max_tokens=4096,
        temperature=0.7,
        system_prompt="You are a test assistant.",
    )


@pytest.fixture
def store():
    return MemoryStore(max_entries=20, max_sessions=100)


@pytest.fixture
def client():
    return FakeCompletionClient()


@pytest.fixture
def solana():
    return FakeSolanaGateway()


@pytest.fixture
def core(store, client, solana, profile):
    return BrainCore(
        memory_store=store,
        completion_client=client,
        solana_gateway=solana,
        profile=profile,
    )
