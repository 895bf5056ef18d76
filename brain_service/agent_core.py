# brain_service/agent_core.py
"""
BrainCore

The request handler behind POST /api/generate.

Responsibilities:
- Validate the incoming message.
- Resolve the session key (wallet address or the anonymous sentinel).
- Best-effort enrichment of the prompt with the wallet's SOL balance.
- Merge prior exchanges from the MemoryStore with the new user turn.
- Call the completion client with the configured profile.
- Record the round trip and shape the response.

This module does NOT:
- Deal with HTTP / FastAPI directly (that happens in app.py).
- Retry anything. Upstream errors propagate as BrainError subclasses.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from .completion_client import AnthropicCompletionClient
from .config import CompletionProfile
from .errors import InvalidInput, NotConfigured, WalletLookupError
from .memory_store import MemoryStore
from .models import GenerateRequest, GenerateResponse, ResponseContext
from .session_context import ANONYMOUS_SESSION, Exchange
from .solana_gateway import SolanaGateway

logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    """ISO 8601 in UTC with millisecond precision, e.g. 2024-01-01T00:00:00.000Z"""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_sol(balance: float) -> str:
    return f"{balance:.9f}".rstrip("0").rstrip(".")


class BrainCore:
    """
    Create once at startup and reuse for all requests.
    """

    def __init__(
        self,
        memory_store: MemoryStore,
        completion_client: AnthropicCompletionClient,
        solana_gateway: SolanaGateway,
        profile: CompletionProfile,
    ) -> None:
        self.memory_store = memory_store
        self.completion_client = completion_client
        self.solana_gateway = solana_gateway
        self.profile = profile

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------
    async def generate(self, req: GenerateRequest) -> GenerateResponse:
        message = self._validate(req)

        if not self.completion_client.ready:
            raise NotConfigured("ANTHROPIC_API_KEY environment variable is missing")

        context = req.context
        wallet = context.wallet.strip() if context and context.wallet else None
        session_key = wallet or ANONYMOUS_SESSION
        request_count = ((context.requestCount if context else None) or 0) + 1

        async with self.memory_store.turn(session_key):
            history = self.memory_store.get(session_key)
            logger.info(
                "Generate: session=%s message_len=%s history=%s",
                session_key,
                len(message),
                len(history),
            )

            outbound = message
            if wallet:
                balance = await self.lookup_balance(wallet)
                if balance is not None:
                    outbound = self._enrich(message, wallet, balance)

            completion = await self.completion_client.complete(
                system_prompt=self.profile.system_prompt,
                history=history,
                new_message=outbound,
                max_tokens=self.profile.max_tokens,
                temperature=self.profile.temperature,
            )

            # the stored turn is what the user typed, not the enriched prompt
            self.memory_store.append(
                session_key,
                Exchange.user(message),
                Exchange.assistant(completion),
            )

        logger.info("Completion received: session=%s chars=%s", session_key, len(completion))
        return GenerateResponse(
            response=completion,
            context=ResponseContext(timestamp=utc_timestamp(), requestCount=request_count),
        )

    async def lookup_balance(self, wallet: str) -> Optional[float]:
        """
        Wallet balance in SOL, or None when it can't be fetched.
        """
        try:
            return await self.solana_gateway.get_balance(wallet)
        except WalletLookupError as exc:
            logger.warning("Could not fetch wallet info: %s", exc)
            return None

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------
    @staticmethod
    def _validate(req: GenerateRequest) -> str:
        message = req.message
        if not isinstance(message, str) or not message.strip():
            raise InvalidInput("message must be a non-empty string")
        return message

    @staticmethod
    def _enrich(message: str, wallet: str, balance: float) -> str:
        return (
            f"{message}\n\nContext: User wallet {wallet} has {format_sol(balance)} SOL. "
            "Consider this when suggesting gas fees or transactions."
        )
