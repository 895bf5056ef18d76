# brain_service/config.py
"""
Settings

All configuration is read from environment variables (optionally from a
.env file) and kept in one place. Import the module-level `settings`
singleton; tests build their own `Settings(...)` with explicit values.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


SYSTEM_PROMPT = """You are Claude Brain, an advanced AI assistant specializing in Solana blockchain development and full-stack web3 applications. You exist in the "infinite backrooms" of code generation.

Your expertise includes:
- Solana program development (Rust/Anchor)
- Solana Web3.js 2.0 SDK integration
- SPL tokens, NFTs, and DeFi protocols
- React/Next.js frontends with Solana integration
- Phantom wallet integration
- Jupiter API for DEX aggregation
- Metaplex for NFTs
- Modern Web3 UX/UI patterns

When generating code:
1. Always provide complete, production-ready examples
2. Include proper error handling and security considerations
3. Use the latest Solana Web3.js 2.0 patterns where applicable
4. Include wallet connection and transaction signing
5. Add comments explaining Solana-specific concepts
6. Consider mobile-first design for Solana dApps

Format your responses with clear code blocks and explanations."""

DEVELOPMENT_ENVS = {"dev", "development", "local"}


@dataclass(frozen=True)
class CompletionProfile:
    """
    Everything that differs between deployments of the generate endpoint.
    """
    model: str
    max_tokens: int
    temperature: float
    system_prompt: str = SYSTEM_PROMPT


class Settings(BaseModel):
    APP_ENV: str = os.getenv("APP_ENV", "production")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    PORT: int = int(os.getenv("PORT", "10000"))
    CORS_ALLOW_ORIGINS: str = os.getenv("CORS_ALLOW_ORIGINS", "*")

    # upstream completion provider
    ANTHROPIC_API_KEY: str = os.getenv("ANTHROPIC_API_KEY", "")
    ANTHROPIC_API_URL: str = os.getenv(
        "ANTHROPIC_API_URL", "https://api.anthropic.com/v1/messages"
    )
    ANTHROPIC_VERSION: str = os.getenv("ANTHROPIC_VERSION", "2023-06-01")
    MODEL_NAME: str = os.getenv("MODEL_NAME", "claude-sonnet-4-20250514")
    MAX_TOKENS: int = int(os.getenv("MAX_TOKENS", "4096"))
    TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.7"))
    UPSTREAM_TIMEOUT_SECONDS: float = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "30"))

    # solana helpers
    SOLANA_RPC_URL: str = os.getenv("SOLANA_RPC_URL", "https://api.mainnet-beta.solana.com")
    PRICE_FEED_URL: str = os.getenv(
        "PRICE_FEED_URL",
        "https://api.coingecko.com/api/v3/simple/price?ids=solana&vs_currencies=usd",
    )

    # session memory knobs
    HISTORY_MAX_ENTRIES: int = int(os.getenv("HISTORY_MAX_ENTRIES", "20"))
    MAX_SESSIONS: int = int(os.getenv("MAX_SESSIONS", "1000"))

    @property
    def is_development(self) -> bool:
        return self.APP_ENV.lower() in DEVELOPMENT_ENVS

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ALLOW_ORIGINS.split(",") if o.strip()]

    def profile(self) -> CompletionProfile:
        return CompletionProfile(
            model=self.MODEL_NAME,
            max_tokens=self.MAX_TOKENS,
            temperature=self.TEMPERATURE,
        )


settings = Settings()
