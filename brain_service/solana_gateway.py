# brain_service/solana_gateway.py
"""
Solana Gateway

Reads wallet balances over Solana's JSON-RPC API.

Used two ways:
- best-effort prompt enrichment in BrainCore (failures are logged, not raised
  to the caller)
- the /api/solana/validate-wallet endpoint
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from solders.pubkey import Pubkey

from .config import settings
from .errors import WalletLookupError

LAMPORTS_PER_SOL = 1_000_000_000


class SolanaGateway:
    def __init__(
        self,
        rpc_url: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.rpc_url = rpc_url or settings.SOLANA_RPC_URL
        self.timeout = timeout
        self._transport = transport

    @staticmethod
    def parse_address(address: Any) -> str:
        """
        Canonical base58 form of a wallet address.
        """
        if not isinstance(address, str) or not address.strip():
            raise WalletLookupError("wallet address must be a non-empty string")
        try:
            return str(Pubkey.from_string(address.strip()))
        except ValueError as exc:
            raise WalletLookupError(f"invalid wallet address: {address!r}") from exc

    async def _rpc(self, method: str, params: list) -> Any:
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.post(self.rpc_url, json=payload)
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise WalletLookupError(f"{method} failed: {exc!r}") from exc

        if not isinstance(data, dict):
            raise WalletLookupError(f"{method} returned a non-object body")
        if data.get("error"):
            raise WalletLookupError(f"{method} rpc error: {data['error']}")
        return data.get("result")

    async def get_balance(self, address: str) -> float:
        """
        Balance in SOL for the given address.
        """
        pubkey = self.parse_address(address)
        result = await self._rpc("getBalance", [pubkey])

        value = result.get("value") if isinstance(result, dict) else None
        if not isinstance(value, int) or isinstance(value, bool):
            raise WalletLookupError(f"getBalance returned unexpected result: {result!r}")
        return value / LAMPORTS_PER_SOL

    async def validate_wallet(self, address: Any) -> Dict[str, Any]:
        try:
            pubkey = self.parse_address(address)
            balance = await self.get_balance(pubkey)
        except WalletLookupError:
            return {"valid": False, "error": "Invalid wallet address"}

        return {"valid": True, "balance": balance, "address": pubkey}
