# brain_service/price_gateway.py
"""
Price Gateway

Pass-through of the public SOL/USD price feed (CoinGecko simple price).
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from .config import settings
from .errors import PriceFeedUnavailable

logger = logging.getLogger(__name__)


class PriceGateway:
    def __init__(
        self,
        feed_url: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.feed_url = feed_url or settings.PRICE_FEED_URL
        self.timeout = timeout
        self._transport = transport

    async def get_sol_price(self) -> float:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.get(self.feed_url)
                resp.raise_for_status()
                data = resp.json()
            price = data["solana"]["usd"]
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
            logger.error("Price feed failed: %r", exc)
            raise PriceFeedUnavailable(f"price feed failed: {exc!r}") from exc

        if not isinstance(price, (int, float)) or isinstance(price, bool):
            raise PriceFeedUnavailable(f"price feed returned {price!r}")
        return float(price)
