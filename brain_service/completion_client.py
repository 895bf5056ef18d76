# brain_service/completion_client.py
"""
Completion Client

Wraps a single call to Anthropic's Messages API:
- builds the request (system prompt + prior exchanges + newest user turn)
- maps non-2xx statuses to the error taxonomy
- reads the first content block's text and nothing else

Kept separate from BrainCore so the provider can be swapped or faked in tests.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from .config import settings
from .errors import (
    MalformedUpstreamResponse,
    UpstreamAuthFailure,
    UpstreamError,
    UpstreamRateLimited,
)
from .session_context import Exchange

logger = logging.getLogger(__name__)


class AnthropicCompletionClient:
    """
    Async client for POST /v1/messages.

    Pass `transport` (e.g. httpx.MockTransport) to avoid real network calls.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        api_url: Optional[str] = None,
        api_version: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = settings.ANTHROPIC_API_KEY if api_key is None else api_key
        self.model = model or settings.MODEL_NAME
        self.api_url = api_url or settings.ANTHROPIC_API_URL
        self.api_version = api_version or settings.ANTHROPIC_VERSION
        self.timeout = settings.UPSTREAM_TIMEOUT_SECONDS if timeout is None else timeout
        self._transport = transport

    @property
    def ready(self) -> bool:
        return bool(self.api_key)

    def _headers(self) -> Dict[str, str]:
        return {
            "content-type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": self.api_version,
        }

    def build_payload(
        self,
        system_prompt: str,
        history: Sequence[Exchange],
        new_message: str,
        max_tokens: int,
        temperature: float,
    ) -> Dict[str, Any]:
        messages: List[Dict[str, str]] = [e.to_message() for e in history]
        messages.append({"role": "user", "content": new_message})
        return {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "system": system_prompt,
            "messages": messages,
        }

    async def complete(
        self,
        system_prompt: str,
        history: Sequence[Exchange],
        new_message: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        """
        Returns the completion text or raises an UpstreamError subclass.
        """
        payload = self.build_payload(
            system_prompt, history, new_message, max_tokens, temperature
        )

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.post(self.api_url, json=payload, headers=self._headers())
        except httpx.HTTPError as exc:
            logger.error("Anthropic API unreachable: %r", exc)
            raise UpstreamError(None, "", f"upstream request failed: {exc!r}") from exc

        if resp.status_code in (401, 403):
            logger.error("Anthropic API auth error: %s %s", resp.status_code, resp.text)
            raise UpstreamAuthFailure(resp.status_code, resp.text)
        if resp.status_code == 429:
            logger.warning("Anthropic API rate limited: %s", resp.text)
            raise UpstreamRateLimited(resp.status_code, resp.text)
        if not resp.is_success:
            logger.error("Anthropic API error: %s %s", resp.status_code, resp.text)
            raise UpstreamError(resp.status_code, resp.text)

        return self._extract_text(resp)

    @staticmethod
    def _extract_text(resp: httpx.Response) -> str:
        try:
            data = resp.json()
        except ValueError as exc:
            raise MalformedUpstreamResponse(resp.status_code, resp.text) from exc

        # Only the first content block's text is relied on.
        try:
            text = data["content"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise MalformedUpstreamResponse(resp.status_code, resp.text) from exc

        if not isinstance(text, str):
            raise MalformedUpstreamResponse(resp.status_code, resp.text)
        return text
