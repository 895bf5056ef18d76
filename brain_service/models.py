# brain_service/models.py
"""
Pydantic models for the HTTP request/response bodies.

Field names follow the JSON the frontends already send (camelCase
`requestCount`, `claudeReady`).
"""

from __future__ import annotations

from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field


class GenerateContext(BaseModel):
    wallet: Optional[str] = Field(None, description="Connected wallet address, also the session key")
    requestCount: Optional[Union[int, float]] = Field(None, description="Client-side request counter")


class GenerateRequest(BaseModel):
    """
    Incoming payload for POST /api/generate.

    `message` is typed loosely on purpose: BrainCore decides what is valid so
    a missing or non-string message is reported as a 400, not a 422.
    """
    message: Any = None
    context: Optional[GenerateContext] = None


class ResponseContext(BaseModel):
    timestamp: str
    requestCount: Union[int, float]


class GenerateResponse(BaseModel):
    response: str
    context: ResponseContext


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    claudeReady: bool
    sessions: int


class ServiceInfo(BaseModel):
    message: str
    status: str
    timestamp: str
    endpoints: List[str]
    claudeReady: bool


class PriceResponse(BaseModel):
    price: float
