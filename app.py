# app.py
"""
FastAPI entrypoint for the Brain service.

Exposes:
- GET  /                            → service banner
- GET  /api/health                  → health check
- POST /api/generate                → prompt → completion, with per-wallet memory
- POST /api/solana/validate-wallet  → address check + balance
- GET  /api/solana/price            → SOL/USD price

Run locally with `python app.py` or `uvicorn app:app`.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from brain_service import __version__
from brain_service.agent_core import BrainCore, utc_timestamp
from brain_service.completion_client import AnthropicCompletionClient
from brain_service.config import settings
from brain_service.errors import BrainError, UpstreamRateLimited
from brain_service.memory_store import MemoryStore
from brain_service.models import (
    GenerateRequest,
    GenerateResponse,
    HealthResponse,
    PriceResponse,
    ServiceInfo,
)
from brain_service.price_gateway import PriceGateway
from brain_service.solana_gateway import SolanaGateway

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="[%(asctime)s] %(levelname)s - %(message)s",
)
logger = logging.getLogger("brain_service")

ENDPOINTS = [
    "GET /",
    "GET /api/health",
    "POST /api/generate",
    "POST /api/solana/validate-wallet",
    "GET /api/solana/price",
]

# ---------------------------------------------------------------------------
# App & dependencies wiring
# ---------------------------------------------------------------------------

app = FastAPI(title="Claude Brain Backend", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# Shared in-process singletons
memory_store = MemoryStore(
    max_entries=settings.HISTORY_MAX_ENTRIES,
    max_sessions=settings.MAX_SESSIONS,
)
completion_client = AnthropicCompletionClient()
solana_gateway = SolanaGateway()
price_gateway = PriceGateway()

brain_core = BrainCore(
    memory_store=memory_store,
    completion_client=completion_client,
    solana_gateway=solana_gateway,
    profile=settings.profile(),
)


# ---------------------------------------------------------------------------
# Error translation
# ---------------------------------------------------------------------------

@app.exception_handler(BrainError)
async def brain_error_handler(request: Request, exc: BrainError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    headers = None
    if isinstance(exc, UpstreamRateLimited):
        headers = {"Retry-After": str(exc.retry_after)}
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_payload(debug=settings.is_development),
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    content = {"error": "Invalid request body"}
    if settings.is_development:
        content["details"] = str(exc.errors())
    return JSONResponse(status_code=400, content=content)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # unknown path, or a known path with the wrong method
    if exc.status_code in (404, 405):
        return JSONResponse(
            status_code=404,
            content={
                "error": "Endpoint not found",
                "path": request.url.path,
                "method": request.method,
                "availableEndpoints": ENDPOINTS,
            },
        )
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    content = {"error": "Something went wrong!"}
    if settings.is_development:
        content["details"] = str(exc)
    return JSONResponse(status_code=500, content=content)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.get("/", response_model=ServiceInfo)
async def index() -> ServiceInfo:
    return ServiceInfo(
        message="Claude Brain Backend is running!",
        status="active",
        timestamp=utc_timestamp(),
        endpoints=ENDPOINTS,
        claudeReady=brain_core.completion_client.ready,
    )


@app.get("/api/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Simple health endpoint for uptime checks.
    """
    return HealthResponse(
        status="healthy",
        timestamp=utc_timestamp(),
        claudeReady=brain_core.completion_client.ready,
        sessions=brain_core.memory_store.session_count,
    )


@app.post("/api/generate", response_model=GenerateResponse)
async def generate(req: GenerateRequest) -> GenerateResponse:
    """
    Main completion endpoint.

    The frontend sends:
    {
      "message": "Build me a token swap UI",
      "context": {"wallet": "<base58 address>", "requestCount": 3}
    }
    """
    return await brain_core.generate(req)


@app.post("/api/solana/validate-wallet")
async def validate_wallet(request: Request) -> dict:
    # Never fails: anything unusable is just an invalid address.
    try:
        body = await request.json()
    except ValueError:
        body = None
    address = body.get("address") if isinstance(body, dict) else None
    return await solana_gateway.validate_wallet(address)


@app.get("/api/solana/price", response_model=PriceResponse)
async def sol_price() -> PriceResponse:
    return PriceResponse(price=await price_gateway.get_sol_price())


# For local dev convenience:
if __name__ == "__main__":
    import uvicorn

    logger.info("Claude AI Ready: %s", completion_client.ready)
    uvicorn.run(
        "app:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.is_development,
    )
