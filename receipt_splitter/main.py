import logging
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send

from receipt_splitter.api.currencies import router as currencies_router
from receipt_splitter.api.payments import router as payments_router
from receipt_splitter.api.splits import router as splits_router
from receipt_splitter.core.config import settings

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

app = FastAPI(title="Receipt Splitter API", version="0.1.0")

cors_origins = settings.cors_origins.split(",")


class TimingMiddleware:
    """Lightweight ASGI middleware, no BaseHTTPMiddleware overhead."""
    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        t0 = time.perf_counter()
        status_code = 0

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        await self.app(scope, receive, send_wrapper)
        ms = int((time.perf_counter() - t0) * 1000)
        method = scope.get("method", "?")
        path = scope.get("path", "?")
        qs = scope.get("query_string", b"").decode()
        qs_str = f"?{qs}" if qs else ""
        logger.info(f"{method} {path}{qs_str} -> {status_code} in {ms}ms")


app.add_middleware(TimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(splits_router)
app.include_router(currencies_router)
app.include_router(payments_router)


@app.get("/api/health")
async def health():
    return {"status": "ok"}
