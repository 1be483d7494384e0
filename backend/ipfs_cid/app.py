import time
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Callable

from fastapi import FastAPI, Request

from .errors import ConfigError
from .logging_config import logger
from .uploads import router as uploads_router
from .w3up_client import w3up_provider


# --- 1. Lifespan (Handles Startup/Shutdown) ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Starting up FastAPI application...")
    try:
        await w3up_provider.get_client()
    except ConfigError as e:
        # Keep serving; the next upload request retries initialization
        logger.critical(f"🔥 w3up-client unavailable at startup: {e}")
    logger.success("🌐 App instance created successfully!")
    try:
        yield
    finally:
        logger.info("🧹 Shutting down...")
        w3up_provider.reset()
        logger.success("✅ Shutdown complete.")


app = FastAPI(lifespan=lifespan)

# ContextVar for per-request logging context
request_logger: ContextVar = ContextVar("request_logger", default=logger)


# --- 2. Request Logging Middleware ---
@app.middleware("http")
async def add_request_context(request: Request, call_next: Callable):
    start_time = time.perf_counter()
    log = logger.bind(
        method=request.method,
        path=request.url.path,
        client=request.client.host if request.client else "unknown",
    )

    token = request_logger.set(log)

    try:
        response = await call_next(request)
        process_time = (time.perf_counter() - start_time) * 1000
        log.info(
            f"✅ {request.method} {request.url.path} completed in {process_time:.2f}ms"
        )
        return response
    except Exception as e:
        log.exception(f"❌ Error handling request: {e}")
        raise
    finally:
        request_logger.reset(token)


# --- 3. Routers ---
app.include_router(uploads_router)


@app.get("/")
def read_root():
    logger.info("🏠 Root endpoint accessed.")
    return {
        "status": "ok",
        "message": "IPFS CID service",
        "w3up_client_ready": w3up_provider.client is not None,
    }
