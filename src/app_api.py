from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import Sequence

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from rtp_core.logging_utils import log_event, setup_logging

# 1. Load environment variables at the very beginning (API keys, store URL)
load_dotenv()
setup_logging(default_level=os.getenv("RTP_LOG_LEVEL", "INFO"))
logger.info(log_event("logging.ready"))

from rtp_core.brain.gemini import GeminiIntentResolver
from rtp_core.config import settings
from rtp_core.protocols.reporter import Reporter
from rtp_core.protocols.resolver import IntentResolver
from rtp_core.protocols.store import Store
from rtp_core.reporters.console import ConsoleReporter
from rtp_engines.assistant import CATALOG_VERSION, ActionDispatcher, router as assistant_router
from rtp_engines.assistant.signing import ActionSigner
from rtp_engines.assistant.store import build_store


# ============================================================
# 🧬 Lifespan Management
# ============================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Builds whatever collaborators were not injected: the store from
    STORE_BACKEND and the Gemini resolver from GEMINI_* settings.
    """
    logger.info(log_event("assistant.startup.begin", catalog=CATALOG_VERSION))

    if app.state.store is None:
        try:
            app.state.store = build_store(settings)
            app.state.dispatcher = ActionDispatcher(app.state.store, app.state.reporters)
        except ValueError as e:
            logger.exception(log_event("assistant.store.bootstrap_failed", error=str(e)))

    if app.state.resolver is None:
        try:
            app.state.resolver = GeminiIntentResolver(
                model_name=settings.GEMINI_MODEL,
                api_key=settings.GEMINI_API_KEY,
                timeout_ms=settings.GEMINI_TIMEOUT_MS,
                restaurant_name=settings.RESTAURANT_NAME,
            )
        except Exception as e:  # noqa: BLE001
            logger.exception(log_event("assistant.resolver.bootstrap_failed", error=str(e)))

    logger.info(
        log_event(
            "assistant.startup.done",
            store=type(app.state.store).__name__,
            resolver=type(app.state.resolver).__name__,
            signing=app.state.signer.enabled,
        )
    )
    yield
    logger.info(log_event("assistant.shutdown.done"))


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code)


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', 'invalid')}" for error in exc.errors()
    )
    logger.info(log_event("api.request.invalid", path=request.url.path, details=details))
    return JSONResponse({"error": "Invalid request", "details": details}, status_code=400)


# ============================================================
# 🛠️ FastAPI Application Setup
# ============================================================
def create_app(
    *,
    store: Store | None = None,
    resolver: IntentResolver | None = None,
    signing_key: str | None = None,
    reporters: Sequence[Reporter] | None = None,
) -> FastAPI:
    app = FastAPI(
        title="RTP Staff Assistant",
        description="Propose, preview, confirm and execute staff actions from natural language",
        lifespan=lifespan,
    )

    app.state.reporters = list(reporters) if reporters is not None else [ConsoleReporter()]
    app.state.store = store
    app.state.resolver = resolver
    app.state.signer = ActionSigner(settings.ACTION_SIGNING_KEY if signing_key is None else signing_key)
    app.state.dispatcher = ActionDispatcher(store, app.state.reporters) if store is not None else None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.frontend_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.include_router(assistant_router)

    @app.get("/health")
    async def healthcheck():
        return {"status": "ok", "catalog": CATALOG_VERSION}

    return app


app = create_app()


# ============================================================
# 🏁 Execution Entry
# ============================================================
if __name__ == "__main__":
    import argparse
    import uvicorn

    parser = argparse.ArgumentParser(description="Run the RTP assistant API server.")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true")
    parser.add_argument(
        "--log-level",
        default=os.getenv("RTP_LOG_LEVEL", "INFO"),
        choices=["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"],
    )
    args = parser.parse_args()

    os.environ["RTP_LOG_LEVEL"] = str(args.log_level).upper()
    setup_logging(default_level=str(args.log_level).upper())
    logger.info(
        log_event(
            "server.run",
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_level=str(args.log_level).upper(),
        )
    )
    uvicorn.run(
        "app_api:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_config=None,
    )
