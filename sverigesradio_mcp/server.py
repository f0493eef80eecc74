"""FastAPI MCP Server for the Sveriges Radio Open API."""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

import markdown
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .api.deps import MCPHTTPException, get_server_state
from .config import Settings
from .config import settings as default_settings
from .engine.dispatcher import ToolDispatcher
from .engine.handlers import HandlerContext
from .mcp import jsonrpc_error
from .mcp.jsonrpc import INTERNAL_ERROR, INVALID_REQUEST, METHOD_NOT_FOUND
from .mcp.methods import LEGACY_PROTOCOL_VERSION, MODERN_PROTOCOL_VERSION, SERVER_NAME, MessageProcessor
from .mcp.prompts import PROMPTS
from .mcp.resources import RESOURCES
from .mcp_transport import router as mcp_router
from .middleware import IPRateLimitMiddleware, SecurityHeadersMiddleware
from .models import CacheStats, HealthResponse, SessionCounts
from .oauth_provider import router as oauth_router
from .services.rate_limiter import RateLimiter
from .services.session_registry import SessionRegistry
from .services.sr_client import SRClient
from .services.transports import LegacySessionRegistry, StreamableTransport

logger = logging.getLogger(__name__)

# ============ SENTRY INITIALIZATION ============


def _filter_sentry_event(event: dict) -> dict:
    """Remove the bearer token and session id from Sentry events."""
    if "request" in event and "headers" in event["request"]:
        headers = event["request"]["headers"]
        for key in ["authorization", "mcp-session-id"]:
            if key in headers:
                headers[key] = "[REDACTED]"
    return event


def init_sentry(settings: Settings) -> bool:
    """Initialize Sentry when SENTRY_DSN is configured. Returns True when enabled."""
    if not settings.sentry_dsn:
        logger.debug("Sentry DSN not configured - error tracking disabled")
        return False
    try:
        import sentry_sdk
        from sentry_sdk.integrations.fastapi import FastApiIntegration
        from sentry_sdk.integrations.starlette import StarletteIntegration
    except ImportError:
        logger.warning("Sentry DSN configured but sentry-sdk not installed")
        return False

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        traces_sample_rate=0.1 if settings.environment == "production" else 1.0,
        integrations=[
            FastApiIntegration(),
            StarletteIntegration(),
        ],
        before_send=lambda event, hint: _filter_sentry_event(event),
    )
    logger.info("Sentry error tracking initialized")
    return True


README_PATH = Path(__file__).resolve().parent.parent / "README.md"

ENDPOINTS = {
    "health": "GET /health",
    "docs": "GET /",
    "mcp": "POST|GET|DELETE /mcp",
    "sse": "GET /sse",
    "messages": "POST /messages?sessionId=<id>",
    "oauth": "GET /.well-known/oauth-protected-resource",
}

# Fallback mapping when an HTTPException carries no JSON-RPC code
STATUS_CODES = {
    400: INVALID_REQUEST,
    413: INVALID_REQUEST,
}


@dataclass
class ServerState:
    """Everything the request handlers share, stored on ``app.state.server``."""

    settings: Settings
    sr_client: SRClient
    rate_limiter: RateLimiter
    sessions: SessionRegistry
    legacy_sessions: LegacySessionRegistry
    dispatcher: ToolDispatcher
    processor: MessageProcessor
    legacy_processor: MessageProcessor


def build_state(settings: Settings, sr_client: SRClient | None = None) -> ServerState:
    sr_client = sr_client or SRClient(
        base_url=settings.sr_api_base,
        timeout=settings.upstream_timeout_seconds,
        default_ttl_seconds=settings.default_cache_ttl_seconds,
    )
    dispatcher = ToolDispatcher(HandlerContext(client=sr_client))
    processor = MessageProcessor(dispatcher, MODERN_PROTOCOL_VERSION)

    return ServerState(
        settings=settings,
        sr_client=sr_client,
        rate_limiter=RateLimiter(
            max_requests=settings.rate_limit_requests,
            window_seconds=settings.rate_limit_window_seconds,
        ),
        sessions=SessionRegistry(
            transport_factory=lambda session_id: StreamableTransport(session_id, processor),
            ttl_seconds=settings.session_ttl_seconds,
        ),
        legacy_sessions=LegacySessionRegistry(),
        dispatcher=dispatcher,
        processor=processor,
        legacy_processor=MessageProcessor(dispatcher, LEGACY_PROTOCOL_VERSION),
    )


async def _sweep_loop(state: ServerState) -> None:
    """Expire idle sessions and stale rate-limit entries until cancelled."""
    interval = state.settings.session_sweep_interval_seconds
    while True:
        await asyncio.sleep(interval)
        try:
            await state.sessions.sweep()
            state.rate_limiter.sweep()
        except Exception as e:
            logger.error(f"Sweep failed: {e}", exc_info=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    state: ServerState = app.state.server
    # Startup
    logger.info(f"Starting {SERVER_NAME} v{__version__} ({len(state.dispatcher)} tools)")

    if state.settings.cors_origins_list == ["*"]:
        logger.warning(
            "CORS is configured to allow all origins ('*'). "
            "Set ALLOWED_ORIGINS to specific domains in production."
        )
    if not state.settings.auth_required:
        logger.warning("MCP_AUTH_TOKEN is not set - authentication disabled")

    sweeper = asyncio.create_task(_sweep_loop(state))

    yield
    # Shutdown
    sweeper.cancel()
    with suppress(asyncio.CancelledError):
        await sweeper
    await state.sessions.close_all()
    state.legacy_sessions.close_all()
    await state.sr_client.aclose()
    logger.info("Server stopped")


# ============ EXCEPTION HANDLERS ============


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors as JSON-RPC error envelopes."""
    if isinstance(exc, MCPHTTPException):
        body = jsonrpc_error(exc.request_id, exc.code, exc.detail)
    elif exc.status_code in (404, 405):
        label = "Not found" if exc.status_code == 404 else "Method not allowed"
        body = jsonrpc_error(
            None,
            METHOD_NOT_FOUND,
            f"{label}: {request.method} {request.url.path}",
            data={"endpoints": ENDPOINTS},
        )
    else:
        body = jsonrpc_error(None, STATUS_CODES.get(exc.status_code, INTERNAL_ERROR), str(exc.detail))

    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content=jsonrpc_error(None, INVALID_REQUEST, "Invalid Request", data={"errors": exc.errors()}),
    )


# ============ HEALTH & DOCS ============


async def health_check(request: Request) -> HealthResponse:
    """Liveness check with registry and cache statistics."""
    state = get_server_state(request)
    return HealthResponse(
        status="healthy",
        service=SERVER_NAME,
        version=__version__,
        timestamp=datetime.now(UTC),
        tools=len(state.dispatcher),
        resources=len(RESOURCES),
        prompts=len(PROMPTS),
        auth_required=state.settings.auth_required,
        sessions=SessionCounts(**state.sessions.counts(), legacy=len(state.legacy_sessions)),
        cache=CacheStats(**state.sr_client.cache_stats()),
    )


async def root():
    """Project README rendered as HTML."""
    try:
        text = README_PATH.read_text(encoding="utf-8")
    except OSError:
        return {
            "name": SERVER_NAME,
            "version": __version__,
            "health": "/health",
            "endpoints": ENDPOINTS,
        }

    body = markdown.markdown(text, extensions=["fenced_code", "tables"])
    return HTMLResponse(
        "<!DOCTYPE html>\n<html><head><meta charset=\"utf-8\">"
        f"<title>{SERVER_NAME}</title></head><body>\n{body}\n</body></html>"
    )


# ============ APP FACTORY ============


def create_app(settings: Settings | None = None, sr_client: SRClient | None = None) -> FastAPI:
    settings = settings or default_settings
    init_sentry(settings)
    state = build_state(settings, sr_client)

    app = FastAPI(
        title="Sveriges Radio MCP Server",
        description="MCP server exposing the Sveriges Radio Open API as tools, resources and prompts",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.server = state

    # IP-based rate limiting middleware (innermost, runs after CORS preflight handling)
    app.add_middleware(IPRateLimitMiddleware, limiter=state.rate_limiter)

    # Security headers and unhandled-error guard
    app.add_middleware(SecurityHeadersMiddleware)

    # CORS middleware (outermost, so rejections still carry CORS headers)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Mcp-Session-Id"],
        expose_headers=["Mcp-Session-Id"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.add_api_route("/health", health_check, methods=["GET"], response_model=HealthResponse, tags=["Health"])
    app.add_api_route("/", root, methods=["GET"], tags=["Health"])

    # Mount MCP transports and discovery metadata
    app.include_router(mcp_router)
    app.include_router(oauth_router)

    return app


app = create_app()


# ============ MAIN ============


def main():
    """Run the server with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=default_settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "sverigesradio_mcp.server:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.debug,
        log_level=default_settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
