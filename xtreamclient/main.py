"""
Xtream Client - FastAPI surface

Exposes the session, catalog, EPG and stream-address operations of the
provider client to a front end and an external player.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from xtreamclient.config import get_settings
from xtreamclient.errors import ErrorKind, LoginFailed, LoginInProgress, ProviderError
from xtreamclient.limiter import limiter
from xtreamclient.routers import catalog, epg, session, streams
from xtreamclient.services.session_controller import get_session_controller

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorKind.INVALID_ADDRESS: 400,
    ErrorKind.INVALID_CREDENTIALS: 401,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.UNREACHABLE: 502,
    ErrorKind.SERVER_ERROR: 502,
    ErrorKind.NETWORK_ERROR: 502,
    ErrorKind.TIMEOUT: 504,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    logger.info("Starting Xtream client...")
    
    controller = await get_session_controller()
    session_state = await controller.start()
    logger.info(f"Startup session status: {session_state.status.value}")
    
    yield
    
    logger.info("Shutting down Xtream client...")


def register_error_handlers(app: FastAPI):
    """Map classified provider failures to HTTP responses."""

    @app.exception_handler(LoginFailed)
    async def login_failed_handler(request: Request, exc: LoginFailed):
        return JSONResponse(
            status_code=ERROR_STATUS[exc.kind],
            content={"detail": exc.message, "kind": exc.kind.value}
        )

    @app.exception_handler(LoginInProgress)
    async def login_in_progress_handler(request: Request, exc: LoginInProgress):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(ProviderError)
    async def provider_error_handler(request: Request, exc: ProviderError):
        return JSONResponse(
            status_code=ERROR_STATUS[exc.kind],
            content={"detail": str(exc), "kind": exc.kind.value}
        )


# Create FastAPI app
settings = get_settings()
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Session, catalog and EPG access for Xtream IPTV providers",
    lifespan=lifespan
)

# Add rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
register_error_handlers(app)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(session.router)
app.include_router(catalog.router)
app.include_router(epg.router)
app.include_router(streams.router)


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    controller = await get_session_controller()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "session": controller.status.value
    }


# Error handlers
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "xtreamclient.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
