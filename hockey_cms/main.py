import asyncio
import logging
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException

from hockey_cms.config import settings
from hockey_cms.core.responses import (
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from hockey_cms.modules.auth import routes as auth_routes
from hockey_cms.modules.categories import routes as categories_routes
from hockey_cms.modules.collections import routes as collections_routes
from hockey_cms.modules.content_save import routes as content_save_routes
from hockey_cms.modules.generation import routes as generation_routes
from hockey_cms.modules.generation_jobs import routes as generation_jobs_routes
from hockey_cms.modules.prompts import routes as prompts_routes
from hockey_cms.modules.source_content import routes as source_content_routes
from hockey_cms.modules.trivia import routes as trivia_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"X-XSS-Protection", b"1; mode=block"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SlowAPIMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
app.include_router(auth_routes.router, prefix="/api")
for router in trivia_routes.routers:
    app.include_router(router, prefix="/api")
for router in collections_routes.routers:
    app.include_router(router, prefix="/api")
app.include_router(categories_routes.router, prefix="/api")
app.include_router(prompts_routes.router, prefix="/api")
app.include_router(prompts_routes.topics_router, prefix="/api")
app.include_router(source_content_routes.router, prefix="/api")
app.include_router(generation_routes.router, prefix="/api")
app.include_router(content_save_routes.router, prefix="/api")
app.include_router(generation_jobs_routes.router, prefix="/api")


@app.on_event("startup")
async def startup_event():
    logger.info("Application startup")

    if settings.job_worker_enabled:
        from hockey_cms.modules.generation_jobs.worker import job_worker_loop
        app.state.job_worker = asyncio.create_task(job_worker_loop())
        logger.info(
            f"Generation job worker started - polling every {settings.job_worker_interval_seconds:g} seconds"
        )


@app.on_event("shutdown")
async def shutdown_event():
    worker = getattr(app.state, "job_worker", None)
    if worker is not None:
        worker.cancel()
    logger.info("Application shutdown")


@app.get("/")
@limiter.exempt
async def root():
    return {"message": "Welcome to hockey-cms", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe: configuration the API cannot serve without."""
    checks = {
        "supabase": bool(settings.supabase_url and settings.supabase_key),
        "gemini": bool(settings.gemini_api_key),
    }
    return {"status": "ready" if checks["supabase"] else "degraded", "checks": checks}
