import asyncio
import logging
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from supabase import Client

from linkup.config import settings
from linkup.core.csrf import CSRF_HEADER, CSRFMiddleware
from linkup.core.log_sanitizer import sanitize_for_logging
from linkup.core.middleware import RequestSizeLimitMiddleware, SecurityHeadersMiddleware
from linkup.core.rate_limit import limiter
from linkup.database.supabase_client import get_supabase, SupabaseClient
from linkup.modules.admin import routes as admin_routes
from linkup.modules.applications import routes as applications_routes
from linkup.modules.auth import routes as auth_routes
from linkup.modules.auth.revocation import RevocationStore
from linkup.modules.auth.service import AuthService
from linkup.modules.companies import routes as companies_routes
from linkup.modules.filters import routes as filters_routes
from linkup.modules.jobs import routes as jobs_routes
from linkup.modules.matching import routes as matching_routes
from linkup.modules.messages import routes as messages_routes
from linkup.modules.users import routes as users_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled exception on %s %s (query=%s): %s",
        request.method,
        request.url.path,
        sanitize_for_logging(dict(request.query_params)),
        exc,
    )
    if settings.is_production:
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
    return JSONResponse(status_code=500, content={"detail": str(exc)})


# Starlette wraps in reverse order: the last middleware added runs first
app.add_middleware(SlowAPIMiddleware)
if settings.csrf_enabled:
    app.add_middleware(CSRFMiddleware)
app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.max_request_size)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_origin_regex=settings.cors_origin_regex,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=[CSRF_HEADER],
)
app.add_middleware(SecurityHeadersMiddleware)

# Include module routes
app.include_router(auth_routes.router)
app.include_router(users_routes.router)
app.include_router(companies_routes.router)
app.include_router(jobs_routes.router)
app.include_router(applications_routes.router)
app.include_router(messages_routes.router)
app.include_router(filters_routes.router)
app.include_router(matching_routes.router)
app.include_router(admin_routes.router)


def _log_task_exception(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    """Exceptions of orphaned tasks are logged, the server keeps running"""
    exc = context.get("exception")
    logger.error("Unhandled exception in background task: %s", context.get("message"), exc_info=exc)


@app.on_event("startup")
async def startup_event():
    logger.info("Application startup (environment=%s)", settings.environment)

    problems = settings.validate_required()
    if problems:
        for problem in problems:
            logger.critical("Invalid configuration: %s", problem)
        raise RuntimeError("Invalid configuration: " + "; ".join(problems))

    asyncio.get_running_loop().set_exception_handler(_log_task_exception)

    supabase = SupabaseClient.get_client()
    try:
        purged = RevocationStore(supabase).purge_expired()
        logger.info("Purged %s expired revoked tokens", purged)
    except Exception as e:
        logger.warning("Could not purge expired revoked tokens: %s", e)

    AuthService(supabase).ensure_default_admin()


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": "Welcome to linkup-backend", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health(supabase: Client = Depends(get_supabase)):
    """Liveness probe including a database round-trip."""
    try:
        supabase.table("user_").select("id_user").limit(1).execute()
    except Exception as e:
        logger.error("Health check failed: %s", e)
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": "unreachable"},
        )
    return {"status": "healthy", "database": "connected", "environment": settings.environment}


@app.get("/ready")
@limiter.exempt
async def ready():
    return {"status": "ready"}
