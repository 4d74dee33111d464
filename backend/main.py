import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import OperationalError

from ai.providers.base import UpstreamServiceError
from config import settings
from db.database import StoreUnavailable, create_tables, dispose_engine, get_engine
from auth.routes import router as auth_router
from api.time_audit import router as time_audit_router
from api.goals import router as goals_router
from api.projects import router as projects_router
from api.next_actions import router as next_actions_router
from api.pomodoro import router as pomodoro_router
from api.north_star import router as north_star_router
from api.scorecard import router as scorecard_router
from api.accountability import router as accountability_router
from api.relationships import router as relationships_router
from api.daily_plans import router as daily_plans_router
from api.goal_reviews import router as goal_reviews_router
from api.insights import router as insights_router
from api.voice import router as voice_router

logging.basicConfig(
    level=getattr(logging, (settings.LOG_LEVEL or "INFO").upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

settings.validate_security_configuration()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if get_engine() is None:
        logger.warning("Starting without a database; reads return empty results and writes fail")
    else:
        try:
            create_tables()
        except OperationalError as e:
            logger.warning(f"Could not create tables at startup: {e}")
    yield
    dispose_engine()


app = FastAPI(title=settings.APP_NAME, version="1.0.0", lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def security_headers_middleware(request: Request, call_next):
    response = await call_next(request)
    if not settings.SECURITY_HEADERS_ENABLED:
        return response
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    response.headers["Permissions-Policy"] = "camera=(), microphone=(self), geolocation=()"
    response.headers["Content-Security-Policy"] = settings.SECURITY_CSP
    return response


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=503, content={"detail": "Database not available"})


@app.exception_handler(UpstreamServiceError)
async def upstream_error_handler(request: Request, exc: UpstreamServiceError):
    logger.error(f"{request.method} {request.url.path} upstream failure: {exc}")
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.get("/api/health")
def health_check():
    return {"status": "ok", "app": settings.APP_NAME, "database": get_engine() is not None}


# Routers
app.include_router(auth_router, prefix="/api")
app.include_router(time_audit_router, prefix="/api")
app.include_router(goals_router, prefix="/api")
app.include_router(projects_router, prefix="/api")
app.include_router(next_actions_router, prefix="/api")
app.include_router(pomodoro_router, prefix="/api")
app.include_router(north_star_router, prefix="/api")
app.include_router(scorecard_router, prefix="/api")
app.include_router(accountability_router, prefix="/api")
app.include_router(relationships_router, prefix="/api")
app.include_router(daily_plans_router, prefix="/api")
app.include_router(goal_reviews_router, prefix="/api")
app.include_router(insights_router, prefix="/api")
app.include_router(voice_router, prefix="/api")

# Uploaded audio
app.mount("/uploads", StaticFiles(directory=str(settings.UPLOAD_DIR)), name="uploads")

# Serve frontend static files (in production)
static_dir = Path(__file__).parent / "static"
if static_dir.exists():
    app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")
