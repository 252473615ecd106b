import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import config
from app.database import Base, SessionLocal, engine
from app.models import application, badge, message, notification, payment, report, task, user  # noqa: F401
from app.crud import badge_crud
from app.routes import (
    application_routes,
    auth_routes,
    badge_routes,
    message_routes,
    notification_routes,
    payment_routes,
    realtime_routes,
    report_routes,
    task_routes,
    user_routes,
)
from app.utils.exceptions import AppError, UnexpectedError

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        badge_crud.seed_default_badges(db)
    finally:
        db.close()
    logger.info("GigBoard backend started")
    yield
    # Shutdown
    logger.info("GigBoard backend shutting down")


app = FastAPI(
    title="GigBoard Backend",
    description="Student gig marketplace: tasks, applications, chat and payments",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ===== ERROR HANDLERS =====

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": UnexpectedError().message})


# ===== ROUTERS =====

app.include_router(auth_routes.router)
app.include_router(user_routes.router)
app.include_router(task_routes.router)
app.include_router(application_routes.router)
app.include_router(message_routes.router)
app.include_router(payment_routes.router)
app.include_router(badge_routes.router)
app.include_router(report_routes.router)
app.include_router(notification_routes.router)
app.include_router(realtime_routes.router)


@app.get("/")
def root():
    return {"message": "GigBoard backend is running!"}


@app.get("/health")
def health():
    """Liveness plus a trivial database round trip"""
    db_status = "connected"
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Health check database query failed: %s", e)
        db_status = "error"
    finally:
        db.close()

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "database": db_status,
    }
