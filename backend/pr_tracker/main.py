# backend/pr_tracker/main.py
import os, json
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from pr_tracker.core.db import get_db, init_db
from pr_tracker.core.errors import AppError, StorageUnavailable
from pr_tracker.core.api import ok, fail, UTF8JSONResponse

from pr_tracker.routers.purchase_requests import router as pr_router
from pr_tracker.routers.auth import router as auth_router

from fastapi.middleware.cors import CORSMiddleware

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("pr_tracker")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # No migrations: create whatever tables are missing
    try:
        init_db()
    except Exception:
        logger.exception("table creation at startup failed")
    yield


app = FastAPI(title="Purchase Request Tracker", default_response_class=UTF8JSONResponse, lifespan=lifespan)


# -----------------------------
# Error envelope
# -----------------------------
@app.exception_handler(AppError)
async def app_error_to_envelope(request: Request, exc: AppError):
    return fail(exc.message, status_code=exc.status_code, error=exc.error)

@app.exception_handler(SQLAlchemyError)
async def storage_error_to_envelope(request: Request, exc: SQLAlchemyError):
    logger.error("unhandled storage error on %s %s: %s", request.method, request.url.path, exc)
    err = StorageUnavailable()
    return fail(err.message, status_code=err.status_code, error=err.error)

@app.exception_handler(StarletteHTTPException)
async def http_exception_to_envelope(request: Request, exc: StarletteHTTPException):
    return fail(str(exc.detail) if exc.detail else exc.__class__.__name__, status_code=exc.status_code)

@app.exception_handler(RequestValidationError)
async def validation_exception_to_envelope(request: Request, exc: RequestValidationError):
    return fail(
        "Validation error",
        status_code=400,
        error="ValidationError",
        meta={"errors": jsonable_encoder(exc.errors())},
    )


# -----------------------------
# CORS (.env)
# -----------------------------
def _parse_origins(env_val: str | None):
    if not env_val or env_val.strip() == "*":
        return ["*"]
    try:
        parsed = json.loads(env_val)
        if isinstance(parsed, list):
            return [str(x) for x in parsed]
    except ValueError:
        pass
    return [s.strip() for s in env_val.split(",") if s.strip()]

ALLOWED_ORIGINS = _parse_origins(os.getenv("CORS_ALLOW_ORIGINS", "*"))
logger.info("CORS allow_origins = %s", ALLOWED_ORIGINS)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=ALLOWED_ORIGINS != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---- Health ----
@app.get("/")
def root():
    return ok(message="Purchase Request Tracker")

@app.get("/health")
def health():
    return ok({"service": "pr-tracker"}, ok=True)

@app.get("/db-ping")
def db_ping(db: Session = Depends(get_db)):
    val = db.execute(text("SELECT 1")).scalar()
    return ok({"db": "ok", "select1": val}, ok=True)


# =========================
# Routers
# =========================
app.include_router(pr_router)     # /api/pr
app.include_router(auth_router)   # /auth

logger.info("routes registered: /api/pr, /auth")
