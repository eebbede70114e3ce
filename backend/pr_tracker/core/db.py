# backend/pr_tracker/core/db.py
import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.engine import make_url
from dotenv import dotenv_values, load_dotenv, find_dotenv

# Project root (= backend) and its .env
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
DEFAULT_DOTENV = os.path.join(BASE_DIR, ".env")
DEFAULT_DSN = "sqlite:///./pr_tracker.db"

def _norm_key(k: str) -> str:
    return k.replace("\ufeff", "").strip() if isinstance(k, str) else k

# Load .env without overriding what the environment (CI, container) already set
dotenv_path = DEFAULT_DOTENV if os.path.exists(DEFAULT_DOTENV) else find_dotenv(filename=".env", usecwd=True)
if dotenv_path:
    cfg = dotenv_values(dotenv_path, encoding="utf-8-sig")
    for k, v in cfg.items():
        nk = _norm_key(k)
        if v is not None and (nk not in os.environ or not os.environ[nk].strip()):
            os.environ[nk] = v
    load_dotenv(dotenv_path, override=False)

DSN = (os.environ.get("DATABASE_URL") or "").strip() or DEFAULT_DSN


def engine_options(dsn: str) -> dict:
    """Dialect-specific create_engine() kwargs."""
    url = make_url(dsn)
    kwargs = dict(pool_pre_ping=True)
    backend = url.get_backend_name()  # e.g. 'sqlite', 'postgresql', 'mssql'
    if backend.startswith("sqlite"):
        # Request threads share the pool; writers wait on the file lock instead of failing fast
        kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}
    elif backend.startswith("mssql"):
        kwargs.update(pool_size=5, max_overflow=10, fast_executemany=True)
    elif backend.startswith("postgresql"):
        kwargs.update(pool_size=5, max_overflow=10)
    return kwargs


engine = create_engine(DSN, **engine_options(DSN))

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db(bind=None) -> None:
    """Create missing tables. There are no migrations; startup calls this."""
    from .. import models  # noqa: F401  (fills Base.metadata)
    Base.metadata.create_all(bind=bind or engine, checkfirst=True)
