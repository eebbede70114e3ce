# backend/pr_tracker/core/security.py
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from fastapi.security.utils import get_authorization_scheme_param
from jose import jwt, JWTError
from passlib.context import CryptContext

from .errors import Unauthorized, TokenInvalidOrExpired

# Kept for the OpenAPI docs (bearer scheme); parsing is done by _extract_bearer_token
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

SECRET_KEY = os.getenv("JWT_SECRET", "dev-secret-change-me")
ALGORITHM = os.getenv("JWT_ALG", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# ---- Password helpers ----
def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)

def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)

# ---- JWT ----
def create_access_token(user_id: str, email: str, role: str, expires_minutes: Optional[int] = None) -> str:
    now = datetime.now(tz=timezone.utc)
    minutes = ACCESS_TOKEN_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
    payload = {
        "id": user_id,
        "email": email,
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=minutes),
    }
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)

def verify_token(token: str) -> Dict[str, Any]:
    """Decode a bearer token; bad signature, garbage and expiry all fail the same way."""
    try:
        claims = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise TokenInvalidOrExpired()
    if not claims.get("id"):
        raise TokenInvalidOrExpired()
    return claims

# ---- Tolerant Authorization header parsing ----
def _extract_bearer_token(request: Request, _doc: Optional[str] = Depends(oauth2_scheme)) -> str:
    """
    Parses 'Authorization' leniently:
      - extra spaces:     "Bearer   <JWT>"
      - doubled scheme:   "Bearer Bearer <JWT>"
      - quoted value:     Authorization: "Bearer <JWT>"
    """
    auth = request.headers.get("Authorization")
    if not auth:
        raise Unauthorized()

    auth = str(auth).strip().strip('"').strip("'")
    scheme, param = get_authorization_scheme_param(auth)

    if not scheme or scheme.lower() != "bearer":
        raise Unauthorized()

    token = (param or "").strip()

    if token.lower().startswith("bearer "):
        token = token.split(None, 1)[1].strip()

    # a JWT never contains spaces
    token = token.replace(" ", "")

    if not token:
        raise Unauthorized()

    return token

# ---- Gate dependency for mutation endpoints ----
def require_token(token: str = Depends(_extract_bearer_token)) -> Dict[str, Any]:
    return verify_token(token)
