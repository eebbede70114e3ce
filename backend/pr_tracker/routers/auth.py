from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..core.api import ok, UTF8JSONResponse
from ..core.db import get_db
from ..core.security import require_token
from ..schemas.user import UserCreate, LoginIn, UserRead, UserDetail, Token
from ..services import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


def _serialize_user(u) -> Dict[str, Any]:
    # passwordHash / reset token never leave the service
    return UserRead.model_validate(u).model_dump()


# ---- Endpoints ----
@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    user = auth_service.register(
        db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=payload.role,
    )
    return ok(
        message="Registration successful! Your account must be activated by an admin before you can log in.",
        user=_serialize_user(user),
        status_code=status.HTTP_201_CREATED,
    )


@router.post("/login", response_model=Token)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    token, user = auth_service.login(db, email=payload.email, password=payload.password)
    return {"token": token, "user": _serialize_user(user)}


@router.get("/me", response_model=UserDetail)
def me(claims: Dict[str, Any] = Depends(require_token), db: Session = Depends(get_db)):
    user = auth_service.get_user(db, claims["id"])
    return UTF8JSONResponse(content=UserDetail.model_validate(user).model_dump())
