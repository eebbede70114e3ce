from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict

RoleLiteral = Literal["user", "manager", "admin", "superadmin"]

# Shape checks only; email format and password length are enforced by
# services.auth_service.validate_registration so they map to InvalidInput.
class UserCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None

class LoginIn(BaseModel):
    email: str
    password: str

class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    email: str
    role: RoleLiteral

class UserDetail(UserRead):
    isActive: bool

class Token(BaseModel):
    token: str
    user: UserRead
