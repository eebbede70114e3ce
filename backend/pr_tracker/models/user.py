from sqlalchemy import Column, String, Boolean, DateTime, CheckConstraint, false, text
from ..core.db import Base
from .purchase_request import new_id, utcnow

class AppUser(Base):
    __tablename__ = "AppUser"

    id                  = Column(String(32),  primary_key=True, default=new_id)
    name                = Column(String(100), nullable=False)
    # stored lowercase (see services.auth_service.normalize_email)
    email               = Column(String(200), nullable=False, unique=True)
    passwordHash        = Column(String(255), nullable=False)
    role                = Column(String(20),  nullable=False, server_default=text("'user'"), default="user")
    isActive            = Column(Boolean,     nullable=False, server_default=false(), default=False)
    resetPasswordToken  = Column(String(255))
    resetPasswordExpire = Column(DateTime)
    createdAt           = Column(DateTime,    nullable=False, default=utcnow)
    updatedAt           = Column(DateTime,    nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint(
            "role in ('user','manager','admin','superadmin')",
            name="CK_AppUser_Role"
        ),
    )
