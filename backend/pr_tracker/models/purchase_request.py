import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Numeric, CheckConstraint, text
from ..core.db import Base


def new_id() -> str:
    return uuid.uuid4().hex

def utcnow() -> datetime:
    # stored naive, always UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


class PurchaseRequest(Base):
    __tablename__ = "PurchaseRequest"

    id                = Column(String(32),  primary_key=True, default=new_id)
    pr_id             = Column(Integer,     nullable=False, unique=True)
    code              = Column(String(32),  nullable=False, unique=True)
    location          = Column(String(50),  nullable=False)
    department        = Column(String(50),  nullable=False)
    propertyReference = Column(String(200), nullable=False)
    estimatedAmount   = Column(Numeric(14, 2), nullable=False)
    requester         = Column(String(200), nullable=False)
    dateRequested     = Column(DateTime,    nullable=False, default=utcnow)
    status            = Column(String(20),  nullable=False, server_default=text("'pending'"), default="pending")
    createdAt         = Column(DateTime,    nullable=False, default=utcnow)
    updatedAt         = Column(DateTime,    nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint(estimatedAmount >= 0, name="CK_PR_EstimatedAmount"),
        CheckConstraint("status IN ('pending','approved','rejected')", name="CK_PR_Status"),
    )
