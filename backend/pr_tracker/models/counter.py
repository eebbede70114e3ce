from sqlalchemy import Column, Integer, String, CheckConstraint, text
from ..core.db import Base

class Counter(Base):
    """One row per series. Only services.sequence_service touches it."""
    __tablename__ = "Counter"

    name  = Column(String(100), primary_key=True)
    value = Column(Integer, nullable=False, server_default=text("0"))

    __table_args__ = (
        CheckConstraint("value >= 0", name="CK_Counter_Value"),
    )
