# backend/pr_tracker/schemas/purchase_request.py
from datetime import datetime
from typing import Optional, Literal
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_serializer, field_validator

MONEY_PLACES = Decimal("0.01")  # 2 places

StatusLiteral = Literal["pending", "approved", "rejected"]


def _to_amount(v) -> Decimal:
    # Round to 2 places ROUND_HALF_UP and require >= 0
    try:
        d = v if isinstance(v, Decimal) else Decimal(str(v))
        d = d.quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError("Estimated Amount must be a number")
    if not d.is_finite() or d < 0:
        raise ValueError("Estimated Amount must be >= 0")
    return d


def _required_text(v: str, label: str) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError(f"{label} is required")
    return v


class PRCreate(BaseModel):
    propertyReference: str = Field(validation_alias=AliasChoices("propertyReference", "uprn"))
    location: str
    department: str
    estimatedAmount: Decimal
    requester: str

    @field_validator("estimatedAmount", mode="before")
    @classmethod
    def _amount(cls, v) -> Decimal:
        if isinstance(v, bool) or v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("Estimated Amount must be a number")
        return _to_amount(v)

    @field_validator("propertyReference", "location", "department", "requester")
    @classmethod
    def _not_blank(cls, v: str, info) -> str:
        return _required_text(v, info.field_name)


class PRUpdate(BaseModel):
    """Partial update. pr_id / code are not part of the model and are ignored if sent."""
    propertyReference: Optional[str] = Field(default=None, validation_alias=AliasChoices("propertyReference", "uprn"))
    location: Optional[str] = None
    department: Optional[str] = None
    estimatedAmount: Optional[Decimal] = None
    requester: Optional[str] = None
    status: Optional[StatusLiteral] = None

    @field_validator("estimatedAmount", mode="before")
    @classmethod
    def _amount(cls, v):
        if v is None:
            return v
        if isinstance(v, bool) or (isinstance(v, str) and not v.strip()):
            raise ValueError("Estimated Amount must be a number")
        return _to_amount(v)

    @field_validator("propertyReference", "location", "department", "requester")
    @classmethod
    def _not_blank(cls, v: Optional[str], info) -> Optional[str]:
        if v is None:
            return v
        return _required_text(v, info.field_name)


class PRRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    pr_id: int
    code: str
    location: str
    department: str
    propertyReference: str
    estimatedAmount: Decimal
    requester: str
    dateRequested: datetime
    status: StatusLiteral
    createdAt: datetime
    updatedAt: datetime

    # plain JSON number for clients
    @field_serializer("estimatedAmount")
    def _ser_amount(self, v: Decimal):
        return float(v)
