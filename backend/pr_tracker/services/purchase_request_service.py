# backend/pr_tracker/services/purchase_request_service.py
from __future__ import annotations
from typing import Any, Dict, List
import logging
import re

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from pr_tracker.core.errors import InvalidInput, NotFound, DuplicateCode, StorageUnavailable
from pr_tracker.domain.codes import validate_codes, format_code
from pr_tracker.domain.constants import SERIES_PURCHASE_REQUEST, PR_STATUS_DEFAULT
from pr_tracker.models import PurchaseRequest
from pr_tracker.models.purchase_request import utcnow
from pr_tracker.services.sequence_service import next_value

logger = logging.getLogger(__name__)

_ID_RE = re.compile(r"^[0-9a-f]{32}$")

UPDATABLE_FIELDS = ("propertyReference", "location", "department", "estimatedAmount", "requester", "status")


def parse_record_id(raw: str) -> str:
    rid = (raw or "").strip().lower()
    if not _ID_RE.match(rid):
        raise InvalidInput("Invalid ID format.")
    return rid


def create_purchase_request(
    db: Session,
    *,
    property_reference: str,
    location: str,
    department: str,
    estimated_amount,
    requester: str,
) -> PurchaseRequest:
    """
    validate codes -> next pr_id -> format code -> insert.

    The counter is committed before the insert. If the insert fails, that
    pr_id is lost for good (a gap) and is never handed out again.
    """
    # 1) unknown location/department must not consume a number
    validate_codes(location, department)

    # 2) sequence
    seq = next_value(db, SERIES_PURCHASE_REQUEST)

    # 3) code
    code = format_code(location, department, seq)

    # 4) persist
    now = utcnow()
    pr = PurchaseRequest(
        pr_id=seq,
        code=code,
        location=location,
        department=department,
        propertyReference=property_reference,
        estimatedAmount=estimated_amount,
        requester=requester,
        status=PR_STATUS_DEFAULT,
        dateRequested=now,
        createdAt=now,
        updatedAt=now,
    )
    try:
        db.add(pr)
        db.commit()
        db.refresh(pr)
    except IntegrityError:
        db.rollback()
        logger.exception("create_purchase_request duplicate (code=%s); pr_id %s is skipped", code, seq)
        raise DuplicateCode(f"Purchase request code {code} already exists.")
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("create_purchase_request error (code=%s); pr_id %s is skipped", code, seq)
        raise StorageUnavailable(f"Error creating purchase request: {type(e).__name__}")

    logger.info("purchase request created: %s (id=%s)", pr.code, pr.id)
    return pr


def list_purchase_requests(db: Session) -> List[PurchaseRequest]:
    try:
        return (
            db.query(PurchaseRequest)
            .order_by(PurchaseRequest.createdAt.desc(), PurchaseRequest.pr_id.desc())
            .all()
        )
    except SQLAlchemyError as e:
        logger.exception("list_purchase_requests error")
        raise StorageUnavailable(f"Error fetching purchase requests: {type(e).__name__}")


def get_purchase_request(db: Session, record_id: str) -> PurchaseRequest:
    rid = parse_record_id(record_id)
    try:
        pr = db.get(PurchaseRequest, rid)
    except SQLAlchemyError as e:
        logger.exception("get_purchase_request error (id=%s)", rid)
        raise StorageUnavailable(f"Error fetching purchase request: {type(e).__name__}")
    if not pr:
        raise NotFound("Purchase Request not found.")
    return pr


def update_purchase_request(db: Session, record_id: str, changes: Dict[str, Any]) -> PurchaseRequest:
    """
    Apply a partial update. pr_id and code are never written here, even when
    location/department change: the code keeps the values it was issued with.
    """
    pr = get_purchase_request(db, record_id)
    rid = pr.id

    fields = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}
    for k, v in fields.items():
        if v is None:
            raise InvalidInput(f"{k} cannot be null.")

    if "location" in fields or "department" in fields:
        validate_codes(fields.get("location", pr.location), fields.get("department", pr.department))

    for k, v in fields.items():
        setattr(pr, k, v)

    try:
        db.add(pr)
        db.commit()
        db.refresh(pr)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("update_purchase_request error (id=%s)", rid)
        raise StorageUnavailable(f"Error updating purchase request: {type(e).__name__}")
    return pr


def delete_purchase_request(db: Session, record_id: str) -> None:
    pr = get_purchase_request(db, record_id)
    rid, code = pr.id, pr.code
    try:
        db.delete(pr)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("delete_purchase_request error (id=%s)", rid)
        raise StorageUnavailable(f"Error deleting purchase request: {type(e).__name__}")
    logger.info("purchase request deleted: %s (id=%s)", code, rid)
