# backend/pr_tracker/routers/purchase_requests.py
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse, Response
from sqlalchemy.orm import Session

from pr_tracker.core.api import ok, UTF8JSONResponse
from pr_tracker.core.db import get_db
from pr_tracker.core.security import require_token
from pr_tracker.schemas.purchase_request import PRCreate, PRUpdate, PRRead
from pr_tracker.services.purchase_request_service import (
    create_purchase_request,
    list_purchase_requests,
    get_purchase_request,
    update_purchase_request,
    delete_purchase_request,
)
from pr_tracker.services.export_service import (
    export_excel,
    export_csv,
    XLSX_MEDIA_TYPE,
    CSV_MEDIA_TYPE,
)

router = APIRouter(prefix="/api/pr", tags=["purchase-requests"])


def _serialize(pr) -> Dict[str, Any]:
    return PRRead.model_validate(pr).model_dump(mode="json")


def _attachment(body: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=body,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/test", response_class=PlainTextResponse, include_in_schema=False)
def pr_test():
    return "Running"


# --- CREATE ---
@router.post("/create", status_code=status.HTTP_201_CREATED)
def create_pr(payload: PRCreate, db: Session = Depends(get_db)):
    pr = create_purchase_request(
        db,
        property_reference=payload.propertyReference,
        location=payload.location,
        department=payload.department,
        estimated_amount=payload.estimatedAmount,
        requester=payload.requester,
    )
    return ok(_serialize(pr), message="Purchase Request created successfully!", status_code=status.HTTP_201_CREATED)


# --- LIST (newest first) ---
@router.get("/")
def list_prs(db: Session = Depends(get_db)):
    return UTF8JSONResponse(content=[_serialize(pr) for pr in list_purchase_requests(db)])


@router.get("", include_in_schema=False)
def list_prs_noslash(db: Session = Depends(get_db)):
    return list_prs(db)


# --- EXPORT ---
@router.get("/export/excel")
def export_prs_excel(db: Session = Depends(get_db)):
    body = export_excel(list_purchase_requests(db))
    return _attachment(body, XLSX_MEDIA_TYPE, "purchase_requests.xlsx")


@router.get("/export/csv")
def export_prs_csv(db: Session = Depends(get_db)):
    body = export_csv(list_purchase_requests(db))
    return _attachment(body, CSV_MEDIA_TYPE, "purchase_requests.csv")


# --- SINGLE RECORD ---
@router.get("/{pr_key}")
def get_pr(pr_key: str, db: Session = Depends(get_db)):
    return UTF8JSONResponse(content=_serialize(get_purchase_request(db, pr_key)))


@router.put("/{pr_key}", dependencies=[Depends(require_token)])
def update_pr(pr_key: str, payload: PRUpdate, db: Session = Depends(get_db)):
    pr = update_purchase_request(db, pr_key, payload.model_dump(exclude_unset=True))
    return ok(_serialize(pr), message="Purchase Request updated successfully!")


@router.delete("/{pr_key}", dependencies=[Depends(require_token)])
def delete_pr(pr_key: str, db: Session = Depends(get_db)):
    delete_purchase_request(db, pr_key)
    return ok(message="Purchase Request deleted successfully!")
