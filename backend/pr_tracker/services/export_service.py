# backend/pr_tracker/services/export_service.py
from __future__ import annotations
from io import BytesIO
from typing import Iterable, List

import pandas as pd
from openpyxl.utils import get_column_letter

from pr_tracker.domain.constants import EXPORT_FIELDS
from pr_tracker.models import PurchaseRequest

SHEET_NAME = "Purchase Requests"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CSV_MEDIA_TYPE = "text/csv"

# (header, width) per field, same order as EXPORT_FIELDS
EXCEL_COLUMNS = {
    "pr_id":             ("PR ID", 10),
    "code":              ("Code", 20),
    "location":          ("Location", 15),
    "department":        ("Department", 15),
    "propertyReference": ("Property Reference", 20),
    "estimatedAmount":   ("Estimated Amount", 20),
    "requester":         ("Requester", 20),
    "status":            ("Status", 15),
    "dateRequested":     ("Date Requested", 25),
}


def to_frame(rows: Iterable[PurchaseRequest]) -> pd.DataFrame:
    records: List[dict] = [
        {
            "pr_id": r.pr_id,
            "code": r.code,
            "location": r.location,
            "department": r.department,
            "propertyReference": r.propertyReference,
            "estimatedAmount": float(r.estimatedAmount) if r.estimatedAmount is not None else None,
            "requester": r.requester,
            "status": r.status,
            "dateRequested": r.dateRequested,
        }
        for r in rows
    ]
    df = pd.DataFrame.from_records(records, columns=list(EXPORT_FIELDS))
    # Excel cannot store tz-aware datetimes
    df["dateRequested"] = pd.to_datetime(df["dateRequested"], utc=True).dt.tz_localize(None)
    return df


def export_excel(rows: Iterable[PurchaseRequest]) -> bytes:
    df = to_frame(rows).rename(columns={k: v[0] for k, v in EXCEL_COLUMNS.items()})
    buf = BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=SHEET_NAME, index=False)
        ws = writer.sheets[SHEET_NAME]
        for idx, field in enumerate(EXPORT_FIELDS, start=1):
            ws.column_dimensions[get_column_letter(idx)].width = EXCEL_COLUMNS[field][1]
    return buf.getvalue()


def export_csv(rows: Iterable[PurchaseRequest]) -> bytes:
    df = to_frame(rows)
    return df.to_csv(index=False, date_format="%Y-%m-%dT%H:%M:%S.%fZ").encode("utf-8")
