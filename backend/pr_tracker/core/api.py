# backend/pr_tracker/core/api.py
from __future__ import annotations
from typing import Any, Dict, Optional
from fastapi.responses import JSONResponse

# UTF-8 charset on every JSON response
class UTF8JSONResponse(JSONResponse):
    media_type = "application/json; charset=utf-8"

def ok(data: Any = None, message: Optional[str] = None, status_code: int = 200, **extra: Any):
    payload: Dict[str, Any] = {}
    if message:
        payload["message"] = message
    if data is not None:
        payload["data"] = data
    payload.update(extra)
    return UTF8JSONResponse(content=payload, status_code=status_code)

def fail(message: str, status_code: int = 400, error: Optional[str] = None, meta: Optional[Dict[str, Any]] = None):
    payload: Dict[str, Any] = {"ok": False, "message": message}
    if error:
        payload["error"] = error
    if meta:
        payload.update(meta)
    return UTF8JSONResponse(content=payload, status_code=status_code)
