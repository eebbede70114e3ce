# backend/pr_tracker/domain/constants.py

"""
Application-wide fixed tables: location/department code tables, enums and
counter series names.
"""

from typing import Final, Mapping

LOCATION_CODES: Final[Mapping[str, str]] = {
    "Raqqa": "RAQ",
    "Hassaka": "HSK",
    "Deir Ezole": "DRZ",
}

DEPARTMENT_CODES: Final[Mapping[str, str]] = {
    "Health": "HEA",
    "Education": "EDU",
    "WASH": "WSH",
}

PR_STATUSES: Final = ("pending", "approved", "rejected")
PR_STATUS_DEFAULT: Final[str] = "pending"

USER_ROLES: Final = ("user", "manager", "admin", "superadmin")
USER_ROLE_DEFAULT: Final[str] = "user"

# Counter series for PurchaseRequest.pr_id
SERIES_PURCHASE_REQUEST: Final[str] = "PurchaseRequest"

# Minimum width of the numeric part of a PR code
SEQ_PAD_WIDTH: Final[int] = 4

# Export column order (CSV header / Excel keys)
EXPORT_FIELDS: Final = (
    "pr_id",
    "code",
    "location",
    "department",
    "propertyReference",
    "estimatedAmount",
    "requester",
    "status",
    "dateRequested",
)
