# backend/pr_tracker/domain/codes.py
from __future__ import annotations
from typing import Tuple

from pr_tracker.core.errors import InvalidInput, UnknownCode
from pr_tracker.domain.constants import LOCATION_CODES, DEPARTMENT_CODES, SEQ_PAD_WIDTH


def validate_codes(location: str, department: str) -> Tuple[str, str]:
    """
    Look up the 3-letter codes for a location/department pair.
    Raises UnknownCode if either name is missing from its table.
    """
    loc = LOCATION_CODES.get(location)
    dept = DEPARTMENT_CODES.get(department)
    if not loc or not dept:
        raise UnknownCode()
    return loc, dept


def format_code(location: str, department: str, sequence_number: int) -> str:
    """'Raqqa', 'Health', 7 -> 'RAQ-HEA-0007'. Numbers past 9999 keep their full width."""
    loc, dept = validate_codes(location, department)
    if isinstance(sequence_number, bool) or not isinstance(sequence_number, int) or sequence_number < 1:
        raise InvalidInput("Sequence number must be a positive integer.")
    return f"{loc}-{dept}-{sequence_number:0{SEQ_PAD_WIDTH}d}"
