import re

import pytest

from pr_tracker.core.errors import InvalidInput, UnknownCode
from pr_tracker.domain.codes import format_code, validate_codes
from pr_tracker.domain.constants import LOCATION_CODES, DEPARTMENT_CODES

CODE_RE = re.compile(r"^[A-Z]{3}-[A-Z]{3}-\d{4,}$")


def test_format_code_pads_to_four_digits():
    assert format_code("Raqqa", "Health", 7) == "RAQ-HEA-0007"


def test_format_code_keeps_full_width_past_9999():
    assert format_code("Raqqa", "Health", 10342) == "RAQ-HEA-10342"


@pytest.mark.parametrize("location", list(LOCATION_CODES))
@pytest.mark.parametrize("department", list(DEPARTMENT_CODES))
def test_format_code_shape_for_every_table_entry(location, department):
    for seq in (1, 9999, 10000, 123456):
        code = format_code(location, department, seq)
        assert CODE_RE.match(code)
        assert code == format_code(location, department, seq)
        assert code.startswith(f"{LOCATION_CODES[location]}-{DEPARTMENT_CODES[department]}-")


def test_other_table_entries():
    assert format_code("Deir Ezole", "WASH", 42) == "DRZ-WSH-0042"
    assert format_code("Hassaka", "Education", 1) == "HSK-EDU-0001"


@pytest.mark.parametrize("location,department", [
    ("Aleppo", "Health"),
    ("Raqqa", "Finance"),
    ("raqqa", "Health"),
    ("", ""),
])
def test_unknown_location_or_department(location, department):
    with pytest.raises(UnknownCode):
        validate_codes(location, department)
    with pytest.raises(UnknownCode):
        format_code(location, department, 1)


@pytest.mark.parametrize("seq", [0, -1, 1.5, "7", True])
def test_sequence_number_must_be_positive_int(seq):
    with pytest.raises(InvalidInput):
        format_code("Raqqa", "Health", seq)
