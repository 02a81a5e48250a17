from datetime import date, datetime

import pytest

from school_appointments.common.datetime_utils import (
    add_months,
    coerce_date,
    format_date,
    format_date_and_time,
    format_time,
)
from school_appointments.common.text import chunk, generate_acronym, generate_qrcode, to_proper
from school_appointments.common.validators import require_letters, require_non_empty
from school_appointments.core.exceptions import ValidationError


@pytest.mark.parametrize(
    "value",
    ["2026-10-19", "Mon Oct 19 2026", "October 19, 2026", "2026-10-19T00:00:00+00:00", datetime(2026, 10, 19, 8)],
)
def test_coerce_date_accepts_stored_formats(value):
    assert coerce_date(value) == date(2026, 10, 19)


def test_coerce_date_rejects_garbage():
    assert coerce_date("") is None
    with pytest.raises(ValueError):
        coerce_date("19/10/2026")


def test_add_months_clamps_to_month_end():
    assert add_months(date(2026, 11, 30), 3) == date(2027, 2, 28)
    assert add_months(date(2026, 10, 19), 3) == date(2027, 1, 19)


def test_display_formats():
    assert format_date(date(2026, 10, 19)) == "October 19, 2026"
    assert format_time("13:05") == "01:05 PM"
    assert format_time("00:30") == "12:30 AM"
    assert format_time(None) == ""
    assert format_date_and_time(datetime(2026, 10, 9, 13, 5, 9)) == "October 09, 2026 at 01:05:09 PM"


def test_text_helpers():
    assert to_proper("juan DELA cruz") == "Juan Dela Cruz"
    assert generate_acronym("Bachelor of Science in Information Technology") == "BSIT"
    assert chunk([1, 2, 3, 4, 5], 2) == [[1, 2], [3, 4], [5]]
    code = generate_qrcode()
    assert len(code) == 6 and code == code.upper()


def test_validators():
    assert require_non_empty("  BSIT ", "Course") == "BSIT"
    with pytest.raises(ValidationError, match="Course is required"):
        require_non_empty(" ", "Course")
    assert require_letters("Ana Marie", "Firstname", 10) == "Ana Marie"
