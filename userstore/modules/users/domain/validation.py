"""
Validation Rules

Field level checks shared by full validation and partial updates.
Each check returns an error message, or an empty string when the value passes.
"""
import calendar
import re
from typing import Any

DATE_OF_BIRTH_FORMAT = "yyyy/MM/dd"

USER_ID_REQUIRED = '"userId" is required'
INVALID_DATE_OF_BIRTH = f'"dateOfBirth" must be a valid date formatted as {DATE_OF_BIRTH_FORMAT}'

_DATE_SHAPE = re.compile(r"([0-9]{4})/([0-9]{2})/([0-9]{2})")


def must_be_string(field: str) -> str:
    return f'"{field}" must be a string'


def validate_date_of_birth(date_of_birth: Any) -> str:
    """Check that the value is a real calendar date written as yyyy/MM/dd.

    Years run from 0000 on the proleptic Gregorian calendar, so year 0 is a
    leap year. ``datetime`` stops at year 1 and is not used here.
    """
    if not isinstance(date_of_birth, str):
        return INVALID_DATE_OF_BIRTH
    match = _DATE_SHAPE.fullmatch(date_of_birth)
    if not match:
        return INVALID_DATE_OF_BIRTH
    year, month, day = (int(part) for part in match.groups())
    if not 1 <= month <= 12:
        return INVALID_DATE_OF_BIRTH
    days_in_month = calendar.mdays[month]
    if month == 2 and calendar.isleap(year):
        days_in_month = 29
    if not 1 <= day <= days_in_month:
        return INVALID_DATE_OF_BIRTH
    return ""
