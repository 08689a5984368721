"""Single-field formatting, masking and validation.

Formatters reshape raw keystrokes into display values; validators return an
error message or ``""``. Callers format first and validate the formatted value.
"""
from __future__ import annotations

import re
from datetime import date
from typing import Optional

from core.utils import digits_only
from rentwise.presets import ADULT_AGE, MIN_DOB_YEAR

BULLET = "•"
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MMDDYYYY_RE = re.compile(r"^\d{2}/\d{2}/\d{4}$")


def format_phone(value: str) -> str:
    """Progressively format phone digits as ``(XXX) XXX-XXXX``."""
    n = digits_only(value)
    if len(n) <= 3:
        return n
    if len(n) <= 6:
        return f"({n[:3]}) {n[3:]}"
    return f"({n[:3]}) {n[3:6]}-{n[6:10]}"


def format_ssn(value: str) -> str:
    """Progressively format SSN/TIN digits as ``XXX-XX-XXXX``."""
    n = digits_only(value)
    if len(n) <= 3:
        return n
    if len(n) <= 5:
        return f"{n[:3]}-{n[3:]}"
    return f"{n[:3]}-{n[3:5]}-{n[5:9]}"


def mask_ssn_display(value: str) -> str:
    """Mask an SSN for an unfocused field.

    The area and group numbers are always bullets; the serial group is shown
    as typed. Stored values are never masked.
    """
    n = digits_only(value)[:9]
    if not n:
        return ""
    if len(n) <= 3:
        return BULLET * len(n)
    if len(n) <= 5:
        return f"{BULLET * 3}-{BULLET * (len(n) - 3)}"
    return f"{BULLET * 3}-{BULLET * 2}-{n[5:]}"


def format_date_input(value: str) -> str:
    """Apply the ``MM/DD/YYYY`` input mask, keeping at most 8 digits."""
    n = digits_only(value)
    if len(n) <= 2:
        return n
    if len(n) <= 4:
        return f"{n[:2]}/{n[2:]}"
    return f"{n[:2]}/{n[2:4]}/{n[4:8]}"


def format_dob(dob: str) -> str:
    """Reorder ``MM/DD/YYYY`` into ISO ``YYYY-MM-DD``.

    Anything not in the slash pattern (already ISO, partial, malformed) is
    returned unchanged.
    """
    if not dob:
        return ""
    parts = dob.split("/")
    if len(parts) == 3:
        mm, dd, yyyy = parts
        if mm.isdigit() and dd.isdigit() and yyyy.isdigit() and len(yyyy) == 4:
            return f"{yyyy}-{mm.zfill(2)}-{dd.zfill(2)}"
    return dob


def validate_date_mmddyyyy(value: str, today: Optional[date] = None) -> str:
    if not value:
        return "Date is required"
    if not MMDDYYYY_RE.match(value):
        return "Please enter a valid date in MM/DD/YYYY format"
    today = today or date.today()
    month, day, year = (int(p) for p in value.split("/"))
    if year < MIN_DOB_YEAR or year > today.year:
        return "Please enter a valid year (1900 - present)"
    if month < 1 or month > 12:
        return "Please enter a valid month (01-12)"
    try:
        date(year, month, day)
    except ValueError:
        return "Please enter a valid date"
    return ""


def years_before(today: date, years: int) -> date:
    """Same calendar day ``years`` earlier; Feb 29 rolls forward to Mar 1."""
    try:
        return today.replace(year=today.year - years)
    except ValueError:
        return date(today.year - years, 3, 1)


def parse_mmddyyyy(value: str) -> date:
    month, day, year = (int(p) for p in value.split("/"))
    return date(year, month, day)


def validate_dob(value: str, today: Optional[date] = None) -> str:
    """Validate a date of birth and require an age of at least 18."""
    today = today or date.today()
    error = validate_date_mmddyyyy(value, today=today)
    if error:
        return error
    if parse_mmddyyyy(value) > years_before(today, ADULT_AGE):
        return "Applicant must be at least 18 years old"
    return ""


def format_currency_digits(value: str) -> str:
    """Group digits with thousands separators; display only."""
    n = digits_only(value)
    return re.sub(r"\B(?=(\d{3})+(?!\d))", ",", n)


def normalize_income(income: str) -> str:
    return (income or "").replace(",", "")


def format_phone_e164(phone: str) -> str:
    """Normalize a US phone number to E.164.

    Digit counts other than 10, or 11 with a leading ``1``, are passed through
    behind a ``+`` without further checks.
    """
    n = digits_only(phone)
    if len(n) == 10:
        return f"+1{n}"
    if len(n) == 11 and n.startswith("1"):
        return f"+{n}"
    return f"+{n}"


def validate_email(value: str) -> str:
    if not value:
        return "Email is required"
    return "" if EMAIL_RE.match(value) else "Please enter a valid email address"


def validate_phone(value: str) -> str:
    n = digits_only(value)
    if not n:
        return "Phone number is required"
    return "" if len(n) == 10 else "Please enter a valid 10-digit phone number"


def validate_ssn(value: str) -> str:
    n = digits_only(value)
    if not n:
        return "SSN/TIN/EIN is required"
    return "" if len(n) == 9 else "Please enter a valid 9-digit SSN/TIN/EIN"


def validate_zip(value: str) -> str:
    if not value:
        return "ZIP code is required"
    return "" if re.fullmatch(r"\d{5}", value) else "Please enter a valid 5-digit ZIP code"


def title_case(name: str) -> str:
    """Capitalize each space-separated word, lower-casing the rest."""
    if not name:
        return ""
    return " ".join(w[:1].upper() + w[1:].lower() for w in name.split(" "))


def upper_state(state: str) -> str:
    return (state or "").upper()
