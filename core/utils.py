"""Assorted utility helpers."""
import re


def digits_only(value):
    """Return only the digit characters of ``value`` (``None`` becomes ``""``)."""
    if value is None:
        return ""
    return re.sub(r"\D", "", str(value))


def parse_int(value, default=0):
    """Parse a leading integer the way form inputs are read.

    Blank or non-numeric input falls back to ``default``.
    """
    m = re.match(r"\s*([+-]?\d+)", "" if value is None else str(value))
    if not m:
        return default
    try:
        return int(m.group(1))
    except (TypeError, ValueError):
        return default
