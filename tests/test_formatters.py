from datetime import date

from core.formatters import (
    format_currency_digits,
    format_date_input,
    format_dob,
    format_phone,
    format_phone_e164,
    format_ssn,
    mask_ssn_display,
    normalize_income,
    title_case,
    validate_date_mmddyyyy,
    validate_dob,
    validate_email,
    validate_phone,
    validate_ssn,
    validate_zip,
    years_before,
)

TODAY = date(2025, 6, 15)


def test_phone_formats_progressively():
    assert format_phone("555") == "555"
    assert format_phone("5551") == "(555) 1"
    assert format_phone("555123") == "(555) 123"
    assert format_phone("5551234") == "(555) 123-4"
    assert format_phone("(555) 123-45678899") == "(555) 123-4567"


def test_ssn_formats_progressively():
    assert format_ssn("123") == "123"
    assert format_ssn("1234") == "123-4"
    assert format_ssn("123456") == "123-45-6"
    assert format_ssn("123-45-67890") == "123-45-6789"


def test_ssn_mask_keeps_only_serial_in_clear():
    assert mask_ssn_display("") == ""
    assert mask_ssn_display("12") == "••"
    assert mask_ssn_display("1234") == "•••-•"
    assert mask_ssn_display("123456789") == "•••-••-6789"
    assert mask_ssn_display("123-45-67") == "•••-••-67"


def test_date_input_mask_caps_at_eight_digits():
    assert format_date_input("01") == "01"
    assert format_date_input("0115") == "01/15"
    assert format_date_input("011519901234") == "01/15/1990"


def test_format_dob_reorders_or_passes_through():
    assert format_dob("02/29/2024") == "2024-02-29"
    assert format_dob("2024-02-29") == "2024-02-29"
    assert format_dob("02/29") == "02/29"
    assert format_dob("") == ""


def test_date_validation_messages():
    assert validate_date_mmddyyyy("", TODAY) == "Date is required"
    assert "MM/DD/YYYY" in validate_date_mmddyyyy("1/2/1990", TODAY)
    assert "valid year" in validate_date_mmddyyyy("01/01/1899", TODAY)
    assert "valid year" in validate_date_mmddyyyy("01/01/2026", TODAY)
    assert "valid month" in validate_date_mmddyyyy("13/01/1990", TODAY)
    assert validate_date_mmddyyyy("02/29/2023", TODAY) != ""
    assert validate_date_mmddyyyy("04/31/2000", TODAY) != ""
    assert validate_date_mmddyyyy("02/29/2024", TODAY) == ""


def test_dob_requires_eighteen_calendar_years():
    assert validate_dob("06/15/2007", TODAY) == ""
    assert validate_dob("06/16/2007", TODAY) == "Applicant must be at least 18 years old"
    assert validate_dob("02/30/1990", TODAY) != ""


def test_leap_day_cutoff_rolls_to_march_first():
    assert years_before(date(2024, 2, 29), 18) == date(2006, 3, 1)
    assert validate_dob("03/01/2006", date(2024, 2, 29)) == ""
    assert validate_dob("03/02/2006", date(2024, 2, 29)) != ""


def test_currency_grouping_round_trips():
    for digits in ["0", "12", "999", "1000", "1234567", "50000000"]:
        assert normalize_income(format_currency_digits(digits)) == digits
    assert format_currency_digits("$4,500.") == "4,500"


def test_e164():
    assert format_phone_e164("(555) 123-4567") == "+15551234567"
    assert len(format_phone_e164("5551234567")) == 12
    assert format_phone_e164("1-555-123-4567") == "+15551234567"
    # lenient passthrough for other lengths
    assert format_phone_e164("12345") == "+12345"


def test_single_field_validators():
    assert validate_email("") == "Email is required"
    assert validate_email("a@b") != ""
    assert validate_email("jane@example.com") == ""
    assert validate_phone("555123456") != ""
    assert validate_phone("(555) 123-4567") == ""
    assert validate_ssn("123-45-678") != ""
    assert validate_ssn("123-45-6789") == ""
    assert validate_zip("7870") != ""
    assert validate_zip("78701") == ""


def test_title_case():
    assert title_case("mARY ann") == "Mary Ann"
    assert title_case("") == ""
