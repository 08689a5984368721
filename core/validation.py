"""Field rules plus the step and submit gates for the application form."""
from __future__ import annotations

from datetime import date
from typing import Callable, Dict, Iterable, Iterator, List, Optional

from loguru import logger
from pydantic import BaseModel, Field

from core.formatters import (
    validate_dob,
    validate_email,
    validate_phone,
    validate_ssn,
    validate_zip,
)
from core.utils import digits_only, parse_int
from rentwise.models import ApplicationForm, Person
from rentwise.presets import (
    ADULT_AGE,
    DURATION_UNDER_2,
    MIN_VEHICLE_YEAR,
    STEP_ADDITIONAL,
    STEP_DOCUMENTS,
    STEP_FINANCIAL,
    STEP_HOLDERS,
    STEP_HOUSING,
    STEP_OCCUPANTS,
    STEP_PERSONAL,
    STEP_REVIEW,
    UNEMPLOYED,
)


class StepValidation(BaseModel):
    is_valid: bool = True
    errors: Dict[str, str] = Field(default_factory=dict)
    missing_fields: List[str] = Field(default_factory=list)
    # Per-entity messages keyed by the lease holder / guarantor id.
    entity_errors: Dict[str, str] = Field(default_factory=dict)


class SubmissionIssue(BaseModel):
    code: str
    message: str
    step: int


def _required(message: str) -> Callable[[str], str]:
    return lambda v: "" if v and str(v).strip() else message


def _employed_required(message: str) -> Callable[..., str]:
    def rule(v, employment: str = "") -> str:
        if employment == UNEMPLOYED:
            return ""
        return "" if v and str(v).strip() else message
    return rule


def _dob_rule(v, today: Optional[date] = None) -> str:
    if not v:
        return "Date of birth is required"
    return validate_dob(v, today=today)


FIELD_RULES: Dict[str, Callable[..., str]] = {
    "first_name": _required("First name is required"),
    "last_name": _required("Last name is required"),
    "email": validate_email,
    "phone": validate_phone,
    "date_of_birth": _dob_rule,
    "ssn": validate_ssn,
    "move_in_date": _required("Move-in date is required"),
    "current_street": _required("This field is required"),
    "current_city": _required("This field is required"),
    "current_state": _required("This field is required"),
    "current_zip": validate_zip,
    "current_duration": _required("Please specify how long you have lived at this address"),
    "previous_street": _required("This field is required"),
    "previous_city": _required("This field is required"),
    "previous_state": _required("This field is required"),
    "previous_zip": validate_zip,
    "employment": _required("Employment status is required"),
    "employer_name": _employed_required("Employer name is required"),
    "industry": _employed_required("Industry is required"),
    "position": _employed_required("Position is required"),
    "monthly_income": _employed_required("Monthly income is required"),
}
EMPLOYMENT_DEPENDENT = {"employer_name", "industry", "position", "monthly_income"}

PERSONAL_FIELDS = ["first_name", "last_name", "email", "phone", "date_of_birth", "ssn", "move_in_date"]
CURRENT_ADDRESS_FIELDS = ["current_street", "current_city", "current_state", "current_zip", "current_duration"]
PREVIOUS_ADDRESS_FIELDS = ["previous_street", "previous_city", "previous_state", "previous_zip"]


def validate_field(name: str, value, employment: str = "", today: Optional[date] = None) -> str:
    """Validate one field value. Unknown fields always pass."""
    rule = FIELD_RULES.get(name)
    if rule is None:
        return ""
    if name in EMPLOYMENT_DEPENDENT:
        return rule(value, employment=employment)
    if name == "date_of_birth":
        return rule(value, today=today)
    return rule(value)


def person_dob_errors(people: Iterable[Person], today: Optional[date] = None) -> Dict[str, str]:
    """Recompute DOB errors for each person, keyed by their stable id."""
    errors: Dict[str, str] = {}
    for p in people:
        err = validate_dob(p.date_of_birth, today=today)
        if err:
            errors[p.id] = err
    return errors


def validate_step(form: ApplicationForm, step: int, today: Optional[date] = None) -> StepValidation:
    """Collect every outstanding error for one step so they can be fixed together."""
    a = form.applicant
    employment = a.employment
    errors: Dict[str, str] = {}
    entity_errors: Dict[str, str] = {}

    def check(name: str, value) -> None:
        err = validate_field(name, value, employment=employment, today=today)
        if err:
            errors[name] = err

    if step == STEP_PERSONAL:
        for name in PERSONAL_FIELDS:
            value = (a.ssn_raw or a.ssn) if name == "ssn" else getattr(a, name)
            check(name, value)

    elif step == STEP_FINANCIAL:
        check("employment", employment)
        if employment != UNEMPLOYED:
            primary = a.employers[0] if a.employers else None
            check("employer_name", a.employer_name or (primary.name if primary else ""))
            check("industry", primary.industry if primary else "")
            check("position", primary.position if primary else "")
            check("monthly_income", primary.income if primary else "")

    elif step == STEP_HOUSING:
        for name in CURRENT_ADDRESS_FIELDS:
            check(name, getattr(a, name))
        if a.current_duration == DURATION_UNDER_2:
            for name in PREVIOUS_ADDRESS_FIELDS:
                check(name, getattr(a, name))

    elif step == STEP_HOLDERS:
        holder_errors = person_dob_errors(form.lease_holders, today=today)
        guarantor_errors = person_dob_errors(form.guarantors, today=today)
        if holder_errors:
            errors["lease_holders"] = "Please fix date of birth errors for lease holders"
        if guarantor_errors:
            errors["guarantors"] = "Please fix date of birth errors for guarantors"
        entity_errors.update(holder_errors)
        entity_errors.update(guarantor_errors)

    elif step == STEP_DOCUMENTS:
        if not form.documents.id:
            errors["documents"] = "At least one ID document is required"

    elif step == STEP_REVIEW:
        if form.background_check_permission is not True:
            errors["background_check_permission"] = "Background check authorization is required"

    return StepValidation(
        is_valid=not errors,
        errors=errors,
        missing_fields=list(errors),
        entity_errors=entity_errors,
    )


def missing_fields_message(result: StepValidation, limit: int = 3) -> str:
    """Summarize a failed step gate for a notification."""
    fields = result.missing_fields
    names = ", ".join(fields[:limit])
    extra = len(fields) - limit
    more = f" and {extra} more field{'s' if extra > 1 else ''}" if extra > 0 else ""
    return f"Please complete: {names}{more}"


def _submission_issues(form: ApplicationForm, today: date) -> Iterator[SubmissionIssue]:
    a = form.applicant
    holders, guarantors = form.lease_holders, form.guarantors

    if a.is_citizen is None:
        yield SubmissionIssue(code="CITIZENSHIP_MISSING", step=STEP_PERSONAL,
            message="Please specify citizenship status for the primary applicant.")
    for i, h in enumerate(holders, 1):
        if h.is_citizen is None:
            yield SubmissionIssue(code="CITIZENSHIP_MISSING", step=STEP_HOLDERS,
                message=f"Please specify citizenship status for lease holder {i}.")
    for i, g in enumerate(guarantors, 1):
        if g.is_citizen is None:
            yield SubmissionIssue(code="CITIZENSHIP_MISSING", step=STEP_HOLDERS,
                message=f"Please specify citizenship status for guarantor {i}.")

    if not a.current_duration:
        yield SubmissionIssue(code="DURATION_MISSING", step=STEP_HOUSING,
            message="Please specify how long you have lived at your current address.")
    for i, h in enumerate(holders, 1):
        if not h.current_duration:
            yield SubmissionIssue(code="DURATION_MISSING", step=STEP_HOLDERS,
                message=f"Please specify how long lease holder {i} has lived at their current address.")
    for i, g in enumerate(guarantors, 1):
        if not g.current_duration:
            yield SubmissionIssue(code="DURATION_MISSING", step=STEP_HOLDERS,
                message=f"Please specify how long guarantor {i} has lived at their current address.")

    if not a.date_of_birth or validate_dob(a.date_of_birth, today=today):
        yield SubmissionIssue(code="DOB_INVALID", step=STEP_PERSONAL,
            message="Please provide a valid date of birth for the primary applicant.")
    for i, h in enumerate(holders, 1):
        if not h.date_of_birth or validate_dob(h.date_of_birth, today=today):
            yield SubmissionIssue(code="DOB_INVALID", step=STEP_HOLDERS,
                message=f"Please provide a valid date of birth for lease holder {i}.")
    for i, g in enumerate(guarantors, 1):
        if not g.date_of_birth or validate_dob(g.date_of_birth, today=today):
            yield SubmissionIssue(code="DOB_INVALID", step=STEP_HOLDERS,
                message=f"Please provide a valid date of birth for guarantor {i}.")

    for i, occ in enumerate(form.additional_occupants, 1):
        if parse_int(occ.age) < ADULT_AGE:
            continue
        if not occ.date_of_birth:
            yield SubmissionIssue(code="OCCUPANT_DOB_MISSING", step=STEP_OCCUPANTS,
                message=f"Please provide date of birth for additional occupant {i} (18 years or older).")
            continue
        err = validate_dob(occ.date_of_birth, today=today)
        if err:
            yield SubmissionIssue(code="OCCUPANT_DOB_INVALID", step=STEP_OCCUPANTS,
                message=f"Please provide a valid date of birth for additional occupant {i}: {err}")

    if form.has_vehicles:
        for i, v in enumerate(form.vehicles, 1):
            year = (v.year or "").strip()
            if not (year.isdigit() and len(year) == 4 and MIN_VEHICLE_YEAR <= int(year) <= today.year):
                yield SubmissionIssue(code="VEHICLE_YEAR_INVALID", step=STEP_ADDITIONAL,
                    message=f"Please provide a valid 4-digit year for vehicle {i}.")

    if not form.emergency_contact.relation:
        yield SubmissionIssue(code="EMERGENCY_RELATION_MISSING", step=STEP_ADDITIONAL,
            message="Please specify the relation for your emergency contact.")

    for i, occ in enumerate(form.additional_occupants, 1):
        age = parse_int(occ.age)
        if age >= ADULT_AGE:
            if not occ.date_of_birth:
                yield SubmissionIssue(code="OCCUPANT_DOB_MISSING", step=STEP_OCCUPANTS,
                    message=f"Please provide date of birth for additional occupant {i} (18 years or older).")
        elif age <= 0:
            # Zero, negative or blank ages count as no age at all.
            yield SubmissionIssue(code="OCCUPANT_AGE_MISSING", step=STEP_OCCUPANTS,
                message=f"Please provide age for additional occupant {i}.")

    for i, pet in enumerate(form.pets, 1):
        if not digits_only(pet.age):
            yield SubmissionIssue(code="PET_AGE_MISSING", step=STEP_ADDITIONAL,
                message=f"Please provide age for pet {i}.")
        if not digits_only(pet.weight):
            yield SubmissionIssue(code="PET_WEIGHT_MISSING", step=STEP_ADDITIONAL,
                message=f"Please provide weight for pet {i}.")


def validate_submission(form: ApplicationForm, today: Optional[date] = None) -> Optional[SubmissionIssue]:
    """Run the ordered submit-time checks and return the first failure, if any."""
    issue = next(_submission_issues(form, today or date.today()), None)
    if issue is not None:
        logger.info("Submission blocked: {} (step {})", issue.code, issue.step)
    return issue
