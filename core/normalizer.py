"""Reshape the application form into outbound records.

Two independent shapes come out of one submission: the screening vendor
payload (PascalCase, fixed contract) and the flat record written to the
document store.
"""
from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from core.formatters import (
    format_dob,
    format_phone_e164,
    normalize_income,
    title_case,
    upper_state,
)
from core.utils import digits_only, parse_int
from rentwise.models import (
    AdditionalOccupant,
    Applicant,
    ApplicationForm,
    AuthUser,
    Employer,
    Person,
    Property,
    Unit,
)
from rentwise.presets import ADULT_AGE, DURATION_LABELS, DURATION_UNDER_2


def _phone(phone: str) -> str:
    return format_phone_e164(phone) if phone else ""


def map_addresses(current: Dict[str, str], previous: Optional[Dict[str, str]] = None) -> List[Dict[str, str]]:
    """Vendor address records for a current and optional previous address.

    Addresses without a street are dropped.
    """
    addresses = []
    if current.get("street"):
        duration = current.get("duration") or ""
        addresses.append(
            {
                "Street": current["street"],
                "City": current.get("city", ""),
                "State": current.get("state", ""),
                "Zip": current.get("zip", ""),
                "Duration": DURATION_LABELS.get(duration, duration or "Current"),
            }
        )
    if previous and previous.get("street"):
        addresses.append(
            {
                "Street": previous["street"],
                "City": previous.get("city", ""),
                "State": previous.get("state", ""),
                "Zip": previous.get("zip", ""),
                "Duration": "Previous",
            }
        )
    return addresses


def map_employers(employers: List[Employer], title_case_names: bool = False) -> List[Dict[str, str]]:
    return [
        {
            "Employer": title_case(e.name) if title_case_names else e.name,
            "Industry": e.industry,
            "Position": e.position,
            "Income": normalize_income(e.income),
            "EmploymentStatus": e.employment_status,
        }
        for e in employers or []
        if e.name
    ]


def person_addresses(person: Person, normalize_case: bool = False) -> List[Dict[str, str]]:
    fix_state = upper_state if normalize_case else (lambda s: s)
    current = {
        "street": person.current_street,
        "city": person.current_city,
        "state": fix_state(person.current_state),
        "zip": person.current_zip,
        "duration": person.current_duration,
    }
    previous = None
    if person.current_duration == DURATION_UNDER_2 and person.previous_street:
        previous = {
            "street": person.previous_street,
            "city": person.previous_city,
            "state": fix_state(person.previous_state),
            "zip": person.previous_zip,
        }
    return map_addresses(current, previous)


def map_person(person: Person, normalize_case: bool = False) -> Dict[str, Any]:
    """Vendor record for the applicant, a lease holder or a guarantor.

    ``normalize_case`` title-cases names and employers and upper-cases
    states; the vendor contract expects it for guarantors only.
    """
    first, last = person.first_name, person.last_name
    if normalize_case:
        first, last = title_case(first), title_case(last)
    return {
        "FirstName": first,
        "MiddleInitial": person.middle_initial,
        "LastName": last,
        "DOB": format_dob(person.date_of_birth),
        "SSN": digits_only(person.ssn_raw or person.ssn),
        "Email": person.email,
        "Phone": _phone(person.phone),
        "CitizenshipStatus": "Citizen" if person.is_citizen else "Non-Citizen",
        "Addresses": person_addresses(person, normalize_case=normalize_case),
        "Employers": map_employers(person.employers, title_case_names=normalize_case),
    }


def map_occupant(occupant: AdditionalOccupant) -> Dict[str, str]:
    """Adults carry a DOB, minors an age; unresolvable ages carry neither."""
    record = {
        "FirstName": occupant.first_name,
        "MiddleInitial": occupant.middle_initial,
        "LastName": occupant.last_name,
    }
    age = parse_int(occupant.age)
    if age >= ADULT_AGE and occupant.date_of_birth:
        record["DOB"] = format_dob(occupant.date_of_birth)
    elif 0 < age < ADULT_AGE:
        record["Age"] = occupant.age
    return record


def map_additional_info(form: ApplicationForm) -> Dict[str, Any]:
    pets = []
    for pet in form.pets:
        weight = digits_only(pet.weight)
        pets.append(
            {
                "Type": pet.type,
                "Breed": pet.breed,
                "Age": digits_only(pet.age),
                "Weight": f"{weight} lbs" if weight else "",
            }
        )
    vehicles = [
        {"Make": v.make, "Model": v.model, "Year": v.year, "LicensePlate": v.license_plate}
        for v in form.vehicles
    ]
    contact = form.emergency_contact
    return {
        "Pets": pets,
        "Vehicles": vehicles,
        "EmergencyContact": {
            "Name": contact.name,
            "Phone": _phone(contact.phone),
            "Relation": contact.relation,
        },
        "Notes": form.additional_info,
    }


def _with_employer_name(applicant: Applicant) -> Applicant:
    # The step-one employer name field fills a blank first employer row.
    employers = applicant.employers or [Employer()]
    if not applicant.employer_name or employers[0].name:
        return applicant
    first = employers[0].model_copy(update={"name": applicant.employer_name})
    return applicant.model_copy(update={"employers": [first, *employers[1:]]})


def build_vendor_payload(form: ApplicationForm) -> Dict[str, Any]:
    """Screening vendor JSON. Key names and order are a fixed external contract."""
    a = form.applicant
    primary = map_person(_with_employer_name(a))
    return {
        "FirstName": a.first_name,
        "MiddleInitial": a.middle_initial,
        "LastName": a.last_name,
        "Email": a.email,
        "Phone": _phone(a.phone),
        "DOB": primary["DOB"],
        "SSN": primary["SSN"],
        "CitizenshipStatus": primary["CitizenshipStatus"],
        "MoveInDate": a.move_in_date,
        "LeaseTerm": a.desired_lease_term,
        "Addresses": primary["Addresses"],
        "Employers": primary["Employers"],
        "LeaseHolders": [map_person(h) for h in form.lease_holders],
        "Guarantors": [map_person(g, normalize_case=True) for g in form.guarantors],
        "AdditionalOccupants": [map_occupant(o) for o in form.additional_occupants],
        "AdditionalInfo": map_additional_info(form),
    }


def annual_income(income: str) -> float:
    cleaned = re.sub(r"[^0-9.]", "", income or "")
    m = re.match(r"\d*\.?\d+|\d+", cleaned)
    return float(m.group(0)) if m else 0.0


def pet_details(form: ApplicationForm) -> str:
    return ", ".join(
        f"{p.type}: {p.name} ({p.age} years, {p.weight} lbs)" for p in form.pets
    )


def _one_line_address(person: Person) -> str:
    region = " ".join(p for p in (person.current_state, person.current_zip) if p)
    return ", ".join(p for p in (person.current_street, person.current_city, region) if p)


def build_persistence_record(
    form: ApplicationForm,
    prop: Optional[Property] = None,
    unit: Optional[Unit] = None,
    user: Optional[AuthUser] = None,
) -> Dict[str, Any]:
    """Flat record for the document store; independent of the vendor shape."""
    a = form.applicant
    primary = a.employers[0] if a.employers else Employer()
    contact = form.emergency_contact
    return {
        "firstName": a.first_name,
        "lastName": a.last_name,
        "email": a.email,
        "phone": a.phone,
        "dateOfBirth": a.date_of_birth,
        "ssn": a.ssn,
        "currentAddress": _one_line_address(a),
        "city": a.current_city,
        "state": a.current_state,
        "zipCode": a.current_zip,
        "employer": primary.name,
        "jobTitle": primary.position,
        "employmentStatus": primary.employment_status,
        "annualIncome": annual_income(primary.income),
        "moveInDate": a.move_in_date,
        "desiredLeaseTerm": a.desired_lease_term,
        "propertyId": prop.id if prop else "general-application",
        "propertyName": prop.name if prop else "General Application",
        "unitId": unit.id if unit else None,
        "unitNumber": unit.unit_number if unit else None,
        "notes": form.additional_info,
        "hasPets": bool(form.has_pets),
        "petDetails": pet_details(form),
        "emergencyContactName": contact.name,
        "emergencyContactPhone": contact.phone,
        "emergencyContactRelationship": contact.relation,
        "submittedBy": user.uid if user else "",
    }
