"""Application form steps.

Each ``render_*`` function draws one step from the current form and returns
the updated form; nothing here writes to the session directly.
"""
from typing import Dict

import streamlit as st

from core.formatters import (
    format_currency_digits,
    format_date_input,
    format_phone,
    format_ssn,
    mask_ssn_display,
    validate_dob,
    validate_email,
    validate_phone,
    validate_ssn,
    validate_zip,
)
from core.state import remove_entry, replace_entry, set_same_as_primary
from core.utils import parse_int
from core.validation import StepValidation
from rentwise.models import (
    AdditionalOccupant,
    ApplicationForm,
    Employer,
    Guarantor,
    LeaseHolder,
    Person,
    Pet,
    Vehicle,
)
from rentwise.presets import (
    ADULT_AGE,
    DURATION_OPTIONS,
    DURATION_UNDER_2,
    EMPLOYMENT_STATUSES,
    INDUSTRY_OPTIONS,
    PET_TYPES,
    POSITION_OPTIONS,
    RELATIONS,
    UNEMPLOYED,
    VEHICLE_TYPES,
)
from ui.components import formatted_text_input, select_input, show_error, yes_no_input

LEASE_TERM_CHOICES = [str(m) for m in (6, 9, 12, 15, 18, 24)]


def _ssn_input(label: str, key: str, stored: str, error: str = "") -> str:
    value = formatted_text_input(label, key, stored, format_ssn, validate_ssn, "ssn", password=True, error=error)
    if value:
        st.caption(mask_ssn_display(value))
    return value


def _identity_fields(person: Person, prefix: str, errors: Dict[str, str]) -> Dict[str, object]:
    c1, c2, c3 = st.columns([3, 1, 3])
    with c1:
        first = formatted_text_input("First Name", f"{prefix}_first_name", person.first_name,
                                     error=errors.get("first_name", ""))
    with c2:
        middle = formatted_text_input("MI", f"{prefix}_middle_initial", person.middle_initial,
                                      formatter=lambda v: v[:1].upper())
    with c3:
        last = formatted_text_input("Last Name", f"{prefix}_last_name", person.last_name,
                                    error=errors.get("last_name", ""))
    c1, c2 = st.columns(2)
    with c1:
        email = formatted_text_input("Email", f"{prefix}_email", person.email, validator=validate_email,
                                     error=errors.get("email", ""))
        dob = formatted_text_input("Date of Birth", f"{prefix}_date_of_birth", person.date_of_birth,
                                   format_date_input, validate_dob, "date_of_birth",
                                   error=errors.get("date_of_birth", ""))
    with c2:
        phone = formatted_text_input("Phone", f"{prefix}_phone", person.phone, format_phone, validate_phone,
                                     error=errors.get("phone", ""))
        ssn = _ssn_input("SSN / TIN / EIN", f"{prefix}_ssn", person.ssn, error=errors.get("ssn", ""))
    citizen = yes_no_input("U.S. Citizen?", f"{prefix}_is_citizen", person.is_citizen)
    return {
        "first_name": first,
        "middle_initial": middle,
        "last_name": last,
        "email": email,
        "phone": phone,
        "date_of_birth": dob,
        "ssn": ssn,
        "ssn_raw": ssn.replace("-", ""),
        "is_citizen": citizen,
    }


def _address_fields(person: Person, prefix: str, errors: Dict[str, str], disabled: bool = False) -> Dict[str, str]:
    out = {}
    out["current_street"] = formatted_text_input("Street", f"{prefix}_current_street", person.current_street,
                                                 error=errors.get("current_street", ""))
    c1, c2, c3 = st.columns(3)
    with c1:
        out["current_city"] = formatted_text_input("City", f"{prefix}_current_city", person.current_city,
                                                   error=errors.get("current_city", ""))
    with c2:
        out["current_state"] = formatted_text_input("State", f"{prefix}_current_state", person.current_state,
                                                    formatter=lambda v: v.upper()[:2],
                                                    error=errors.get("current_state", ""))
    with c3:
        out["current_zip"] = formatted_text_input("ZIP", f"{prefix}_current_zip", person.current_zip,
                                                  formatter=lambda v: "".join(ch for ch in v if ch.isdigit())[:5],
                                                  validator=validate_zip, error=errors.get("current_zip", ""))
    out["current_duration"] = select_input("Time at this address", list(DURATION_OPTIONS), f"{prefix}_current_duration",
                                           person.current_duration, "current_duration",
                                           format_func=DURATION_OPTIONS.get,
                                           error=errors.get("current_duration", ""))
    if out["current_duration"] == DURATION_UNDER_2:
        st.markdown("**Previous address**")
        out["previous_street"] = formatted_text_input("Previous Street", f"{prefix}_previous_street",
                                                      person.previous_street, error=errors.get("previous_street", ""))
        c1, c2, c3 = st.columns(3)
        with c1:
            out["previous_city"] = formatted_text_input("Previous City", f"{prefix}_previous_city",
                                                        person.previous_city, error=errors.get("previous_city", ""))
        with c2:
            out["previous_state"] = formatted_text_input("Previous State", f"{prefix}_previous_state",
                                                         person.previous_state, formatter=lambda v: v.upper()[:2],
                                                         error=errors.get("previous_state", ""))
        with c3:
            out["previous_zip"] = formatted_text_input("Previous ZIP", f"{prefix}_previous_zip", person.previous_zip,
                                                       validator=validate_zip, error=errors.get("previous_zip", ""))
    return out


def _employer_fields(employer: Employer, prefix: str, errors: Dict[str, str]) -> Employer:
    c1, c2 = st.columns(2)
    with c1:
        name = formatted_text_input("Employer Name", f"{prefix}_name", employer.name,
                                    error=errors.get("employer_name", ""))
        industry = select_input("Industry", INDUSTRY_OPTIONS, f"{prefix}_industry", employer.industry,
                                error=errors.get("industry", ""))
    with c2:
        position = select_input("Position", POSITION_OPTIONS, f"{prefix}_position", employer.position,
                                error=errors.get("position", ""))
        income = formatted_text_input("Monthly Income", f"{prefix}_income", employer.income,
                                      format_currency_digits, help_key="monthly_income",
                                      error=errors.get("monthly_income", ""))
    return employer.model_copy(update={"name": name, "industry": industry, "position": position, "income": income})


def render_personal_step(form: ApplicationForm, result: StepValidation) -> ApplicationForm:
    a = form.applicant
    update = _identity_fields(a, "applicant", result.errors)
    c1, c2 = st.columns(2)
    with c1:
        update["move_in_date"] = formatted_text_input("Desired Move-in Date", "applicant_move_in_date", a.move_in_date,
                                                      format_date_input, help_key="move_in_date",
                                                      error=result.errors.get("move_in_date", ""))
    with c2:
        update["desired_lease_term"] = select_input("Desired Lease Term (months)", LEASE_TERM_CHOICES,
                                                    "applicant_desired_lease_term", a.desired_lease_term)
    return form.model_copy(update={"applicant": a.model_copy(update=update)})


def render_financial_step(form: ApplicationForm, result: StepValidation) -> ApplicationForm:
    a = form.applicant
    employment = select_input("Employment Status", EMPLOYMENT_STATUSES, "applicant_employment", a.employment,
                              format_func=lambda v: v.replace("-", " ").title(),
                              error=result.errors.get("employment", ""))
    employers = list(a.employers) or [Employer()]
    if employment and employment != UNEMPLOYED:
        primary = _employer_fields(employers[0], f"employer_{0}", result.errors)
        employers[0] = primary.model_copy(update={"employment_status": employment})
        for i, extra in enumerate(employers[1:], 1):
            with st.expander(f"Additional employer {i}"):
                employers[i] = _employer_fields(extra, f"employer_{i}", {})
        if st.button("Add Employer", key="add_employer"):
            employers.append(Employer())
    other = st.checkbox("I have other income", value=a.has_other_income, key="applicant_has_other_income")
    details = a.other_income_details
    if other:
        details = st.text_area("Other income details", value=details, key="applicant_other_income_details")
    update = {
        "employment": employment,
        "employers": employers,
        "employer_name": employers[0].name,
        "has_other_income": other,
        "other_income_details": details,
    }
    return form.model_copy(update={"applicant": a.model_copy(update=update)})


def render_housing_step(form: ApplicationForm, result: StepValidation) -> ApplicationForm:
    a = form.applicant
    update = _address_fields(a, "applicant", result.errors)
    return form.model_copy(update={"applicant": a.model_copy(update=update)})


def _render_party(form: ApplicationForm, person: Person, field: str, label: str, errors: Dict[str, str]) -> ApplicationForm:
    prefix = f"{field}_{person.id}"
    with st.expander(label, expanded=True):
        if person.id in errors:
            show_error(errors[person.id])
        update = _identity_fields(person, prefix, {})
        same = st.checkbox("Same address as primary applicant", value=person.same_as_primary,
                           key=f"{prefix}_same_as_primary")
        if same != person.same_as_primary:
            form = set_same_as_primary(form, person.id, same)
            person = next(p for p in getattr(form, field) if p.id == person.id)
        if not same:
            update.update(_address_fields(person, prefix, {}))
        if st.button("Remove", key=f"{prefix}_remove"):
            return form.model_copy(update={field: remove_entry(getattr(form, field), person.id)})
    changed = person.model_copy(update=update)
    return form.model_copy(update={field: replace_entry(getattr(form, field), changed)})


def render_holders_step(form: ApplicationForm, result: StepValidation) -> ApplicationForm:
    st.subheader("Lease Holders")
    show_error(result.errors.get("lease_holders", ""))
    for i, holder in enumerate(list(form.lease_holders), 1):
        form = _render_party(form, holder, "lease_holders", f"Lease holder {i}", result.entity_errors)
    if st.button("Add Lease Holder", key="add_lease_holder"):
        form = form.model_copy(update={"lease_holders": [*form.lease_holders, LeaseHolder()]})
    st.subheader("Guarantors")
    show_error(result.errors.get("guarantors", ""))
    for i, guarantor in enumerate(list(form.guarantors), 1):
        form = _render_party(form, guarantor, "guarantors", f"Guarantor {i}", result.entity_errors)
    if st.button("Add Guarantor", key="add_guarantor"):
        form = form.model_copy(update={"guarantors": [*form.guarantors, Guarantor()]})
    return form


def render_occupants_step(form: ApplicationForm, result: StepValidation) -> ApplicationForm:
    occupants = list(form.additional_occupants)
    for i, occ in enumerate(form.additional_occupants, 1):
        prefix = f"occupant_{occ.id}"
        with st.expander(f"Occupant {i}", expanded=True):
            c1, c2, c3 = st.columns([3, 1, 3])
            first = c1.text_input("First Name", value=occ.first_name, key=f"{prefix}_first_name")
            middle = c2.text_input("MI", value=occ.middle_initial, key=f"{prefix}_middle_initial")
            last = c3.text_input("Last Name", value=occ.last_name, key=f"{prefix}_last_name")
            age = formatted_text_input("Age", f"{prefix}_age", occ.age,
                                       formatter=lambda v: "".join(ch for ch in v if ch.isdigit())[:3])
            update = {"first_name": first, "middle_initial": middle, "last_name": last, "age": age}
            if parse_int(age) >= ADULT_AGE:
                update["date_of_birth"] = formatted_text_input("Date of Birth", f"{prefix}_date_of_birth",
                                                               occ.date_of_birth, format_date_input, validate_dob)
                update["ssn"] = _ssn_input("SSN / TIN", f"{prefix}_ssn", occ.ssn)
            if st.button("Remove", key=f"{prefix}_remove"):
                occupants = remove_entry(occupants, occ.id)
                continue
        occupants = replace_entry(occupants, occ.model_copy(update=update))
    if st.button("Add Occupant", key="add_occupant"):
        occupants.append(AdditionalOccupant())
    return form.model_copy(update={"additional_occupants": occupants})


def _render_pets(form: ApplicationForm) -> ApplicationForm:
    has_pets = yes_no_input("Do you have pets?", "has_pets", form.has_pets)
    pets = [] if has_pets is False else list(form.pets)
    if has_pets:
        for i, pet in enumerate(form.pets, 1):
            prefix = f"pet_{pet.id}"
            with st.expander(f"Pet {i}", expanded=True):
                c1, c2 = st.columns(2)
                with c1:
                    kind = select_input("Type", PET_TYPES, f"{prefix}_type", pet.type, format_func=str.title)
                    name = st.text_input("Name", value=pet.name, key=f"{prefix}_name")
                    breed = st.text_input("Breed", value=pet.breed, key=f"{prefix}_breed")
                with c2:
                    age = st.text_input("Age (years)", value=pet.age, key=f"{prefix}_age")
                    weight = st.text_input("Weight (lbs)", value=pet.weight, key=f"{prefix}_weight")
                    service = st.checkbox("Service animal", value=pet.is_service_animal, key=f"{prefix}_service")
            changed = pet.model_copy(update={"type": kind, "name": name, "breed": breed, "age": age,
                                             "weight": weight, "is_service_animal": service})
            pets = replace_entry(pets, changed)
        if st.button("Add Pet", key="add_pet"):
            pets.append(Pet())
    return form.model_copy(update={"has_pets": has_pets, "pets": pets})


def _render_vehicles(form: ApplicationForm) -> ApplicationForm:
    has_vehicles = yes_no_input("Do you have vehicles?", "has_vehicles", form.has_vehicles)
    vehicles = [] if has_vehicles is False else list(form.vehicles)
    if has_vehicles:
        for i, v in enumerate(form.vehicles, 1):
            prefix = f"vehicle_{v.id}"
            with st.expander(f"Vehicle {i}", expanded=True):
                c1, c2 = st.columns(2)
                with c1:
                    kind = select_input("Type", VEHICLE_TYPES, f"{prefix}_type", v.type)
                    make = st.text_input("Make", value=v.make, key=f"{prefix}_make")
                    model = st.text_input("Model", value=v.model, key=f"{prefix}_model")
                with c2:
                    year = formatted_text_input("Year", f"{prefix}_year", v.year,
                                                formatter=lambda s: "".join(ch for ch in s if ch.isdigit())[:4])
                    color = st.text_input("Color", value=v.color, key=f"{prefix}_color")
                    plate = formatted_text_input("License Plate", f"{prefix}_plate", v.license_plate,
                                                 formatter=str.upper)
            changed = Vehicle(id=v.id, type=kind, make=make, model=model, year=year, color=color,
                              license_plate=plate)
            vehicles = replace_entry(vehicles, changed)
        if st.button("Add Vehicle", key="add_vehicle"):
            vehicles.append(Vehicle())
    return form.model_copy(update={"has_vehicles": has_vehicles, "vehicles": vehicles})


def render_additional_step(form: ApplicationForm, result: StepValidation) -> ApplicationForm:
    form = _render_pets(form)
    form = _render_vehicles(form)
    st.subheader("Emergency Contact")
    ec = form.emergency_contact
    c1, c2 = st.columns(2)
    with c1:
        name = st.text_input("Name", value=ec.name, key="emergency_name")
        phone = formatted_text_input("Phone", "emergency_phone", ec.phone, format_phone)
    with c2:
        email = st.text_input("Email", value=ec.email, key="emergency_email")
        relation = select_input("Relation", RELATIONS, "emergency_relation", ec.relation, "relation")
    notes = st.text_area("Anything else we should know?", value=form.additional_info, key="additional_info")
    contact = ec.model_copy(update={"name": name, "phone": phone, "email": email, "relation": relation})
    return form.model_copy(update={"emergency_contact": contact, "additional_info": notes})
