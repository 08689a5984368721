from core.normalizer import (
    build_persistence_record,
    build_vendor_payload,
    map_addresses,
    map_employers,
    map_occupant,
    map_person,
)
from rentwise.models import (
    AdditionalOccupant,
    Applicant,
    ApplicationForm,
    AuthUser,
    EmergencyContact,
    Employer,
    Guarantor,
    LeaseHolder,
    Pet,
    Property,
    Unit,
    Vehicle,
)

VENDOR_KEYS = [
    "FirstName", "MiddleInitial", "LastName", "Email", "Phone", "DOB", "SSN", "CitizenshipStatus",
    "MoveInDate", "LeaseTerm", "Addresses", "Employers", "LeaseHolders", "Guarantors",
    "AdditionalOccupants", "AdditionalInfo",
]


def _applicant():
    return Applicant(
        first_name="Jane",
        middle_initial="Q",
        last_name="Doe",
        email="jane@example.com",
        phone="(555) 123-4567",
        date_of_birth="01/15/1990",
        ssn="•••-••-6789",
        ssn_raw="123456789",
        move_in_date="08/01/2025",
        desired_lease_term="12",
        current_street="1 Main St",
        current_city="Austin",
        current_state="TX",
        current_zip="78701",
        current_duration="0-2",
        previous_street="9 Old Rd",
        previous_city="Dallas",
        previous_state="TX",
        previous_zip="75201",
        employment="full-time",
        employers=[Employer(name="Acme", industry="Technology", position="Manager", income="5,250")],
    )


def test_blank_street_emits_no_address():
    assert map_addresses({"street": "", "city": "Austin", "state": "TX", "zip": "78701", "duration": "2+"}) == []


def test_duration_labels():
    def duration(d):
        return map_addresses({"street": "x", "duration": d})[0]["Duration"]

    assert duration("0-2") == "Less than 2 years"
    assert duration("2+") == "More than 2 years"
    assert duration("5+") == "More than 2 years"
    assert duration("") == "Current"


def test_previous_address_tagged():
    rows = map_addresses({"street": "1 Main"}, {"street": "9 Old Rd", "city": "Dallas"})
    assert [r["Duration"] for r in rows] == ["Current", "Previous"]
    assert len(map_addresses({"street": "1 Main"}, {"street": ""})) == 1


def test_employers_drop_blank_names_and_strip_commas():
    rows = map_employers([Employer(name="Acme", income="12,500"), Employer(name="", income="1")])
    assert len(rows) == 1
    assert rows[0]["Income"] == "12500"


def test_guarantor_casing_differs_from_lease_holder():
    kwargs = dict(first_name="mARY", last_name="o'neil", current_street="1 Elm", current_state="tx",
                  employers=[Employer(name="big co")])
    holder = map_person(LeaseHolder(**kwargs))
    guarantor = map_person(Guarantor(**kwargs), normalize_case=True)
    assert holder["FirstName"] == "mARY"
    assert holder["Addresses"][0]["State"] == "tx"
    assert holder["Employers"][0]["Employer"] == "big co"
    assert guarantor["FirstName"] == "Mary"
    assert guarantor["LastName"] == "O'neil"
    assert guarantor["Addresses"][0]["State"] == "TX"
    assert guarantor["Employers"][0]["Employer"] == "Big Co"


def test_person_fields():
    rec = map_person(LeaseHolder(first_name="Al", date_of_birth="03/04/1985", ssn="123-45-6789",
                                 phone="5551234567", is_citizen=False))
    assert rec["DOB"] == "1985-03-04"
    assert rec["SSN"] == "123456789"
    assert rec["Phone"] == "+15551234567"
    assert rec["CitizenshipStatus"] == "Non-Citizen"
    assert map_person(LeaseHolder())["Phone"] == ""


def test_occupant_age_or_dob():
    adult = map_occupant(AdditionalOccupant(first_name="A", age="30", date_of_birth="01/02/1995"))
    child = map_occupant(AdditionalOccupant(first_name="B", age="7"))
    unknown = map_occupant(AdditionalOccupant(first_name="C", age="0"))
    assert adult["DOB"] == "1995-01-02" and "Age" not in adult
    assert child["Age"] == "7" and "DOB" not in child
    assert "Age" not in unknown and "DOB" not in unknown


def test_occupant_age_is_sent_as_typed():
    assert map_occupant(AdditionalOccupant(first_name="D", age="07"))["Age"] == "07"


def test_vendor_payload_shape():
    form = ApplicationForm(
        applicant=_applicant(),
        lease_holders=[LeaseHolder(first_name="lee")],
        guarantors=[Guarantor(first_name="gus")],
        additional_occupants=[AdditionalOccupant(first_name="Kid", age="7")],
        pets=[Pet(type="dog", breed="Lab", age="3 yrs", weight="40lbs")],
        vehicles=[Vehicle(make="Honda", model="Civic", year="2020", license_plate="abc123")],
        emergency_contact=EmergencyContact(name="Sam", phone="555-987-6543", relation="Sibling"),
        additional_info="Quiet tenant",
    )
    payload = build_vendor_payload(form)
    assert list(payload) == VENDOR_KEYS
    assert payload["SSN"] == "123456789"
    assert payload["DOB"] == "1990-01-15"
    assert payload["Phone"] == "+15551234567"
    assert [a["Duration"] for a in payload["Addresses"]] == ["Less than 2 years", "Previous"]
    assert payload["Employers"][0]["Income"] == "5250"
    assert payload["LeaseHolders"][0]["FirstName"] == "lee"
    assert payload["Guarantors"][0]["FirstName"] == "Gus"
    assert payload["AdditionalOccupants"] == [{"FirstName": "Kid", "MiddleInitial": "", "LastName": "", "Age": "7"}]
    info = payload["AdditionalInfo"]
    assert info["Pets"] == [{"Type": "dog", "Breed": "Lab", "Age": "3", "Weight": "40 lbs"}]
    assert info["Vehicles"][0]["LicensePlate"] == "ABC123"
    assert info["EmergencyContact"] == {"Name": "Sam", "Phone": "+15559876543", "Relation": "Sibling"}
    assert info["Notes"] == "Quiet tenant"


def test_vendor_payload_uses_step_one_employer_name():
    a = _applicant().model_copy(update={"employer_name": "Globex", "employers": [Employer(industry="Retail")]})
    payload = build_vendor_payload(ApplicationForm(applicant=a))
    assert payload["Employers"][0]["Employer"] == "Globex"
    assert payload["Employers"][0]["Industry"] == "Retail"


def test_persistence_record_is_flat():
    form = ApplicationForm(
        applicant=_applicant(),
        has_pets=True,
        pets=[Pet(type="dog", name="Rex", age="3", weight="40"), Pet(type="cat", name="Tom", age="2", weight="9")],
        emergency_contact=EmergencyContact(name="Sam", phone="555", relation="Sibling"),
    )
    prop = Property(id="p1", name="Maple Court")
    unit = Unit(id="u1", unit_number="204")
    record = build_persistence_record(form, prop=prop, unit=unit, user=AuthUser(uid="user-1"))
    assert record["currentAddress"] == "1 Main St, Austin, TX 78701"
    assert record["annualIncome"] == 5250.0
    assert record["petDetails"] == "dog: Rex (3 years, 40 lbs), cat: Tom (2 years, 9 lbs)"
    assert record["propertyId"] == "p1"
    assert record["unitNumber"] == "204"
    assert record["submittedBy"] == "user-1"
    assert record["emergencyContactRelationship"] == "Sibling"


def test_persistence_record_defaults():
    record = build_persistence_record(ApplicationForm())
    assert record["annualIncome"] == 0.0
    assert record["petDetails"] == ""
    assert record["propertyId"] == "general-application"
    assert record["unitId"] is None
    assert record["submittedBy"] == ""


def test_persistence_record_skips_blank_address_parts():
    assert build_persistence_record(ApplicationForm())["currentAddress"] == ""
    partial = ApplicationForm(applicant=Applicant(current_city="Austin", current_zip="78701"))
    assert build_persistence_record(partial)["currentAddress"] == "Austin, 78701"
