from datetime import date

import pytest

from core.submission import checkout, submit_application, upload_documents
from rentwise.models import Applicant, ApplicationForm, AuthUser, EmergencyContact, PetInfo, Property, Unit
from rentwise.presets import PET_INSURANCE, STEP_PERSONAL, STEP_REVIEW
from rentwise.pricing import calculate_total, default_selections, toggle_product

TODAY = date(2025, 6, 15)
USER = AuthUser(uid="user-1", email="jane@example.com")


def _ready_form(**overrides):
    data = dict(
        applicant=Applicant(first_name="Jane", last_name="Doe", date_of_birth="01/15/1990", current_duration="2+",
                            current_street="1 Main St", ssn="123-45-6789"),
        emergency_contact=EmergencyContact(name="Sam", relation="Sibling"),
        background_check_permission=True,
        documents={"id": ["id.png"]},
    )
    data.update(overrides)
    return ApplicationForm(**data)


class RecordingStore:
    def __init__(self, response=None, error=None):
        self.calls = []
        self.response = response or {"success": True, "id": "app-1", "documents_uploaded": 1}
        self.error = error

    def __call__(self, record, documents, uid):
        self.calls.append((record, documents, uid))
        if self.error:
            raise self.error
        return self.response


def test_submit_builds_both_shapes():
    store = RecordingStore()
    result = submit_application(_ready_form(), user=USER, prop=Property(id="p1"), unit=Unit(id="u1"),
                                store=store, today=TODAY)
    assert result.success
    assert result.application_id == "app-1"
    assert result.vendor_payload["SSN"] == "123456789"
    assert result.record["propertyId"] == "p1"
    record, documents, uid = store.calls[0]
    assert documents == ["id.png"] and uid == "user-1"
    assert "FirstName" not in record


def test_background_permission_blocks_submit():
    store = RecordingStore()
    result = submit_application(_ready_form(background_check_permission=False), store=store, today=TODAY)
    assert not result.success
    assert result.issue.step == STEP_REVIEW
    assert store.calls == []


def test_first_invariant_violation_is_returned():
    store = RecordingStore()
    form = _ready_form(applicant=Applicant(is_citizen=None, current_duration="2+", date_of_birth="01/15/1990"))
    result = submit_application(form, store=store, today=TODAY)
    assert result.issue.code == "CITIZENSHIP_MISSING"
    assert result.issue.step == STEP_PERSONAL
    assert store.calls == []


@pytest.mark.parametrize("store", [
    RecordingStore(error=RuntimeError("firestore down")),
    RecordingStore(response={"success": False, "error": "quota"}),
])
def test_store_failure_keeps_form(store):
    form = _ready_form()
    before = form.model_dump()
    result = submit_application(form, store=store, today=TODAY)
    assert not result.success
    assert "try again" in result.message
    assert result.vendor_payload["FirstName"] == "Jane"
    assert form.model_dump() == before


def test_default_store_is_not_wired():
    result = submit_application(_ready_form(), user=USER, today=TODAY)
    assert not result.success


def test_guest_checkout_is_simulated():
    sel = default_selections()
    totals = calculate_total(sel, 1200)

    def gateway(*args):
        raise AssertionError("gateway must not be called for guests")

    result = checkout(totals, sel, 1200, user=None, gateway=gateway)
    assert result.success and result.simulated
    assert result.amount_cents == 5000


def test_pet_insurance_requires_pet_type():
    sel = toggle_product(default_selections(), PET_INSURANCE)
    totals = calculate_total(sel, 1200)
    calls = []
    result = checkout(totals, sel, 1200, user=USER, pet_info=PetInfo(name="Rex"), gateway=lambda *a: calls.append(a))
    assert not result.success
    assert calls == []
    result = checkout(totals, sel, 1200, user=USER, pet_info=PetInfo(type="dog"),
                      gateway=lambda amount, items, email: "https://pay.example/session")
    assert result.success
    assert result.checkout_url == "https://pay.example/session"
    assert result.amount_cents == 5400


def test_gateway_failure_is_reported():
    sel = default_selections()

    def gateway(amount, items, email):
        raise ConnectionError("timeout")

    result = checkout(calculate_total(sel, 1200), sel, 1200, user=USER, gateway=gateway)
    assert not result.success
    assert result.amount_cents == 5000


def test_upload_documents():
    form = ApplicationForm()
    new_form, result = upload_documents(form, [("id.png", b"x")], user=USER,
                                        uploader=lambda name, data, uid: f"{uid}/{name}")
    assert result.success
    assert new_form.documents.id == ["user-1/id.png"]
    assert form.documents.id == []

    def broken(name, data, uid):
        raise OSError("disk")

    same, result = upload_documents(form, [("id.png", b"x")], user=USER, uploader=broken)
    assert not result.success and same is form

    guest_form, result = upload_documents(form, [("id.png", b"x")])
    assert result.success and guest_form.documents.id == ["id.png"]
