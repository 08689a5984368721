from streamlit.testing.v1 import AppTest

from core.state import FormSession
from rentwise.models import Applicant, ApplicationForm, EmergencyContact


def application_app():
    import app

    app.render_application()


def _session(tmp_path, form=None):
    return FormSession(form=form or ApplicationForm(), draft_path=str(tmp_path / "draft.json"), debounce_seconds=60)


def test_next_is_blocked_until_step_is_complete(tmp_path):
    at = AppTest.from_function(application_app)
    at.session_state["form_session"] = _session(tmp_path)
    at.run()
    assert at.subheader[0].value == "Step 1 of 8: Personal Info"
    at.button(key="step_next").click().run()
    assert at.session_state["form_session"].current_step == 0
    assert any(e.value.startswith("Please complete:") for e in at.error)


def test_inputs_are_formatted_and_stored(tmp_path):
    at = AppTest.from_function(application_app)
    at.session_state["form_session"] = _session(tmp_path)
    at.run()
    at.text_input(key="applicant_phone").input("5551234567").run()
    at.run()
    assert at.text_input(key="applicant_phone").value == "(555) 123-4567"
    session = at.session_state["form_session"]
    assert session.form.applicant.phone == "(555) 123-4567"
    assert session.pending_save


def test_submit_failure_is_reported_without_losing_form(tmp_path):
    form = ApplicationForm(
        applicant=Applicant(first_name="Jane", date_of_birth="01/15/1990", current_duration="2+"),
        emergency_contact=EmergencyContact(relation="Sibling"),
        background_check_permission=True,
        documents={"id": ["id.png"]},
    )
    session = _session(tmp_path, form)
    session.jump_to_step(7)
    at = AppTest.from_function(application_app)
    at.session_state["form_session"] = session
    at.run()
    at.button(key="submit_application").click().run()
    assert any("failed to save" in e.value for e in at.error)
    assert at.session_state["form_session"].form.applicant.first_name == "Jane"


def test_submit_issue_navigates_back(tmp_path):
    form = ApplicationForm(background_check_permission=True, documents={"id": ["id.png"]})
    session = _session(tmp_path, form)
    session.jump_to_step(7)
    at = AppTest.from_function(application_app)
    at.session_state["form_session"] = session
    at.run()
    at.button(key="submit_application").click().run()
    # the applicant has no address duration yet
    assert at.session_state["form_session"].current_step == 2
    assert any("current address" in e.value for e in at.error)
