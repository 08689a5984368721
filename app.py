import streamlit as st

from core.config import get_settings, setup_logging
from core.state import FormSession, prefill_from_user
from core.submission import submit_application
from core.validation import StepValidation, missing_fields_message
from rentwise import __version__
from rentwise.models import Property
from rentwise.presets import SAMPLE_PROPERTY, STEP_TITLES
from rentwise.pricing import resolve_base_rent
from ui.documents import render_documents_step, render_review_step
from ui.forms import (
    render_additional_step,
    render_financial_step,
    render_holders_step,
    render_housing_step,
    render_occupants_step,
    render_personal_step,
)
from ui.products import render_product_selection
from ui.property import render_unit_browser
from ui.sidebar import render_step_sidebar

STEP_RENDERERS = [
    render_personal_step,
    render_financial_step,
    render_housing_step,
    render_holders_step,
    render_occupants_step,
    render_additional_step,
    lambda form, result: render_documents_step(form, result, st.session_state.get("user")),
    render_review_step,
]


def init_state():
    ss = st.session_state
    ss.setdefault("user", None)
    if "form_session" not in ss:
        session = FormSession()
        session.form = prefill_from_user(session.form, ss["user"])
        ss["form_session"] = session
    ss.setdefault("property", Property.model_validate(SAMPLE_PROPERTY))
    ss.setdefault("flash", None)
    ss.setdefault("step_result", None)


def _flash():
    msg = st.session_state.get("flash")
    if msg:
        st.error(msg)
        st.session_state["flash"] = None


def render_application():
    """Current step of the application form with Back / Next / Submit."""
    init_state()
    session: FormSession = st.session_state["form_session"]
    step = session.current_step
    st.subheader(f"Step {step + 1} of {len(STEP_TITLES)}: {STEP_TITLES[step]}")
    _flash()

    # Gate errors are only shown on the step that produced them.
    stored = st.session_state.get("step_result")
    result = stored[1] if stored and stored[0] == step else StepValidation()
    form = STEP_RENDERERS[step](session.form, result)
    if form != session.form:
        session.update(form)

    back, forward = st.columns(2)
    if step > 0 and back.button("Back", key="step_back"):
        session.prev_step()
        st.rerun()
    if step < len(STEP_TITLES) - 1:
        if forward.button("Next", key="step_next"):
            outcome = session.next_step()
            if outcome.is_valid:
                st.session_state["step_result"] = None
            else:
                st.session_state["step_result"] = (step, outcome)
                st.session_state["flash"] = missing_fields_message(outcome)
            st.rerun()
    elif forward.button("Submit Application", key="submit_application"):
        selection = st.session_state.get("selected_unit_term")
        result = submit_application(
            session.form,
            user=st.session_state.get("user"),
            prop=st.session_state.get("property"),
            unit=selection[0] if selection else None,
        )
        if result.success:
            session.close(clear=True)
            st.session_state.pop("form_session")
            st.success(result.message)
        elif result.issue is not None:
            session.jump_to_step(result.issue.step)
            st.session_state["flash"] = result.issue.message
            st.rerun()
        else:
            st.error(result.message)
            with st.expander("Screening payload"):
                st.json(result.vendor_payload)


def render_units():
    init_state()
    picked = render_unit_browser(st.session_state["property"])
    st.session_state["selected_unit_term"] = picked
    return picked


def render_checkout():
    init_state()
    picked = st.session_state.get("selected_unit_term")
    unit, months = picked if picked else (None, 12)
    selected_rent = None
    if unit is not None:
        selected_rent = next((t.rent for t in unit.lease_terms if t.months == months), None)
    base_rent = resolve_base_rent(unit, months, selected_rent=selected_rent)
    st.caption(f"Base rent: ${base_rent:,.2f}/mo")
    return render_product_selection(base_rent, user=st.session_state.get("user"))


def main():
    settings = get_settings()
    setup_logging(settings.log_level)
    st.set_page_config(page_title="RentWise Application", layout="wide")
    init_state()

    st.title("RentWise")
    st.caption(f"v{__version__}")
    if st.session_state.get("user") is None:
        st.sidebar.info("Test mode: not signed in. Payments are simulated.")
    view = st.sidebar.radio("Navigate", ["Units", "Application", "Add-ons & Payment"], key="view")
    if view == "Application":
        render_step_sidebar(st.session_state["form_session"])
        render_application()
    elif view == "Units":
        render_units()
    else:
        render_checkout()


if __name__ == "__main__":
    main()
