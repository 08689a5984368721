"""Documents and review steps."""
from __future__ import annotations
from typing import Optional

import streamlit as st

from core.checklist import build_step_checklist
from core.submission import upload_documents
from core.validation import StepValidation
from rentwise.models import ApplicationForm, AuthUser
from ui.components import show_error


def render_documents_step(form: ApplicationForm, result: StepValidation, user: Optional[AuthUser] = None) -> ApplicationForm:
    st.markdown("Upload a government-issued photo ID for each adult applicant.")
    files = st.file_uploader("ID documents", accept_multiple_files=True, key="id_documents")
    if files and st.button("Upload", key="upload_documents"):
        form, outcome = upload_documents(form, [(f.name, f.getvalue()) for f in files], user=user)
        if outcome.success:
            st.success(outcome.message)
        else:
            st.error(outcome.message)
    for name in form.documents.id:
        st.caption(f"📄 {name}")
    show_error(result.errors.get("documents", ""))
    return form


def render_review_step(form: ApplicationForm, result: StepValidation) -> ApplicationForm:
    with st.expander("Application Checklist", expanded=True):
        for row in build_step_checklist(form):
            st.markdown(f"{'✅' if row['checked'] else '⬜'} {row['label']}")
    background = st.checkbox(
        "I authorize a background and credit check",
        value=form.background_check_permission,
        key="background_check_permission",
    )
    show_error(result.errors.get("background_check_permission", ""))
    texts = st.checkbox(
        "Send me text message updates about my application",
        value=form.text_message_permission,
        key="text_message_permission",
    )
    return form.model_copy(update={"background_check_permission": background, "text_message_permission": texts})
