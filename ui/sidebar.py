import streamlit as st

from core.checklist import build_step_checklist
from core.state import FormSession


def render_step_sidebar(session: FormSession):
    """Step list in the sidebar; only steps up to the current one can be revisited."""
    st.sidebar.header("Application")
    for i, row in enumerate(build_step_checklist(session.form)):
        label = ("✅ " if row["checked"] else "") + row["label"]
        if i == session.current_step:
            st.sidebar.markdown(f"**▶ {label}**")
        elif i < session.current_step:
            if st.sidebar.button(label, key=f"goto_step_{i}"):
                session.jump_to_step(i)
                st.rerun()
        else:
            st.sidebar.caption(label)
