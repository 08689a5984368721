"""Labelled form inputs that format on every run and show inline errors."""
from typing import Callable, List, Optional

import streamlit as st

FIELD_GUIDANCE = {
    "ssn": "Social Security, ITIN or EIN. Hidden on screen once entered.",
    "date_of_birth": "MM/DD/YYYY. Applicants must be at least 18.",
    "move_in_date": "MM/DD/YYYY.",
    "current_duration": "Less than 2 years at this address requires a previous address.",
    "monthly_income": "Gross monthly income from this employer.",
    "relation": "Required before the application can be submitted.",
}


def show_error(message: str) -> None:
    if message:
        st.caption(f":red[{message}]")


def formatted_text_input(
    label: str,
    key: str,
    stored: str,
    formatter: Optional[Callable[[str], str]] = None,
    validator: Optional[Callable[[str], str]] = None,
    help_key: Optional[str] = None,
    password: bool = False,
    error: str = "",
) -> str:
    """Text input whose value is re-formatted before each render.

    The validator only runs once something has been typed so untouched fields
    stay quiet; ``error`` forces a message from a failed step gate.
    """
    if key not in st.session_state:
        st.session_state[key] = stored or ""
    elif formatter:
        st.session_state[key] = formatter(st.session_state[key])
    st.text_input(
        label,
        key=key,
        help=FIELD_GUIDANCE.get(help_key or ""),
        type="password" if password else "default",
    )
    value = st.session_state[key]
    if formatter:
        value = formatter(value)
    message = (validator(value) if validator and value else "") or error
    show_error(message)
    return value


def select_input(label: str, options: List[str], key: str, stored: str, help_key: Optional[str] = None,
                 format_func=str, error: str = "") -> str:
    choices = [""] + list(options)
    if key not in st.session_state:
        st.session_state[key] = stored if stored in choices else ""
    st.selectbox(
        label,
        choices,
        key=key,
        help=FIELD_GUIDANCE.get(help_key or ""),
        format_func=lambda v: "Select..." if v == "" else format_func(v),
    )
    show_error(error)
    return st.session_state[key]


def yes_no_input(label: str, key: str, stored: Optional[bool]) -> Optional[bool]:
    """Radio with an explicit unanswered state; returns ``None`` until answered."""
    choices = ["", "Yes", "No"]
    if key not in st.session_state:
        st.session_state[key] = "" if stored is None else ("Yes" if stored else "No")
    st.radio(label, choices, key=key, horizontal=True, format_func=lambda v: v or "Not answered")
    answer = st.session_state[key]
    return None if answer == "" else answer == "Yes"
