import streamlit as st

from core.config import get_settings
from core.listings import (
    can_proceed,
    compare_units,
    comparison_key,
    credit_score_label,
    explainers_for,
    is_affordable,
    parse_money,
    rank_units,
    rent_to_income_ratio,
    toggle_compare,
)
from rentwise.models import PrequalAnswers, Property
from rentwise.pricing import lease_term_schedule, lease_terms_for


def render_match_finder(prop: Property):
    """Prequalification answers and the property's units ranked against them."""
    with st.expander("Find your best match", expanded=True):
        c1, c2 = st.columns(2)
        with c1:
            location = st.text_input("Preferred area", key="prequal_location")
            budget = st.text_input("Monthly budget", key="prequal_budget")
            income = st.text_input("Monthly income", key="prequal_income")
        with c2:
            move_in = st.text_input("Move-in date", key="prequal_move_in")
            bedrooms = st.selectbox("Bedrooms", ["", "1", "2", "3", "4"], key="prequal_bedrooms",
                                    format_func=lambda v: v or "Any")
            credit = st.number_input("Credit score", min_value=300, max_value=850,
                                     value=get_settings().default_credit_score, key="prequal_credit")
        pets = st.checkbox("I have pets", key="prequal_pets")
        answers = PrequalAnswers(location=location, move_in=move_in, budget=budget, bedrooms=bedrooms, pets=pets)
        st.caption(f"Credit: {credit_score_label(int(credit))}")

        monthly_income = parse_money(income)
        ranked = rank_units(prop, answers)
        for listing, score in ranked:
            st.markdown(f"**{listing.title}** • {listing.rent}/mo • {score}% match")
            for reason in explainers_for(listing, answers):
                st.caption(f"• {reason}")
            rent = parse_money(listing.rent)
            if monthly_income and rent:
                ratio = rent_to_income_ratio(rent, monthly_income)
                note = "" if is_affordable(rent, monthly_income) else " (above the recommended 30%)"
                st.caption(f"Rent is {ratio:.0f}% of your monthly income{note}")
    return ranked


def render_unit_browser(prop: Property):
    """Unit cards with lease terms, the comparison table and the proceed gate.

    Returns ``(unit, term)`` once a unit and a lease term are chosen, else ``None``.
    """
    st.session_state.setdefault("compare_keys", [])
    st.session_state.setdefault("selected_terms", {})
    st.header(prop.name)
    st.caption(f"{prop.address}, {prop.city}, {prop.state} {prop.zip}")
    render_match_finder(prop)

    for unit in prop.units:
        key = comparison_key(prop, unit)
        with st.expander(f"Unit {unit.unit_number} • {unit.bedrooms} bd / {unit.bathrooms:g} ba • {unit.sqft} sqft"):
            if not unit.available:
                st.caption("Not currently available")
            terms = lease_terms_for(unit)
            labels = {t.months: f"{t.months} mo • ${t.rent:,.0f}/mo" + (" • Popular" if t.popular else "") for t in terms}
            current = st.session_state["selected_terms"].get(key)
            months = st.selectbox(
                "Lease term",
                [0] + list(labels),
                index=([0] + list(labels)).index(current) if current in labels else 0,
                format_func=lambda m: "Select..." if m == 0 else labels[m],
                key=f"term_{key}",
            )
            if months:
                st.session_state["selected_terms"][key] = months
            else:
                st.session_state["selected_terms"].pop(key, None)
            if st.checkbox("Show all terms", key=f"schedule_{key}"):
                st.dataframe(lease_term_schedule(unit), hide_index=True)
            in_compare = key in st.session_state["compare_keys"]
            if st.button("Remove from compare" if in_compare else "Add to compare", key=f"compare_{key}"):
                keys, error = toggle_compare(st.session_state["compare_keys"], key)
                st.session_state["compare_keys"] = keys
                if error:
                    st.warning(error)

    pairs = [(prop, u) for u in prop.units if comparison_key(prop, u) in st.session_state["compare_keys"]]
    if pairs:
        st.subheader("Unit Comparison")
        st.dataframe(compare_units(pairs))
        selected = st.radio(
            "Choose a unit",
            [comparison_key(p, u) for p, u in pairs],
            format_func=lambda k: f"Unit {next(u.unit_number for _, u in pairs if comparison_key(prop, u) == k)}",
            key="selected_unit",
        )
    else:
        selected = None

    if can_proceed(selected, st.session_state["selected_terms"]):
        unit = next(u for _, u in pairs if comparison_key(prop, u) == selected)
        term = st.session_state["selected_terms"][selected]
        st.caption(f"Selected: Unit {unit.unit_number}, {term} months")
        return unit, term
    st.caption("Select a unit and a lease term to continue.")
    return None
