"""Add-on selection, the live order summary and checkout."""
from typing import Optional

import streamlit as st

from core.config import get_settings
from core.submission import checkout
from rentwise.models import AuthUser, PetInfo, TieredSelection
from rentwise.presets import (
    DISCLAIMER,
    OPTIONAL_PRODUCTS,
    PERSONAL_CONTENTS,
    PERSONAL_CONTENTS_TIERS,
    PET_INSURANCE,
    PET_TYPES,
    PRODUCT_DESCRIPTIONS,
    PRODUCT_NAMES,
    REQUIRED_PRODUCTS,
)
from rentwise.pricing import (
    apply_coupon,
    calculate_total,
    coupon_for_input,
    default_selections,
    product_price,
    set_product_option,
    toggle_product,
    yearly_cost,
)


def render_product_selection(base_rent: float, credit_score: Optional[int] = None, user: Optional[AuthUser] = None):
    """Render add-ons and the order summary; returns the current totals."""
    settings = get_settings()
    credit_score = settings.default_credit_score if credit_score is None else credit_score
    st.session_state.setdefault("selections", default_selections())
    st.session_state.setdefault("applied_coupon", None)
    selections = st.session_state["selections"]

    st.subheader("Included")
    for product_id in REQUIRED_PRODUCTS:
        price = product_price(product_id, base_rent, credit_score)
        st.markdown(f"**{PRODUCT_NAMES[product_id]}** ${price:,.2f}/mo")
        st.caption(PRODUCT_DESCRIPTIONS[product_id])

    st.subheader("Optional")
    for product_id in OPTIONAL_PRODUCTS:
        sel = selections[product_id]
        checked = st.checkbox(PRODUCT_NAMES[product_id], value=sel.selected, key=f"product_{product_id}",
                              help=PRODUCT_DESCRIPTIONS[product_id])
        if checked != sel.selected:
            selections = toggle_product(selections, product_id)
        if product_id == PERSONAL_CONTENTS and isinstance(sel, TieredSelection):
            tiers = list(PERSONAL_CONTENTS_TIERS)
            option = st.selectbox(
                "Coverage amount",
                tiers,
                index=tiers.index(sel.option),
                format_func=lambda t: f"${int(t):,} coverage • ${PERSONAL_CONTENTS_TIERS[t]:.2f}/mo",
                key="personal_contents_tier",
            )
            if option != sel.option:
                selections = set_product_option(selections, product_id, option)
    st.session_state["selections"] = selections

    pet_info = None
    if selections[PET_INSURANCE].selected:
        with st.expander("Pet information", expanded=True):
            pet_info = PetInfo(
                type=st.selectbox("Pet type", [""] + PET_TYPES, key="pet_info_type"),
                name=st.text_input("Pet name", key="pet_info_name"),
                breed=st.text_input("Breed", key="pet_info_breed"),
                weight=st.text_input("Weight (lbs)", key="pet_info_weight"),
            )

    code = st.text_input("Coupon code", key="coupon_code")
    applied = coupon_for_input(st.session_state["applied_coupon"], code)
    if st.button("Apply coupon", key="apply_coupon"):
        applied, error = apply_coupon(code, settings.valid_coupons)
        if error:
            st.error(error)
        elif applied:
            st.success(f"{applied.discount_percent:g}% discount applied.")
    st.session_state["applied_coupon"] = applied

    annual = st.toggle("Pay eligible add-ons annually", key="annual_payment")
    totals = calculate_total(selections, base_rent, annual=annual, coupon=applied, credit_score=credit_score,
                             annual_discount_rate=settings.annual_discount_rate)
    st.session_state["totals"] = totals.model_dump()

    st.subheader("Order Summary")
    st.caption(f"Monthly-only: ${totals.monthly_only:,.2f}")
    st.caption(f"Flexible add-ons: ${totals.flexible_payment:,.2f}/mo")
    st.caption(f"Subtotal: ${totals.subtotal:,.2f}")
    if annual and totals.annual_discount > 0:
        st.caption(f"Annual discount: -${totals.annual_discount:,.2f}")
    if totals.coupon_discount > 0:
        st.caption(f"Coupon ({applied.code}): -${totals.coupon_discount:,.2f}")
    st.metric("Total due", f"${totals.total:,.2f}")
    if annual:
        st.caption(f"Saving ${yearly_cost(totals, False) - yearly_cost(totals, True):,.2f} a year with annual payment")
    st.caption(DISCLAIMER)

    if st.button("Proceed to Payment", key="proceed_to_payment"):
        result = checkout(totals, selections, base_rent, user=user, pet_info=pet_info, credit_score=credit_score)
        if result.success:
            st.success(result.message)
            if result.checkout_url:
                st.link_button("Open checkout", result.checkout_url)
        else:
            st.error(result.message)
    return totals
