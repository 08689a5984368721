from __future__ import annotations

import math
from typing import Callable, Dict, List, Optional, Tuple

import pandas as pd

from rentwise.models import (
    Coupon,
    FlatSelection,
    LeaseTerm,
    PaymentTotals,
    SelectionMap,
    TieredSelection,
    Unit,
)
from rentwise.presets import (
    ANNUAL_DISCOUNT_RATE,
    ANNUAL_ELIGIBLE,
    BASELINE_TERM_MONTHS,
    DEFAULT_CREDIT_SCORE,
    DEPOSIT_ALT_FEE_FLOOR,
    DEPOSIT_ALT_FEE_TIERS,
    DEPOSIT_ALT_RENT_PCT,
    FALLBACK_RENT,
    FLAT_PRICES,
    FLEX_RENT,
    FLEX_RENT_SHARE,
    LONG_TERM_STEP,
    MAX_TERM_MONTHS,
    MIN_CHARGE_CENTS,
    OPTIONAL_PRODUCTS,
    PERSONAL_CONTENTS,
    PERSONAL_CONTENTS_TIERS,
    PRODUCT_NAMES,
    REQUIRED_PRODUCTS,
    SECURITY_DEPOSIT_ALT,
    SHORT_TERM_STEP,
    VALID_COUPONS,
)

RentForTerm = Callable[[float, int], float]


def round_half_up(x: float) -> int:
    """Round to the nearest integer with halves going up, as checkout does."""
    return int(math.floor(x + 0.5))


def _check_rent(base_rent: float) -> float:
    rent = float(base_rent)
    if rent < 0:
        raise ValueError(f"base rent cannot be negative: {base_rent}")
    return rent


def security_deposit_fee(credit_score: int) -> float:
    """Tiered monthly fee added to the deposit alternative; better credit pays less."""
    for minimum, fee in DEPOSIT_ALT_FEE_TIERS:
        if credit_score >= minimum:
            return fee
    return DEPOSIT_ALT_FEE_FLOOR


def product_price(
    product_id: str,
    base_rent: float,
    credit_score: int = DEFAULT_CREDIT_SCORE,
    option: Optional[str] = None,
) -> float:
    """Monthly price of one add-on.

    The flex rent figure here is the service fee only; the rent share it pulls
    into the monthly bucket is added by :func:`calculate_total`.
    """
    rent = _check_rent(base_rent)
    if product_id == SECURITY_DEPOSIT_ALT:
        return float(round_half_up(rent * DEPOSIT_ALT_RENT_PCT)) + security_deposit_fee(credit_score)
    if product_id == PERSONAL_CONTENTS:
        tier = option or TieredSelection().option
        if tier not in PERSONAL_CONTENTS_TIERS:
            raise ValueError(f"unknown coverage tier {tier!r}")
        return PERSONAL_CONTENTS_TIERS[tier]
    if product_id in FLAT_PRICES:
        if option is not None:
            raise ValueError(f"{product_id} has no coverage options")
        return FLAT_PRICES[product_id]
    raise ValueError(f"unknown product {product_id!r}")


def default_selections() -> SelectionMap:
    """Optional products, all off; contents coverage starts on the 7500 tier."""
    selections: SelectionMap = {}
    for product_id in OPTIONAL_PRODUCTS:
        if product_id == PERSONAL_CONTENTS:
            selections[product_id] = TieredSelection()
        else:
            selections[product_id] = FlatSelection()
    return selections


def _optional(product_id: str) -> None:
    if product_id in REQUIRED_PRODUCTS:
        raise ValueError(f"{product_id} is required and cannot be toggled")
    if product_id not in OPTIONAL_PRODUCTS:
        raise ValueError(f"unknown product {product_id!r}")


def toggle_product(selections: SelectionMap, product_id: str) -> SelectionMap:
    """Return a new selection map with ``product_id`` flipped."""
    _optional(product_id)
    current = selections.get(product_id) or default_selections()[product_id]
    updated = dict(selections)
    updated[product_id] = current.model_copy(update={"selected": not current.selected})
    return updated


def set_product_option(selections: SelectionMap, product_id: str, option: str) -> SelectionMap:
    """Choose a coverage tier; choosing a tier also opts the product in."""
    _optional(product_id)
    current = selections.get(product_id) or default_selections()[product_id]
    if not isinstance(current, TieredSelection):
        raise ValueError(f"{product_id} has no coverage options")
    updated = dict(selections)
    updated[product_id] = TieredSelection(selected=True, option=option)
    return updated


def apply_coupon(code: str, valid_coupons: Optional[Dict[str, float]] = None) -> Tuple[Optional[Coupon], str]:
    """Look up a coupon code.

    Returns ``(coupon, "")`` for a valid code, ``(None, message)`` for an
    unknown one and ``(None, "")`` for a blank field.
    """
    coupons = VALID_COUPONS if valid_coupons is None else valid_coupons
    code = (code or "").strip()
    if not code:
        return None, ""
    if code in coupons:
        return Coupon(code=code, discount_percent=coupons[code]), ""
    return None, "The coupon code you entered is not valid."


def coupon_for_input(applied: Optional[Coupon], code: str) -> Optional[Coupon]:
    """Drop an applied coupon as soon as the code field no longer matches it."""
    if applied is None or (code or "").strip() != applied.code:
        return None
    return applied


def line_items(
    selections: SelectionMap,
    base_rent: float,
    credit_score: int = DEFAULT_CREDIT_SCORE,
) -> List[Dict[str, object]]:
    """Every billed line: required products, selected optionals and the flex rent share."""
    rent = _check_rent(base_rent)
    items = []
    for product_id in REQUIRED_PRODUCTS:
        items.append(
            {
                "product": product_id,
                "name": PRODUCT_NAMES[product_id],
                "monthly": product_price(product_id, rent, credit_score),
                "annual_eligible": product_id in ANNUAL_ELIGIBLE,
            }
        )
    for product_id in OPTIONAL_PRODUCTS:
        sel = selections.get(product_id)
        if sel is None or not sel.selected:
            continue
        option = sel.option if isinstance(sel, TieredSelection) else None
        items.append(
            {
                "product": product_id,
                "name": PRODUCT_NAMES[product_id],
                "monthly": product_price(product_id, rent, credit_score, option),
                "annual_eligible": product_id in ANNUAL_ELIGIBLE,
            }
        )
        if product_id == FLEX_RENT:
            items.append(
                {
                    "product": "flex_rent_share",
                    "name": "Rent (50%)",
                    "monthly": rent * FLEX_RENT_SHARE,
                    "annual_eligible": False,
                }
            )
    return items


def calculate_total(
    selections: SelectionMap,
    base_rent: float,
    annual: bool = False,
    coupon: Optional[Coupon] = None,
    credit_score: int = DEFAULT_CREDIT_SCORE,
    annual_discount_rate: float = ANNUAL_DISCOUNT_RATE,
) -> PaymentTotals:
    """Live order summary for the selected add-ons.

    Annual-eligible products form the flexible bucket that can be billed once a
    year at a discount. Flex rent (its fee and the rent share) always stays
    monthly. The coupon applies to the monthly subtotal, before any annual
    discount.
    """
    monthly_only = 0.0
    flexible = 0.0
    for item in line_items(selections, base_rent, credit_score):
        if item["annual_eligible"]:
            flexible += item["monthly"]
        else:
            monthly_only += item["monthly"]

    subtotal = monthly_only + flexible
    annual_flexible = flexible * 12
    annual_discount = annual_flexible * annual_discount_rate if annual else 0.0
    billed_flexible = annual_flexible - annual_discount if annual else flexible
    coupon_discount = coupon.discount_percent / 100 * subtotal if coupon else 0.0

    return PaymentTotals(
        monthly_only=monthly_only,
        flexible_payment=flexible,
        subtotal=subtotal,
        annual_flexible=annual_flexible,
        annual_discount=annual_discount,
        coupon_discount=coupon_discount,
        total=monthly_only + billed_flexible - coupon_discount,
    )


def yearly_cost(totals: PaymentTotals, annual: bool) -> float:
    """Twelve months of charges under either billing mode, for comparing them."""
    if annual:
        return totals.monthly_only * 12 + totals.annual_flexible - totals.annual_discount
    return totals.subtotal * 12


def linear_rent_for_term(base_rent: float, months: int) -> float:
    """Placeholder term curve: +5% per month under 12, -2% per month over."""
    rent = _check_rent(base_rent)
    if months < BASELINE_TERM_MONTHS:
        return float(round_half_up(rent * (1 + (BASELINE_TERM_MONTHS - months) * SHORT_TERM_STEP)))
    if months > BASELINE_TERM_MONTHS:
        return float(round_half_up(rent * (1 - (months - BASELINE_TERM_MONTHS) * LONG_TERM_STEP)))
    return rent


def unit_base_rent(unit: Optional[Unit]) -> float:
    """Reference monthly rent: the 12-month term, else the first listed term, else list rent."""
    if unit is None:
        return FALLBACK_RENT
    for term in unit.lease_terms:
        if term.months == BASELINE_TERM_MONTHS:
            return float(term.rent)
    if unit.lease_terms:
        return float(unit.lease_terms[0].rent)
    return float(unit.rent) if unit.rent else FALLBACK_RENT


def resolve_base_rent(
    unit: Optional[Unit],
    lease_term_months: int,
    selected_rent: Optional[float] = None,
    rent_for_term: RentForTerm = linear_rent_for_term,
) -> float:
    """Monthly rent the pricing screen starts from.

    An explicitly selected term rent wins; otherwise the term strategy is
    applied to the unit's reference rent.
    """
    if selected_rent:
        return _check_rent(selected_rent)
    if unit is None:
        return FALLBACK_RENT
    return float(rent_for_term(unit_base_rent(unit), lease_term_months))


def lease_terms_for(unit: Optional[Unit], rent_for_term: RentForTerm = linear_rent_for_term) -> List[LeaseTerm]:
    """Terms for 1..24 months; listed terms win, the rest are synthesized."""
    base = unit_base_rent(unit)
    listed = {t.months: t for t in unit.lease_terms} if unit else {}
    terms = []
    for months in range(1, MAX_TERM_MONTHS + 1):
        if months in listed:
            terms.append(listed[months])
            continue
        rent = float(rent_for_term(base, months))
        terms.append(
            LeaseTerm(
                months=months,
                rent=rent,
                popular=months == BASELINE_TERM_MONTHS,
                savings=base - rent if months > BASELINE_TERM_MONTHS else None,
            )
        )
    return terms


def lease_term_schedule(unit: Optional[Unit], rent_for_term: RentForTerm = linear_rent_for_term) -> pd.DataFrame:
    """Tabular lease-term options for display."""
    rows = [t.model_dump() for t in lease_terms_for(unit, rent_for_term)]
    return pd.DataFrame(rows, columns=["months", "rent", "popular", "savings", "concession"])


def amount_in_cents(total: float) -> int:
    """Charge amount for the payment provider, never below its minimum."""
    return max(MIN_CHARGE_CENTS, round_half_up(total * 100))
