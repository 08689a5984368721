"""Listing match scoring, affordability and unit comparison."""
from __future__ import annotations

import re
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from core.utils import parse_int
from rentwise.models import Listing, PrequalAnswers, Property, Unit
from rentwise.presets import (
    CREDIT_SCORE_FLOOR_LABEL,
    CREDIT_SCORE_LABELS,
    MAX_COMPARE,
    MAX_EXPLAINERS,
    MAX_RENT_TO_INCOME,
    NETWORK_BOOST,
    RANK_DEFAULT,
    RANK_WEIGHTS,
)
from rentwise.pricing import round_half_up, unit_base_rent


def parse_money(value: Optional[str]) -> Optional[float]:
    """``"$1,800"`` -> ``1800.0``; blank or digit-free input gives ``None``."""
    if not value:
        return None
    m = re.match(r"\d*\.?\d+", re.sub(r"[^\d.]", "", value))
    return float(m.group(0)) if m else None


def _available_now(listing: Listing) -> bool:
    return "now" in listing.available.lower()


def _location_match(listing: Listing, answers: PrequalAnswers) -> bool:
    return answers.location.lower() in listing.address.lower()


def rank_listing(listing: Listing, answers: PrequalAnswers) -> int:
    """Score 0-100 for how well a listing fits the prequalification answers."""
    scores: Dict[str, float] = {}
    budget, rent = parse_money(answers.budget), parse_money(listing.rent)
    if budget and rent:
        scores["budget"] = max(0.0, 100 - abs(rent - budget) / budget * 100)
    if answers.bedrooms and listing.beds:
        diff = abs(parse_int(answers.bedrooms) - listing.beds)
        scores["bedrooms"] = 100 if diff == 0 else 80 if diff == 1 else 60
    if answers.location and listing.address:
        scores["location"] = 100 if _location_match(listing, answers) else 70
    if answers.move_in:
        scores["availability"] = 100 if _available_now(listing) else 85

    if not scores:
        score = float(RANK_DEFAULT)
    else:
        weight = sum(RANK_WEIGHTS[k] for k in scores)
        score = sum(s * RANK_WEIGHTS[k] for k, s in scores.items()) / weight
    if listing.network:
        score *= NETWORK_BOOST
    return round_half_up(min(100.0, score))


def explainers_for(listing: Listing, answers: PrequalAnswers) -> List[str]:
    """Up to three short reasons a listing matches."""
    out: List[str] = []
    budget, rent = parse_money(answers.budget), parse_money(listing.rent)
    if budget and rent:
        diff = rent - budget
        if abs(diff) <= 100:
            out.append("Perfect budget match within your range")
        elif diff < 0:
            out.append(f"Great value - ${abs(diff):,.0f} under your budget")
        elif diff <= 300:
            out.append("Slightly over budget but includes premium features")

    if answers.bedrooms and listing.beds:
        wanted = parse_int(answers.bedrooms)
        if wanted == listing.beds:
            plural = "s" if listing.beds != 1 else ""
            out.append(f"Perfect match - {listing.beds} bedroom{plural} as requested")
        elif listing.beds > wanted:
            out.append(f"Extra space with {listing.beds} bedrooms")

    if answers.pets and any(
        word in tag.lower() for tag in listing.explainers for word in ("pet", "dog", "cat")
    ):
        out.append("Pet-friendly building perfect for your furry friend")

    if _available_now(listing):
        out.append("Available immediately for quick move-in")
    elif answers.move_in:
        out.append(f"Available {listing.available.lower()}")

    if answers.location and _location_match(listing, answers):
        out.append(f"Great location in your preferred {answers.location} area")

    if listing.network:
        out.append("RentWise verified property with trusted landlord")

    return out[:MAX_EXPLAINERS]


def listing_for_unit(prop: Property, unit: Unit, network: bool = False) -> Listing:
    """Present a property unit the way the match scoring reads listings."""
    tags = list(prop.amenities)
    if prop.pet_policy.allowed:
        tags.append("Pet friendly")
    return Listing(
        id=comparison_key(prop, unit),
        title=f"{prop.name} - Unit {unit.unit_number}",
        address=f"{prop.address}, {prop.city}, {prop.state} {prop.zip}",
        rent=f"${unit_base_rent(unit):,.0f}",
        beds=unit.bedrooms,
        baths=unit.bathrooms,
        available=unit.available_date,
        network=network,
        explainers=tags,
    )


def rank_units(prop: Property, answers: PrequalAnswers) -> List[Tuple[Listing, int]]:
    """Available units of a property as listings, best match first."""
    ranked = [
        (listing, rank_listing(listing, answers))
        for listing in (listing_for_unit(prop, u) for u in prop.units if u.available)
    ]
    return sorted(ranked, key=lambda pair: pair[1], reverse=True)


def credit_score_label(score: int) -> str:
    for minimum, label in CREDIT_SCORE_LABELS:
        if score >= minimum:
            return label
    return CREDIT_SCORE_FLOOR_LABEL


def rent_to_income_ratio(rent: float, monthly_income: float) -> float:
    """Rent as a percentage of monthly income."""
    if monthly_income <= 0:
        raise ValueError("monthly income must be positive")
    return rent / monthly_income * 100


def is_affordable(rent: float, monthly_income: float, max_ratio: float = MAX_RENT_TO_INCOME) -> bool:
    if monthly_income <= 0:
        return False
    return rent_to_income_ratio(rent, monthly_income) <= max_ratio


def comparison_key(prop: Property, unit: Unit) -> str:
    return f"{prop.id}-{unit.id}"


def toggle_compare(keys: Sequence[str], key: str) -> Tuple[List[str], str]:
    """Add or remove a unit from the comparison list.

    Returns the new list and an error message when the list is already full.
    """
    keys = list(keys)
    if key in keys:
        return [k for k in keys if k != key], ""
    if len(keys) >= MAX_COMPARE:
        return keys, f"You can compare up to {MAX_COMPARE} units at a time."
    return keys + [key], ""


def compare_units(pairs: Sequence[Tuple[Property, Unit]]) -> pd.DataFrame:
    """Side-by-side table of the units being compared, one row per unit."""
    if len(pairs) > MAX_COMPARE:
        raise ValueError(f"at most {MAX_COMPARE} units can be compared")
    rows = []
    for prop, unit in pairs:
        rows.append(
            {
                "key": comparison_key(prop, unit),
                "property": prop.name,
                "unit": unit.unit_number,
                "bedrooms": unit.bedrooms,
                "bathrooms": unit.bathrooms,
                "sqft": unit.sqft,
                "floor": unit.floor,
                "rent": unit_base_rent(unit),
                "deposit": unit.deposit,
                "available": unit.available,
                "available_date": unit.available_date,
            }
        )
    columns = ["key", "property", "unit", "bedrooms", "bathrooms", "sqft", "floor", "rent", "deposit",
               "available", "available_date"]
    return pd.DataFrame(rows, columns=columns).set_index("key")


def can_proceed(selected_key: Optional[str], selected_terms: Dict[str, int]) -> bool:
    """A unit must be chosen and have a lease term picked for it."""
    return bool(selected_key) and bool(selected_terms.get(selected_key))
