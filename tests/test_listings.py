import pytest

from core.listings import (
    can_proceed,
    compare_units,
    credit_score_label,
    explainers_for,
    is_affordable,
    listing_for_unit,
    parse_money,
    rank_listing,
    rank_units,
    rent_to_income_ratio,
    toggle_compare,
)
from rentwise.models import LeaseTerm, Listing, PrequalAnswers, PetPolicy, Property, Unit


def _listing(**overrides):
    data = dict(id="l1", address="12 Oak St, Austin TX", rent="$1,800", beds=2, available="Available Now")
    data.update(overrides)
    return Listing(**data)


def test_parse_money():
    assert parse_money("$1,800") == 1800
    assert parse_money("1800.50") == 1800.5
    assert parse_money("") is None
    assert parse_money("call us") is None


def test_perfect_match_scores_100():
    answers = PrequalAnswers(location="Austin", move_in="asap", budget="1800", bedrooms="2")
    assert rank_listing(_listing(), answers) == 100


def test_rank_without_answers_defaults_to_70():
    assert rank_listing(_listing(), PrequalAnswers()) == 70
    assert rank_listing(_listing(network=True), PrequalAnswers()) == 77


def test_rank_penalizes_mismatches_and_caps_boost():
    answers = PrequalAnswers(budget="1500", bedrooms="4", location="Dallas")
    score = rank_listing(_listing(), answers)
    assert 0 < score < 100
    assert rank_listing(_listing(network=True), answers) >= score
    assert rank_listing(_listing(network=True), PrequalAnswers(budget="1800")) == 100


def test_explainers_capped_at_three():
    answers = PrequalAnswers(location="Austin", move_in="asap", budget="2000", bedrooms="2", pets=True)
    out = explainers_for(_listing(network=True, explainers=["Dog park"]), answers)
    assert len(out) == 3
    assert out[0] == "Great value - $200 under your budget"
    assert out[1] == "Perfect match - 2 bedrooms as requested"
    assert out[2].startswith("Pet-friendly")


def test_explainers_for_later_availability():
    out = explainers_for(_listing(available="March 1"), PrequalAnswers(move_in="spring"))
    assert out == ["Available march 1"]


def test_credit_labels():
    assert credit_score_label(780) == "Excellent (750+)"
    assert credit_score_label(700) == "Good (700-749)"
    assert credit_score_label(650) == "Fair (650-699)"
    assert credit_score_label(500) == "Poor (below 650)"


def test_affordability():
    assert rent_to_income_ratio(1500, 5000) == pytest.approx(30)
    assert is_affordable(1500, 5000)
    assert not is_affordable(1600, 5000)
    assert not is_affordable(1000, 0)
    with pytest.raises(ValueError):
        rent_to_income_ratio(1000, 0)


def test_compare_limit():
    keys = []
    for i in range(5):
        keys, error = toggle_compare(keys, f"p-{i}")
        assert error == ""
    keys, error = toggle_compare(keys, "p-5")
    assert len(keys) == 5 and "up to 5" in error
    keys, _ = toggle_compare(keys, "p-0")
    assert "p-0" not in keys


def test_compare_units_frame():
    prop = Property(id="p", name="Maple")
    units = [Unit(id=str(i), unit_number=str(100 + i), rent=1000 + i,
                  lease_terms=[LeaseTerm(months=12, rent=900 + i)]) for i in range(3)]
    df = compare_units([(prop, u) for u in units])
    assert list(df.index) == ["p-0", "p-1", "p-2"]
    assert df.loc["p-1", "rent"] == 901
    with pytest.raises(ValueError):
        compare_units([(prop, Unit(id=str(i))) for i in range(6)])


def test_can_proceed():
    assert not can_proceed(None, {})
    assert not can_proceed("p-1", {})
    assert not can_proceed("p-1", {"p-2": 12})
    assert can_proceed("p-1", {"p-1": 12})


def test_listing_for_unit():
    prop = Property(id="p1", name="Oak Place", address="12 Oak St", city="Austin", state="TX", zip="78701",
                    amenities=["Pool"], pet_policy=PetPolicy(allowed=True))
    unit = Unit(id="u1", unit_number="2B", bedrooms=2, rent=1500, available_date="Available Now",
                lease_terms=[LeaseTerm(months=12, rent=1450)])
    listing = listing_for_unit(prop, unit)
    assert listing.id == "p1-u1"
    assert listing.rent == "$1,450"
    assert listing.beds == 2
    assert listing.explainers == ["Pool", "Pet friendly"]
    answers = PrequalAnswers(pets=True, location="Austin")
    assert "Pet-friendly building perfect for your furry friend" in explainers_for(listing, answers)


def test_rank_units_orders_best_match_first():
    prop = Property(id="p1", units=[
        Unit(id="a", bedrooms=1, rent=1200),
        Unit(id="b", bedrooms=2, rent=1650),
        Unit(id="c", bedrooms=2, rent=1650, available=False),
    ])
    ranked = rank_units(prop, PrequalAnswers(budget="$1,650", bedrooms="2"))
    assert [listing.id for listing, _ in ranked] == ["p1-b", "p1-a"]
    assert ranked[0][1] == 100
