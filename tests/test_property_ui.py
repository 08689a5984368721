from streamlit.testing.v1 import AppTest


def units_app():
    import app

    app.render_units()


def _matches(at):
    return [m.value for m in at.markdown if "% match" in m.value]


def test_units_are_ranked_against_answers():
    at = AppTest.from_function(units_app)
    at.run()
    assert all(m.endswith("70% match") for m in _matches(at))
    at.text_input(key="prequal_budget").input("$1,650").run()
    at.selectbox(key="prequal_bedrooms").set_value("2").run()
    matches = _matches(at)
    assert matches[0].startswith("**Maple Court Apartments - Unit 204**")
    assert matches[0].endswith("100% match")
    captions = [c.value for c in at.caption]
    assert "• Perfect budget match within your range" in captions
    assert "• Perfect match - 2 bedrooms as requested" in captions


def test_affordability_and_credit_label():
    at = AppTest.from_function(units_app)
    at.run()
    at.text_input(key="prequal_income").input("5000").run()
    at.selectbox(key="prequal_bedrooms").set_value("2").run()
    captions = [c.value for c in at.caption]
    assert "Rent is 33% of your monthly income (above the recommended 30%)" in captions
    assert "Rent is 24% of your monthly income" in captions
    assert "Credit: Good (700-749)" in captions
