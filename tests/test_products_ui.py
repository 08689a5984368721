from streamlit.testing.v1 import AppTest


def checkout_app():
    import app

    app.render_checkout()


def _total(at):
    return next(m.value for m in at.metric if m.label == "Total due")


def test_required_products_only():
    at = AppTest.from_function(checkout_app)
    at.run()
    assert _total(at) == "$50.00"


def test_annual_toggle_and_coupon():
    at = AppTest.from_function(checkout_app)
    at.run()
    at.toggle(key="annual_payment").set_value(True).run()
    assert _total(at) == "$558.00"
    at.text_input(key="coupon_code").input("111").run()
    at.button(key="apply_coupon").click().run()
    assert _total(at) == "$555.50"
    at.text_input(key="coupon_code").input("11").run()
    assert _total(at) == "$558.00"


def test_invalid_coupon_shows_error():
    at = AppTest.from_function(checkout_app)
    at.run()
    at.text_input(key="coupon_code").input("999").run()
    at.button(key="apply_coupon").click().run()
    assert any("not valid" in e.value for e in at.error)
    assert _total(at) == "$50.00"


def test_optional_product_adds_to_total():
    at = AppTest.from_function(checkout_app)
    at.run()
    at.checkbox(key="product_credit_reporting").check().run()
    assert _total(at) == "$57.00"


def test_guest_checkout_is_simulated():
    at = AppTest.from_function(checkout_app)
    at.run()
    at.button(key="proceed_to_payment").click().run()
    assert any("simulated" in s.value for s in at.success)
