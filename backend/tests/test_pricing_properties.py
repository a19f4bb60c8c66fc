"""
Property-based tests for pricing arithmetic.
"""

from hypothesis import given, settings, strategies as st

from rest_api.services.domain.pricing import calculate_pricing, calculate_tax, price_line

cents = st.integers(min_value=0, max_value=1_000_000)
quantities = st.integers(min_value=1, max_value=99)


class TestPricingProperties:
    """Invariants that hold for any cart."""

    @given(subtotal=cents)
    @settings(max_examples=200)
    def test_tax_is_rounded_half_up(self, subtotal):
        exact = subtotal * 8 / 100
        assert abs(calculate_tax(subtotal) - exact) <= 0.5

    @given(a=cents, b=cents)
    def test_tax_is_monotonic(self, a, b):
        low, high = sorted((a, b))
        assert calculate_tax(low) <= calculate_tax(high)

    @given(base=cents, quantity=quantities, add_on=cents)
    def test_line_total_scales_with_quantity(self, base, quantity, add_on):
        line = price_line(base, quantity, add_ons=[{"name": "Extra", "price_cents": add_on}])
        assert line.total_cents == (base + add_on) * quantity

    @given(
        prices=st.lists(st.tuples(cents, quantities), min_size=1, max_size=10),
        fee=cents,
        tip=cents,
        discount=cents,
    )
    def test_total_composition(self, prices, fee, tip, discount):
        lines = [price_line(price, qty) for price, qty in prices]
        pricing = calculate_pricing(lines, fee, tip_cents=tip, discount_cents=discount)

        assert pricing.subtotal_cents == sum(price * qty for price, qty in prices)
        expected = pricing.subtotal_cents + fee + pricing.tax_cents + tip - discount
        assert pricing.total_cents == max(0, expected)
        assert pricing.total_cents >= 0
