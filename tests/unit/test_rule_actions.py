"""
Tests for rule actions: price formulas, reason strings and failure handling.
"""

import pytest

from repricer.core.models import ActionType, OutcomeKind, Product
from repricer.services.rule_actions import apply_rule, format_number, margin_target_price


class TestMarginTargetPrice:

    def test_solves_against_flat_clawback(self):
        # (40 + 5) / (0.80 - 0.25) * 1.2
        assert margin_target_price(40, 5, 25) == pytest.approx(98.1818, abs=1e-4)

    def test_returns_none_when_target_unreachable(self):
        assert margin_target_price(40, 5, 80) is None
        assert margin_target_price(40, 5, 95) is None

    def test_zero_costs_give_zero_price(self):
        assert margin_target_price(0, 0, 15) == 0.0


class TestSetMargin:

    def test_price_achieves_target(self, make_rule, sample_product, marketplace_channel):
        rule = make_rule("margin-25", ActionType.SET_MARGIN, 25)

        outcome = apply_rule(rule, sample_product, marketplace_channel)

        assert outcome.kind == OutcomeKind.RULE_APPLIED
        assert outcome.price == pytest.approx(98.1818, abs=1e-4)
        assert outcome.reason == "Set to achieve 25% margin (rule: Margin 25)"
        assert outcome.rule_id == "margin-25"

    def test_missing_cost_fails(self, make_rule, uncosted_product, marketplace_channel):
        rule = make_rule("margin-25", ActionType.SET_MARGIN, 25)

        outcome = apply_rule(rule, uncosted_product, marketplace_channel)

        assert outcome.failed is True
        assert outcome.price == uncosted_product.current_price
        assert outcome.reason == "Cannot calculate margin - missing cost price"

    @pytest.mark.parametrize("target", [80, 85, 120])
    def test_target_too_high_fails(self, make_rule, sample_product, marketplace_channel, target):
        rule = make_rule("greedy", ActionType.SET_MARGIN, target)

        outcome = apply_rule(rule, sample_product, marketplace_channel)

        assert outcome.kind == OutcomeKind.ACTION_FAILED
        assert outcome.price == sample_product.current_price
        assert outcome.reason == f"Cannot achieve {target}% margin - target too high"

    def test_fractional_target_in_reason(self, make_rule, sample_product, marketplace_channel):
        rule = make_rule("fine", ActionType.SET_MARGIN, 22.5)

        outcome = apply_rule(rule, sample_product, marketplace_channel)

        assert outcome.reason.startswith("Set to achieve 22.5% margin")


class TestSetMarkup:

    def test_multiplies_cost(self, make_rule, sample_product, marketplace_channel):
        rule = make_rule("markup", ActionType.SET_MARKUP, 2.5)

        outcome = apply_rule(rule, sample_product, marketplace_channel)

        assert outcome.price == pytest.approx(100.00)
        assert outcome.reason == "Applied 2.5x markup on cost (rule: Markup)"

    def test_missing_cost_fails(self, make_rule, uncosted_product, marketplace_channel):
        rule = make_rule("markup", ActionType.SET_MARKUP, 2)

        outcome = apply_rule(rule, uncosted_product, marketplace_channel)

        assert outcome.failed is True
        assert outcome.price == uncosted_product.current_price
        assert "missing cost data" in outcome.reason

    def test_non_positive_multiplier_fails(self, make_rule, sample_product, marketplace_channel):
        rule = make_rule("markup", ActionType.SET_MARKUP, 0)

        outcome = apply_rule(rule, sample_product, marketplace_channel)

        assert outcome.failed is True


class TestAdjustments:

    def test_percent_increase(self, make_rule, sample_product, marketplace_channel):
        outcome = apply_rule(
            make_rule("bump", ActionType.ADJUST_PERCENT, 10), sample_product, marketplace_channel
        )

        assert outcome.price == pytest.approx(110.00)
        assert outcome.reason == "10% increase (rule: Bump)"

    def test_percent_decrease(self, make_rule, sample_product, marketplace_channel):
        outcome = apply_rule(
            make_rule("clearance", ActionType.ADJUST_PERCENT, -15), sample_product, marketplace_channel
        )

        assert outcome.price == pytest.approx(85.00)
        assert outcome.reason == "15% decrease (rule: Clearance)"

    def test_fixed_increase(self, make_rule, sample_product, marketplace_channel):
        outcome = apply_rule(
            make_rule("plus-five", ActionType.ADJUST_FIXED, 5), sample_product, marketplace_channel
        )

        assert outcome.price == pytest.approx(105.00)
        assert outcome.reason == "£5.00 increase (rule: Plus Five)"

    def test_fixed_decrease(self, make_rule, sample_product, marketplace_channel):
        outcome = apply_rule(
            make_rule("minus", ActionType.ADJUST_FIXED, -2.5), sample_product, marketplace_channel
        )

        assert outcome.price == pytest.approx(97.50)
        assert outcome.reason == "£2.50 decrease (rule: Minus)"


class TestFixedAndMrpActions:

    def test_set_price_is_verbatim(self, make_rule, sample_product, marketplace_channel):
        outcome = apply_rule(
            make_rule("fixed", ActionType.SET_PRICE, 49.5), sample_product, marketplace_channel
        )

        assert outcome.price == 49.5
        assert outcome.reason == "Set to fixed price £49.50 (rule: Fixed)"

    def test_match_mrp(self, make_rule, sample_product, marketplace_channel):
        outcome = apply_rule(
            make_rule("rrp", ActionType.MATCH_MRP), sample_product, marketplace_channel
        )

        assert outcome.price == 150.00
        assert outcome.reason == "Set to MRP (rule: Rrp)"

    def test_discount_from_mrp(self, make_rule, sample_product, marketplace_channel):
        outcome = apply_rule(
            make_rule("sale", ActionType.DISCOUNT_FROM_MRP, 20), sample_product, marketplace_channel
        )

        assert outcome.price == pytest.approx(120.00)
        assert outcome.reason == "20% discount from MRP (rule: Sale)"

    def test_match_mrp_without_mrp_is_zero(self, make_rule, marketplace_channel):
        product = Product(sku="NO-MRP", current_price=30, cost_price=10)

        outcome = apply_rule(make_rule("rrp", ActionType.MATCH_MRP), product, marketplace_channel)

        assert outcome.price == 0.0


class TestFormatNumber:

    @pytest.mark.parametrize(
        "value, expected",
        [(25.0, "25"), (25, "25"), (2.5, "2.5"), (-10.0, "-10"), (0.0, "0")],
    )
    def test_format(self, value, expected):
        assert format_number(value) == expected
