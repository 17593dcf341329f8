"""
Rule action applier.

Turns a matched pricing rule into a candidate price. Actions never raise:
when a price cannot be computed the product's current price comes back
tagged as ``action_failed`` with a reason the approval UI shows verbatim.
"""

import logging
import math

from repricer.core.models import (
    ActionType,
    Channel,
    OutcomeKind,
    PricingRule,
    Product,
    RuleOutcome,
)

logger = logging.getLogger(__name__)

# Flat deduction from price ex-VAT standing in for commission, payment and
# advertising when solving for a target margin. Channel-agnostic.
CLAWBACK_RATE = 0.20
VAT_MULTIPLIER = 1.2


def margin_target_price(cost_price: float, delivery_cost: float, margin_percent: float) -> float | None:
    """
    Selling price (VAT-inclusive) that yields ``margin_percent``.

    Uses the simplified model:
        PPO          = price_ex_vat * (1 - clawback) - delivery - cost
        price_ex_vat = (cost + delivery) / (0.80 - margin)
        price        = price_ex_vat * 1.2

    Returns:
        The price, or None when the target margin leaves no positive divisor.
    """
    divisor = (1 - CLAWBACK_RATE) - margin_percent / 100
    if divisor <= 0:
        return None
    price_ex_vat = (cost_price + delivery_cost) / divisor
    return price_ex_vat * VAT_MULTIPLIER


def format_number(value: float) -> str:
    """Render a number the way reasons show it: ``25`` not ``25.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _direction(value: float) -> str:
    return "increase" if value >= 0 else "decrease"


def apply_rule(rule: PricingRule, product: Product, channel: Channel) -> RuleOutcome:
    """
    Compute the candidate price for a matched rule.

    Args:
        rule: The rule that matched.
        product: Product being priced.
        channel: Channel being priced for. The margin formula does not use its
                 fee schedule; it is accepted so every action sees the same inputs.

    Returns:
        RuleOutcome tagged ``rule_applied`` or ``action_failed``.
    """
    action = rule.action
    value = action.value
    shown = format_number(value)
    tag = f"(rule: {rule.name})"

    def applied(price: float, reason: str) -> RuleOutcome:
        return RuleOutcome(
            kind=OutcomeKind.RULE_APPLIED,
            price=price,
            reason=reason,
            rule_id=rule.rule_id,
            rule_name=rule.name,
        )

    def failed(reason: str) -> RuleOutcome:
        logger.info(
            "Rule %s could not price SKU %s on %s: %s",
            rule.rule_id, product.sku, channel.channel_id, reason,
        )
        return RuleOutcome(
            kind=OutcomeKind.ACTION_FAILED,
            price=product.current_price,
            reason=reason,
            rule_id=rule.rule_id,
            rule_name=rule.name,
        )

    kind = action.type

    if kind == ActionType.SET_MARGIN:
        if product.cost_price <= 0:
            return failed("Cannot calculate margin - missing cost price")

        price = margin_target_price(product.cost_price, product.delivery_cost, value)
        if price is None:
            return failed(f"Cannot achieve {shown}% margin - target too high")
        if price <= 0 or not math.isfinite(price):
            return failed("Cannot calculate valid price - calculation error")

        return applied(price, f"Set to achieve {shown}% margin {tag}")

    if kind == ActionType.SET_MARKUP:
        price = product.cost_price * value
        if price <= 0 or not math.isfinite(price):
            return failed("Cannot calculate markup - missing cost data")
        return applied(price, f"Applied {shown}x markup on cost {tag}")

    if kind == ActionType.ADJUST_PERCENT:
        price = product.current_price * (1 + value / 100)
        return applied(price, f"{format_number(abs(value))}% {_direction(value)} {tag}")

    if kind == ActionType.ADJUST_FIXED:
        price = product.current_price + value
        return applied(price, f"£{abs(value):.2f} {_direction(value)} {tag}")

    if kind == ActionType.SET_PRICE:
        return applied(value, f"Set to fixed price £{value:.2f} {tag}")

    if kind == ActionType.MATCH_MRP:
        return applied(product.mrp, f"Set to MRP {tag}")

    if kind == ActionType.DISCOUNT_FROM_MRP:
        price = product.mrp * (1 - value / 100)
        return applied(price, f"{shown}% discount from MRP {tag}")

    return failed("Unknown action type")
