"""Price rounding rules."""

import math

from repricer.core.models import RoundingRule


def _round_half_up(value: float) -> float:
    return math.floor(value + 0.5)


def apply_rounding(price: float, rule: RoundingRule | str | None) -> float:
    """
    Round ``price`` according to ``rule``.

    ``nearest_99p``/``nearest_95p`` keep the whole-pound part and replace the
    pence, so they can move a price up or down by less than one pound.
    Half-cent ties round up, not to even. Non-finite prices are returned as-is.
    """
    if not math.isfinite(price):
        return price

    if rule == RoundingRule.NEAREST_99P:
        return math.floor(price) + 0.99
    if rule == RoundingRule.NEAREST_95P:
        return math.floor(price) + 0.95
    if rule == RoundingRule.NEAREST_POUND:
        return float(_round_half_up(price))
    if rule == RoundingRule.ROUND_DOWN:
        return math.floor(price * 100) / 100
    if rule == RoundingRule.ROUND_UP:
        return math.ceil(price * 100) / 100
    return _round_half_up(price * 100) / 100
