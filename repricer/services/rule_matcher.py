"""
Rule matcher.

Finds the first active pricing rule, in priority order, whose conditions
all hold for a product. First match wins: rule authors control precedence
purely through the priority number.
"""

import logging
import math
import re
from collections.abc import Iterable
from functools import lru_cache

from repricer.core.models import CostBreakdown, PricingRule, Product, RuleConditions

logger = logging.getLogger(__name__)


def sort_rules(rules: Iterable[PricingRule]) -> tuple[PricingRule, ...]:
    """Return a new tuple ordered by ascending priority (stable for ties)."""
    return tuple(sorted(rules, key=lambda rule: rule.priority))


@lru_cache(maxsize=256)
def _compile_pattern(pattern: str) -> re.Pattern | None:
    try:
        return re.compile(pattern)
    except re.error as e:
        logger.warning("Ignoring invalid SKU pattern %r: %s", pattern, e)
        return None


def _sku_matches_any(sku: str, patterns: tuple[str, ...]) -> bool:
    for pattern in patterns:
        compiled = _compile_pattern(pattern)
        if compiled is not None and compiled.search(sku):
            return True
    return False


def _within(value: float, below: float | None, above: float | None) -> bool:
    """Strict threshold check; an unset bound imposes no constraint."""
    if below is not None and value >= below:
        return False
    if above is not None and value <= above:
        return False
    return True


def rule_matches(rule: PricingRule, product: Product, breakdown: CostBreakdown) -> bool:
    """
    Check whether every condition of ``rule`` holds for ``product``.

    Args:
        rule: The rule whose conditions are evaluated.
        product: Product state (stock, sales, current price).
        breakdown: Breakdown at the product's current price, for margin conditions.

    Returns:
        True when all specified conditions pass.
    """
    c: RuleConditions = rule.conditions

    # Allow-lists
    if c.brands and product.brand not in c.brands:
        return False
    if c.categories and (not product.category or product.category not in c.categories):
        return False
    if c.skus and product.sku not in c.skus:
        return False
    if c.sku_patterns and not _sku_matches_any(product.sku, c.sku_patterns):
        return False

    if not _within(breakdown.margin_percent, c.margin_below, c.margin_above):
        return False
    if not _within(product.stock_level, c.stock_below, c.stock_above):
        return False
    # Sales velocity thresholds are 7-day unit totals
    if not _within(product.sales_last_7_days, c.sales_velocity_below, c.sales_velocity_above):
        return False

    daily_sales = product.daily_sales
    if not _within(daily_sales, c.daily_sales_below, c.daily_sales_above):
        return False

    days_of_stock = product.stock_level / daily_sales if daily_sales > 0 else math.inf
    if not _within(days_of_stock, c.days_of_stock_below, c.days_of_stock_above):
        return False

    if not _within(product.current_price, c.price_below, c.price_above):
        return False

    daily_revenue = daily_sales * product.current_price
    return _within(daily_revenue, c.daily_revenue_below, c.daily_revenue_above)


def find_applicable_rule(
    rules: Iterable[PricingRule],
    product: Product,
    breakdown: CostBreakdown,
) -> PricingRule | None:
    """
    Return the first active rule whose conditions match, or None.

    ``rules`` must already be in priority order (see ``sort_rules``); the
    scan is linear and order-sensitive.
    """
    for rule in rules:
        if not rule.is_active:
            continue
        if rule_matches(rule, product, breakdown):
            logger.debug("Rule %s matched SKU %s", rule.rule_id, product.sku)
            return rule
    return None
