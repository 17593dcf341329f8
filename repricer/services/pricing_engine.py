"""
Price calculation orchestrator.

Sequences the cost breakdown, rule matching and rule actions for one
product, then applies rounding, the minimum-margin floor and the MRP
ceiling, and forecasts the profit/revenue impact from sales velocity.
"""

import logging
from collections.abc import Iterable, Mapping

from repricer.core.channels import default_channels
from repricer.core.exceptions import ChannelNotConfigured
from repricer.core.interfaces import IPriceCalculator
from repricer.core.models import (
    Channel,
    OutcomeKind,
    PriceCalculationResult,
    PricingConfig,
    PricingRule,
    Product,
    RuleOutcome,
)
from repricer.core.sanitize import sanitize_number
from repricer.services.cost_breakdown import channel_breakdown
from repricer.services.rounding import apply_rounding
from repricer.services.rule_actions import apply_rule, format_number, margin_target_price
from repricer.services.rule_matcher import find_applicable_rule, sort_rules

logger = logging.getLogger(__name__)

NO_RULE_REASON = "No rule applied - price unchanged"
MISSING_COST_WARNING = "Missing cost price - cannot calculate accurate margin"
CEILING_WARNING = "Price capped at MRP"


class PricingEngine(IPriceCalculator):
    """
    Calculates proposed prices for products against pricing rules.

    Per product:
    - Current cost breakdown on the channel
    - First matching active rule (lowest priority number wins)
    - Rounding, floor price (minimum margin) and MRP ceiling
    - Proposed breakdown and sales-velocity impact forecasts

    The engine holds no per-run state. Rules are passed on every call so a
    batch always works from its own snapshot.
    """

    def __init__(
        self,
        config: PricingConfig | None = None,
        channels: Mapping[str, Channel] | Iterable[Channel] | None = None,
    ):
        self._config = config or PricingConfig()
        if channels is None:
            channels = default_channels()
        if isinstance(channels, Mapping):
            self._channels = dict(channels)
        else:
            self._channels = {channel.channel_id: channel for channel in channels}

    @property
    def config(self) -> PricingConfig:
        return self._config

    @property
    def default_channel_id(self) -> str:
        return self._config.default_channel_id

    def get_channel(self, channel_id: str | None = None) -> Channel:
        """Look up a channel, raising ChannelNotConfigured if absent."""
        channel_id = channel_id or self.default_channel_id
        channel = self._channels.get(channel_id)
        if channel is None:
            raise ChannelNotConfigured(channel_id)
        return channel

    def floor_price(self, product: Product) -> float:
        """
        Minimum selling price that meets the configured minimum margin.

        Falls back to the current price when the minimum margin cannot be
        reached at any price.
        """
        price = margin_target_price(
            product.cost_price,
            product.delivery_cost,
            self._config.minimum_margin_percent,
        )
        if price is None:
            return product.current_price
        return price

    def calculate_price(
        self,
        product: Product,
        rules: Iterable[PricingRule],
        channel_id: str | None = None,
    ) -> PriceCalculationResult:
        """
        Calculate the proposed price for one product.

        Args:
            product: Product to price.
            rules: Pricing rules in any order. A sorted copy is used; the
                   caller's collection is never reordered.
            channel_id: Channel to price for (default channel if omitted).

        Returns:
            PriceCalculationResult with every number sanitized to be finite.

        Raises:
            ChannelNotConfigured: If ``channel_id`` is not in the channel map.
        """
        channel = self.get_channel(channel_id)
        config = self._config
        rounding = config.default_rounding_rule
        min_margin = config.minimum_margin_percent
        warnings: list[str] = []

        if not product.has_cost:
            warnings.append(MISSING_COST_WARNING)

        current_breakdown = channel_breakdown(product, product.current_price, channel)

        rule = find_applicable_rule(sort_rules(rules), product, current_breakdown)
        if rule is not None:
            outcome = apply_rule(rule, product, channel)
        else:
            outcome = RuleOutcome(
                kind=OutcomeKind.UNCHANGED,
                price=product.current_price,
                reason=NO_RULE_REASON,
            )

        # Only rule-produced prices are rounded. A product no rule matched keeps
        # its price; rounding it would turn 100 into a 100.99 proposal.
        proposed_price = outcome.price
        if outcome.kind == OutcomeKind.RULE_APPLIED:
            proposed_price = apply_rounding(proposed_price, rounding)

        at_floor_price = False
        floor = self.floor_price(product)
        if proposed_price < floor:
            proposed_price = apply_rounding(floor, rounding)
            warnings.append(f"Price raised to floor ({format_number(min_margin)}% minimum margin)")
            at_floor_price = True

        at_ceiling_price = False
        ceiling = product.mrp
        if ceiling > 0 and proposed_price > ceiling:
            proposed_price = ceiling
            warnings.append(CEILING_WARNING)
            at_ceiling_price = True

        proposed_breakdown = channel_breakdown(product, proposed_price, channel)

        below_minimum_margin = proposed_breakdown.margin_percent < min_margin
        if below_minimum_margin and not at_floor_price:
            warnings.append(
                f"Margin ({proposed_breakdown.margin_percent:.1f}%) below minimum "
                f"({format_number(min_margin)}%)"
            )

        # Forecasts assume the trailing-week sales velocity holds
        sales_velocity = product.daily_sales
        profit_per_unit_change = proposed_breakdown.net_profit - current_breakdown.net_profit
        revenue_per_unit_change = proposed_price - product.current_price

        price_change = proposed_price - product.current_price
        if product.current_price > 0:
            price_change_percent = price_change / product.current_price * 100
        else:
            price_change_percent = 0.0

        result = PriceCalculationResult(
            sku=product.sku,
            current_price=sanitize_number(product.current_price),
            proposed_price=sanitize_number(proposed_price),
            price_change=sanitize_number(price_change),
            price_change_percent=sanitize_number(price_change_percent),
            current_margin=sanitize_number(current_breakdown.margin_percent),
            proposed_margin=sanitize_number(proposed_breakdown.margin_percent),
            margin_change=sanitize_number(
                proposed_breakdown.margin_percent - current_breakdown.margin_percent
            ),
            current_profit=sanitize_number(current_breakdown.net_profit),
            proposed_profit=sanitize_number(proposed_breakdown.net_profit),
            estimated_daily_profit_change=sanitize_number(profit_per_unit_change * sales_velocity),
            estimated_weekly_revenue_impact=sanitize_number(
                revenue_per_unit_change * sales_velocity * 7
            ),
            estimated_weekly_profit_impact=sanitize_number(
                profit_per_unit_change * sales_velocity * 7
            ),
            sales_velocity=sanitize_number(sales_velocity),
            cost_breakdown=proposed_breakdown.sanitized(),
            applied_rule=rule.name if rule else None,
            applied_rule_id=rule.rule_id if rule else None,
            outcome_kind=outcome.kind,
            reason=outcome.reason,
            warnings=warnings,
            below_minimum_margin=below_minimum_margin,
            at_floor_price=at_floor_price,
            at_ceiling_price=at_ceiling_price,
        )

        logger.debug(
            "Priced SKU %s on %s: %.2f -> %.2f (%s)",
            product.sku, channel.channel_id, result.current_price, result.proposed_price,
            outcome.kind,
        )
        return result
