"""
Abstract base classes defining the core contracts for the repricer.

The orchestrator implements IPriceCalculator so that the proposal
generator (and any integration layer) can depend on the contract
rather than on the concrete engine.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from repricer.core.models import PriceCalculationResult, PricingRule, Product


class IPriceCalculator(ABC):
    """Interface for per-product price calculation."""

    @abstractmethod
    def calculate_price(
        self,
        product: Product,
        rules: Iterable[PricingRule],
        channel_id: str | None = None,
    ) -> PriceCalculationResult:
        """
        Calculate a proposed price for a single product.

        Args:
            product: Current cost, stock and sales state of the product.
            rules: Pricing rules in any order; only active rules are considered.
            channel_id: Channel whose fee schedule applies. Defaults to the
                        configured default channel.

        Returns:
            PriceCalculationResult with proposed price, margins and forecasts.

        Raises:
            ChannelNotConfigured: If the channel is not in the channel map.
        """
        ...

    @property
    @abstractmethod
    def default_channel_id(self) -> str:
        """Channel used when the caller does not name one."""
        ...
