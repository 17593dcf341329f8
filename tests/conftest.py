"""
Shared test fixtures for the repricer test suite.
"""

import pytest

from repricer.core.models import (
    ActionType,
    Channel,
    PricingConfig,
    PricingRule,
    Product,
    RoundingRule,
    RuleAction,
    RuleConditions,
)
from repricer.services.pricing_engine import PricingEngine


def _build_rule(
    rule_id: str,
    action_type: ActionType,
    value: float = 0.0,
    priority: int = 10,
    is_active: bool = True,
    **conditions,
) -> PricingRule:
    """Build a rule with keyword conditions, e.g. ``brands=["Acme"]``."""
    return PricingRule(
        rule_id=rule_id,
        name=rule_id.replace("-", " ").title(),
        priority=priority,
        is_active=is_active,
        conditions=RuleConditions(**conditions),
        action=RuleAction(type=action_type, value=value),
    )


@pytest.fixture
def make_rule():
    """Factory fixture for pricing rules."""
    return _build_rule


@pytest.fixture
def sample_product() -> Product:
    """A well-costed product selling below its MRP."""
    return Product(
        sku="BAL-1001-BLK",
        title="Balterley 600mm Vanity Unit - Black",
        brand="Balterley",
        category="Bathroom Furniture",
        mrp=150.00,
        current_price=100.00,
        cost_price=40.00,
        delivery_cost=5.00,
        stock_level=70,
        sales_last_7_days=14,
        sales_last_30_days=50,
    )


@pytest.fixture
def uncosted_product() -> Product:
    """A product whose COGS has not been uploaded yet."""
    return Product(
        sku="BAL-2002-WHT",
        title="Balterley Basin Mixer Tap",
        brand="Balterley",
        mrp=80.00,
        current_price=100.00,
        cost_price=0.0,
        delivery_cost=5.00,
        stock_level=12,
        sales_last_7_days=3,
    )


@pytest.fixture
def marketplace_channel() -> Channel:
    """15% commission, VAT-inclusive prices, ads kept out of margin."""
    return Channel(
        channel_id="amazon",
        name="Amazon UK",
        commission_percent=15,
        vat_percent=20,
        prices_include_vat=True,
    )


@pytest.fixture
def pricing_config() -> PricingConfig:
    return PricingConfig(
        minimum_margin_percent=15,
        default_rounding_rule=RoundingRule.NEAREST_99P,
    )


@pytest.fixture
def engine(pricing_config, marketplace_channel) -> PricingEngine:
    return PricingEngine(config=pricing_config, channels=[marketplace_channel])


@pytest.fixture
def unrounded_engine(marketplace_channel) -> PricingEngine:
    """Engine that only rounds to the penny, for exact price assertions."""
    config = PricingConfig(minimum_margin_percent=15, default_rounding_rule=RoundingRule.NONE)
    return PricingEngine(config=config, channels=[marketplace_channel])
