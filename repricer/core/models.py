"""
Pydantic domain models for the repricer.

These models represent the data flowing through a pricing run:
Product + Channel + PricingRule → CostBreakdown → PriceCalculationResult → PriceProposal
"""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from repricer.core.sanitize import sanitize_number


class RoundingRule(StrEnum):
    """Rounding applied to a proposed price."""
    NONE = "none"
    NEAREST_99P = "nearest_99p"
    NEAREST_95P = "nearest_95p"
    NEAREST_POUND = "nearest_pound"
    ROUND_DOWN = "round_down"
    ROUND_UP = "round_up"


class ActionType(StrEnum):
    """What a pricing rule does once its conditions match."""
    SET_MARGIN = "set_margin"
    SET_MARKUP = "set_markup"
    ADJUST_PERCENT = "adjust_percent"
    ADJUST_FIXED = "adjust_fixed"
    SET_PRICE = "set_price"
    MATCH_MRP = "match_mrp"
    DISCOUNT_FROM_MRP = "discount_from_mrp"


class OutcomeKind(StrEnum):
    """How a price was arrived at."""
    RULE_APPLIED = "rule_applied"
    UNCHANGED = "unchanged"
    ACTION_FAILED = "action_failed"


class ProposalStatus(StrEnum):
    """Approval workflow status of a proposal."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    MODIFIED = "modified"
    PUSHED = "pushed"


# ─── Catalog Models ───────────────────────────────────────────


class Product(BaseModel):
    """A sellable item as handed in by the catalog/sync layer."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    sku: str = Field(..., min_length=1)
    title: str = Field(default="")
    brand: str = Field(default="")
    category: str | None = None
    mrp: float = Field(default=0.0, ge=0, description="Recommended price; 0 means no ceiling")
    current_price: float = Field(default=0.0, ge=0)
    cost_price: float = Field(default=0.0, description="COGS; 0 or less means unknown")
    delivery_cost: float = Field(default=0.0, ge=0)
    stock_level: int = Field(default=0)
    sales_last_7_days: int = Field(default=0, ge=0)
    sales_last_30_days: int = Field(default=0, ge=0)

    @field_validator(
        "mrp",
        "current_price",
        "cost_price",
        "delivery_cost",
        "stock_level",
        "sales_last_7_days",
        "sales_last_30_days",
        mode="before",
    )
    @classmethod
    def _missing_as_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @property
    def has_cost(self) -> bool:
        return self.cost_price > 0

    @property
    def daily_sales(self) -> float:
        """Average units sold per day over the trailing week."""
        return self.sales_last_7_days / 7


class Channel(BaseModel):
    """A sales destination and its fee schedule."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    channel_id: str = Field(..., min_length=1)
    name: str = Field(default="")
    is_active: bool = True
    commission_percent: float = Field(default=0.0, ge=0)
    fixed_fee: float = Field(default=0.0, ge=0)
    payment_processing_percent: float = Field(default=0.0, ge=0)
    default_acos_percent: float = Field(default=0.0, ge=0)
    include_advertising_in_margin: bool = False
    vat_percent: float = Field(default=20.0, ge=0)
    prices_include_vat: bool = True

    @property
    def advertising_percent(self) -> float:
        """Advertising cost of sale that counts toward margin."""
        if self.include_advertising_in_margin:
            return self.default_acos_percent
        return 0.0


# ─── Rule Models ──────────────────────────────────────────────


class RuleConditions(BaseModel):
    """Conjunctive conditions; anything left unset imposes no constraint."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )

    brands: tuple[str, ...] = ()
    categories: tuple[str, ...] = ()
    skus: tuple[str, ...] = ()
    sku_patterns: tuple[str, ...] = ()

    margin_below: float | None = None
    margin_above: float | None = None
    stock_below: float | None = None
    stock_above: float | None = None
    sales_velocity_below: float | None = None
    sales_velocity_above: float | None = None
    daily_sales_below: float | None = None
    daily_sales_above: float | None = None
    days_of_stock_below: float | None = None
    days_of_stock_above: float | None = None
    price_below: float | None = None
    price_above: float | None = None
    daily_revenue_below: float | None = None
    daily_revenue_above: float | None = None


class RuleAction(BaseModel):
    """The single action a rule performs."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    type: ActionType
    value: float = 0.0


class PricingRule(BaseModel):
    """An externally authored business rule. Lower priority evaluates first."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    rule_id: str = Field(..., min_length=1)
    name: str = Field(default="")
    description: str | None = None
    priority: int = 100
    is_active: bool = True
    conditions: RuleConditions = Field(default_factory=RuleConditions)
    action: RuleAction


class PricingConfig(BaseModel):
    """Global pricing configuration for a run."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    minimum_margin_percent: float = 15.0
    default_rounding_rule: RoundingRule = RoundingRule.NEAREST_99P
    maximum_discount_percent: float = 50.0
    default_channel_id: str = "amazon"
    proposal_ttl_days: int = Field(default=30, ge=1)


# ─── Calculation Models ───────────────────────────────────────


class CostBreakdown(BaseModel):
    """Margin decomposition for one selling price on one channel."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    selling_price: float
    vat_amount: float = 0.0
    price_ex_vat: float = 0.0
    cost_price: float = 0.0
    delivery_cost: float = 0.0
    channel_commission: float = 0.0
    channel_fixed_fee: float = 0.0
    payment_processing: float = 0.0
    advertising_cost: float = 0.0
    total_costs: float = 0.0
    net_profit: float = Field(default=0.0, description="Profit per order (PPO)")
    margin_percent: float = Field(default=0.0, description="Net profit over price ex-VAT")

    @property
    def is_profitable(self) -> bool:
        return self.net_profit > 0

    def sanitized(self) -> "CostBreakdown":
        """Copy with every non-finite number replaced by zero."""
        return self.model_copy(
            update={name: sanitize_number(getattr(self, name)) for name in type(self).model_fields}
        )


class RuleOutcome(BaseModel):
    """Price produced by a rule action, tagged with how it came about."""

    kind: OutcomeKind
    price: float
    reason: str
    rule_id: str | None = None
    rule_name: str | None = None

    @property
    def failed(self) -> bool:
        return self.kind == OutcomeKind.ACTION_FAILED


class PriceCalculationResult(BaseModel):
    """Orchestrator output for a single product."""

    sku: str
    current_price: float
    proposed_price: float
    price_change: float = 0.0
    price_change_percent: float = 0.0

    current_margin: float = 0.0
    proposed_margin: float = 0.0
    margin_change: float = 0.0

    current_profit: float = 0.0
    proposed_profit: float = 0.0

    estimated_daily_profit_change: float = 0.0
    estimated_weekly_revenue_impact: float = 0.0
    estimated_weekly_profit_impact: float = 0.0
    sales_velocity: float = 0.0

    cost_breakdown: CostBreakdown

    applied_rule: str | None = None
    applied_rule_id: str | None = None
    outcome_kind: OutcomeKind = OutcomeKind.UNCHANGED
    reason: str
    warnings: list[str] = Field(default_factory=list)

    below_minimum_margin: bool = False
    at_floor_price: bool = False
    at_ceiling_price: bool = False

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0


# ─── Workflow Models ──────────────────────────────────────────


class PriceProposal(BaseModel):
    """A persistable price change awaiting human approval."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    proposal_id: str
    sku: str
    product_title: str = ""
    brand: str = ""
    category: str | None = None

    current_price: float
    proposed_price: float
    price_change: float
    price_change_percent: float

    current_margin: float
    proposed_margin: float
    margin_change: float

    cost_breakdown: CostBreakdown

    stock_level: float = 0
    sales_last_7_days: float = 0
    sales_last_30_days: float = 0
    avg_daily_sales: float = 0.0
    estimated_daily_profit_change: float = 0.0
    estimated_weekly_revenue_impact: float = 0.0
    estimated_weekly_profit_impact: float = 0.0

    applied_rule_id: str | None = None
    applied_rule_name: str | None = None
    reason: str
    warnings: list[str] = Field(default_factory=list)

    status: ProposalStatus = ProposalStatus.PENDING
    created_at: str
    batch_id: str
    ttl: int

    @property
    def is_increase(self) -> bool:
        return self.price_change > 0

    def to_item(self) -> dict[str, Any]:
        """Document shape handed to the persistence layer (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ProposalBatch(BaseModel):
    """Summary statistics for one proposal generation run."""

    batch_id: str
    created_at: datetime
    total_proposals: int = 0
    pending_count: int = 0
    price_increases: int = 0
    price_decreases: int = 0
    average_price_change: float = Field(default=0.0, description="Mean percent change")
    average_margin_change: float = 0.0
    total_estimated_impact: float = Field(default=0.0, description="Sum of weekly profit impact")
    proposals_with_warnings: int = 0
