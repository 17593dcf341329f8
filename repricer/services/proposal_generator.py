"""
Proposal generator.

Runs the pricing engine over a product collection and turns every
meaningful price change into a pending PriceProposal for the approval
workflow. Persisting the proposals is the caller's job.
"""

import logging
import math
import uuid
from collections.abc import Callable, Iterable, Mapping
from datetime import UTC, datetime, timedelta

from repricer.config import Settings, get_settings
from repricer.core.interfaces import IPriceCalculator
from repricer.core.logging_config import batch_log_context, configure_logging
from repricer.core.models import (
    Channel,
    PriceCalculationResult,
    PriceProposal,
    PricingRule,
    Product,
    ProposalBatch,
    ProposalStatus,
)
from repricer.core.sanitize import sanitize_number
from repricer.services.pricing_engine import PricingEngine
from repricer.services.rule_matcher import sort_rules

logger = logging.getLogger(__name__)

# Smallest price change that becomes a proposal
MIN_PRICE_CHANGE = 0.01
DEFAULT_PROPOSAL_TTL_DAYS = 30


def is_actionable(result: PriceCalculationResult) -> bool:
    """Whether a calculation result should become a proposal."""
    if abs(result.price_change) < MIN_PRICE_CHANGE:
        return False
    if result.proposed_price <= 0 or not math.isfinite(result.proposed_price):
        return False
    return True


class ProposalGenerator:
    """
    Builds price proposals for a batch of products.

    Each batch prices every product against one sorted snapshot of the rules.
    """

    def __init__(
        self,
        engine: IPriceCalculator,
        ttl_days: int = DEFAULT_PROPOSAL_TTL_DAYS,
        clock: Callable[[], datetime] | None = None,
    ):
        self._engine = engine
        self._ttl_days = ttl_days
        self._clock = clock or (lambda: datetime.now(UTC))

    def build_proposal(
        self,
        product: Product,
        result: PriceCalculationResult,
        batch_id: str,
    ) -> PriceProposal:
        """Wrap a calculation result into a pending, sanitized proposal."""
        now = self._clock()
        expires_at = now + timedelta(days=self._ttl_days)

        return PriceProposal(
            proposal_id=str(uuid.uuid4()),
            sku=product.sku,
            product_title=product.title,
            brand=product.brand,
            category=product.category,
            current_price=sanitize_number(result.current_price),
            proposed_price=sanitize_number(result.proposed_price),
            price_change=sanitize_number(result.price_change),
            price_change_percent=sanitize_number(result.price_change_percent),
            current_margin=sanitize_number(result.current_margin),
            proposed_margin=sanitize_number(result.proposed_margin),
            margin_change=sanitize_number(result.margin_change),
            cost_breakdown=result.cost_breakdown.sanitized(),
            stock_level=sanitize_number(product.stock_level),
            sales_last_7_days=sanitize_number(product.sales_last_7_days),
            sales_last_30_days=sanitize_number(product.sales_last_30_days),
            avg_daily_sales=sanitize_number(result.sales_velocity),
            estimated_daily_profit_change=sanitize_number(result.estimated_daily_profit_change),
            estimated_weekly_revenue_impact=sanitize_number(result.estimated_weekly_revenue_impact),
            estimated_weekly_profit_impact=sanitize_number(result.estimated_weekly_profit_impact),
            applied_rule_id=result.applied_rule_id,
            applied_rule_name=result.applied_rule,
            reason=result.reason,
            warnings=list(result.warnings),
            status=ProposalStatus.PENDING,
            created_at=now.isoformat(),
            batch_id=batch_id,
            ttl=int(expires_at.timestamp()),
        )

    def generate_proposals(
        self,
        products: Iterable[Product],
        rules: Iterable[PricingRule],
        batch_id: str,
        channel_id: str | None = None,
    ) -> list[PriceProposal]:
        """
        Generate pending proposals for every product whose price should change.

        Args:
            products: Products to price.
            rules: Pricing rules in any order, snapshotted for the whole batch.
            batch_id: Identifier shared by every proposal from this run.
            channel_id: Channel to price for (engine default if omitted).

        Returns:
            Proposals for products with a price change of at least one penny
            and a positive, finite proposed price.

        Raises:
            ChannelNotConfigured: If the channel is not configured.
        """
        channel_id = channel_id or self._engine.default_channel_id
        snapshot = sort_rules(rules)
        proposals: list[PriceProposal] = []
        skipped = 0

        with batch_log_context(batch_id, channel_id):
            for product in products:
                result = self._engine.calculate_price(product, snapshot, channel_id)
                if not is_actionable(result):
                    skipped += 1
                    continue
                proposals.append(self.build_proposal(product, result, batch_id))

            summary = summarize_batch(batch_id, proposals, created_at=self._clock())
            logger.info(
                "Batch %s: %d proposals (%d increases, %d decreases), %d unchanged, "
                "%d with warnings",
                batch_id,
                summary.total_proposals,
                summary.price_increases,
                summary.price_decreases,
                skipped,
                summary.proposals_with_warnings,
            )
        return proposals


def summarize_batch(
    batch_id: str,
    proposals: list[PriceProposal],
    created_at: datetime | None = None,
) -> ProposalBatch:
    """
    Aggregate summary statistics for a batch of proposals.

    Args:
        batch_id: The batch being summarized.
        proposals: Proposals generated in the batch.
        created_at: Batch timestamp (now, UTC, if omitted).

    Returns:
        ProposalBatch with counts, mean percent price change, mean margin
        change and total estimated weekly profit impact.
    """
    count = len(proposals)
    avg_price_change = sum(p.price_change_percent for p in proposals) / count if count else 0.0
    avg_margin_change = sum(p.margin_change for p in proposals) / count if count else 0.0

    return ProposalBatch(
        batch_id=batch_id,
        created_at=created_at or datetime.now(UTC),
        total_proposals=count,
        pending_count=sum(1 for p in proposals if p.status == ProposalStatus.PENDING),
        price_increases=sum(1 for p in proposals if p.price_change > 0),
        price_decreases=sum(1 for p in proposals if p.price_change < 0),
        average_price_change=sanitize_number(avg_price_change),
        average_margin_change=sanitize_number(avg_margin_change),
        total_estimated_impact=sanitize_number(
            sum(p.estimated_weekly_profit_impact for p in proposals)
        ),
        proposals_with_warnings=sum(1 for p in proposals if p.warnings),
    )


def build_proposal_generator(
    settings: Settings | None = None,
    channels: Mapping[str, Channel] | Iterable[Channel] | None = None,
    setup_logs: bool = True,
) -> ProposalGenerator:
    """
    Wire a ProposalGenerator from settings.

    Args:
        settings: Repricer settings (cached environment settings if omitted).
        channels: Channel map for the engine (default channel configs if omitted).
        setup_logs: Configure structured logging from ``settings`` first.
    """
    settings = settings or get_settings()
    if setup_logs:
        configure_logging(settings)
    config = settings.pricing_config()
    engine = PricingEngine(config=config, channels=channels)
    return ProposalGenerator(engine, ttl_days=config.proposal_ttl_days)
