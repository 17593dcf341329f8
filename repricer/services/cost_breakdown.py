"""
Cost breakdown calculator.

Decomposes a selling price into VAT, channel fees, advertising, delivery
and cost of goods to get net profit per order (PPO) and margin.
"""

from repricer.core.models import Channel, CostBreakdown, Product


def compute_breakdown(
    selling_price: float,
    cost_price: float,
    delivery_cost: float,
    commission_percent: float,
    fixed_fee: float,
    payment_processing_percent: float,
    advertising_percent: float,
    vat_percent: float,
    prices_include_vat: bool,
) -> CostBreakdown:
    """
    Calculate the full margin decomposition for one selling price.

    Percentage fees are charged on the price excluding VAT, and margin is
    net profit over the price excluding VAT:

        price_ex_vat = selling_price / (1 + vat)      (VAT-inclusive prices)
        net_profit   = price_ex_vat - (cost + delivery + fees + ads)
        margin_pct   = net_profit / price_ex_vat * 100

    Args:
        selling_price: Price the customer pays on the channel.
        cost_price: Cost of goods (0 when unknown).
        delivery_cost: Delivery cost per unit.
        commission_percent: Channel commission, percent of price ex-VAT.
        fixed_fee: Fixed per-transaction channel fee.
        payment_processing_percent: Payment processing, percent of price ex-VAT.
        advertising_percent: Advertising cost of sale, percent of price ex-VAT.
            Callers pass 0 when the channel keeps ads out of margin.
        vat_percent: VAT rate in percent.
        prices_include_vat: Whether ``selling_price`` already contains VAT.

    Returns:
        Unrounded CostBreakdown. Margin is 0 when price ex-VAT is not positive.
    """
    vat_rate = vat_percent / 100

    if prices_include_vat:
        price_ex_vat = selling_price / (1 + vat_rate)
        vat_amount = selling_price - price_ex_vat
    else:
        price_ex_vat = selling_price
        vat_amount = selling_price * vat_rate

    channel_commission = price_ex_vat * commission_percent / 100
    payment_processing = price_ex_vat * payment_processing_percent / 100
    advertising_cost = price_ex_vat * advertising_percent / 100

    total_costs = (
        cost_price
        + delivery_cost
        + channel_commission
        + fixed_fee
        + payment_processing
        + advertising_cost
    )
    net_profit = price_ex_vat - total_costs
    margin_percent = (net_profit / price_ex_vat) * 100 if price_ex_vat > 0 else 0.0

    return CostBreakdown(
        selling_price=selling_price,
        vat_amount=vat_amount,
        price_ex_vat=price_ex_vat,
        cost_price=cost_price,
        delivery_cost=delivery_cost,
        channel_commission=channel_commission,
        channel_fixed_fee=fixed_fee,
        payment_processing=payment_processing,
        advertising_cost=advertising_cost,
        total_costs=total_costs,
        net_profit=net_profit,
        margin_percent=margin_percent,
    )


def channel_breakdown(product: Product, price: float, channel: Channel) -> CostBreakdown:
    """Breakdown of ``price`` for ``product`` under ``channel``'s fee schedule."""
    return compute_breakdown(
        selling_price=price,
        cost_price=product.cost_price,
        delivery_cost=product.delivery_cost,
        commission_percent=channel.commission_percent,
        fixed_fee=channel.fixed_fee,
        payment_processing_percent=channel.payment_processing_percent,
        advertising_percent=channel.advertising_percent,
        vat_percent=channel.vat_percent,
        prices_include_vat=channel.prices_include_vat,
    )
