"""
Default channel fee schedules.

Used when a tenant has not configured its own channels yet. Rates are
UK marketplace defaults; per-tenant agreements override them.
"""

from repricer.core.models import Channel

DEFAULT_CHANNEL_ID = "amazon"

DEFAULT_CHANNEL_CONFIGS: dict[str, Channel] = {
    "amazon": Channel(
        channel_id="amazon",
        name="Amazon UK",
        commission_percent=15,
        default_acos_percent=15,
        include_advertising_in_margin=True,
        vat_percent=20,
        prices_include_vat=True,
    ),
    "ebay": Channel(
        channel_id="ebay",
        name="eBay UK",
        commission_percent=12.8,
        fixed_fee=0.30,
        default_acos_percent=10,
        include_advertising_in_margin=True,
        vat_percent=20,
        prices_include_vat=True,
    ),
    "bandq": Channel(
        channel_id="bandq",
        name="B&Q",
        commission_percent=15,
        include_advertising_in_margin=False,
        vat_percent=20,
        prices_include_vat=True,
    ),
    "manomano": Channel(
        channel_id="manomano",
        name="ManoMano",
        commission_percent=15,
        default_acos_percent=10,
        include_advertising_in_margin=True,
        vat_percent=20,
        prices_include_vat=True,
    ),
    "shopify": Channel(
        channel_id="shopify",
        name="Shopify (Direct)",
        commission_percent=0,
        payment_processing_percent=2.9,  # Shopify Payments
        default_acos_percent=5,  # Google/Facebook ads
        include_advertising_in_margin=True,
        vat_percent=20,
        prices_include_vat=True,
    ),
}


def default_channels() -> list[Channel]:
    """All default channels, in declaration order."""
    return list(DEFAULT_CHANNEL_CONFIGS.values())
