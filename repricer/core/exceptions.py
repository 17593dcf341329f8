"""
Custom exception hierarchy for the repricer.

All application-specific exceptions inherit from RepricerError,
enabling catch-all handling by callers while allowing
fine-grained handling in business logic.
"""


class RepricerError(Exception):
    """Base exception for all repricer errors."""

    def __init__(self, message: str = "", details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# ─── Configuration Errors ─────────────────────────────────────


class ChannelNotConfigured(RepricerError):
    """
    The requested sales channel is missing from the supplied channel map.

    This is a caller configuration error rather than a data quality issue,
    so it is the one failure the engine raises instead of downgrading to
    a warning.
    """

    def __init__(self, channel_id: str, **kwargs):
        self.channel_id = channel_id
        message = f"Channel {channel_id} not configured"
        super().__init__(message=message, **kwargs)
