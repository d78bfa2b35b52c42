"""
errors.py — Error taxonomy for the token scanner pipeline.
"""


class ScannerError(Exception):
    """Base class for every error raised by the scanner."""


class ConfigError(ScannerError):
    """A required setting is missing. Fatal at startup."""


class ValidationError(ScannerError):
    """The received text does not look like a token address."""

    def __init__(self, text: str, reason: str):
        self.text = text
        self.length = len(text)
        self.reason = reason
        super().__init__(f"invalid address ({self.length} chars): {reason}")


class UpstreamFetchError(ScannerError):
    """A required market/security request failed."""


class MissingDataError(ScannerError):
    """Requests succeeded but returned nothing usable."""


class OnChainQueryError(ScannerError):
    """Indexer or RPC lookup failed. Recovered locally, never shown to users."""
