"""Exception hierarchy for the pre-market report pipeline.

Recoverable errors (``ProviderError``) are caught inside the aggregator.
Everything else is fatal and surfaces to the CLI as a failed run.
"""


class PremarketError(Exception):
    """Base class for all pipeline errors."""


class ConfigError(PremarketError):
    """Configuration is missing, unreadable or inconsistent."""


class ProviderError(PremarketError):
    """A market-data request failed (network, HTTP status, bad JSON)."""

    def __init__(self, message: str, endpoint: str = ""):
        super().__init__(message)
        self.endpoint = endpoint


class MalformedPayloadError(ProviderError):
    """The provider answered, but not with a usable payload."""


class SynthesisError(PremarketError):
    """The language-model call failed or returned nothing."""


class DeliveryError(PremarketError):
    """The rendered report could not be delivered."""


class IncompleteReportError(PremarketError):
    """The model response is missing required report sections."""

    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(f"Report is missing required sections: {', '.join(self.missing)}")
