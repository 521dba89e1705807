class InsightsError(Exception):
    """Base class for every failure the insights core surfaces."""

    # Tiers that settled successfully before the failure, when any did
    partial = None


class CredentialError(InsightsError):
    """Missing or invalid access token. Raised before any network call."""


class ProviderError(InsightsError):
    """The reporting API answered with a structured error."""

    def __init__(self, message, code=None):
        super().__init__(message)
        self.message = message
        self.code = code


class TransportError(InsightsError):
    """Network failure or an undecodable response."""


class ValidationError(InsightsError):
    """Malformed date range."""


class PartialResultError(InsightsError):
    """
    A mandatory tier failed after other tiers had settled. The original error
    is the ``__cause__``; the settled tiers are in ``partial``.
    """

    def __init__(self, message, partial):
        super().__init__(message)
        self.partial = partial
