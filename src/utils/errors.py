"""Custom exception hierarchy for Leafee.

All application exceptions inherit from :class:`LeafeeError`, which carries
an optional ``provider_name`` so error handlers can identify which external
service (e.g. "gemini", "trefle", "sqlite") caused the failure.

    LeafeeError  (base -- catch-all for any Leafee error)
    +-- ProviderUnavailableError (external service down / unreachable / no credentials)
    +-- LLMError                 (any LLM API call failure)
    +-- StoreError               (plant store read / write failure)
    +-- ConfigurationError       (startup / missing config)
    +-- InvalidRequestError      (caller supplied an unusable request)
    +-- DetailsUnavailableError  (no locale could be generated for a species)

Each class also declares the HTTP status the API middleware maps it to, so
the boundary layer never needs a hand-maintained lookup table.
"""


class LeafeeError(Exception):
    """Base exception for all Leafee errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[trefle] HTTP 503``.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# External service / provider errors
# ---------------------------------------------------------------------------

class ProviderUnavailableError(LeafeeError):
    """Raised when an external service or provider is unreachable.

    The image aggregator catches this to move on to the next provider
    in the configured priority order.
    """

    def __init__(
        self,
        message: str = "External service is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class LLMError(LeafeeError):
    """Raised when an LLM API call fails or returns an unusable response."""

    def __init__(
        self,
        message: str = "LLM API call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class StoreError(LeafeeError):
    """Raised when the plant store cannot be read or written."""

    def __init__(
        self,
        message: str = "Plant store operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Orchestration / configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(LeafeeError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class InvalidRequestError(LeafeeError):
    """Raised when a request cannot be served as submitted (missing species name)."""

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid request",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class DetailsUnavailableError(LeafeeError):
    """Raised when no locale could be generated for a species.

    Nothing is persisted when this is raised; the API answers 503 so the
    caller can retry later.
    """

    status_code = 503

    def __init__(
        self,
        message: str = "Unable to generate plant details",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
