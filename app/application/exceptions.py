class LLMUpstreamError(RuntimeError):
    """Raised when LLM provider fails (timeouts, network errors, service unavailable)."""
    pass


class LLMContractError(RuntimeError):
    """Raised when LLM adapter violates contract (bad format or missing data)."""
    pass


class RetrievalError(RuntimeError):
    """Raised when the embedding or vector search backend fails."""
    pass


class CalendarError(RuntimeError):
    """Raised when the calendar backend cannot list or create events."""
    pass


class SpreadsheetError(RuntimeError):
    """Raised when a reservation row cannot be appended to the sheet."""
    pass
