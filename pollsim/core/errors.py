"""Error types raised by the poll simulation service.

Each error carries the HTTP status the API layer answers with, so route
handlers can let them propagate to the application's exception handler.
"""

from typing import List, Optional


class PollSimError(Exception):
    """Base class for all service errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(PollSimError):
    """A request field was missing or empty."""

    status_code = 400


class QuotaExceeded(PollSimError):
    """The process-wide LLM call budget is spent."""

    status_code = 429

    def __init__(self, limit: int):
        super().__init__(f"API call limit reached ({limit} calls). Please try again later.")
        self.limit = limit


class PollNotFound(PollSimError):
    """No poll exists with the requested id."""

    status_code = 404

    def __init__(self, poll_id: int):
        super().__init__("Poll not found")
        self.poll_id = poll_id


class GenerationFailed(PollSimError):
    """The LLM call failed or its output could not be used."""

    status_code = 500

    def __init__(self, detail: str, prefix: str = "Failed to generate poll analysis"):
        super().__init__(f"{prefix}: {detail}")
        self.detail = detail


class MalformedResponse(GenerationFailed):
    """The LLM answered, but not with the survey structure that was asked for."""

    def __init__(self, detail: str, problems: Optional[List[str]] = None):
        super().__init__(detail, prefix="Malformed response from LLM provider")
        self.problems = problems or []


class PersistenceFailed(PollSimError):
    """The poll store could not read or write a row."""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__(f"Failed to access poll store: {detail}")
        self.detail = detail
