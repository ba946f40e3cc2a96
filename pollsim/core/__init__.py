# Core survey module
from .errors import (
    PollSimError,
    ValidationFailed,
    QuotaExceeded,
    PollNotFound,
    GenerationFailed,
    MalformedResponse,
    PersistenceFailed,
)

__all__ = [
    "PollSimError",
    "ValidationFailed",
    "QuotaExceeded",
    "PollNotFound",
    "GenerationFailed",
    "MalformedResponse",
    "PersistenceFailed",
]
