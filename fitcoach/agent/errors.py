"""Failure types raised by the coaching pipeline.

Safety refusals are NOT errors -- they are a normal outcome flagged on the
ExchangeResult. Only remote generation and persistence problems raise.
"""

from enum import Enum


class FailureKind(Enum):
    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    SERVER_ERROR = "server_error"
    TRANSPORT = "transport"


# Kinds where resubmitting the same message later may succeed
RETRYABLE_KINDS = {FailureKind.RATE_LIMIT, FailureKind.TRANSPORT}


class RemoteGenerationFailure(Exception):
    """The model service could not produce a reply.

    Carries the cause tag so callers can tell retryable failures
    (rate limit, transport) from non-retryable ones (auth).
    """

    def __init__(self, kind: FailureKind, message: str = "", status_code: int | None = None):
        self.kind = kind
        self.status_code = status_code
        super().__init__(message or kind.value)

    @property
    def retryable(self) -> bool:
        return self.kind in RETRYABLE_KINDS

    def __repr__(self) -> str:
        return f"RemoteGenerationFailure(kind={self.kind.value!r}, status_code={self.status_code!r})"


class PersistenceFailure(Exception):
    """A session or profile store could not be read or written."""
