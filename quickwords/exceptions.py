"""Custom exceptions shared across services."""

from dataclasses import dataclass

from quickwords.models import ErrorKind


@dataclass(eq=False)
class ServiceError(Exception):
    """Base exception for service layer failures."""

    message: str
    code: str = "service_error"
    status_code: int | None = None
    kind: ErrorKind = ErrorKind.GENERIC_FAILURE

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


@dataclass(eq=False)
class ModelClientError(ServiceError):
    """Raised when the text model fails to return a usable response."""

    code: str = "model_error"


@dataclass(eq=False)
class ModelUnavailableError(ModelClientError):
    """Raised when the text model cannot be reached or is disabled."""

    code: str = "model_unavailable"
    kind: ErrorKind = ErrorKind.MODEL_UNAVAILABLE


@dataclass(eq=False)
class ContextExhaustedError(ModelClientError):
    """Raised when the session's context window is full."""

    code: str = "context_length_exceeded"
    kind: ErrorKind = ErrorKind.CONTEXT_EXHAUSTED


@dataclass(eq=False)
class UnsupportedInputError(ModelClientError):
    """Raised when the model refuses the input's language or locale."""

    code: str = "unsupported_language"
    kind: ErrorKind = ErrorKind.UNSUPPORTED_INPUT
