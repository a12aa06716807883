# util/errors.py
from typing import Optional
from fastapi import HTTPException, status
from util.enums import ErrorMessage


class AppError(HTTPException):
    # Flow: raise AppError to short-circuit with a typed status & message.
    def __init__(
        self, message: str, http_status: int = status.HTTP_400_BAD_REQUEST
    ) -> None:
        super().__init__(status_code=http_status, detail=message)

    @classmethod
    def of(cls, error: ErrorMessage, detail: Optional[str] = None) -> "AppError":
        info = error.value
        message = f"{info.message}: {detail}" if detail else info.message
        return cls(message, info.http_status)


class _TypedError(AppError):
    error: ErrorMessage

    def __init__(self, detail: Optional[str] = None) -> None:
        info = self.error.value
        message = f"{info.message}: {detail}" if detail else info.message
        super().__init__(message, info.http_status)


class UnsupportedFormat(_TypedError):
    error = ErrorMessage.UNSUPPORTED_FORMAT


class ExtractionFailure(_TypedError):
    error = ErrorMessage.EXTRACTION_FAILURE


class StoreUnavailable(_TypedError):
    error = ErrorMessage.STORE_UNAVAILABLE


class ModelUnavailable(_TypedError):
    error = ErrorMessage.MODEL_UNAVAILABLE


class MalformedModelOutput(_TypedError):
    error = ErrorMessage.MALFORMED_MODEL_OUTPUT


class EmptyContext(_TypedError):
    error = ErrorMessage.EMPTY_CONTEXT
