"""
Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy for the accumulator.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

A proof that does not check out is NOT an error: verification returns
False. Exceptions here signal malformed input or a malfunctioning
collaborator (store corruption, bad configuration).
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the accumulator."""

    # Caller input
    INVALID_POSITION = "INVALID_POSITION"
    INVALID_INPUT = "INVALID_INPUT"

    # Store
    NODE_NOT_FOUND = "NODE_NOT_FOUND"
    STORE_FAILURE = "STORE_FAILURE"
    JOURNAL_CORRUPTED = "JOURNAL_CORRUPTED"

    # Setup
    UNSUPPORTED_HASHER = "UNSUPPORTED_HASHER"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class AccumulatorError(BaseModel):
    """
    Base error model for structured error reporting (CLI JSON output).
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INVALID_POSITION],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "AccumulatorException":
        """Convert this error model to a raised exception."""
        return AccumulatorException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class AccumulatorException(Exception):
    """
    Base exception for all accumulator errors.

    Carries structured error information and can be converted to an
    AccumulatorError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "ACCUMULATOR_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> AccumulatorError:
        """Convert this exception to an AccumulatorError model."""
        return AccumulatorError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidPositionException(AccumulatorException):
    """Raised when an element position is outside ``1..elements_count``."""

    def __init__(
        self,
        message: str,
        position: int | None = None,
        elements_count: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if position is not None:
            full_details["position"] = position
        if elements_count is not None:
            full_details["elements_count"] = elements_count
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_POSITION,
            details=full_details,
            retryable=False,
        )


class InvalidInputException(AccumulatorException, ValueError):
    """Raised on malformed input: bad proof shape, bad digest, bad value."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_INPUT,
            details=full_details,
            retryable=False,
        )


class NodeNotFoundException(AccumulatorException):
    """
    Raised when the store has no node at a position the engine expects.

    Indicates store corruption or a bug; never retried.
    """

    def __init__(
        self,
        position: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["position"] = position
        super().__init__(
            message=f"No node stored at position {position}",
            code=ErrorCodes.NODE_NOT_FOUND,
            details=full_details,
            retryable=False,
        )


class StoreFailureException(AccumulatorException):
    """Raised by a store that detects its own backing data is unusable."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.STORE_FAILURE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details=details,
            retryable=False,
        )


class UnsupportedHasherException(AccumulatorException):
    """Raised when a hasher name is not registered."""

    def __init__(self, name: str, supported: list[str]) -> None:
        super().__init__(
            message=f"Unsupported hasher: '{name}'. Supported hashers: {sorted(supported)}",
            code=ErrorCodes.UNSUPPORTED_HASHER,
            details={"name": name, "supported": sorted(supported)},
            retryable=False,
        )


class ConfigurationException(AccumulatorException):
    """Raised when runtime configuration is invalid."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIGURATION_ERROR,
            details=details,
            retryable=False,
        )


class CanonicalizationException(AccumulatorException):
    """Exception raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
            retryable=False,
        )
