"""Booking error taxonomy.

Recoverable errors describe something the caller can fix (bad input, a seat
lost to another buyer, a missing identity). Fatal errors mean storage is in
an unexpected state and are never turned into result values.
"""

from enum import Enum


class ErrorCode(Enum):
    """Stable error codes exposed to API clients."""

    VALIDATION = "VALIDATION"
    SEAT_UNAVAILABLE = "SEAT_UNAVAILABLE"
    AUTHENTICATION = "AUTHENTICATION"
    RECEIPT_GENERATION = "RECEIPT_GENERATION"
    STORAGE = "STORAGE"
    PARTIAL_CANCELLATION = "PARTIAL_CANCELLATION"


class BookingError(Exception):
    """Base booking error with a code and a user-safe message."""

    code: ErrorCode
    recoverable: bool = True

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(BookingError):
    """Invalid input or a violated business precondition."""

    code = ErrorCode.VALIDATION


class SeatUnavailableError(BookingError):
    """The seat already has an ACTIVE ticket for the showtime."""

    code = ErrorCode.SEAT_UNAVAILABLE

    def __init__(self, seat_id: int) -> None:
        super().__init__(f"Seat {seat_id} is no longer available")
        self.seat_id = seat_id


class AuthenticationError(BookingError):
    """The acting user could not be established."""

    code = ErrorCode.AUTHENTICATION


class ReceiptGenerationError(BookingError):
    """The receipt document could not be produced. The sale itself stands."""

    code = ErrorCode.RECEIPT_GENERATION


class StorageError(BookingError):
    """Unexpected persistence failure. Nothing partial was committed."""

    code = ErrorCode.STORAGE
    recoverable = False


class PartialCancellationError(StorageError):
    """Purchase and ticket cancellation could not be applied together."""

    code = ErrorCode.PARTIAL_CANCELLATION
