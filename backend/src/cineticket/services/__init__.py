"""Booking services: availability, reservation, commit and cancellation."""

from cineticket.services.booking import BookingService
from cineticket.services.context import RequestContext
from cineticket.services.receipts import ReceiptGenerator, TextReceiptGenerator
from cineticket.services.result import Err, Ok, Result
from cineticket.services.transaction import PurchaseConfirmation, ReceiptWarning

__all__ = [
    "BookingService",
    "Err",
    "Ok",
    "PurchaseConfirmation",
    "ReceiptGenerator",
    "ReceiptWarning",
    "RequestContext",
    "Result",
    "TextReceiptGenerator",
]
