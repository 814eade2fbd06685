"""Typed results returned by the booking facade.

Callers branch on ``Ok``/``Err`` instead of catching business exceptions:

    match await booking.purchase(ctx, ...):
        case Ok(confirmation):
            ...
        case Err(SeatUnavailableError() as error):
            ...
"""

import functools
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, ParamSpec, TypeVar

from cineticket.errors import BookingError

logger = logging.getLogger(__name__)

T = TypeVar("T")
P = ParamSpec("P")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: BookingError

    @property
    def is_ok(self) -> bool:
        return False


Result = Ok[T] | Err


def returns_result(
    func: Callable[P, Awaitable[T]],
) -> Callable[P, Awaitable[Ok[T] | Err]]:
    """
    Wrap an async operation so recoverable booking errors come back as ``Err``.

    Fatal errors (``StorageError`` and anything that is not a BookingError)
    propagate unchanged.
    """

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> Ok[T] | Err:
        try:
            value = await func(*args, **kwargs)
        except BookingError as error:
            if not error.recoverable:
                raise
            logger.info(f"{func.__name__} rejected: {error}")
            return Err(error)
        return Ok(value)

    return wrapper
