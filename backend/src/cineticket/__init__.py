"""CineTicket booking core: seat reservations, purchases and cancellations."""

__version__ = "0.1.0"
