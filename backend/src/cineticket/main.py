"""FastAPI application entry point."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cineticket.api.errors import storage_error_handler
from cineticket.api.routes import concessions, health, purchases, showtimes
from cineticket.config import settings
from cineticket.errors import StorageError

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="CineTicket API",
    description="Seat booking and concession sales for cinema showtimes",
    version="0.1.0",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(StorageError, storage_error_handler)

# Include routers
app.include_router(health.router)
app.include_router(showtimes.router, prefix="/api", tags=["showtimes"])
app.include_router(concessions.router, prefix="/api", tags=["concessions"])
app.include_router(purchases.router, prefix="/api", tags=["purchases"])
