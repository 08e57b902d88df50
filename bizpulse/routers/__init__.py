"""API routers for all endpoints."""

from bizpulse.routers import dashboard, metrics, products, system

__all__ = [
    "dashboard",
    "metrics",
    "products",
    "system",
]
