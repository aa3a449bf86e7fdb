"""
SwingCoach API Module

FastAPI routes for golf swing analysis.
"""

from .routes import router, API_VERSION

__all__ = [
    "router",
    "API_VERSION",
]
