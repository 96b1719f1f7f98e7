"""
API route modules.
"""

from routes.conversions import router as conversions_router

__all__ = [
    "conversions_router",
]
