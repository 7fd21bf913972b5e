"""
API routers package.
"""

from skyline.routers import auth, health, vacations

__all__ = [
    "auth",
    "health",
    "vacations",
]
