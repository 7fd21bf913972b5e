"""
SQLAlchemy models package.
All models inherit from the Base class defined in database.py.
"""

from skyline.models.user import Role, User
from skyline.models.vacation import Vacation, VacationLike

__all__ = [
    "Role",
    "User",
    "Vacation",
    "VacationLike",
]
