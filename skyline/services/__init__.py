"""
Services package for business logic.
"""

from skyline.services.users import UserService
from skyline.services.vacations import VacationService

__all__ = [
    "UserService",
    "VacationService",
]
