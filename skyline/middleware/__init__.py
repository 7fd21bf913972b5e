"""
Request dependencies for authentication and authorization.
"""

from skyline.middleware.auth import get_current_user, prevent_admin_like, require_admin

__all__ = [
    "get_current_user",
    "prevent_admin_like",
    "require_admin",
]
