"""
Async client library: state store plus the HTTP client that keeps it in
sync with the API.
"""

from skyline.client.api import ClientConfig, ClientRequestError, SkylineClient, VacationForm
from skyline.client.store import LikeSnapshot, PaginationMeta, VacationStore

__all__ = [
    "ClientConfig",
    "ClientRequestError",
    "LikeSnapshot",
    "PaginationMeta",
    "SkylineClient",
    "VacationForm",
    "VacationStore",
]
