"""
Async HTTP client for the Skyline Trips API.

Keeps a VacationStore in sync with the server. Likes are optimistic: the
store changes before the request is sent, the server's answer replaces
the local copy on success, and the pre-toggle snapshot is restored on
failure. Only one toggle per vacation may be in flight; further toggles
for that id are ignored until it settles.

Any 401 while logged in ends the session and calls on_session_expired.
"""

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Callable, List, Optional

import httpx
import jwt

from skyline.client.store import PaginationMeta, VacationStore
from skyline.schemas.auth import TokenUser
from skyline.schemas.vacation import ReportRow, VacationResponse
from skyline.services.images import ImageUpload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientConfig:
    base_url: str = "http://localhost:4001"
    timeout: float = 10.0
    page_size: int = 9


@dataclass(frozen=True)
class VacationForm:
    """Editable vacation fields as entered in an admin form."""

    destination: str
    description: str
    start_date: date
    end_date: date
    price: float

    def to_form_data(self) -> dict[str, str]:
        return {
            "destination": self.destination,
            "description": self.description,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "price": str(self.price),
        }


class ClientRequestError(Exception):
    """A user-facing failure of an API call."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def decode_user(token: str) -> TokenUser:
    """Read the user claims from a token without verifying it."""
    payload = jwt.decode(token, options={"verify_signature": False})
    return TokenUser.model_validate(payload["user"])


def _server_message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    return body.get("error") if isinstance(body, dict) else None


class SkylineClient:
    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        store: Optional[VacationStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_session_expired: Optional[Callable[[], Any]] = None,
    ):
        self.config = config or ClientConfig()
        self.store = store or VacationStore()
        self.store.pagination.page_size = self.config.page_size
        self.on_session_expired = on_session_expired
        self._pending: set[str] = set()
        self._http = httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "SkylineClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def is_pending(self, vacation_id: str) -> bool:
        return vacation_id in self._pending

    # ---------------------------------------------------------
    # Transport
    # ---------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        if self.store.token:
            return {"Authorization": f"Bearer {self.store.token}"}
        return {}

    def _expire_session(self) -> None:
        logger.info("Session expired, logging out")
        self.store.logout()
        if self.on_session_expired is not None:
            self.on_session_expired()

    async def _request(
        self,
        method: str,
        url: str,
        failure_message: str,
        use_server_message: bool = False,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            response = await self._http.request(method, url, headers=self._headers(), **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise ClientRequestError(failure_message) from exc

        if response.status_code == 401 and self.store.is_logged_in:
            self._expire_session()

        if response.is_error:
            message = failure_message
            if use_server_message:
                message = _server_message(response) or failure_message
            raise ClientRequestError(message, response.status_code)
        return response

    # ---------------------------------------------------------
    # Session
    # ---------------------------------------------------------

    def _start_session(self, token: str) -> TokenUser:
        user = decode_user(token)
        self.store.set_user(user, token)
        return user

    async def register(self, first_name: str, last_name: str, email: str, password: str) -> TokenUser:
        response = await self._request(
            "POST",
            "/api/register",
            "Registration failed.",
            use_server_message=True,
            json={
                "firstName": first_name,
                "lastName": last_name,
                "email": email,
                "password": password,
            },
        )
        return self._start_session(response.json())

    async def login(self, email: str, password: str) -> TokenUser:
        response = await self._request(
            "POST",
            "/api/login",
            "Login failed.",
            use_server_message=True,
            json={"email": email, "password": password},
        )
        return self._start_session(response.json())

    def logout(self) -> None:
        self.store.logout()

    # ---------------------------------------------------------
    # Browsing
    # ---------------------------------------------------------

    async def get_vacations(
        self,
        filter: str = "all",
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> PaginationMeta:
        """Load one page into the store and return its pagination metadata."""
        params = {
            "filter": filter,
            "page": page,
            "pageSize": page_size or self.config.page_size,
        }
        try:
            response = await self._request(
                "GET", "/api/vacations", "Failed to load vacations. Please try again.", params=params
            )
        except ClientRequestError:
            self.store.init_vacations([])
            self.store.reset_page()
            raise

        data = response.json()
        self.store.init_vacations([VacationResponse.model_validate(v) for v in data["vacations"]])
        pagination = PaginationMeta(
            page=data["page"],
            page_size=data["pageSize"],
            total_pages=data["totalPages"],
            total_count=data["totalCount"],
        )
        self.store.set_pagination(pagination)
        return pagination

    async def get_vacation(self, vacation_id: str) -> VacationResponse:
        """The store copy when present, otherwise the server's."""
        vacation = self.store.find(vacation_id)
        if vacation is not None:
            return vacation

        response = await self._request(
            "GET", f"/api/vacations/{vacation_id}", "Failed to load vacation details."
        )
        return VacationResponse.model_validate(response.json())

    # ---------------------------------------------------------
    # Likes
    # ---------------------------------------------------------

    async def toggle_like(self, vacation_id: str) -> bool:
        """
        Like or unlike a vacation optimistically.

        Returns False when a toggle for the same vacation is already in
        flight (nothing is changed), True once the server confirmed.
        Raises ClientRequestError after restoring the pre-toggle state.
        """
        if vacation_id in self._pending:
            return False

        self._pending.add(vacation_id)
        try:
            snapshot = self.store.toggle_like_optimistic(vacation_id)
            method = "DELETE" if snapshot is not None and snapshot.liked_by_me else "POST"
            try:
                response = await self._request(
                    method, f"/api/vacations/{vacation_id}/like", "Failed to toggle like"
                )
            except ClientRequestError:
                if snapshot is not None:
                    self.store.restore_like(snapshot)
                raise

            self.store.update_vacation(VacationResponse.model_validate(response.json()))
            return True
        finally:
            self._pending.discard(vacation_id)

    # ---------------------------------------------------------
    # Admin
    # ---------------------------------------------------------

    async def add_vacation(self, form: VacationForm, image: ImageUpload) -> VacationResponse:
        response = await self._request(
            "POST",
            "/api/vacations",
            "Failed to add vacation. Please check the form and try again.",
            data=form.to_form_data(),
            files={"image": (image.filename, image.content, image.content_type)},
        )
        vacation = VacationResponse.model_validate(response.json())
        self.store.add_vacation(vacation)
        return vacation

    async def update_vacation(
        self,
        vacation_id: str,
        form: VacationForm,
        image: Optional[ImageUpload] = None,
    ) -> VacationResponse:
        files = None
        if image is not None:
            files = {"image": (image.filename, image.content, image.content_type)}

        response = await self._request(
            "PATCH",
            f"/api/vacations/{vacation_id}",
            "Failed to update vacation. Please check the form and try again.",
            data=form.to_form_data(),
            files=files,
        )
        vacation = VacationResponse.model_validate(response.json())
        self.store.update_vacation(vacation)
        return vacation

    async def delete_vacation(self, vacation_id: str) -> None:
        await self._request(
            "DELETE",
            f"/api/vacations/{vacation_id}",
            "Failed to delete vacation. Please try again later.",
        )
        self.store.delete_vacation(vacation_id)

    async def get_report_json(self) -> List[ReportRow]:
        response = await self._request(
            "GET", "/api/vacations/report/json", "Failed to load report data."
        )
        return [ReportRow.model_validate(row) for row in response.json()]

    async def download_report_csv(self, path: Path | str = "vacations-report.csv") -> Path:
        """Save the CSV report to path and return it."""
        response = await self._request(
            "GET", "/api/vacations/report/csv", "Failed to download report."
        )
        target = Path(path)
        target.write_bytes(response.content)
        return target
