"""
Shared test fixtures for the Skyline Trips test suite.

API tests run against a real SQLite database file per test (aiosqlite) and
an in-memory image store injected through dependency overrides.
"""

from datetime import date, timedelta
from typing import Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from skyline.config import Settings
from skyline.exceptions import ImageStoreError
from skyline.models.user import Role, User
from skyline.models.vacation import Vacation, VacationLike
from skyline.services.images import StoredImage
from skyline.services.security import hash_password

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class FakeImageStore:
    """Records uploads and deletions instead of calling a hosting service."""

    def __init__(self):
        self.images: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.fail_uploads = False
        self._counter = 0

    async def upload(self, filename: str, content: bytes, content_type: str) -> StoredImage:
        if self.fail_uploads:
            raise ImageStoreError("Image service unavailable.")
        self._counter += 1
        public_id = f"vacations/image-{self._counter}"
        self.images[public_id] = content
        return StoredImage(url=f"https://images.example.com/{public_id}.png", public_id=public_id)

    async def delete(self, public_id: str) -> None:
        self.images.pop(public_id, None)
        self.deleted.append(public_id)


@pytest.fixture
def test_settings(tmp_path):
    """Settings configured for testing."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'skyline.db'}",
        db_auto_create=True,
        jwt_secret_key="test-secret-key",
        cloudinary_cloud_name=None,
        cloudinary_api_key=None,
        cloudinary_api_secret=None,
        image_dir=str(tmp_path / "uploads"),
        public_base_url="http://test",
        environment="development",
        debug=True,
    )


@pytest.fixture
def image_store():
    return FakeImageStore()


@pytest_asyncio.fixture
async def app(test_settings, image_store):
    """Application with tables created and the fake image store injected."""
    from skyline.main import create_app
    from skyline.routers.vacations import get_image_store

    app = create_app(test_settings)
    await app.state.database.create_tables()
    app.dependency_overrides[get_image_store] = lambda: image_store

    yield app

    app.dependency_overrides.clear()
    await app.state.database.close()


@pytest_asyncio.fixture
async def app_client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def database(app):
    return app.state.database


@pytest.fixture
def make_user(app):
    """Insert a user directly and return (user, token)."""

    async def _make_user(
        email: str = "dana@example.com",
        role: Role = Role.USER,
        password: str = "secret123",
    ) -> tuple[User, str]:
        async with app.state.database.session() as session:
            user = User(
                first_name="Dana",
                last_name="Levi",
                email=email,
                password=hash_password(password),
                role=role.value,
            )
            session.add(user)
        return user, app.state.token_service.create_token(user)

    return _make_user


@pytest_asyncio.fixture
async def user_token(make_user):
    _, token = await make_user("dana@example.com")
    return token


@pytest_asyncio.fixture
async def admin_token(make_user):
    _, token = await make_user("admin@example.com", role=Role.ADMIN)
    return token


@pytest.fixture
def make_vacation(app):
    """
    Insert a vacation directly, bypassing the create rules.

    Used for past or running vacations the API would refuse to create.
    """

    async def _make_vacation(
        destination: str = "Paris",
        start: Optional[date] = None,
        days: int = 5,
        price: float = 500,
        liked_by: tuple[str, ...] = (),
    ) -> Vacation:
        start = start or date.today() + timedelta(days=1)
        async with app.state.database.session() as session:
            vacation = Vacation(
                destination=destination,
                description="A lovely trip for testing purposes.",
                start_date=start,
                end_date=start + timedelta(days=days),
                price=price,
                image_url=f"https://images.example.com/{destination}.png",
                image_public_id=f"seed/{destination}",
                likes=[VacationLike(user_id=user_id) for user_id in liked_by],
            )
            session.add(vacation)
        return vacation

    return _make_vacation


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def vacation_form(**overrides) -> dict[str, str]:
    start = date.today() + timedelta(days=1)
    form = {
        "destination": "Paris",
        "description": "City of lights and long walks.",
        "startDate": start.isoformat(),
        "endDate": (start + timedelta(days=5)).isoformat(),
        "price": "500",
    }
    form.update(overrides)
    return form


def image_file(content_type: str = "image/png") -> dict:
    return {"image": ("paris.png", PNG_BYTES, content_type)}
