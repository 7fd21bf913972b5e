"""Tests for schema creation and admin provisioning."""

import pytest
from sqlalchemy import select

from skyline.database import Database
from skyline.models.user import Role, User
from skyline.scripts.init_db import ensure_admin, init_db
from skyline.services.security import verify_password


async def load_user(settings, email: str) -> User:
    database = Database(settings)
    try:
        async with database.session() as session:
            result = await session.execute(select(User).where(User.email == email))
            return result.scalar_one()
    finally:
        await database.close()


@pytest.mark.asyncio
async def test_init_db_creates_admin(test_settings):
    created = await init_db(test_settings, "Root@Example.com", "admin-pass")
    assert created is True

    admin = await load_user(test_settings, "root@example.com")
    assert admin.role == Role.ADMIN.value
    assert verify_password("admin-pass", admin.password)


@pytest.mark.asyncio
async def test_init_db_is_idempotent(test_settings):
    await init_db(test_settings, "root@example.com", "first-pass")
    created = await init_db(test_settings, "root@example.com", "second-pass")
    assert created is False

    admin = await load_user(test_settings, "root@example.com")
    assert verify_password("second-pass", admin.password)


@pytest.mark.asyncio
async def test_ensure_admin_promotes_existing_user(app, make_user):
    await make_user("promote@example.com")

    async with app.state.database.session() as session:
        user, created = await ensure_admin(session, "promote@example.com", "new-pass")

    assert created is False
    assert user.role == Role.ADMIN.value
    assert user.first_name == "Dana"
