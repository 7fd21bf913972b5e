"""
Database initialization and administrator provisioning.

Creates any missing tables, then creates the administrator account or
promotes an existing user to admin. Idempotent - safe to run multiple times.
Registration through the API only ever creates regular users, so this is
the way administrators come into existence.

Usage:
    python -m skyline.scripts.init_db [--admin-email EMAIL] [--admin-password PASSWORD | --generate]

If neither a password nor --generate is given, you will be prompted.
"""

import argparse
import asyncio
import getpass
import os
import secrets
import sys

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from skyline.config import Settings, get_settings
from skyline.database import Database
from skyline.models.user import Role, User
from skyline.services.security import hash_password

DEFAULT_ADMIN_EMAIL = "admin@skylinetrips.com"


async def ensure_admin(
    session: AsyncSession,
    email: str,
    password: str,
    first_name: str = "Site",
    last_name: str = "Admin",
) -> tuple[User, bool]:
    """
    Create the admin user, or promote and re-password an existing one.

    Returns the user and whether it was newly created.
    """
    email = email.strip().lower()
    result = await session.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if user is None:
        user = User(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password=hash_password(password),
            role=Role.ADMIN.value,
        )
        session.add(user)
        await session.flush()
        return user, True

    user.role = Role.ADMIN.value
    user.password = hash_password(password)
    await session.flush()
    return user, False


async def init_db(settings: Settings, email: str, password: str) -> bool:
    """Create tables and provision the admin. Returns True if the admin was created."""
    database = Database(settings)
    try:
        await database.create_tables()
        async with database.session() as session:
            _, created = await ensure_admin(session, email, password)
        return created
    finally:
        await database.close()


def main():
    parser = argparse.ArgumentParser(
        description="Create the Skyline Trips schema and administrator account"
    )
    parser.add_argument(
        "--admin-email",
        type=str,
        default=os.environ.get("INIT_ADMIN_EMAIL", DEFAULT_ADMIN_EMAIL),
        help=f"Admin email (default: {DEFAULT_ADMIN_EMAIL})",
    )
    parser.add_argument(
        "--admin-password",
        type=str,
        default=os.environ.get("INIT_ADMIN_PASSWORD"),
        help="Admin password (prompted if not provided)",
    )
    parser.add_argument(
        "--generate",
        action="store_true",
        help="Generate a random password",
    )

    args = parser.parse_args()

    if args.generate:
        password = secrets.token_urlsafe(16)
        print("A secure admin password has been generated.\n")
        os.write(1, f"    {password}\n\n".encode())
        print("Please copy this password and store it in a secure password manager.\n")
    elif args.admin_password:
        password = args.admin_password
    else:
        password = getpass.getpass("Enter admin password: ")
        confirm = getpass.getpass("Confirm password: ")

        if password != confirm:
            print("Passwords do not match!")
            sys.exit(1)

    if not 4 <= len(password) <= 128:
        print("Password must be between 4 and 128 characters!")
        sys.exit(1)

    created = asyncio.run(init_db(get_settings(), args.admin_email, password))
    if created:
        print(f"Created admin user: {args.admin_email}")
    else:
        print(f"Promoted and updated admin user: {args.admin_email}")


if __name__ == "__main__":
    main()
