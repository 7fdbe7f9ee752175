"""
Seed Admin User

Creates the first ADMIN account. Admin accounts cannot self-register, so
run this once per environment.

Usage:
    SEED_ADMIN_PASSWORD=... python scripts/seed_admin.py --username admin --email admin@example.com
"""

import argparse
import asyncio
import os

from smartlearn.core.database import async_session_maker, close_db, init_db
from smartlearn.core.security import hash_password
from smartlearn.modules.users import repository
from smartlearn.modules.users.models import UserRole


async def seed_admin(username: str, email: str, password: str) -> None:
    """Create the admin account if neither its username nor email is taken."""
    await init_db()

    try:
        async with async_session_maker() as db:
            existing = await repository.get_by_username(
                db, username
            ) or await repository.get_by_email(db, email)
            if existing:
                print(f"Account already exists: {existing.username} <{existing.email}>")
                print(f"  ID: {existing.id}")
                print(f"  Role: {existing.role.value}")
                return

            admin = await repository.create(
                db,
                username=username,
                email=email,
                password_hash=hash_password(password),
                role=UserRole.ADMIN,
                email_verified=True,
            )

            print("Admin created successfully!")
            print(f"  Username: {admin.username}")
            print(f"  Email: {admin.email}")
            print(f"  ID: {admin.id}")
    finally:
        await close_db()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the initial ADMIN account.")
    parser.add_argument("--username", default="admin")
    parser.add_argument("--email", required=True)
    args = parser.parse_args()

    password = os.getenv("SEED_ADMIN_PASSWORD")
    if not password:
        parser.error("SEED_ADMIN_PASSWORD must be set")

    asyncio.run(seed_admin(args.username, args.email, password))


if __name__ == "__main__":
    main()
