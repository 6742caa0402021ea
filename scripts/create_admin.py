#!/usr/bin/env python3
"""
Create an admin account, or promote an existing user to admin.

Registration through the API always yields a regular user, so the first
admin has to be bootstrapped here:

    python scripts/create_admin.py --email admin@example.com --name "Site Admin"
"""

from __future__ import annotations

import argparse
import asyncio
import getpass

from cat_registry.core.config import get_settings
from cat_registry.domain.policy import ScopedFilter
from cat_registry.domain.services.auth_service import hash_password
from cat_registry.infrastructure.db import Database
from cat_registry.infrastructure.db.models import UserRole
from cat_registry.infrastructure.repositories import UserRepository


async def create_admin(database: Database, *, email: str, user_name: str, password: str) -> str:
    async with database.session_factory() as session:
        users = UserRepository(session)
        existing = await users.find_by_email(email)
        if existing is not None:
            await users.update_matching(ScopedFilter(resource_id=existing.id), {"role": UserRole.ADMIN})
            print(f"Promoted {email} ({existing.id}) to admin")
            return existing.id

        user_id = await users.insert(
            {
                "user_name": user_name,
                "email": email.lower(),
                "hashed_password": hash_password(password),
                "role": UserRole.ADMIN,
            }
        )
        print(f"Created admin {email} ({user_id})")
        return user_id


async def main() -> None:
    parser = argparse.ArgumentParser(description="Bootstrap an admin account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", default="Admin")
    args = parser.parse_args()
    password = getpass.getpass("Password: ")

    database = Database.from_settings(get_settings())
    try:
        await create_admin(database, email=args.email, user_name=args.name, password=password)
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(main())
