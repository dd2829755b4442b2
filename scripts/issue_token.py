#!/usr/bin/env python3
"""
Issue a development access token for a ledger user, creating the user if needed.

Usage:
  python scripts/issue_token.py --username admin.sog --role ADMIN --branch-code SOG
  python scripts/issue_token.py --username root --role SUPER_ADMIN

Tokens are normally issued by the authentication service; this is for local
runs against a development database (DATABASE_URL and SECRET_KEY from .env).
"""
import argparse
import asyncio
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select

from app.core.security import create_access_token
from app.database import AsyncSessionLocal, close_db
from app.models import Branch, User
from app.models.enums import UserRole


async def issue(username: str, role: UserRole, branch_code: str = None) -> str:
    async with AsyncSessionLocal() as db:
        branch_id = None
        if branch_code:
            branch = (
                await db.execute(select(Branch).where(Branch.code == branch_code.upper()))
            ).scalar_one_or_none()
            if not branch:
                raise SystemExit(f"ERROR: unknown branch code {branch_code}")
            branch_id = branch.id

        user = (
            await db.execute(select(User).where(User.username == username))
        ).unique().scalar_one_or_none()
        if not user:
            user = User(username=username, role=role, branch_id=branch_id, is_active=True)
            db.add(user)
            await db.commit()
            print(f"Created user {username} ({role.value})")

        return create_access_token(user.id)


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--username", required=True)
    parser.add_argument("--role", choices=[r.value for r in UserRole], default=UserRole.ADMIN.value)
    parser.add_argument("--branch-code", default=None)
    args = parser.parse_args()

    async def run():
        try:
            return await issue(args.username, UserRole(args.role), args.branch_code)
        finally:
            await close_db()

    token = asyncio.run(run())
    print(token)


if __name__ == "__main__":
    main()
