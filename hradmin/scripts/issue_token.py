"""
Mint a bearer token for an existing active user, for local development.

Usage: python -m hradmin.scripts.issue_token --user-id 1 [--minutes 120]
"""

import argparse
import asyncio
import sys
from typing import Optional

from hradmin.auth.security import create_access_token
from hradmin.core.models import User
from hradmin.db.session import AsyncSessionLocal


async def issue_token(user_id: int, minutes: Optional[int] = None) -> str:
    async with AsyncSessionLocal() as session:
        user = await session.get(User, user_id)
        if user is None or user.status != "ACTIVE":
            raise SystemExit(f"No active user with id {user_id}")
    return create_access_token(subject={"sub": str(user_id)}, expires_minutes=minutes)


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--user-id", type=int, required=True)
    parser.add_argument("--minutes", type=int, default=None, help="token lifetime (defaults to settings)")
    args = parser.parse_args(argv)
    token = asyncio.run(issue_token(args.user_id, args.minutes))
    sys.stdout.write(token + "\n")


if __name__ == "__main__":
    main()
