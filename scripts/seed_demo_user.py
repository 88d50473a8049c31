from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from sqlmodel import select

# Run from the repository root without installing the package.
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))


async def ensure_demo_user(email: str, password: str, name: str, admin: bool) -> tuple[str, bool]:
    from fishing_api.config import get_settings
    from fishing_api.db.models import User
    from fishing_api.db.session import init_db, session_scope
    from fishing_api.modules.auth.security import hash_password

    await init_db()
    async with session_scope() as session:
        result = await session.execute(select(User).where(User.email == email))
        user = result.scalars().first()
        created = user is None
        if user is None:
            user = User(name=name, email=email, rating=get_settings().rating_default)
        # Re-running resets the password and admin flag to the requested values.
        user.password_hash = hash_password(password)
        user.is_admin = admin
        session.add(user)
        await session.flush()
        user_id = str(user.id)
    return user_id, created


async def main_async() -> None:
    from fishing_api.db.session import get_engine
    from fishing_api.modules.auth.service import normalize_email

    parser = argparse.ArgumentParser(description="Create or reset the demo account.")
    parser.add_argument("--email", default="test@example.com")
    parser.add_argument("--password", default="password123")
    parser.add_argument("--name", default="Test User")
    parser.add_argument("--admin", action="store_true", help="Grant admin privileges.")
    args = parser.parse_args()

    email = normalize_email(args.email)
    try:
        user_id, created = await ensure_demo_user(email, args.password, args.name, args.admin)
    finally:
        await get_engine().dispose()
    print("Demo user ready:" if created else "Demo user updated:")
    print(f"  id={user_id}")
    print(f"  email={email}")
    print(f"  admin={args.admin}")


if __name__ == "__main__":
    asyncio.run(main_async())
