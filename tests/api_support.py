from __future__ import annotations

import asyncio
import sys
import tempfile
import unittest
from collections.abc import AsyncGenerator, Awaitable, Callable
from itertools import count
from pathlib import Path
from typing import ClassVar, TypeVar

from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from fishing_api.app import create_app
from fishing_api.config import Settings
from fishing_api.db import models as _models
from fishing_api.db.session import get_session

del _models

T = TypeVar("T")

PASSWORD = "supersecret123"  # noqa: S105
_EMAIL_SEQ = count(1)


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class ApiTestCase(unittest.TestCase):
    """Runs the app against a throwaway SQLite file shared by the whole class."""

    app_settings: ClassVar[Settings | None] = None
    email_prefix: ClassVar[str] = "angler"

    @classmethod
    def setUpClass(cls) -> None:
        cls.tmpdir = tempfile.TemporaryDirectory()
        db_path = Path(cls.tmpdir.name) / f"{cls.__name__}.db"
        cls.engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", echo=False)
        cls.sessionmaker = async_sessionmaker(
            bind=cls.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        async def _init_db() -> None:
            async with cls.engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)

        asyncio.run(_init_db())
        app = create_app(settings=cls.app_settings)

        async def _session_override() -> AsyncGenerator[AsyncSession, None]:
            async with cls.sessionmaker() as session:
                try:
                    yield session
                except Exception:
                    await session.rollback()
                    raise

        app.dependency_overrides[get_session] = _session_override
        cls.client = TestClient(app)

    @classmethod
    def tearDownClass(cls) -> None:
        cls.client.close()
        asyncio.run(cls.engine.dispose())
        cls.tmpdir.cleanup()

    def in_session(self, work: Callable[[AsyncSession], Awaitable[T]]) -> T:
        """Run ``work`` in its own session and commit, bypassing the API."""

        async def _run() -> T:
            async with self.sessionmaker() as session:
                outcome = await work(session)
                await session.commit()
                return outcome

        return asyncio.run(_run())

    def register_and_login(self, name: str) -> tuple[str, str, dict[str, str]]:
        email = f"{self.email_prefix}-{next(_EMAIL_SEQ)}@example.com"
        registered = self.client.post(
            "/api/v1/auth/register",
            json={"name": name, "email": email, "password": PASSWORD},
        )
        self.assertEqual(registered.status_code, 201, registered.text)
        login = self.client.post(
            "/api/v1/auth/login",
            json={"email": email, "password": PASSWORD},
        )
        self.assertEqual(login.status_code, 200, login.text)
        return registered.json()["id"], email, bearer(login.json()["access_token"])
