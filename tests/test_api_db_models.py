from __future__ import annotations

import asyncio
import sys
import tempfile
import unittest
from datetime import datetime, timedelta
from pathlib import Path
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel, select

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from fishing_api.common.datetime_utils import utcnow
from fishing_api.db import models as _models
from fishing_api.db.models import AuthRefreshToken, User

del _models


def _constraint_names(table_name: str) -> set[str]:
    return {
        getattr(constraint, "name", "") or ""
        for constraint in SQLModel.metadata.tables[table_name].constraints
    }


class TestApiDbModels(unittest.TestCase):
    def test_expected_tables_are_registered(self) -> None:
        table_names = set(SQLModel.metadata.tables.keys())
        for name in (
            "user",
            "authrefreshtoken",
            "team",
            "teammember",
            "fishingevent",
            "fishingparticipant",
            "teamparticipation",
            "fishcatch",
            "eventresult",
            "userratinghistory",
            "teamratinghistory",
        ):
            self.assertIn(name, table_names)

    def test_registration_pairs_are_unique(self) -> None:
        self.assertIn("uq_fishing_participants_event_user", _constraint_names("fishingparticipant"))
        self.assertIn("uq_team_participations_event_team", _constraint_names("teamparticipation"))
        self.assertIn("uq_team_members_team_user", _constraint_names("teammember"))
        self.assertIn("uq_users_email", _constraint_names("user"))

    def test_rating_history_event_id_has_no_foreign_key(self) -> None:
        for table_name in ("userratinghistory", "teamratinghistory"):
            event_column = SQLModel.metadata.tables[table_name].c["event_id"]
            self.assertEqual(len(event_column.foreign_keys), 0)
            self.assertTrue(event_column.nullable)

    def test_user_and_team_carry_rating(self) -> None:
        self.assertIn("rating", SQLModel.metadata.tables["user"].c)
        self.assertIn("rating", SQLModel.metadata.tables["team"].c)

    def test_event_has_format_and_capacity_columns(self) -> None:
        events_table = SQLModel.metadata.tables["fishingevent"]
        for column in ("format", "max_participants", "latitude", "longitude", "fish_types"):
            self.assertIn(column, events_table.c)

    def test_refresh_token_usable_until_revoked_or_expired(self) -> None:
        issued = datetime(2030, 1, 1, 12, 0)
        token = AuthRefreshToken(
            user_id=uuid4(),
            token_hash="a" * 64,
            expires_at=issued + timedelta(days=14),
        )

        self.assertTrue(token.is_usable(issued))
        self.assertFalse(token.is_usable(issued + timedelta(days=14)))

        token.revoke(issued + timedelta(hours=1))
        token.revoke(issued + timedelta(hours=2))
        self.assertEqual(token.revoked_at, issued + timedelta(hours=1))
        self.assertFalse(token.is_usable(issued))

    def test_naive_utc_timestamps_survive_a_database_round_trip(self) -> None:
        async def _run() -> User:
            with tempfile.TemporaryDirectory() as tmpdir:
                engine = create_async_engine(f"sqlite+aiosqlite:///{Path(tmpdir) / 'models.db'}")
                try:
                    async with engine.begin() as conn:
                        await conn.run_sync(SQLModel.metadata.create_all)
                    sessionmaker = async_sessionmaker(bind=engine, class_=AsyncSession)
                    async with sessionmaker() as session:
                        session.add(User(email="clock@example.com", created_at=stamp))
                        await session.commit()
                    async with sessionmaker() as session:
                        result = await session.execute(select(User))
                        return result.scalars().one()
                finally:
                    await engine.dispose()

        stamp = utcnow()
        self.assertIsNone(stamp.tzinfo)

        stored = asyncio.run(_run())
        self.assertEqual(stored.created_at, stamp)
        self.assertIsNone(stored.created_at.tzinfo)
        self.assertIsNone(stored.updated_at.tzinfo)


if __name__ == "__main__":
    unittest.main()
