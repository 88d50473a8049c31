from __future__ import annotations

import asyncio
import sys
import tempfile
import unittest
from datetime import datetime
from pathlib import Path
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel, select

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from fishing_api.config import Settings
from fishing_api.db import models as _models
from fishing_api.db.models import FishingEvent, User, UserRatingHistory
from fishing_api.modules.results.repository import ResultsRepository
from fishing_api.modules.results.schemas import ResultEntryRequest, ResultsSubmitRequest
from fishing_api.modules.results.service import ResultsService

del _models


def _table(*rows: tuple[UUID, int]) -> ResultsSubmitRequest:
    return ResultsSubmitRequest(
        results=[
            ResultEntryRequest(participant_type="user", participant_id=user_id, place=place)
            for user_id, place in rows
        ]
    )


class TestResultsServicePolicies(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        db_path = Path(self.tmpdir.name) / "results_policies.db"
        self.database_url = f"sqlite+aiosqlite:///{db_path}"
        self.engine = create_async_engine(self.database_url, echo=False)
        self.sessionmaker = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        async def _init_db() -> None:
            async with self.engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)

        asyncio.run(_init_db())

    def tearDown(self) -> None:
        async def _dispose() -> None:
            await self.engine.dispose()

        asyncio.run(_dispose())
        self.tmpdir.cleanup()

    def _settings(self, **overrides: object) -> Settings:
        return Settings(database_url=self.database_url, app_env="test", **overrides)

    async def _seed(self, session: AsyncSession, user_count: int) -> tuple[UUID, list[UUID]]:
        owner = User(email="owner@example.com", name="Owner")
        users = [User(email=f"angler{index}@example.com") for index in range(user_count)]
        session.add(owner)
        session.add_all(users)
        await session.flush()
        event = FishingEvent(
            title="Lake Derby",
            latitude=10.0,
            longitude=20.0,
            start_date=datetime(2030, 6, 1, 6, 0),
            owner_id=owner.id,
        )
        session.add(event)
        await session.commit()
        return owner.id, [event.id, *[user.id for user in users]]

    async def _rating(self, session: AsyncSession, user_id: UUID) -> int:
        user = await session.get(User, user_id, populate_existing=True)
        assert user is not None
        return user.rating

    def test_revert_policy_makes_resubmission_idempotent(self) -> None:
        async def _run() -> None:
            async with self.sessionmaker() as session:
                owner_id, (event_id, user_id) = await self._seed(session, 1)
                service = ResultsService(
                    ResultsRepository(session),
                    self._settings(results_resubmit_policy="revert"),
                )

                await service.submit_results(event_id, _table((user_id, 1)), user_id=owner_id)
                self.assertEqual(await self._rating(session, user_id), 1020)

                await service.submit_results(event_id, _table((user_id, 1)), user_id=owner_id)
                self.assertEqual(await self._rating(session, user_id), 1020)

                rows = await service.submit_results(
                    event_id, _table((user_id, 2)), user_id=owner_id
                )
                self.assertEqual(rows[0].rating_change, 10)
                self.assertEqual(await self._rating(session, user_id), 1010)

                history = (
                    await session.execute(
                        select(UserRatingHistory)
                        .where(UserRatingHistory.user_id == user_id)
                        .order_by(UserRatingHistory.created_at)
                    )
                ).scalars().all()
                self.assertEqual(
                    [(row.old_rating, row.new_rating, row.change) for row in history],
                    [(1000, 1020, 20), (1020, 1020, 0), (1020, 1010, -10)],
                )

        asyncio.run(_run())

    def test_revert_policy_withdraws_entries_dropped_from_the_table(self) -> None:
        async def _run() -> None:
            async with self.sessionmaker() as session:
                owner_id, (event_id, first_id, second_id) = await self._seed(session, 2)
                service = ResultsService(
                    ResultsRepository(session),
                    self._settings(results_resubmit_policy="revert"),
                )

                await service.submit_results(event_id, _table((first_id, 1)), user_id=owner_id)
                await service.submit_results(event_id, _table((second_id, 1)), user_id=owner_id)
                self.assertEqual(await self._rating(session, first_id), 1000)
                self.assertEqual(await self._rating(session, second_id), 1020)

                await service.submit_results(event_id, _table((first_id, 1)), user_id=owner_id)
                self.assertEqual(await self._rating(session, first_id), 1020)
                self.assertEqual(await self._rating(session, second_id), 1000)

                history = (
                    await session.execute(
                        select(UserRatingHistory)
                        .where(UserRatingHistory.user_id == first_id)
                        .order_by(UserRatingHistory.created_at)
                    )
                ).scalars().all()
                self.assertEqual(
                    [(row.old_rating, row.new_rating, row.change) for row in history],
                    [(1000, 1020, 20), (1020, 1000, -20), (1000, 1020, 20)],
                )
                self.assertIn("withdrawn", history[1].reason)
                self.assertEqual(sum(row.change for row in history), 20)

        asyncio.run(_run())

    def test_compound_policy_reapplies_changes(self) -> None:
        async def _run() -> None:
            async with self.sessionmaker() as session:
                owner_id, (event_id, user_id) = await self._seed(session, 1)
                service = ResultsService(ResultsRepository(session), self._settings())

                await service.submit_results(event_id, _table((user_id, 1)), user_id=owner_id)
                await service.submit_results(event_id, _table((user_id, 1)), user_id=owner_id)
                self.assertEqual(await self._rating(session, user_id), 1040)

        asyncio.run(_run())

    def test_elo_strategy_uses_current_ratings(self) -> None:
        async def _run() -> None:
            async with self.sessionmaker() as session:
                owner_id, (event_id, first_id, second_id) = await self._seed(session, 2)
                service = ResultsService(
                    ResultsRepository(session),
                    self._settings(rating_strategy="elo", rating_elo_k_factor=32.0),
                )

                rows = await service.submit_results(
                    event_id,
                    _table((second_id, 2), (first_id, 1)),
                    user_id=owner_id,
                )
                self.assertEqual([row.participant_id for row in rows], [first_id, second_id])
                self.assertEqual([row.rating_change for row in rows], [16, -16])
                self.assertEqual(await self._rating(session, first_id), 1016)
                self.assertEqual(await self._rating(session, second_id), 984)

        asyncio.run(_run())


if __name__ == "__main__":
    unittest.main()
