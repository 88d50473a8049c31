from __future__ import annotations

import unittest
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from api_support import ApiTestCase
from fishing_api.db.models import Team, User


class TestApiRatingsIntegration(ApiTestCase):
    email_prefix = "ratings"

    def _register_and_login(self, name: str) -> tuple[str, dict[str, str]]:
        user_id, _, headers = self.register_and_login(name)
        return user_id, headers

    def _publish(
        self,
        owner_headers: dict[str, str],
        rows: list[dict[str, object]],
        title: str = "Ratings Cup",
    ) -> str:
        event_resp = self.client.post(
            "/api/v1/events",
            json={
                "title": title,
                "latitude": 45.0,
                "longitude": 12.0,
                "start_date": "2030-08-01T06:00:00Z",
            },
            headers=owner_headers,
        )
        self.assertEqual(event_resp.status_code, 201, event_resp.text)
        event_id = event_resp.json()["id"]
        results_resp = self.client.post(
            f"/api/v1/events/{event_id}/results",
            json={"results": rows},
            headers=owner_headers,
        )
        self.assertEqual(results_resp.status_code, 201, results_resp.text)
        return event_id

    def _promote_user_to_admin(self, user_id: str) -> None:
        self._set_column(User, user_id, is_admin=True)

    def _set_cached_rating(self, model: type[User] | type[Team], row_id: str, rating: int) -> None:
        self._set_column(model, row_id, rating=rating)

    def _set_column(self, model: type[User] | type[Team], row_id: str, **values: object) -> None:
        async def _update(session: AsyncSession) -> None:
            row = await session.get(model, UUID(row_id))
            if row is None:
                raise AssertionError(f"{model.__name__} {row_id} not found")
            for key, value in values.items():
                setattr(row, key, value)
            session.add(row)

        self.in_session(_update)

    def test_user_ratings_sorting_and_pagination(self) -> None:
        _, owner_headers = self._register_and_login("Sort Owner")
        winner_id, _ = self._register_and_login("Sort Winner")
        loser_id, _ = self._register_and_login("Sort Loser")
        newest_id, _ = self._register_and_login("Sort Newest")
        self._publish(
            owner_headers,
            [
                {"participant_type": "user", "participant_id": winner_id, "place": 1},
                {"participant_type": "user", "participant_id": loser_id, "place": 4},
            ],
        )

        recent = self.client.get("/api/v1/ratings/users", params={"limit": 100})
        self.assertEqual(recent.status_code, 200)
        recent_ids = [row["id"] for row in recent.json()["items"]]
        self.assertLess(recent_ids.index(newest_id), recent_ids.index(winner_id))

        by_rating = self.client.get(
            "/api/v1/ratings/users",
            params={"sort": "rating", "limit": 100},
        )
        self.assertEqual(by_rating.status_code, 200)
        items = by_rating.json()["items"]
        ratings = [row["rating"] for row in items]
        self.assertEqual(ratings, sorted(ratings, reverse=True))
        by_id = {row["id"]: row["rating"] for row in items}
        self.assertEqual(by_id[winner_id], 1020)
        self.assertEqual(by_id[loser_id], 990)
        self.assertEqual(by_id[newest_id], 1000)

        page = self.client.get("/api/v1/ratings/users", params={"page": 2, "limit": 2})
        self.assertEqual(page.status_code, 200)
        pagination = page.json()["pagination"]
        self.assertEqual(pagination["page"], 2)
        self.assertEqual(pagination["limit"], 2)
        self.assertGreaterEqual(pagination["total"], 4)
        self.assertEqual(pagination["pages"], -(-pagination["total"] // 2))
        self.assertLessEqual(len(page.json()["items"]), 2)

        bad_sort = self.client.get("/api/v1/ratings/users", params={"sort": "alphabetical"})
        self.assertEqual(bad_sort.status_code, 422)

    def test_team_ratings_include_member_counts(self) -> None:
        _, owner_headers = self._register_and_login("Team Sort Owner")
        mate_id, _ = self._register_and_login("Team Sort Mate")
        _, captain_headers = self._register_and_login("Team Sort Captain")
        team_resp = self.client.post(
            "/api/v1/teams",
            json={"name": "Carp Collective", "member_ids": [mate_id]},
            headers=captain_headers,
        )
        self.assertEqual(team_resp.status_code, 201, team_resp.text)
        team_id = team_resp.json()["id"]
        self._publish(
            owner_headers,
            [{"participant_type": "team", "participant_id": team_id, "place": 1}],
        )

        response = self.client.get(
            "/api/v1/ratings/teams",
            params={"sort": "rating", "limit": 100},
        )
        self.assertEqual(response.status_code, 200)
        row = next(item for item in response.json()["items"] if item["id"] == team_id)
        self.assertEqual(row["member_count"], 2)
        self.assertEqual(row["rating"], 1020)
        self.assertEqual(row["name"], "Carp Collective")

    def test_history_pagination_and_lookup_errors(self) -> None:
        _, owner_headers = self._register_and_login("History Owner")
        user_id, _ = self._register_and_login("History Angler")
        for title in ("First Derby", "Second Derby", "Third Derby"):
            self._publish(
                owner_headers,
                [{"participant_type": "user", "participant_id": user_id, "place": 2}],
                title=title,
            )

        first_page = self.client.get(
            f"/api/v1/ratings/users/{user_id}/history",
            params={"limit": 2},
        )
        self.assertEqual(first_page.status_code, 200)
        body = first_page.json()
        self.assertEqual(body["total"], 3)
        self.assertTrue(body["has_more"])
        self.assertEqual(len(body["items"]), 2)
        self.assertIn("Third Derby", body["items"][0]["reason"])
        self.assertEqual(body["items"][0]["new_rating"], 1030)

        last_page = self.client.get(
            f"/api/v1/ratings/users/{user_id}/history",
            params={"limit": 2, "offset": 2},
        ).json()
        self.assertFalse(last_page["has_more"])
        self.assertEqual(len(last_page["items"]), 1)
        self.assertEqual(last_page["items"][0]["old_rating"], 1000)

        unknown_user = self.client.get(f"/api/v1/ratings/users/{uuid4()}/history")
        self.assertEqual(unknown_user.status_code, 404)
        self.assertEqual(unknown_user.json()["error_code"], "user_not_found")

        unknown_team = self.client.get(f"/api/v1/ratings/teams/{uuid4()}/history")
        self.assertEqual(unknown_team.status_code, 404)
        self.assertEqual(unknown_team.json()["error_code"], "team_not_found")

        malformed = self.client.get("/api/v1/ratings/users/oops/history")
        self.assertEqual(malformed.status_code, 400)
        self.assertEqual(malformed.json()["message"], "Invalid user id.")

    def test_rebuild_restores_cached_ratings_from_history(self) -> None:
        admin_id, admin_headers = self._register_and_login("Rebuild Admin")
        angler_id, angler_headers = self._register_and_login("Rebuild Angler")
        self._publish(
            admin_headers,
            [{"participant_type": "user", "participant_id": angler_id, "place": 1}],
        )

        forbidden = self.client.post("/api/v1/ratings/rebuild", headers=angler_headers)
        self.assertEqual(forbidden.status_code, 403)
        self.assertEqual(forbidden.json()["error_code"], "not_authorized")

        self._promote_user_to_admin(admin_id)
        self._set_cached_rating(User, angler_id, 5000)
        self._set_cached_rating(User, admin_id, 1)

        rebuilt = self.client.post("/api/v1/ratings/rebuild", headers=admin_headers)
        self.assertEqual(rebuilt.status_code, 200, rebuilt.text)
        self.assertEqual(rebuilt.json(), {"users_updated": 2, "teams_updated": 0})

        angler = self.client.get("/api/v1/auth/me", headers=angler_headers).json()
        admin = self.client.get("/api/v1/auth/me", headers=admin_headers).json()
        self.assertEqual(angler["rating"], 1020)
        self.assertEqual(admin["rating"], 1000)

        again = self.client.post("/api/v1/ratings/rebuild", headers=admin_headers)
        self.assertEqual(again.json(), {"users_updated": 0, "teams_updated": 0})


if __name__ == "__main__":
    unittest.main()
