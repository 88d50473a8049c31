from __future__ import annotations

import unittest
from uuid import uuid4

import httpx

from api_support import ApiTestCase


class TestApiResultsIntegration(ApiTestCase):
    email_prefix = "results"

    def _register_and_login(self, name: str) -> tuple[str, dict[str, str]]:
        user_id, _, headers = self.register_and_login(name)
        return user_id, headers

    def _create_event(self, headers: dict[str, str], title: str = "Spring Cup") -> str:
        response = self.client.post(
            "/api/v1/events",
            json={
                "title": title,
                "latitude": 55.75,
                "longitude": 37.61,
                "start_date": "2030-05-10T06:00:00Z",
            },
            headers=headers,
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["id"]

    def _submit(
        self,
        event_id: str,
        headers: dict[str, str],
        rows: list[dict[str, object]],
    ) -> httpx.Response:
        return self.client.post(
            f"/api/v1/events/{event_id}/results",
            json={"results": rows},
            headers=headers,
        )

    def _rating_of(self, headers: dict[str, str]) -> int:
        response = self.client.get("/api/v1/auth/me", headers=headers)
        self.assertEqual(response.status_code, 200)
        return response.json()["rating"]

    def _user_history(self, user_id: str) -> dict:
        response = self.client.get(f"/api/v1/ratings/users/{user_id}/history")
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()

    def test_first_place_adds_twenty_and_records_history(self) -> None:
        _, owner_headers = self._register_and_login("Results Owner")
        winner_id, winner_headers = self._register_and_login("Winner")
        event_id = self._create_event(owner_headers, title="Spring Cup")

        response = self._submit(
            event_id,
            owner_headers,
            [{"participant_type": "user", "participant_id": winner_id, "place": 1, "score": 4.2}],
        )
        self.assertEqual(response.status_code, 201, response.text)
        rows = response.json()
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["rating_change"], 20)
        self.assertEqual(rows[0]["participant_name"], "Winner")
        self.assertEqual(self._rating_of(winner_headers), 1020)

        history = self._user_history(winner_id)
        self.assertEqual(history["total"], 1)
        entry = history["items"][0]
        self.assertEqual(entry["old_rating"], 1000)
        self.assertEqual(entry["new_rating"], 1020)
        self.assertEqual(entry["change"], 20)
        self.assertEqual(entry["event_id"], event_id)
        self.assertIn("Spring Cup", entry["reason"])
        self.assertIn("Place 1", entry["reason"])

    def test_resubmitting_same_table_compounds_rating(self) -> None:
        _, owner_headers = self._register_and_login("Compound Owner")
        user_id, user_headers = self._register_and_login("Compound Angler")
        event_id = self._create_event(owner_headers)
        payload = [{"participant_type": "user", "participant_id": user_id, "place": 1}]

        self.assertEqual(self._submit(event_id, owner_headers, payload).status_code, 201)
        self.assertEqual(self._rating_of(user_headers), 1020)
        self.assertEqual(self._submit(event_id, owner_headers, payload).status_code, 201)
        self.assertEqual(self._rating_of(user_headers), 1040)

        results_resp = self.client.get(f"/api/v1/events/{event_id}/results")
        self.assertEqual(len(results_resp.json()), 1)

        history = self._user_history(user_id)
        self.assertEqual(history["total"], 2)
        self.assertEqual(
            [(item["old_rating"], item["new_rating"]) for item in history["items"]],
            [(1020, 1040), (1000, 1020)],
        )

    def test_second_submission_replaces_first_table(self) -> None:
        _, owner_headers = self._register_and_login("Replace Owner")
        first_id, first_headers = self._register_and_login("Replace First")
        second_id, second_headers = self._register_and_login("Replace Second")
        event_id = self._create_event(owner_headers)

        first_resp = self._submit(
            event_id,
            owner_headers,
            [
                {"participant_type": "user", "participant_id": first_id, "place": 1},
                {"participant_type": "user", "participant_id": second_id, "place": 2},
            ],
        )
        self.assertEqual(first_resp.status_code, 201, first_resp.text)

        second_resp = self._submit(
            event_id,
            owner_headers,
            [{"participant_type": "user", "participant_id": second_id, "place": 1}],
        )
        self.assertEqual(second_resp.status_code, 201, second_resp.text)

        results = self.client.get(f"/api/v1/events/{event_id}/results").json()
        self.assertEqual(
            [(row["participant_id"], row["place"]) for row in results],
            [(second_id, 1)],
        )
        self.assertEqual(self._rating_of(first_headers), 1020)
        self.assertEqual(self._rating_of(second_headers), 1030)
        self.assertEqual(self._user_history(first_id)["total"], 1)
        self.assertEqual(self._user_history(second_id)["total"], 2)

    def test_rating_change_depends_only_on_place(self) -> None:
        _, owner_headers = self._register_and_login("Places Owner")
        user_ids = [self._register_and_login(f"Places {index}")[0] for index in range(5)]
        event_id = self._create_event(owner_headers)

        # Scores run against the places on purpose.
        rows = [
            {
                "participant_type": "user",
                "participant_id": user_id,
                "place": place,
                "score": float(10 * place),
            }
            for place, user_id in enumerate(user_ids, start=1)
        ]
        response = self._submit(event_id, owner_headers, list(reversed(rows)))
        self.assertEqual(response.status_code, 201, response.text)
        body = response.json()
        self.assertEqual([row["place"] for row in body], [1, 2, 3, 4, 5])
        self.assertEqual([row["rating_change"] for row in body], [20, 10, 0, -10, -10])

        third_history = self._user_history(user_ids[2])
        self.assertEqual(third_history["total"], 1)
        self.assertEqual(third_history["items"][0]["change"], 0)

    def test_team_results_update_team_rating(self) -> None:
        _, owner_headers = self._register_and_login("Team Results Owner")
        mate_id, _ = self._register_and_login("Team Results Mate")
        _, captain_headers = self._register_and_login("Team Results Captain")
        team_resp = self.client.post(
            "/api/v1/teams",
            json={"name": "Zander Squad", "member_ids": [mate_id]},
            headers=captain_headers,
        )
        self.assertEqual(team_resp.status_code, 201, team_resp.text)
        team_id = team_resp.json()["id"]
        event_id = self._create_event(owner_headers, title="Autumn Duo")

        response = self._submit(
            event_id,
            owner_headers,
            [{"participant_type": "team", "participant_id": team_id, "place": 2}],
        )
        self.assertEqual(response.status_code, 201, response.text)
        self.assertEqual(response.json()[0]["participant_name"], "Zander Squad")

        team = self.client.get(f"/api/v1/teams/{team_id}", headers=captain_headers).json()
        self.assertEqual(team["rating"], 1010)

        history_resp = self.client.get(f"/api/v1/ratings/teams/{team_id}/history")
        self.assertEqual(history_resp.status_code, 200)
        history = history_resp.json()
        self.assertEqual(history["total"], 1)
        self.assertIn("Autumn Duo", history["items"][0]["reason"])

    def test_unknown_participant_rolls_back_whole_submission(self) -> None:
        _, owner_headers = self._register_and_login("Rollback Owner")
        user_id, user_headers = self._register_and_login("Rollback Angler")
        event_id = self._create_event(owner_headers)

        first = self._submit(
            event_id,
            owner_headers,
            [{"participant_type": "user", "participant_id": user_id, "place": 1}],
        )
        self.assertEqual(first.status_code, 201)

        failed = self._submit(
            event_id,
            owner_headers,
            [
                {"participant_type": "user", "participant_id": user_id, "place": 2},
                {"participant_type": "user", "participant_id": str(uuid4()), "place": 1},
            ],
        )
        self.assertEqual(failed.status_code, 404)
        self.assertEqual(failed.json()["error_code"], "participant_not_found")

        results = self.client.get(f"/api/v1/events/{event_id}/results").json()
        self.assertEqual([(row["participant_id"], row["place"]) for row in results], [(user_id, 1)])
        self.assertEqual(self._rating_of(user_headers), 1020)
        self.assertEqual(self._user_history(user_id)["total"], 1)

    def test_submission_rejections(self) -> None:
        _, owner_headers = self._register_and_login("Reject Owner")
        user_id, user_headers = self._register_and_login("Reject Angler")
        other_id, _ = self._register_and_login("Reject Other")
        event_id = self._create_event(owner_headers)
        valid = [{"participant_type": "user", "participant_id": user_id, "place": 1}]

        not_owner = self._submit(event_id, user_headers, valid)
        self.assertEqual(not_owner.status_code, 403)
        self.assertEqual(not_owner.json()["error_code"], "not_authorized")

        missing_event = self._submit(str(uuid4()), owner_headers, valid)
        self.assertEqual(missing_event.status_code, 404)
        self.assertEqual(missing_event.json()["error_code"], "event_not_found")

        invalid_tables = [
            [],
            [
                {"participant_type": "user", "participant_id": user_id, "place": 1},
                {"participant_type": "user", "participant_id": other_id, "place": 1},
            ],
            [
                {"participant_type": "user", "participant_id": user_id, "place": 1},
                {"participant_type": "user", "participant_id": user_id, "place": 2},
            ],
            [{"participant_type": "crew", "participant_id": user_id, "place": 1}],
            [{"participant_type": "user", "participant_id": user_id, "place": 0}],
        ]
        for rows in invalid_tables:
            with self.subTest(rows=rows):
                response = self._submit(event_id, owner_headers, rows)
                self.assertEqual(response.status_code, 400, response.text)
                self.assertEqual(response.json()["error_code"], "invalid_results_format")

        malformed_bodies = [
            {},
            {"results": "nope"},
            {"results": {"participant_type": "user"}},
            {"results": [{"participant_type": "user", "place": 1}]},
            {"results": [{"participant_type": "user", "participant_id": "x", "place": 1}]},
            {"results": ["first"]},
        ]
        for body in malformed_bodies:
            with self.subTest(body=body):
                response = self.client.post(
                    f"/api/v1/events/{event_id}/results",
                    json=body,
                    headers=owner_headers,
                )
                self.assertEqual(response.status_code, 400, response.text)
                self.assertEqual(response.json()["error_code"], "invalid_results_format")

        self.assertEqual(self._rating_of(user_headers), 1000)
        self.assertEqual(self.client.get(f"/api/v1/events/{event_id}/results").json(), [])

    def test_get_results_for_unknown_event_is_404(self) -> None:
        response = self.client.get(f"/api/v1/events/{uuid4()}/results")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error_code"], "event_not_found")


if __name__ == "__main__":
    unittest.main()
