from __future__ import annotations

import sys
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from fishing_api.app import create_app
from fishing_api.config import Settings


def _test_settings(**overrides: object) -> Settings:
    values: dict[str, object] = {
        "app_name": "Fishing Events API (Test)",
        "app_env": "test",
        "app_docs_enabled": False,
    }
    values.update(overrides)
    return Settings(**values)


class TestApiHealth(unittest.TestCase):
    def test_health_endpoint_returns_ok(self) -> None:
        client = TestClient(create_app(settings=_test_settings(rating_strategy="elo")))

        response = client.get("/health")
        self.assertEqual(response.status_code, 200)

        payload = response.json()
        self.assertEqual(payload["status"], "ok")
        self.assertEqual(payload["app"], "Fishing Events API (Test)")
        self.assertEqual(payload["env"], "test")
        self.assertEqual(payload["rating_strategy"], "elo")

    def test_docs_disabled_hides_docs_routes(self) -> None:
        client = TestClient(create_app(settings=_test_settings()))

        self.assertEqual(client.get("/docs").status_code, 404)
        self.assertEqual(client.get("/redoc").status_code, 404)

    def test_ready_endpoint_returns_ready_when_db_answers(self) -> None:
        client = TestClient(create_app(settings=_test_settings()))
        with patch(
            "fishing_api.modules.health.router._database_reachable",
            new=AsyncMock(return_value=True),
        ):
            response = client.get("/health/ready")

        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["status"], "ready")
        self.assertEqual(payload["checks"], {"db": True})

    def test_ready_endpoint_returns_503_when_db_is_down(self) -> None:
        client = TestClient(create_app(settings=_test_settings()))
        with patch(
            "fishing_api.modules.health.router._database_reachable",
            new=AsyncMock(return_value=False),
        ):
            response = client.get("/health/ready")

        self.assertEqual(response.status_code, 503)
        payload = response.json()
        self.assertEqual(payload["error_code"], "service_unavailable")
        self.assertEqual(payload["detail"], "Database not ready")

    def test_cors_headers_are_present_when_origins_configured(self) -> None:
        client = TestClient(
            create_app(settings=_test_settings(app_cors_origins=["http://localhost:3000"]))
        )

        response = client.options(
            "/health",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "GET",
            },
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.headers.get("access-control-allow-origin"),
            "http://localhost:3000",
        )

    def test_request_logging_emits_request_completed(self) -> None:
        client = TestClient(
            create_app(settings=_test_settings(app_log_requests=True, app_log_json=False))
        )

        with self.assertLogs("fishing_api.request", level="INFO") as captured:
            response = client.get("/health")

        self.assertEqual(response.status_code, 200)
        self.assertIn("request_completed", "\n".join(captured.output))


if __name__ == "__main__":
    unittest.main()
