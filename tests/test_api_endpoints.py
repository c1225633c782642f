"""
Test suite for the SlideSmith API server.
"""

import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from server import app
from slidesmith.configs.config import config
from slidesmith.core.rate_limit import limiter


class TestAPIServer(unittest.TestCase):
    """Test cases for the main API server."""

    def setUp(self) -> None:
        """Set up test client before each test."""
        self.client = TestClient(app)

    def test_root_endpoint(self) -> None:
        """Test that the root endpoint returns the expected welcome message."""
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "SlideSmith Backend API")

    def test_validation_errors_use_error_envelope(self) -> None:
        """Test that malformed bodies come back as {error} with status 400."""
        with patch.object(limiter, "enabled", False):
            response = self.client.post("/api/optimize", json={})
        self.assertEqual(response.status_code, 400)
        self.assertIn("content", response.json()["error"])

    def test_cors_preflight(self) -> None:
        """Test that configured origins are allowed to call the proxy."""
        origin = config.cors_origins[0]
        response = self.client.options(
            "/api/plan",
            headers={
                "Origin": origin,
                "Access-Control-Request-Method": "POST",
            },
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["access-control-allow-origin"], origin)


if __name__ == "__main__":
    unittest.main()
