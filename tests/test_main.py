import unittest

from app.main import app
from app.rate_limit import RateLimitMiddleware


class TestMain(unittest.TestCase):
    def test_app_metadata(self):
        self.assertEqual(app.title, "Weather Cache Gateway")

    def test_routes_and_middleware_registered(self):
        paths = {route.path for route in app.routes}
        self.assertIn("/cache/{city_name}", paths)
        self.assertIn("/health", paths)
        self.assertTrue(any(m.cls is RateLimitMiddleware for m in app.user_middleware))


if __name__ == "__main__":
    unittest.main()
