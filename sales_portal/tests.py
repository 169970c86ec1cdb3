from unittest.mock import MagicMock, patch

from django.http import HttpResponse
from django.test import RequestFactory, SimpleTestCase, override_settings

from .middleware import RequestTimingMiddleware


class RequestTimingMiddlewareTest(SimpleTestCase):
    """Testes do RequestTimingMiddleware."""

    def setUp(self):
        self.request = RequestFactory().post("/api/gerar-pix/")

    @override_settings(LOG_REQUEST_TIMING_MS=500)
    @patch("sales_portal.middleware.time.perf_counter", side_effect=[0.0, 1.2])
    def test_loga_request_lento(self, _mock_clock):
        middleware = RequestTimingMiddleware(lambda request: HttpResponse(status=200))

        with self.assertLogs("sales_portal.middleware", level="WARNING") as logs:
            response = middleware(self.request)

        self.assertEqual(response.status_code, 200)
        self.assertIn("SLOW_REQUEST path=/api/gerar-pix/", logs.output[0])

    @override_settings(LOG_REQUEST_TIMING_MS=500)
    @patch("sales_portal.middleware.logger")
    @patch("sales_portal.middleware.time.perf_counter", side_effect=[0.0, 0.1])
    def test_request_rapido_nao_loga(self, _mock_clock, mock_logger: MagicMock):
        middleware = RequestTimingMiddleware(lambda request: HttpResponse(status=200))
        middleware(self.request)
        mock_logger.warning.assert_not_called()
