"""
Tests for the trivia provider wrapper.
"""

from unittest.mock import Mock, patch

import requests
from django.test import TestCase, override_settings

from jeopardy_app.exceptions import MalformedResponseError, ProviderError
from jeopardy_app.trivia_api_wrapper import TriviaAPIWrapper


def mock_response(status_code=200, payload=None, json_error=None):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    if json_error:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


class TestTriviaAPIWrapper(TestCase):
    """Test cases for the trivia API wrapper."""

    def setUp(self):
        self.wrapper = TriviaAPIWrapper(base_url="https://trivia.example/api/", timeout=3.0)
        self.wrapper.reset_counters()

    def test_initialization(self):
        self.assertEqual(self.wrapper.base_url, "https://trivia.example/api")
        self.assertEqual(self.wrapper.request_timeout, 3.0)
        self.assertEqual(self.wrapper.total_calls, 0)

    @override_settings(JEOPARDY_PROVIDER_BASE_URL="https://other.example/api", JEOPARDY_PROVIDER_TIMEOUT=7.5)
    def test_defaults_from_settings(self):
        wrapper = TriviaAPIWrapper()
        self.assertEqual(wrapper.base_url, "https://other.example/api")
        self.assertEqual(wrapper.request_timeout, 7.5)

    def test_list_categories(self):
        categories = [{"id": 11, "title": "poets", "clues_count": 5}]
        with patch.object(self.wrapper._session, "get", return_value=mock_response(payload=categories)) as mock_get:
            result = self.wrapper.list_categories(count=100, offset=42)

        self.assertEqual(result, categories)
        mock_get.assert_called_once_with(
            "https://trivia.example/api/categories", params={"count": 100, "offset": 42}, timeout=3.0
        )
        self.assertEqual(self.wrapper.successful_calls, 1)

    def test_list_clues(self):
        clues = [{"question": "q", "answer": "a", "category": {"title": "T"}}]
        with patch.object(self.wrapper._session, "get", return_value=mock_response(payload=clues)) as mock_get:
            result = self.wrapper.list_clues(11)

        self.assertEqual(result, clues)
        mock_get.assert_called_once_with("https://trivia.example/api/clues", params={"category": 11}, timeout=3.0)

    def test_error_status_raises_provider_error(self):
        with patch.object(self.wrapper._session, "get", return_value=mock_response(status_code=503)):
            with self.assertRaises(ProviderError):
                self.wrapper.list_clues(11)
        self.assertEqual(self.wrapper.failed_calls, 1)

    def test_connection_error_raises_provider_error(self):
        with patch.object(self.wrapper._session, "get", side_effect=requests.exceptions.ConnectionError("refused")):
            with self.assertRaises(ProviderError):
                self.wrapper.list_categories(count=100, offset=4)

    def test_timeout_raises_provider_error(self):
        with patch.object(self.wrapper._session, "get", side_effect=requests.exceptions.Timeout("read timed out")) as mock_get:
            with self.assertRaises(ProviderError):
                self.wrapper.list_clues(11)
        # No retries
        self.assertEqual(mock_get.call_count, 1)

    def test_invalid_json_raises_malformed(self):
        with patch.object(self.wrapper._session, "get", return_value=mock_response(json_error=ValueError("Expecting value"))):
            with self.assertRaises(MalformedResponseError):
                self.wrapper.list_clues(11)

    def test_non_list_payload_raises_malformed(self):
        with patch.object(self.wrapper._session, "get", return_value=mock_response(payload={"error": "nope"})):
            with self.assertRaises(MalformedResponseError):
                self.wrapper.list_categories(count=100, offset=4)

    def test_malformed_is_a_board_load_error(self):
        from jeopardy_app.exceptions import BoardLoadError

        self.assertTrue(issubclass(MalformedResponseError, BoardLoadError))
        self.assertTrue(issubclass(ProviderError, BoardLoadError))

    def test_get_status(self):
        with patch.object(self.wrapper._session, "get", return_value=mock_response(payload=[])):
            self.wrapper.list_clues(1)
        with patch.object(self.wrapper._session, "get", return_value=mock_response(status_code=500)):
            with self.assertRaises(ProviderError):
                self.wrapper.list_clues(2)

        status = self.wrapper.get_status()
        self.assertEqual(status["total_calls"], 2)
        self.assertEqual(status["successful_calls"], 1)
        self.assertEqual(status["failed_calls"], 1)
        self.assertEqual(status["success_rate"], 50.0)
        self.assertEqual(status["base_url"], "https://trivia.example/api")

    def test_reset_counters(self):
        self.wrapper.total_calls = 5
        self.wrapper.successful_calls = 3
        self.wrapper.failed_calls = 2
        self.wrapper.reset_counters()
        self.assertEqual(self.wrapper.get_status()["total_calls"], 0)
        self.assertEqual(self.wrapper.get_status()["success_rate"], 0)
