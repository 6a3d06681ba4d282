"""
Thin wrapper around the jService-compatible trivia API.

Only two read operations are needed: listing a page of categories and listing
the clues of one category. Failures are raised immediately; retrying is left
to whoever asked for the board.
"""

import logging
import time
from typing import Any, Dict, List, Optional

import requests
from django.conf import settings

from jeopardy_app.exceptions import MalformedResponseError, ProviderError
from jeopardy_app.metrics import record_provider_request
from jeopardy_app.tracing import add_span_attribute, trace_operation

logger = logging.getLogger(__name__)


class TriviaAPIWrapper:
    """
    Wrapper for trivia provider calls with timeouts, payload validation and call accounting.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.JEOPARDY_PROVIDER_BASE_URL).rstrip("/")
        self.request_timeout = timeout if timeout is not None else settings.JEOPARDY_PROVIDER_TIMEOUT

        self._session = requests.Session()
        self._session.headers.update({"Accept": "application/json"})

        # Track API calls for monitoring
        self.total_calls = 0
        self.successful_calls = 0
        self.failed_calls = 0

    def _get_list(self, endpoint: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """GET {base_url}/{endpoint} and return the decoded JSON list."""
        url = f"{self.base_url}/{endpoint}"
        self.total_calls += 1
        start_time = time.time()
        status = "error"

        try:
            with trace_operation(f"provider.{endpoint}", **{k: str(v) for k, v in params.items()}):
                logger.debug(f"Requesting {url} with params {params}")
                try:
                    response = self._session.get(url, params=params, timeout=self.request_timeout)
                except requests.exceptions.RequestException as e:
                    raise ProviderError(f"Trivia provider unreachable at {url}: {e}") from e

                add_span_attribute("http.status_code", response.status_code)
                if not response.ok:
                    raise ProviderError(f"Trivia provider answered {response.status_code} for {url}")

                try:
                    data = response.json()
                except ValueError as e:
                    raise MalformedResponseError(f"Trivia provider returned invalid JSON for {url}: {e}") from e

                if not isinstance(data, list):
                    raise MalformedResponseError(
                        f"Expected a list from {url}, got {type(data).__name__}"
                    )

                status = "success"
                self.successful_calls += 1
                return data
        except (ProviderError, MalformedResponseError) as e:
            self.failed_calls += 1
            logger.error(f"Trivia provider call failed: {e}")
            raise
        finally:
            record_provider_request(endpoint, time.time() - start_time, status)

    @trace_operation("TriviaAPIWrapper.list_categories")
    def list_categories(self, count: int, offset: int) -> List[Dict[str, Any]]:
        """
        Get one page of category summaries.

        Args:
            count: Maximum number of categories to return
            offset: Pagination offset into the provider's category list

        Returns:
            List of dicts carrying at least "id" and "title"
        """
        return self._get_list("categories", {"count": count, "offset": offset})

    @trace_operation("TriviaAPIWrapper.list_clues")
    def list_clues(self, category_id: int) -> List[Dict[str, Any]]:
        """
        Get all clues of a category.

        Returns:
            List of dicts carrying "question", "answer" and "category": {"title": ...}
        """
        return self._get_list("clues", {"category": category_id})

    def get_status(self) -> Dict[str, Any]:
        """Get current wrapper status for monitoring."""
        return {
            "base_url": self.base_url,
            "request_timeout": self.request_timeout,
            "total_calls": self.total_calls,
            "successful_calls": self.successful_calls,
            "failed_calls": self.failed_calls,
            "success_rate": (self.successful_calls / self.total_calls * 100) if self.total_calls > 0 else 0,
        }

    def reset_counters(self):
        """Reset call counters (useful for testing)."""
        self.total_calls = 0
        self.successful_calls = 0
        self.failed_calls = 0


# Global instance used by the board loader
trivia_api_wrapper = TriviaAPIWrapper()


def get_trivia_api_status() -> Dict[str, Any]:
    """Get the status of the shared trivia API wrapper."""
    return trivia_api_wrapper.get_status()
