"""
Pytest configuration and fixtures for HN Thread tests.
"""

import threading
import time
from typing import Any, Dict, List, Optional

import pytest
import requests

from hn_thread.hn import HNContext

BASE_URL = "https://hacker-news.firebaseio.com/v0"


def item_url(item_id: int) -> str:
    return f"{BASE_URL}/item/{item_id}.json"


def http_error(status_code: int) -> requests.HTTPError:
    """Build the error requests raises for a non-2xx response."""
    response = requests.Response()
    response.status_code = status_code
    return requests.HTTPError(f"{status_code} Server Error", response=response)


class MockApiClient:
    """Mock API client for testing."""

    def __init__(self, responses: Optional[Dict[str, Any]] = None):
        """
        Initialize with predefined responses.

        A response that is an exception instance is raised instead of
        returned. URLs without a response return None, as upstream does
        for ids that do not exist.
        """
        self.responses = responses or {}
        self.delays: Dict[str, float] = {}
        self.get_calls: List[str] = []
        self._lock = threading.Lock()

    def add_items(self, *items: Dict[str, Any]) -> None:
        for item in items:
            self.responses[item_url(item["id"])] = item

    def get(self, url: str) -> Any:
        """Return (or raise) the predefined response for the URL."""
        with self._lock:
            self.get_calls.append(url)
        if url in self.delays:
            time.sleep(self.delays[url])
        response = self.responses.get(url)
        if isinstance(response, Exception):
            raise response
        return response

    def fetched_ids(self) -> List[int]:
        return sorted(int(url.rsplit("/", 1)[1].split(".")[0]) for url in self.get_calls)


@pytest.fixture
def mock_api_client() -> MockApiClient:
    """Return a mock API client."""
    return MockApiClient()


@pytest.fixture
def mock_context(mock_api_client: MockApiClient) -> HNContext:
    """Return a mock HN context."""
    return HNContext(api_client=mock_api_client, base_url=BASE_URL, max_concurrency=8)


@pytest.fixture
def sample_story() -> Dict[str, Any]:
    """Return a sample HN story with three top-level comments."""
    return {
        "id": 12345,
        "type": "story",
        "title": "Test Story",
        "by": "testuser",
        "time": 1617235200,
        "score": 42,
        "url": "https://example.com/article",
        "descendants": 5,
        "kids": [1001, 1002, 1003],
    }


@pytest.fixture
def sample_comments() -> List[Dict[str, Any]]:
    """
    Return a comment tree for sample_story.

    1001 has replies 2001 and 2002; 2001 has reply 3001.
    """
    return [
        {"id": 1001, "type": "comment", "parent": 12345, "by": "user1",
         "time": 1617235300, "text": "Comment 1", "kids": [2001, 2002]},
        {"id": 1002, "type": "comment", "parent": 12345, "by": "user2",
         "time": 1617235400, "text": "Comment 2"},
        {"id": 1003, "type": "comment", "parent": 12345, "by": "user3",
         "time": 1617235500, "text": "Comment 3"},
        {"id": 2001, "type": "comment", "parent": 1001, "by": "user4",
         "time": 1617235600, "text": "Reply 1", "kids": [3001]},
        {"id": 2002, "type": "comment", "parent": 1001, "by": "user5",
         "time": 1617235700, "text": "Reply 2"},
        {"id": 3001, "type": "comment", "parent": 2001, "by": "user6",
         "time": 1617235800, "text": "Nested reply"},
    ]


@pytest.fixture
def loaded_client(mock_api_client, sample_story, sample_comments) -> MockApiClient:
    """Return the mock client serving sample_story and its comments."""
    mock_api_client.add_items(sample_story, *sample_comments)
    return mock_api_client
