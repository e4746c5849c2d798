import asyncio
from typing import Any, Optional, Protocol

import requests
from pydantic import ValidationError
from requests.adapters import HTTPAdapter

from hn_thread.errors import (
    DecodeError,
    FetchBudgetExceeded,
    InvalidInputError,
    UpstreamStatusError,
    UpstreamTransportError,
)
from hn_thread.logging_config import get_logger
from hn_thread.models import Item

logger = get_logger(__name__)


class ApiClient(Protocol):
    """Protocol defining the interface for an API client."""

    def get(self, url: str) -> Any:
        """Make a GET request to the specified URL and return the decoded JSON body."""
        ...


class RequestsClient:
    """Implementation of ApiClient using a pooled requests session."""

    def __init__(self, timeout: float = 10.0, pool_size: int = 32):
        self.timeout = timeout
        self.session = requests.Session()
        adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)

    def get(self, url: str) -> Any:
        """Make a GET request to the specified URL."""
        response = self.session.get(
            url, headers={"Accept": "application/json"}, timeout=self.timeout
        )
        if not 200 <= response.status_code <= 299:
            raise requests.HTTPError(
                f"{response.status_code} response for url: {url}", response=response
            )
        return response.json()

    def close(self) -> None:
        """Release pooled connections."""
        self.session.close()


class HNContext:
    """
    Context object for Hacker News API operations.
    Contains all dependencies needed by the API client.
    """

    def __init__(
        self,
        api_client: Optional[ApiClient] = None,
        base_url: str = "https://hacker-news.firebaseio.com/v0",
        max_concurrency: int = 32,
    ):
        """
        Initialize the Hacker News context.

        Args:
            api_client: Client for making HTTP requests
            base_url: Base URL for the Hacker News API
            max_concurrency: Maximum number of item fetches in flight at once
        """
        if max_concurrency < 1:
            raise InvalidInputError(f"max_concurrency must be at least 1, got {max_concurrency}")
        self.api_client = api_client or RequestsClient(pool_size=max_concurrency)
        self.base_url = base_url
        self.max_concurrency = max_concurrency

    def close(self) -> None:
        """Release resources held by the API client."""
        close = getattr(self.api_client, "close", None)
        if close is not None:
            close()


class FetchBudget:
    """Counts fetches made for one request and enforces an optional ceiling."""

    def __init__(self, max_fetches: Optional[int] = None):
        self.max_fetches = max_fetches
        self.count = 0

    def spend(self, item_id: int) -> None:
        if self.max_fetches is not None and self.count >= self.max_fetches:
            raise FetchBudgetExceeded(item_id, self.max_fetches)
        self.count += 1


class HackerNewsAPI:
    """
    A client for the Hacker News API that retrieves single items by id.
    """

    def __init__(
        self,
        context: Optional[HNContext] = None,
        budget: Optional[FetchBudget] = None,
    ) -> None:
        """
        Initialize the HackerNews API client.

        Args:
            context: Context object containing dependencies
            budget: Fetch counter shared by every fetch of one request
        """
        self.context = context or HNContext()
        self.budget = budget or FetchBudget()
        self._semaphore: Optional[asyncio.Semaphore] = None

    def item_url(self, item_id: int) -> str:
        return f"{self.context.base_url}/item/{item_id}.json"

    def get_item(self, item_id: int) -> Item:
        """
        Retrieve an item (story, comment, etc.) from the HackerNews API.

        Args:
            item_id: The ID of the item to retrieve

        Returns:
            The validated item

        Raises:
            UpstreamStatusError: upstream answered with a non-2xx status
            DecodeError: the body is not JSON, or is null, or is not an item
            UpstreamTransportError: the request never got a response
        """
        url = self.item_url(item_id)
        try:
            payload = self.context.api_client.get(url)
        except requests.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else 0
            raise UpstreamStatusError(item_id, status_code) from e
        except requests.JSONDecodeError as e:
            raise DecodeError(f"Item {item_id} is not valid JSON: {e}", item_id) from e
        except requests.RequestException as e:
            # MissingSchema and InvalidURL are also ValueErrors
            raise UpstreamTransportError(f"Failed to reach upstream for item {item_id}: {e}", item_id) from e
        except ValueError as e:
            raise DecodeError(f"Item {item_id} is not valid JSON: {e}", item_id) from e

        try:
            return Item.model_validate(payload)
        except ValidationError as e:
            raise DecodeError(f"Item {item_id} does not match the item shape: {e}", item_id) from e

    async def fetch_item(self, item_id: int) -> Item:
        """
        Fetch an item without blocking the event loop.

        The number of concurrent fetches is bounded by the context's
        max_concurrency and every call counts against the fetch budget.
        """
        self.budget.spend(item_id)
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self.context.max_concurrency)
        async with self._semaphore:
            logger.debug("fetching item", item_id=item_id)
            return await asyncio.to_thread(self.get_item, item_id)


def get_item(item_id: int, context: Optional[HNContext] = None) -> Item:
    """
    Convenience function to fetch a single HN item.

    Args:
        item_id: The ID of the HN item
        context: Context containing dependencies

    Returns:
        The validated item
    """
    api = HackerNewsAPI(context)
    return api.get_item(item_id)
