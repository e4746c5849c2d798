"""
Error kinds raised while aggregating a story.

Every error carries the item id it concerns (when there is one) and the
status code the request surface reports for it.
"""

from typing import Optional


class HNThreadError(Exception):
    """Base class for all aggregation errors."""

    status = 500
    category = "error"

    def __init__(self, message: str, item_id: Optional[int] = None):
        super().__init__(message)
        self.item_id = item_id


class InvalidInputError(HNThreadError):
    """The requested story id is missing or malformed."""

    status = 400
    category = "invalid_input"


class UpstreamError(HNThreadError):
    """Fetching a single item from the upstream API failed."""

    status = 502
    category = "upstream"


class UpstreamTransportError(UpstreamError):
    """The upstream API could not be reached."""

    category = "upstream_transport"


class UpstreamStatusError(UpstreamError):
    """The upstream API answered with a non-2xx status."""

    category = "upstream_status"

    def __init__(self, item_id: int, status_code: int):
        super().__init__(f"Failed to fetch item {item_id}: HTTP {status_code}", item_id)
        self.status_code = status_code


class DecodeError(UpstreamError):
    """The upstream body is not JSON or is not an item."""

    category = "decode"


class FetchBudgetExceeded(UpstreamError):
    """The per-request fetch ceiling was reached before this item."""

    category = "fetch_budget"

    def __init__(self, item_id: int, max_fetches: int):
        super().__init__(
            f"Not fetching item {item_id}: limit of {max_fetches} fetches reached",
            item_id,
        )
        self.max_fetches = max_fetches


class WrongKindError(HNThreadError):
    """The root item exists but is not a story."""

    status = 422
    category = "wrong_kind"

    def __init__(self, item_id: int, kind: str):
        super().__init__(f"Item {item_id} is a {kind}, not a story", item_id)
        self.kind = kind


class AggregateTimeoutError(HNThreadError):
    """The whole request took longer than its timeout."""

    status = 504
    category = "timeout"

    def __init__(self, item_id: int, timeout: float):
        super().__init__(f"Timed out after {timeout}s aggregating story {item_id}", item_id)
        self.timeout = timeout
