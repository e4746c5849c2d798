from typing import Any, Dict, Optional

from hn_thread.config import load_config
from hn_thread.errors import InvalidInputError
from hn_thread.hn import HNContext, RequestsClient
from hn_thread.workflow import AggregateOptions


def _non_negative(name: str, value: Optional[Any]) -> Optional[int]:
    if value is None:
        return None
    value = int(value)
    if value < 0:
        raise InvalidInputError(f"{name} must be non-negative, got {value}")
    return value


class HNContextProvider:
    """
    Service locator/provider for Hacker News contexts.
    Follows the patterns in "Architecture Patterns with Python".
    """

    @staticmethod
    def get_default_context(config_path: str = "") -> HNContext:
        """
        Factory method to create a default context with standard configuration.

        Args:
            config_path: Path to the configuration file. If not provided,
                         the function will search for a config file in standard locations.

        Returns:
            A configured HNContext
        """
        return HNContextProvider.get_context_from_config(load_config(config_path))

    @staticmethod
    def get_context_from_config(config: Dict[str, Any]) -> HNContext:
        """
        Create a context from an already loaded configuration.

        Args:
            config: Configuration as returned by load_config

        Returns:
            A configured HNContext
        """
        api = config["api"]
        return HNContextProvider.get_context_from_params(
            base_url=api["base_url"],
            request_timeout=float(api["request_timeout"]),
            max_concurrency=int(api["max_concurrency"]),
        )

    @staticmethod
    def get_context_from_params(
        base_url: str = "https://hacker-news.firebaseio.com/v0",
        request_timeout: float = 10.0,
        max_concurrency: int = 32,
    ) -> HNContext:
        """
        Alternative factory method that creates a context using parameter values directly.

        Args:
            base_url: Base URL for the Hacker News API
            request_timeout: Seconds allowed for a single item fetch
            max_concurrency: Maximum number of item fetches in flight at once

        Returns:
            A configured HNContext

        Raises:
            InvalidInputError: max_concurrency is below 1
        """
        if max_concurrency < 1:
            raise InvalidInputError(f"max_concurrency must be at least 1, got {max_concurrency}")
        api_client = RequestsClient(timeout=request_timeout, pool_size=max_concurrency)
        return HNContext(
            api_client=api_client,
            base_url=base_url,
            max_concurrency=max_concurrency,
        )

    @staticmethod
    def get_default_options(config_path: str = "") -> AggregateOptions:
        """
        Build aggregation defaults from the configuration file.

        Args:
            config_path: Path to the configuration file

        Returns:
            AggregateOptions with depth, limit, timeout and fetch ceiling
        """
        return HNContextProvider.get_options_from_config(load_config(config_path))

    @staticmethod
    def get_options_from_config(config: Dict[str, Any]) -> AggregateOptions:
        """
        Build aggregation defaults from an already loaded configuration.

        Raises:
            InvalidInputError: depth, limit or max_fetches is negative
        """
        aggregate = config["aggregate"]
        timeout = aggregate.get("timeout")
        return AggregateOptions(
            depth=_non_negative("depth", aggregate["depth"]),
            limit=_non_negative("limit", aggregate.get("limit")),
            timeout=float(timeout) if timeout is not None else None,
            max_fetches=_non_negative("max_fetches", aggregate.get("max_fetches")),
        )
