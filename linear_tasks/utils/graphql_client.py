# The MIT License (MIT)
# Copyright © 2025 Entrius

import time
from dataclasses import dataclass
from typing import Dict, Optional

import bittensor as bt
import requests

from linear_tasks.classes import GraphQLError, GraphQLResponse
from linear_tasks.constants import (
    LINEAR_API_URL,
    RATE_LIMIT_MIN_REMAINING,
    REQUEST_TIMEOUT_SECONDS,
)
from linear_tasks.queries import GraphQLOperation
from linear_tasks.utils.utils import mask_secret


@dataclass
class RateLimitInfo:
    """Represents Linear API request rate limit information extracted from response headers."""

    limit: int  # Maximum requests allowed per window
    remaining: int  # Requests remaining in current window
    reset_timestamp_ms: int  # Unix timestamp (milliseconds) when the window resets

    @property
    def is_exceeded(self) -> bool:
        return self.remaining == 0

    @property
    def seconds_until_reset(self) -> int:
        current_time_ms = int(time.time() * 1000)
        return max(0, (self.reset_timestamp_ms - current_time_ms) // 1000)

    def __str__(self) -> str:
        return f"RateLimit(remaining={self.remaining}/{self.limit}, resets_in={self.seconds_until_reset}s)"


def parse_rate_limit_headers(response: requests.Response) -> Optional[RateLimitInfo]:
    """
    Parse Linear API rate limit information from response headers.

    Args:
        response: The HTTP response from the Linear API

    Returns:
        RateLimitInfo if the headers are present and valid, None otherwise
    """
    headers = response.headers

    try:
        limit = int(headers.get('X-RateLimit-Requests-Limit', 0))
        remaining = int(headers.get('X-RateLimit-Requests-Remaining', 0))
        reset_timestamp_ms = int(headers.get('X-RateLimit-Requests-Reset', 0))

        if limit == 0 and reset_timestamp_ms == 0:
            return None

        return RateLimitInfo(limit=limit, remaining=remaining, reset_timestamp_ms=reset_timestamp_ms)
    except (ValueError, TypeError) as e:
        bt.logging.debug(f"Could not parse rate limit headers: {e}")
        return None


def check_preemptive_rate_limit(response: requests.Response) -> None:
    """Log a warning when the request budget is close to exhausted."""
    rate_limit_info = parse_rate_limit_headers(response)

    if rate_limit_info:
        if rate_limit_info.remaining <= RATE_LIMIT_MIN_REMAINING:
            bt.logging.warning(
                f"Approaching Linear API rate limit: {rate_limit_info.remaining} requests remaining, "
                f"resets in {rate_limit_info.seconds_until_reset}s"
            )
        elif rate_limit_info.remaining <= rate_limit_info.limit * 0.1:
            bt.logging.info(
                f"Linear API rate limit status: {rate_limit_info.remaining}/{rate_limit_info.limit} remaining"
            )


def make_headers(api_key: str) -> Dict[str, str]:
    """Build Linear HTTP headers for a personal API key.

    Args:
        api_key (str): Linear API key, sent as-is (no Bearer prefix)
    Returns:
        Dict[str, str]: Mapping of HTTP header names to values.
    """
    return {
        "Authorization": api_key,
        "Content-Type": "application/json",
    }


class LinearGraphQLClient:
    """Executes GraphQL operations against the Linear API.

    Every call is exactly one HTTP round trip. Nothing is retried: callers decide what a failed
    or empty response means for them.
    """

    def __init__(self, api_key: str, api_url: str = LINEAR_API_URL, timeout: int = REQUEST_TIMEOUT_SECONDS):
        if not api_key:
            raise ValueError('api_key is required')
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"LinearGraphQLClient(api_url={self.api_url}, api_key={mask_secret(self.api_key)})"

    def execute(self, operation: GraphQLOperation) -> GraphQLResponse:
        """
        Send a single GraphQL operation.

        Args:
            operation (GraphQLOperation): Query or mutation with its variables

        Returns:
            GraphQLResponse: data and/or errors reported by the server. HTTP failures without a
            GraphQL error body are reported as one synthetic error.

        Raises:
            requests.exceptions.RequestException: on transport failures
        """
        bt.logging.debug(f"Executing {operation.name} with variables {operation.variables}")
        response = requests.post(
            self.api_url,
            headers=make_headers(self.api_key),
            json=operation.to_payload(),
            timeout=self.timeout,
        )

        check_preemptive_rate_limit(response)

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.status_code == 200 and isinstance(payload, dict):
            return GraphQLResponse.from_json(payload)

        # Linear reports validation and rate limit errors as HTTP 400 with a GraphQL error body
        if isinstance(payload, dict) and payload.get('errors'):
            bt.logging.warning(f"{operation.name} failed with status {response.status_code}")
            return GraphQLResponse.from_json(payload)

        bt.logging.error(f"{operation.name} failed with status {response.status_code}: {response.text[:200]}")
        return GraphQLResponse(errors=[GraphQLError(f"HTTP {response.status_code}: {response.text[:200]}")])
