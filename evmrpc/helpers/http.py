"""HTTP transport for JSON-RPC requests, with optional retry."""

from asyncio import sleep
from functools import wraps

from typing import TYPE_CHECKING, Any, ParamSpec, Self, TypeVar

import httpx

from evmrpc.errors import TransportError
from evmrpc.helpers.constants import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
    JSON_CONTENT_TYPE,
    MAX_CONNECTIONS,
    MAX_KEEPALIVE_CONNECTIONS,
    RETRY_BASE_DELAY,
    RETRY_MAX_DELAY,
)
from evmrpc.helpers.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from types import TracebackType


logger = get_logger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


def retry_with_backoff(
    max_retries: int = DEFAULT_MAX_RETRIES,
    base_delay: float = RETRY_BASE_DELAY,
    max_delay: float = RETRY_MAX_DELAY,
    *,
    retry_on: tuple[type[Exception], ...] = (httpx.TransportError,),
    log_errors: bool = True,
) -> "Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]":
    """Decorator to retry async functions with exponential backoff.

    Only exceptions listed in ``retry_on`` are retried; anything else
    propagates on the first attempt.

    Args:
        max_retries: Maximum number of attempts (1 disables retrying)
        base_delay: Initial delay in seconds
        max_delay: Maximum delay between attempts
        retry_on: Exception types that trigger another attempt
        log_errors: Whether to log retry attempts

    Example:
        ```python
        @retry_with_backoff(max_retries=3, base_delay=2.0)
        async def post(client: httpx.AsyncClient, url: str, body: bytes) -> bytes:
            response = await client.post(url, content=body)
            return response.content

        # Connection failures are retried after 2s, then 4s
        ```
    """
    if max_retries < 1:
        msg = f"max_retries must be at least 1, got {max_retries}"
        raise ValueError(msg)

    def decorator(func: "Callable[P, Awaitable[T]]") -> "Callable[P, Awaitable[T]]":
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            for attempt in range(1, max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except retry_on as e:
                    if attempt == max_retries:
                        if log_errors and max_retries > 1:
                            logger.error(
                                "%s failed after %d attempts", func.__name__, max_retries
                            )
                        raise
                    if log_errors:
                        logger.warning(
                            "%s failed (attempt %d/%d): %s",
                            func.__name__,
                            attempt,
                            max_retries,
                            e,
                        )

                # Exponential backoff with max_delay cap
                await sleep(min(base_delay * (2 ** (attempt - 1)), max_delay))

            # Unreachable: the last attempt either returns or raises
            msg = f"{func.__name__} failed without exception"
            raise RuntimeError(msg)

        return wrapper

    return decorator


def create_http_client(timeout: float = DEFAULT_TIMEOUT, **kwargs: Any) -> httpx.AsyncClient:
    """Create a pooled httpx AsyncClient for a node endpoint.

    Args:
        timeout: Default timeout in seconds
        **kwargs: Additional httpx.AsyncClient kwargs
    """
    kwargs.setdefault(
        "limits",
        httpx.Limits(
            max_connections=MAX_CONNECTIONS,
            max_keepalive_connections=MAX_KEEPALIVE_CONNECTIONS,
        ),
    )
    return httpx.AsyncClient(timeout=timeout, **kwargs)


class HttpTransport:
    """POSTs serialized JSON-RPC requests to a node endpoint.

    Any HTTP failure (connection error, timeout, non-2xx status) is raised as
    ``TransportError``. The underlying client is closed by ``aclose`` only if
    this transport created it.
    """

    def __init__(
        self,
        rpc_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        client: httpx.AsyncClient | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Initialize HTTP transport.

        Args:
            rpc_url: Node JSON-RPC endpoint URL
            timeout: Request timeout in seconds
            client: Shared client to use instead of creating one
            max_retries: Attempts per request for connection errors and timeouts
            headers: Extra headers sent with every request

        Raises:
            ValueError: If rpc_url is empty or None
        """
        if not rpc_url:
            msg = "RPC URL cannot be empty"
            raise ValueError(msg)

        self.rpc_url = rpc_url
        self.timeout = timeout
        self.headers = {"Content-Type": JSON_CONTENT_TYPE, **(headers or {})}
        self._owns_client = client is None
        self._client = client if client is not None else create_http_client(timeout)
        self._post = retry_with_backoff(max_retries=max_retries)(self._post_once)

    async def _post_once(self, payload: bytes) -> bytes:
        response = await self._client.post(
            self.rpc_url, content=payload, headers=self.headers, timeout=self.timeout
        )
        response.raise_for_status()
        return response.content

    async def send(self, payload: bytes) -> bytes:
        """Send one request body and return the raw response body.

        Raises:
            TransportError: If the request could not be completed
        """
        try:
            return await self._post(payload)
        except httpx.HTTPStatusError as e:
            msg = f"HTTP {e.response.status_code} from {self.rpc_url}"
            raise TransportError(msg) from e
        except httpx.TimeoutException as e:
            msg = f"Request to {self.rpc_url} timed out after {self.timeout}s"
            raise TransportError(msg) from e
        except httpx.HTTPError as e:
            msg = f"HTTP error calling {self.rpc_url}: {e}"
            raise TransportError(msg) from e

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: "TracebackType | None",
    ) -> None:
        await self.aclose()


__all__ = [
    "HttpTransport",
    "create_http_client",
    "retry_with_backoff",
]
