"""Configuration management and environment variable utilities."""

import os

from dotenv import load_dotenv

from evmrpc.helpers.constants import DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT


# Load environment variables from .env file
load_dotenv()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_required_env(key: str) -> str:
    """Get a required environment variable.

    Args:
        key: Environment variable name

    Returns:
        Environment variable value

    Raises:
        ValueError: If the environment variable is not set
    """
    value = os.getenv(key)
    if not value:
        msg = f"{key} environment variable is not set"
        raise ValueError(msg)
    return value


def get_optional_env(key: str, default: str | None = None) -> str | None:
    """Get an optional environment variable with a default value.

    Empty values count as unset.
    """
    value = os.getenv(key)
    return value if value else default


def get_eth_rpc_url(rpc_url: str | None = None) -> str:
    """Get the node JSON-RPC URL from parameter or environment.

    Args:
        rpc_url: Optional RPC URL to use directly

    Returns:
        Node JSON-RPC URL

    Raises:
        ValueError: If RPC URL is not provided and ETH_RPC_URL env var is not set

    Example:
        ```python
        from evmrpc.helpers.config import get_eth_rpc_url

        # Get from environment
        rpc_url = get_eth_rpc_url()

        # Or provide explicitly
        rpc_url = get_eth_rpc_url("https://rpc.sepolia.org")
        ```
    """
    if rpc_url:
        return rpc_url

    env_rpc_url = os.getenv("ETH_RPC_URL")
    if not env_rpc_url:
        msg = "ETH_RPC_URL must be provided or set in environment variables"
        raise ValueError(msg)

    return env_rpc_url


def get_rpc_timeout() -> float:
    """Get the HTTP timeout in seconds from ETH_RPC_TIMEOUT.

    Raises:
        ValueError: If the value is not a positive number
    """
    raw = get_optional_env("ETH_RPC_TIMEOUT")
    if raw is None:
        return DEFAULT_TIMEOUT

    try:
        timeout = float(raw)
    except ValueError as e:
        msg = f"ETH_RPC_TIMEOUT must be a number, got {raw!r}"
        raise ValueError(msg) from e

    if timeout <= 0:
        msg = f"ETH_RPC_TIMEOUT must be positive, got {raw!r}"
        raise ValueError(msg)
    return timeout


def get_rpc_max_retries() -> int:
    """Get the number of HTTP attempts from ETH_RPC_MAX_RETRIES.

    Raises:
        ValueError: If the value is not a positive integer
    """
    raw = get_optional_env("ETH_RPC_MAX_RETRIES")
    if raw is None:
        return DEFAULT_MAX_RETRIES

    try:
        max_retries = int(raw)
    except ValueError as e:
        msg = f"ETH_RPC_MAX_RETRIES must be an integer, got {raw!r}"
        raise ValueError(msg) from e

    if max_retries < 1:
        msg = f"ETH_RPC_MAX_RETRIES must be at least 1, got {raw!r}"
        raise ValueError(msg)
    return max_retries


def get_log_level() -> str:
    """Get the package log level from EVMRPC_LOG_LEVEL (default INFO).

    Raises:
        ValueError: If the level name is unknown
    """
    level = (get_optional_env("EVMRPC_LOG_LEVEL", "INFO") or "INFO").upper()
    if level not in LOG_LEVELS:
        msg = f"Invalid log level: {level}"
        raise ValueError(msg)
    return level


__all__ = [
    "LOG_LEVELS",
    "get_eth_rpc_url",
    "get_log_level",
    "get_optional_env",
    "get_required_env",
    "get_rpc_max_retries",
    "get_rpc_timeout",
]
