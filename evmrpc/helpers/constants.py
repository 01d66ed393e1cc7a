"""Protocol and client constants shared across the package."""

import re


# JSON-RPC Protocol
JSONRPC_VERSION = "2.0"
"""JSON-RPC protocol version sent with every request"""

JSON_CONTENT_TYPE = "application/json"
"""Content type for JSON-RPC request bodies"""

# Method Names
ETH_BLOCK_NUMBER = "eth_blockNumber"
ETH_GAS_PRICE = "eth_gasPrice"
ETH_GET_BALANCE = "eth_getBalance"
ETH_GET_STORAGE_AT = "eth_getStorageAt"
ETH_GET_CODE = "eth_getCode"
ETH_GET_TRANSACTION_COUNT = "eth_getTransactionCount"
ETH_GET_BLOCK_TRANSACTION_COUNT_BY_HASH = "eth_getBlockTransactionCountByHash"
ETH_GET_BLOCK_BY_HASH = "eth_getBlockByHash"
ETH_GET_BLOCK_BY_NUMBER = "eth_getBlockByNumber"
ETH_GET_TRANSACTION_BY_HASH = "eth_getTransactionByHash"
ETH_GET_TRANSACTION_BY_BLOCK_HASH_AND_INDEX = "eth_getTransactionByBlockHashAndIndex"
ETH_GET_TRANSACTION_BY_BLOCK_NUMBER_AND_INDEX = (
    "eth_getTransactionByBlockNumberAndIndex"
)
ETH_GET_TRANSACTION_RECEIPT = "eth_getTransactionReceipt"
ETH_CALL = "eth_call"

# HTTP and Network Constants
DEFAULT_TIMEOUT = 30.0
"""Default HTTP request timeout in seconds"""

MAX_KEEPALIVE_CONNECTIONS = 5
"""Maximum number of keepalive connections in pool"""

MAX_CONNECTIONS = 10
"""Maximum total number of connections"""

# Retry Configuration
DEFAULT_MAX_RETRIES = 1
"""Default number of HTTP attempts (1 means no retry)"""

RETRY_BASE_DELAY = 1.0
"""Base delay for exponential backoff in seconds"""

RETRY_MAX_DELAY = 60.0
"""Maximum delay between retries in seconds"""

# Input Validation
ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")
"""20-byte account address"""

HASH_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")
"""32-byte block or transaction hash"""

SLOT_PATTERN = re.compile(r"^0x[0-9a-fA-F]{1,64}$")
"""Storage slot position, at most 32 bytes"""


__all__ = [
    "ADDRESS_PATTERN",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_TIMEOUT",
    "ETH_BLOCK_NUMBER",
    "ETH_CALL",
    "ETH_GAS_PRICE",
    "ETH_GET_BALANCE",
    "ETH_GET_BLOCK_BY_HASH",
    "ETH_GET_BLOCK_BY_NUMBER",
    "ETH_GET_BLOCK_TRANSACTION_COUNT_BY_HASH",
    "ETH_GET_CODE",
    "ETH_GET_STORAGE_AT",
    "ETH_GET_TRANSACTION_BY_BLOCK_HASH_AND_INDEX",
    "ETH_GET_TRANSACTION_BY_BLOCK_NUMBER_AND_INDEX",
    "ETH_GET_TRANSACTION_BY_HASH",
    "ETH_GET_TRANSACTION_COUNT",
    "ETH_GET_TRANSACTION_RECEIPT",
    "HASH_PATTERN",
    "JSONRPC_VERSION",
    "JSON_CONTENT_TYPE",
    "MAX_CONNECTIONS",
    "MAX_KEEPALIVE_CONNECTIONS",
    "RETRY_BASE_DELAY",
    "RETRY_MAX_DELAY",
    "SLOT_PATTERN",
]
