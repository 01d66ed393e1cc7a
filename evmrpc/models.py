"""Pydantic models for chain entities returned by the node.

All models are frozen and ignore unknown wire fields. Quantities are decoded
into ``Uint256`` so values wider than 64 bits keep full precision.
"""

from pydantic import BaseModel, ConfigDict, Field

from evmrpc.numeric import Uint256


class ChainEntity(BaseModel):
    """Base for entities decoded from camelCase wire objects."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class BlockIdentity(ChainEntity):
    """Block fields present whatever the transaction detail mode."""

    number: Uint256 | None = Field(
        default=None, description="Block height, null for pending blocks"
    )
    hash: str | None = Field(
        default=None, description="Block hash, null for pending blocks"
    )
    parent_hash: str = Field(..., description="Parent block hash", alias="parentHash")
    nonce: Uint256 | None = Field(default=None, description="Proof-of-work nonce")
    sha3_uncles: str = Field(..., description="Hash of uncles", alias="sha3Uncles")
    logs_bloom: str | None = Field(
        default=None, description="Bloom filter of block logs", alias="logsBloom"
    )
    transactions_root: str = Field(
        ..., description="Transaction trie root", alias="transactionsRoot"
    )
    state_root: str = Field(..., description="State trie root", alias="stateRoot")
    receipts_root: str = Field(
        ..., description="Receipts trie root", alias="receiptsRoot"
    )
    miner: str | None = Field(default=None, description="Miner/validator address")
    difficulty: Uint256 = Field(..., description="Block difficulty")
    total_difficulty: Uint256 | None = Field(
        default=None, description="Chain difficulty up to this block", alias="totalDifficulty"
    )
    extra_data: str = Field(..., description="Extra data field", alias="extraData")
    size: Uint256 = Field(..., description="Block size in bytes")
    gas_limit: Uint256 = Field(..., description="Gas limit", alias="gasLimit")
    gas_used: Uint256 = Field(..., description="Gas used", alias="gasUsed")
    timestamp: Uint256 = Field(..., description="Unix timestamp")
    base_fee_per_gas: Uint256 | None = Field(
        default=None, description="Base fee per gas", alias="baseFeePerGas"
    )
    mix_hash: str | None = Field(default=None, description="Mix hash", alias="mixHash")
    uncles: tuple[str, ...] = Field(default=(), description="Uncle block hashes")

    def identity(self) -> "BlockIdentity":
        """Return only the identity fields of this block."""
        return BlockIdentity.model_construct(
            _fields_set=self.model_fields_set & set(BlockIdentity.model_fields),
            **{name: getattr(self, name) for name in BlockIdentity.model_fields},
        )


class Transaction(ChainEntity):
    """Full transaction record."""

    block_hash: str | None = Field(default=None, alias="blockHash")
    block_number: Uint256 | None = Field(default=None, alias="blockNumber")
    from_address: str = Field(..., description="Sender address", alias="from")
    gas: Uint256 = Field(..., description="Gas provided by the sender")
    gas_price: Uint256 = Field(..., alias="gasPrice")
    hash: str
    input: str = Field(..., description="Call data")
    nonce: Uint256
    to: str | None = Field(default=None, description="Recipient, null for creation")
    transaction_index: Uint256 | None = Field(default=None, alias="transactionIndex")
    value: Uint256 = Field(..., description="Value transferred in wei")
    v: str
    r: str
    s: str
    type: Uint256 | None = Field(default=None, description="EIP-2718 envelope type")
    chain_id: Uint256 | None = Field(default=None, alias="chainId")
    max_fee_per_gas: Uint256 | None = Field(default=None, alias="maxFeePerGas")
    max_priority_fee_per_gas: Uint256 | None = Field(
        default=None, alias="maxPriorityFeePerGas"
    )


class Block(BlockIdentity):
    """Block whose transactions are listed as hashes."""

    transactions: tuple[str, ...] = Field(..., description="Transaction hashes")


class BlockWithTx(BlockIdentity):
    """Block carrying full transaction records."""

    transactions: tuple[Transaction, ...] = Field(
        ..., description="Transactions in block order"
    )


class Log(ChainEntity):
    """Event log emitted during transaction execution."""

    removed: bool
    log_index: Uint256 = Field(..., alias="logIndex")
    transaction_index: Uint256 = Field(..., alias="transactionIndex")
    transaction_hash: str = Field(..., alias="transactionHash")
    block_hash: str = Field(..., alias="blockHash")
    block_number: Uint256 = Field(..., alias="blockNumber")
    address: str
    data: str
    topics: tuple[str, ...]


class TransactionReceipt(ChainEntity):
    """Receipt of a mined transaction."""

    transaction_hash: str = Field(..., alias="transactionHash")
    transaction_index: Uint256 = Field(..., alias="transactionIndex")
    block_hash: str = Field(..., alias="blockHash")
    block_number: Uint256 = Field(..., alias="blockNumber")
    from_address: str = Field(..., alias="from")
    to: str | None = None
    cumulative_gas_used: Uint256 = Field(..., alias="cumulativeGasUsed")
    effective_gas_price: Uint256 = Field(..., alias="effectiveGasPrice")
    gas_used: Uint256 = Field(..., alias="gasUsed")
    contract_address: str | None = Field(default=None, alias="contractAddress")
    logs: tuple[Log, ...]
    logs_bloom: str = Field(..., alias="logsBloom")
    status: Uint256 | None = Field(
        default=None, description="1 on success, 0 on failure (post-Byzantium)"
    )
    root: str | None = Field(default=None, description="State root (pre-Byzantium)")
    type: Uint256 | None = None


class CallRequest(ChainEntity):
    """Message call sent with ``eth_call``."""

    from_address: str | None = Field(default=None, alias="from")
    to: str
    gas: Uint256 | None = None
    gas_price: Uint256 | None = Field(default=None, alias="gasPrice")
    value: Uint256 | None = None
    data: str | None = None

    def to_wire(self) -> dict[str, str]:
        """Serialize with wire names, omitting unset fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = [
    "Block",
    "BlockIdentity",
    "BlockWithTx",
    "CallRequest",
    "ChainEntity",
    "Log",
    "Transaction",
    "TransactionReceipt",
]
