"""Token operation contracts and the per-protocol strategy interface.

Operation flow:
1. Caller submits a TokenOperationRequest
2. Strategy validates the fields required for (kind, protocol)
3. Capability is resolved for EVM contracts (see capability.py)
4. Strategy encodes an UnsignedTransaction
5. Transaction is handed to the submission collaborator
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

from polychain.chains import Protocol
from polychain.tokens.validation import is_non_empty_string, require


class TokenCapability(str, Enum):
    """Interface standard implemented by a token contract."""

    NON_FUNGIBLE_UNIQUE = "erc721"          # one owner per token id
    NON_FUNGIBLE_SEMI_FUNGIBLE = "erc1155"  # owned quantity per token id
    UNKNOWN = "unknown"


class OperationKind(str, Enum):
    """Token operation kinds."""

    INFO = "info"
    BALANCE = "balance"
    METADATA = "metadata"
    TRANSFER = "transfer"
    MINT = "mint"
    BURN = "burn"

    @property
    def is_read_only(self) -> bool:
        return self in (OperationKind.INFO, OperationKind.BALANCE, OperationKind.METADATA)


Numeric = Union[int, Decimal, str]


class Destination(BaseModel):
    """One output of a fan-out transfer."""

    address: str = Field(..., description="Recipient address")
    amount: Numeric = Field(..., description="Amount for this recipient")


class TokenOperationRequest(BaseModel):
    """Abstract token operation.

    Field requirements depend on (kind, protocol) and are enforced by the
    protocol strategy, not by this model.
    """

    kind: OperationKind = Field(..., description="Operation kind")
    protocol: Protocol = Field(..., description="Target protocol")
    token: Optional[str] = Field(None, description="Token uid (Hathor) or contract/mint address")
    token_id: Optional[Numeric] = Field(None, description="Token id within the contract")
    amount: Optional[Numeric] = Field(None, description="Amount to transfer or mint")
    sender: Optional[str] = Field(None, description="Source wallet address")
    destination: Optional[str] = Field(None, description="Single recipient")
    destinations: Optional[list[Destination]] = Field(None, description="Fan-out recipients")
    address: Optional[str] = Field(None, description="Owner address for balance queries")
    uri: Optional[str] = Field(None, description="Metadata URI for unique-token mints")
    options: dict[str, Any] = Field(default_factory=dict, description="Protocol-specific extras")
    testnet: Optional[bool] = Field(None, description="Network selection (None = settings default)")


class UnsignedTransaction(BaseModel):
    """Protocol-specific unsigned payload.

    The submission collaborator is responsible for signing and broadcasting;
    nothing in this package does either.
    """

    protocol: Protocol = Field(..., description="Target protocol")
    target: Optional[str] = Field(None, description="Contract, token or account addressed")
    payload: dict[str, Any] = Field(default_factory=dict, description="Encoded protocol payload")
    chain_id: Optional[int] = Field(None, description="EVM chain ID")
    description: Optional[str] = Field(None, description="Human-readable description")


class TransactionReceipt(BaseModel):
    """Result returned by the submission collaborator."""

    protocol: Protocol = Field(..., description="Target protocol")
    tx_id: str = Field(..., description="Transaction hash or id")
    simulated: bool = Field(default=False, description="True for dry-run submissions")


class TokenStrategy(ABC):
    """Validation and encoding rules of one protocol family."""

    #: Whether encoding depends on a probed TokenCapability
    requires_capability: bool = False

    @abstractmethod
    def supports(self, kind: OperationKind) -> bool:
        """Whether the operation kind is implemented for this protocol."""
        pass

    @abstractmethod
    def validate(self, request: TokenOperationRequest) -> None:
        """Validate request fields.

        Raises:
            ValidationFailed: Naming the first violated rule
        """
        pass

    @abstractmethod
    def encode(
        self,
        request: TokenOperationRequest,
        capability: Optional[TokenCapability] = None,
        testnet: bool = False,
    ) -> UnsignedTransaction:
        """Build the unsigned transaction for a validated request."""
        pass

    def token_reference(self, request: TokenOperationRequest) -> Optional[str]:
        """Reference used in read-only query paths."""
        return request.token

    def validate_query(self, request: TokenOperationRequest) -> None:
        """Validate a read-only request (INFO, BALANCE, METADATA)."""
        require(is_non_empty_string(request.token), "Invalid token")
        if request.kind == OperationKind.BALANCE:
            require(is_non_empty_string(request.address), "Invalid address")
