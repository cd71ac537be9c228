"""EVM token strategy (ERC-721 / ERC-1155).

The parameter layout of a transfer or mint depends on the interface the
contract implements, so this strategy needs a resolved TokenCapability.
UNKNOWN is encoded like ERC-1155 (amount-based), which is what contracts
without interface introspection most often accept.
"""

import logging
import secrets
from typing import Any, Optional

from eth_utils import to_checksum_address

from polychain.abi import encode_call, parse_signature
from polychain.chains import EVM_NETWORKS, Protocol
from polychain.errors import UnsupportedProtocol
from polychain.tokens.base import (
    OperationKind,
    TokenCapability,
    TokenOperationRequest,
    TokenStrategy,
    UnsignedTransaction,
)
from polychain.tokens.validation import (
    check_optional_amount,
    is_evm_address,
    is_non_empty_string,
    parse_token_id,
    parse_uint256,
    require,
)

logger = logging.getLogger(__name__)

# ERC-165 interface IDs
ERC721_INTERFACE_ID = "0x80ac58cd"
ERC1155_INTERFACE_ID = "0xd9b67a26"
SUPPORTS_INTERFACE = "supportsInterface(bytes4)"

# Method signatures
ERC721_SAFE_TRANSFER = "safeTransferFrom(address,address,uint256)"
ERC1155_SAFE_TRANSFER = "safeTransferFrom(address,address,uint256,uint256,bytes)"
ERC721_MINT = "mintWithTokenURI(address,uint256,string)"
ERC1155_MINT = "mint(address,uint256,uint256,bytes)"

RANDOM_TOKEN_ID_BITS = 53

EVM_KINDS = frozenset({
    OperationKind.INFO,
    OperationKind.BALANCE,
    OperationKind.METADATA,
    OperationKind.TRANSFER,
    OperationKind.MINT,
})


def generate_token_id() -> int:
    """Random non-zero token id for mints without a caller-supplied id.

    No uniqueness check against chain state is made; callers that need a
    guaranteed-free id must supply one.
    """
    token_id = 0
    while token_id == 0:
        token_id = secrets.randbits(RANDOM_TOKEN_ID_BITS)
    return token_id


class EvmTokenStrategy(TokenStrategy):
    """Builds ERC-721/ERC-1155 contract calls for one EVM protocol."""

    requires_capability = True

    def __init__(self, protocol: Protocol):
        self.protocol = protocol
        self.network = EVM_NETWORKS[protocol]

    def supports(self, kind: OperationKind) -> bool:
        return kind in EVM_KINDS

    def validate(self, request: TokenOperationRequest) -> None:
        require(is_evm_address(request.sender), "Invalid sender address")
        require(is_evm_address(request.token), "Invalid token address")
        require(is_evm_address(request.destination), "Invalid destination address")
        require(request.destinations is None, "EVM operations take a single destination")

        if request.kind == OperationKind.TRANSFER or request.token_id is not None:
            parse_token_id(request.token_id)
        check_optional_amount(request.amount)

        fee_currency = request.options.get("fee_currency")
        if fee_currency is not None:
            require(is_evm_address(fee_currency), "Invalid feeCurrency")

    def validate_query(self, request: TokenOperationRequest) -> None:
        require(is_evm_address(request.token), "Invalid token address")
        if request.kind == OperationKind.BALANCE:
            require(is_evm_address(request.address), "Invalid address")
        if request.kind == OperationKind.METADATA:
            parse_token_id(request.token_id)
        elif request.token_id is not None:
            parse_token_id(request.token_id)

    def encode(
        self,
        request: TokenOperationRequest,
        capability: Optional[TokenCapability] = None,
        testnet: bool = False,
    ) -> UnsignedTransaction:
        capability = capability or TokenCapability.UNKNOWN

        if request.kind == OperationKind.TRANSFER:
            signature, params = self._transfer_call(request, capability)
        elif request.kind == OperationKind.MINT:
            signature, params = self._mint_call(request, capability)
        else:
            raise UnsupportedProtocol(
                f"{request.kind.value} is not an encodable operation on {self.protocol.value}"
            )

        method, _ = parse_signature(signature)
        contract = to_checksum_address(request.token)
        payload: dict[str, Any] = {
            "method": method,
            "signature": signature,
            "params": params,
            "data": encode_call(signature, params),
            "from": to_checksum_address(request.sender),
            "to": contract,
            "value": "0x0",
        }
        fee_currency = request.options.get("fee_currency")
        if fee_currency:
            payload["fee_currency"] = to_checksum_address(fee_currency)

        return UnsignedTransaction(
            protocol=self.protocol,
            target=contract,
            payload=payload,
            chain_id=self.network.get_chain_id(testnet),
            description=f"{method} on {self.network.name} contract {contract[:10]}... ({capability.value})",
        )

    def _transfer_call(
        self, request: TokenOperationRequest, capability: TokenCapability
    ) -> tuple[str, list]:
        sender = to_checksum_address(request.sender)
        destination = to_checksum_address(request.destination)
        token_id = parse_token_id(request.token_id)

        if capability == TokenCapability.NON_FUNGIBLE_UNIQUE:
            return ERC721_SAFE_TRANSFER, [sender, destination, token_id]

        amount = parse_uint256(request.amount, "Invalid amount")
        return ERC1155_SAFE_TRANSFER, [sender, destination, token_id, amount, b""]

    def _mint_call(
        self, request: TokenOperationRequest, capability: TokenCapability
    ) -> tuple[str, list]:
        destination = to_checksum_address(request.destination)

        if request.token_id is None:
            token_id = generate_token_id()
            logger.info(
                f"No token id supplied for mint on {self.protocol.value} "
                f"{request.token}, using random id {token_id}"
            )
        else:
            token_id = parse_token_id(request.token_id)

        if capability == TokenCapability.NON_FUNGIBLE_UNIQUE:
            require(is_non_empty_string(request.uri), "Invalid token uri")
            return ERC721_MINT, [destination, token_id, request.uri]

        amount = parse_uint256(request.amount, "Invalid amount")
        return ERC1155_MINT, [destination, token_id, amount, b""]
