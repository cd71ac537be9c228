"""Transaction encoder.

Pure front end over the protocol strategies: validate, then encode with an
already-resolved capability. No network access happens here; EVM callers
classify the contract first (see capability.py) and pass the result in.
"""

import logging
from typing import Optional

from polychain.config import Settings, get_settings
from polychain.errors import UnsupportedProtocol
from polychain.tokens.base import (
    TokenCapability,
    TokenOperationRequest,
    TokenStrategy,
    UnsignedTransaction,
)
from polychain.tokens.factory import get_token_strategy

logger = logging.getLogger(__name__)


class TransactionEncoder:
    """Validates token requests and builds unsigned transactions."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def resolve_testnet(self, request: TokenOperationRequest) -> bool:
        if request.testnet is None:
            return self.settings.default_testnet
        return request.testnet

    def strategy_for(self, request: TokenOperationRequest) -> TokenStrategy:
        """Get the strategy for a request, checking the kind is implemented.

        Raises:
            UnsupportedProtocol: If (kind, protocol) has no implementation
        """
        strategy = get_token_strategy(request.protocol)
        if not strategy.supports(request.kind):
            raise UnsupportedProtocol(
                f"{request.kind.value} is not supported on {request.protocol.value}"
            )
        return strategy

    def validate(self, request: TokenOperationRequest) -> TokenStrategy:
        """Validate a request and return the strategy that will encode it.

        Raises:
            UnsupportedProtocol: If (kind, protocol) has no implementation
            ValidationFailed: On the first violated field rule
        """
        strategy = self.strategy_for(request)
        if request.kind.is_read_only:
            strategy.validate_query(request)
        else:
            strategy.validate(request)
        return strategy

    def encode(
        self,
        request: TokenOperationRequest,
        capability: Optional[TokenCapability] = None,
    ) -> UnsignedTransaction:
        """Validate and encode a transfer or mint.

        Args:
            request: Token operation (TRANSFER or MINT)
            capability: Probed capability for EVM contracts (None = UNKNOWN)

        Returns:
            UnsignedTransaction ready for the submission collaborator
        """
        if request.kind.is_read_only:
            raise UnsupportedProtocol(f"{request.kind.value} does not produce a transaction")

        strategy = self.validate(request)
        testnet = self.resolve_testnet(request)
        tx = strategy.encode(request, capability, testnet)

        logger.debug(
            f"Encoded {request.kind.value} on {request.protocol.value} "
            f"(capability={capability.value if capability else None}, testnet={testnet})"
        )
        return tx
