"""Operation dispatcher.

Single entry point for token operations. Each call is driven through a
per-call state machine:

    RECEIVED -> VALIDATED -> CAPABILITY_RESOLVED -> ENCODED -> DELEGATED -> DONE

Any error, cancellation included, moves the call to FAILED and propagates
unchanged. Read-only operations go from VALIDATED straight to the query
collaborator.

Nothing is kept between calls; the capability cache lives in the call
context and is discarded with it.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from polychain.chains import Protocol, to_protocol
from polychain.config import Settings, get_settings
from polychain.errors import NotImplementedOperation
from polychain.providers.api import HttpChainQueryClient
from polychain.providers.base import ChainQueryClient, ContractReader, TransactionSubmitter
from polychain.providers.dryrun import DryRunSubmitter
from polychain.providers.rpc import JsonRpcContractReader
from polychain.tokens.base import (
    OperationKind,
    TokenCapability,
    TokenOperationRequest,
    TokenStrategy,
    TransactionReceipt,
    UnsignedTransaction,
)
from polychain.tokens.capability import CapabilityCache, CapabilityProber
from polychain.tokens.encoder import TransactionEncoder
from polychain.tokens.queries import build_token_query

logger = logging.getLogger(__name__)


class DispatchState(str, Enum):
    """Dispatcher call states."""

    RECEIVED = "received"
    VALIDATED = "validated"
    CAPABILITY_RESOLVED = "capability_resolved"
    ENCODED = "encoded"
    DELEGATED = "delegated"
    DONE = "done"
    FAILED = "failed"


@dataclass
class DispatchContext:
    """State of one dispatcher call."""

    request: TokenOperationRequest
    state: DispatchState = DispatchState.RECEIVED
    history: list[DispatchState] = field(default_factory=list)
    testnet: bool = False
    strategy: Optional[TokenStrategy] = None
    capability: Optional[TokenCapability] = None
    transaction: Optional[UnsignedTransaction] = None
    result: Any = None
    error: Optional[Exception] = None
    cache: CapabilityCache = field(default_factory=dict)

    def advance(self, state: DispatchState) -> None:
        self.history.append(self.state)
        self.state = state


class OperationDispatcher:
    """Validates, classifies, encodes and delegates token operations.

    Usage:
        dispatcher = OperationDispatcher(settings, submitter=my_submitter)
        receipt = await dispatcher.transfer(Protocol.ETHEREUM, token=..., ...)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        contract_reader: Optional[ContractReader] = None,
        query_client: Optional[ChainQueryClient] = None,
        submitter: Optional[TransactionSubmitter] = None,
    ):
        self.settings = settings or get_settings()
        self.encoder = TransactionEncoder(self.settings)
        self.prober = CapabilityProber(
            contract_reader or JsonRpcContractReader(self.settings), self.settings
        )
        self.query_client = query_client or HttpChainQueryClient(self.settings)
        self.submitter = submitter or DryRunSubmitter()

    async def dispatch(self, request: TokenOperationRequest) -> Union[TransactionReceipt, dict]:
        """Run one operation to completion.

        Returns:
            TransactionReceipt for TRANSFER/MINT, the API response for
            INFO/BALANCE/METADATA

        Raises:
            NotImplementedOperation: For BURN
            UnsupportedProtocol, ValidationFailed, ProbeUnavailable,
            ChainQueryError: From the stage that failed
        """
        context = await self.run(DispatchContext(request=request))
        return context.result

    async def prepare(self, request: TokenOperationRequest) -> UnsignedTransaction:
        """Validate, classify and encode without submitting."""
        context = await self.run(DispatchContext(request=request), submit=False)
        return context.transaction

    async def run(self, context: DispatchContext, submit: bool = True) -> DispatchContext:
        """Drive a call context through the state machine."""
        request = context.request
        try:
            if request.kind == OperationKind.BURN:
                raise NotImplementedOperation(
                    f"burn is not implemented for {request.protocol.value}"
                )

            context.strategy = self.encoder.validate(request)
            context.testnet = self.encoder.resolve_testnet(request)
            context.advance(DispatchState.VALIDATED)

            if request.kind.is_read_only:
                path, params = build_token_query(request, context.strategy)
                context.result = await self.query_client.query(request.protocol, path, params)
                context.advance(DispatchState.DONE)
                return context

            if context.strategy.requires_capability:
                context.capability = await self.prober.classify(
                    request.protocol, request.token, cache=context.cache, testnet=context.testnet
                )
            context.advance(DispatchState.CAPABILITY_RESOLVED)

            context.transaction = self.encoder.encode(request, context.capability)
            context.advance(DispatchState.ENCODED)
            if not submit:
                return context

            context.advance(DispatchState.DELEGATED)
            context.result = await self.submitter.submit(context.transaction)
            context.advance(DispatchState.DONE)
            logger.info(
                f"{request.kind.value} on {request.protocol.value} submitted: {context.result.tx_id}"
            )
            return context

        except (Exception, asyncio.CancelledError) as e:
            logger.warning(
                f"{request.kind.value} on {request.protocol.value} failed "
                f"in state {context.state.value}: {e}"
            )
            context.error = e
            context.advance(DispatchState.FAILED)
            raise

    # ======================
    # Convenience entry points
    # ======================

    async def transfer(
        self,
        protocol: Union[Protocol, str],
        token: str,
        sender: Optional[str] = None,
        destination: Optional[str] = None,
        token_id: Any = None,
        amount: Any = None,
        destinations: Optional[list] = None,
        **extra: Any,
    ) -> TransactionReceipt:
        """Transfer a token."""
        return await self.dispatch(TokenOperationRequest(
            kind=OperationKind.TRANSFER,
            protocol=to_protocol(protocol),
            token=token,
            sender=sender,
            destination=destination,
            token_id=token_id,
            amount=amount,
            destinations=destinations,
            **extra,
        ))

    async def mint(
        self,
        protocol: Union[Protocol, str],
        token: str,
        sender: Optional[str] = None,
        destination: Optional[str] = None,
        token_id: Any = None,
        amount: Any = None,
        uri: Optional[str] = None,
        **extra: Any,
    ) -> TransactionReceipt:
        """Mint a token; a random id is drawn when token_id is omitted."""
        return await self.dispatch(TokenOperationRequest(
            kind=OperationKind.MINT,
            protocol=to_protocol(protocol),
            token=token,
            sender=sender,
            destination=destination,
            token_id=token_id,
            amount=amount,
            uri=uri,
            **extra,
        ))

    async def burn(self, protocol: Union[Protocol, str], token: str, **extra: Any) -> TransactionReceipt:
        """Burn is declared but not implemented on any protocol."""
        return await self.dispatch(TokenOperationRequest(
            kind=OperationKind.BURN,
            protocol=to_protocol(protocol),
            token=token,
            **extra,
        ))

    async def get_info(self, protocol: Union[Protocol, str], token: str, **extra: Any) -> dict:
        """Get token info."""
        return await self.dispatch(TokenOperationRequest(
            kind=OperationKind.INFO,
            protocol=to_protocol(protocol),
            token=token,
            **extra,
        ))

    async def get_balance(
        self,
        protocol: Union[Protocol, str],
        token: str,
        address: str,
        token_id: Any = None,
        **extra: Any,
    ) -> dict:
        """Get the token balance of an address."""
        return await self.dispatch(TokenOperationRequest(
            kind=OperationKind.BALANCE,
            protocol=to_protocol(protocol),
            token=token,
            address=address,
            token_id=token_id,
            **extra,
        ))

    async def get_metadata(
        self,
        protocol: Union[Protocol, str],
        token: str,
        token_id: Any = None,
        **extra: Any,
    ) -> dict:
        """Get token metadata."""
        return await self.dispatch(TokenOperationRequest(
            kind=OperationKind.METADATA,
            protocol=to_protocol(protocol),
            token=token,
            token_id=token_id,
            **extra,
        ))
