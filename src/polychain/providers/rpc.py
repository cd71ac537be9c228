"""JSON-RPC contract reader (eth_call over httpx)."""

import logging
from typing import Any, Optional, Sequence

import httpx
from eth_abi.exceptions import DecodingError

from polychain.abi import decode_bool, encode_call
from polychain.chains import Protocol
from polychain.config import Settings, get_settings
from polychain.errors import ProbeUnavailable, UnsupportedProtocol
from polychain.providers.base import ContractReader

logger = logging.getLogger(__name__)


class JsonRpcContractReader(ContractReader):
    """Reads bool view methods through the protocol's configured RPC URL."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self.transport = transport

    async def call(
        self,
        protocol: Protocol,
        contract: str,
        signature: str,
        params: Sequence[Any],
        testnet: bool = False,
    ) -> bool:
        rpc_url = self.settings.get_rpc_url(protocol, testnet)
        if not rpc_url:
            raise UnsupportedProtocol(f"No RPC endpoint configured for {protocol.value}")

        payload = {
            "jsonrpc": "2.0",
            "method": "eth_call",
            "params": [{"to": contract, "data": encode_call(signature, params)}, "latest"],
            "id": 1,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.request_timeout,
                transport=self.transport,
            ) as client:
                response = await client.post(rpc_url, json=payload)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPError as e:
            logger.error(f"eth_call {signature} on {contract} ({protocol.value}) failed: {e}")
            raise ProbeUnavailable(f"RPC node unavailable for {protocol.value}: {e}") from e
        except ValueError as e:
            raise ProbeUnavailable(f"Invalid JSON-RPC response from {protocol.value} node") from e

        if not isinstance(body, dict):
            raise ProbeUnavailable(f"Invalid JSON-RPC response from {protocol.value} node")

        if "error" in body:
            error = body["error"]
            message = error.get("message", "") if isinstance(error, dict) else str(error)
            # Contracts without the method revert
            if "revert" in message.lower():
                logger.debug(f"eth_call {signature} on {contract} reverted: {message}")
                return False
            raise ProbeUnavailable(f"JSON-RPC error from {protocol.value} node: {message}")

        result = body.get("result")
        if not result or result == "0x":
            return False
        if not isinstance(result, str):
            raise ProbeUnavailable(f"Invalid eth_call result from {protocol.value} node")

        try:
            return decode_bool(result)
        except (DecodingError, ValueError):
            logger.debug(f"eth_call {signature} on {contract} returned non-bool data: {result}")
            return False
