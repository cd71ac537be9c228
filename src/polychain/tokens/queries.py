"""Read-only query paths for the chain data API."""

from typing import Any, Optional, Sequence

from polychain.chains import Protocol
from polychain.tokens.base import OperationKind, TokenOperationRequest, TokenStrategy


def build_token_query(
    request: TokenOperationRequest, strategy: TokenStrategy
) -> tuple[str, dict[str, Any]]:
    """Build (path, params) for an INFO, BALANCE or METADATA request.

    The token reference is the token uid on Hathor and the contract or
    mint address elsewhere. Hathor tokens have no token id.
    """
    ref = strategy.token_reference(request)
    params: dict[str, Any] = {"protocol": request.protocol.value}
    send_token_id = request.token_id is not None and request.protocol != Protocol.HATHOR

    if request.kind == OperationKind.INFO:
        path = f"/nft/{ref}/info"
        send_token_id = False
    elif request.kind == OperationKind.BALANCE:
        path = f"/nft/{ref}/balance/{request.address}"
    elif request.kind == OperationKind.METADATA:
        path = f"/nft/{ref}/metadata"
    else:
        raise ValueError(f"{request.kind.value} is not a read-only operation")

    if send_token_id:
        params["tokenId"] = str(request.token_id)
    return path, params


def build_wallet_query(
    protocol: Protocol,
    address: str,
    token_addresses: Optional[Sequence[str]] = None,
) -> tuple[str, dict[str, Any]]:
    """Build (path, params) for a wallet info request."""
    params: dict[str, Any] = {"protocol": protocol.value}
    if token_addresses:
        params["tokenAddresses[]"] = list(token_addresses)
    return f"/wallet/{address}/info", params
