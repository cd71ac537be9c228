"""Tests for the HTTP and JSON-RPC collaborators."""

import json

import httpx
import pytest

from conftest import CONTRACT
from polychain.abi import selector
from polychain.chains import Protocol
from polychain.errors import ChainQueryError, ProbeUnavailable, UnsupportedProtocol
from polychain.providers import DryRunSubmitter, HttpChainQueryClient, JsonRpcContractReader
from polychain.tokens import CapabilityProber, UnsignedTransaction
from polychain.tokens.evm import SUPPORTS_INTERFACE

TRUE_WORD = "0x" + "00" * 31 + "01"
FALSE_WORD = "0x" + "00" * 32


def rpc_transport(body=None, status_code=200, error=None):
    """MockTransport answering every eth_call with a fixed body."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        if error is not None:
            raise error
        return httpx.Response(status_code, json=body)

    return httpx.MockTransport(handler), seen


class TestHttpChainQueryClient:
    """Tests for the chain data API client."""

    @pytest.mark.asyncio
    async def test_query_sends_api_key_and_params(self, settings):
        """Test path, params and x-api-key header."""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["request"] = request
            return httpx.Response(200, json={"name": "Token"})

        client = HttpChainQueryClient(settings, transport=httpx.MockTransport(handler))
        result = await client.query(Protocol.ETHEREUM, f"/nft/{CONTRACT}/info", {"tokenId": "1"})

        request = captured["request"]
        assert result == {"name": "Token"}
        assert request.url.path == f"/nft/{CONTRACT}/info"
        assert request.url.host == "api.test.local"
        assert request.url.params["protocol"] == "ETHEREUM"
        assert request.url.params["tokenId"] == "1"
        assert request.headers["x-api-key"] == "test-api-key"

    @pytest.mark.asyncio
    async def test_repeated_params(self, settings):
        """Test list params are sent as repeated keys."""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["params"] = request.url.params
            return httpx.Response(200, json={})

        client = HttpChainQueryClient(settings, transport=httpx.MockTransport(handler))
        await client.query(
            Protocol.CELO, "/wallet/0xabc/info", {"tokenAddresses[]": ["0x1", "0x2"]}
        )

        assert captured["params"].get_list("tokenAddresses[]") == ["0x1", "0x2"]

    @pytest.mark.asyncio
    async def test_no_api_key_header_when_unset(self, settings):
        """Test the header is omitted without an API key."""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["headers"] = request.headers
            return httpx.Response(200, json={})

        settings.api_key = ""
        client = HttpChainQueryClient(settings, transport=httpx.MockTransport(handler))
        await client.query(Protocol.HATHOR, "/nft/x/info")

        assert "x-api-key" not in captured["headers"]

    @pytest.mark.asyncio
    async def test_error_status(self, settings):
        """Test API errors carry message and status code."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"message": "Token not found"})

        client = HttpChainQueryClient(settings, transport=httpx.MockTransport(handler))

        with pytest.raises(ChainQueryError) as exc_info:
            await client.query(Protocol.ETHEREUM, "/nft/x/info")

        assert exc_info.value.status_code == 404
        assert str(exc_info.value) == "Token not found"

    @pytest.mark.asyncio
    async def test_error_status_without_json(self, settings):
        """Test non-JSON error bodies."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="Bad gateway")

        client = HttpChainQueryClient(settings, transport=httpx.MockTransport(handler))

        with pytest.raises(ChainQueryError) as exc_info:
            await client.query(Protocol.ETHEREUM, "/nft/x/info")

        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_transport_error(self, settings):
        """Test connection failures become ChainQueryError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = HttpChainQueryClient(settings, transport=httpx.MockTransport(handler))

        with pytest.raises(ChainQueryError) as exc_info:
            await client.query(Protocol.ETHEREUM, "/nft/x/info")

        assert exc_info.value.status_code is None


class TestJsonRpcContractReader:
    """Tests for eth_call based contract reads."""

    @pytest.mark.asyncio
    async def test_true_result(self, settings):
        """Test a true bool result and the eth_call request shape."""
        transport, seen = rpc_transport({"jsonrpc": "2.0", "id": 1, "result": TRUE_WORD})
        reader = JsonRpcContractReader(settings, transport=transport)

        result = await reader.call(
            Protocol.ETHEREUM, CONTRACT, SUPPORTS_INTERFACE, [bytes.fromhex("80ac58cd")]
        )

        assert result is True
        call = seen[0]
        assert call["method"] == "eth_call"
        assert call["params"][0]["to"] == CONTRACT
        assert call["params"][0]["data"].startswith(selector(SUPPORTS_INTERFACE))
        assert call["params"][0]["data"].startswith("0x01ffc9a7")
        assert call["params"][1] == "latest"

    @pytest.mark.asyncio
    async def test_false_result(self, settings):
        """Test a false bool result."""
        transport, _ = rpc_transport({"jsonrpc": "2.0", "id": 1, "result": FALSE_WORD})
        reader = JsonRpcContractReader(settings, transport=transport)

        assert await reader.call(
            Protocol.BSC, CONTRACT, SUPPORTS_INTERFACE, [bytes.fromhex("80ac58cd")]
        ) is False

    @pytest.mark.asyncio
    async def test_empty_result(self, settings):
        """Test an empty return (no code or fallback) is False."""
        transport, _ = rpc_transport({"jsonrpc": "2.0", "id": 1, "result": "0x"})
        reader = JsonRpcContractReader(settings, transport=transport)

        assert await reader.call(
            Protocol.ETHEREUM, CONTRACT, SUPPORTS_INTERFACE, [bytes.fromhex("80ac58cd")]
        ) is False

    @pytest.mark.asyncio
    async def test_revert_is_false(self, settings):
        """Test a reverted call answers not supported."""
        transport, _ = rpc_transport({
            "jsonrpc": "2.0",
            "id": 1,
            "error": {"code": 3, "message": "execution reverted"},
        })
        reader = JsonRpcContractReader(settings, transport=transport)

        assert await reader.call(
            Protocol.ETHEREUM, CONTRACT, SUPPORTS_INTERFACE, [bytes.fromhex("80ac58cd")]
        ) is False

    @pytest.mark.asyncio
    async def test_other_rpc_error(self, settings):
        """Test non-revert JSON-RPC errors are failures."""
        transport, _ = rpc_transport({
            "jsonrpc": "2.0",
            "id": 1,
            "error": {"code": -32005, "message": "rate limit exceeded"},
        })
        reader = JsonRpcContractReader(settings, transport=transport)

        with pytest.raises(ProbeUnavailable):
            await reader.call(
                Protocol.ETHEREUM, CONTRACT, SUPPORTS_INTERFACE, [bytes.fromhex("80ac58cd")]
            )

    @pytest.mark.asyncio
    async def test_http_error(self, settings):
        """Test HTTP errors are failures."""
        transport, _ = rpc_transport({}, status_code=503)
        reader = JsonRpcContractReader(settings, transport=transport)

        with pytest.raises(ProbeUnavailable):
            await reader.call(
                Protocol.ETHEREUM, CONTRACT, SUPPORTS_INTERFACE, [bytes.fromhex("80ac58cd")]
            )

    @pytest.mark.asyncio
    async def test_connection_error(self, settings):
        """Test connection failures are failures."""
        transport, _ = rpc_transport(error=httpx.ConnectError("connection refused"))
        reader = JsonRpcContractReader(settings, transport=transport)

        with pytest.raises(ProbeUnavailable):
            await reader.call(
                Protocol.ETHEREUM, CONTRACT, SUPPORTS_INTERFACE, [bytes.fromhex("80ac58cd")]
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [b"null", b"[1]", b'"x"', b"not json"])
    async def test_malformed_body(self, settings, content):
        """Test bodies that are not a JSON-RPC object are failures."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, content=content, headers={"content-type": "application/json"}
            )

        reader = JsonRpcContractReader(settings, transport=httpx.MockTransport(handler))

        with pytest.raises(ProbeUnavailable):
            await reader.call(
                Protocol.ETHEREUM, CONTRACT, SUPPORTS_INTERFACE, [bytes.fromhex("80ac58cd")]
            )

    @pytest.mark.asyncio
    async def test_non_string_result(self, settings):
        """Test a result that is not hex text is a failure."""
        transport, _ = rpc_transport({"jsonrpc": "2.0", "id": 1, "result": [1]})
        reader = JsonRpcContractReader(settings, transport=transport)

        with pytest.raises(ProbeUnavailable):
            await reader.call(
                Protocol.ETHEREUM, CONTRACT, SUPPORTS_INTERFACE, [bytes.fromhex("80ac58cd")]
            )

    @pytest.mark.asyncio
    async def test_malformed_body_through_prober(self, settings):
        """Test the prober surfaces a malformed node answer as ProbeUnavailable."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"null")

        reader = JsonRpcContractReader(settings, transport=httpx.MockTransport(handler))
        prober = CapabilityProber(reader, settings)

        with pytest.raises(ProbeUnavailable):
            await prober.classify(Protocol.ETHEREUM, CONTRACT)

    @pytest.mark.asyncio
    async def test_non_evm_protocol(self, settings):
        """Test protocols without an RPC endpoint."""
        reader = JsonRpcContractReader(settings)

        with pytest.raises(UnsupportedProtocol):
            await reader.call(
                Protocol.SOLANA, CONTRACT, SUPPORTS_INTERFACE, [bytes.fromhex("80ac58cd")]
            )


class TestDryRunSubmitter:
    """Tests for the simulated submitter."""

    @pytest.mark.asyncio
    async def test_submit(self):
        """Test simulated receipts and recording."""
        submitter = DryRunSubmitter()
        tx = UnsignedTransaction(protocol=Protocol.ETHEREUM, target=CONTRACT, payload={})

        receipt = await submitter.submit(tx)

        assert receipt.simulated is True
        assert receipt.tx_id.startswith("sim_tx_")
        assert receipt.protocol == Protocol.ETHEREUM
        assert submitter.submitted == [tx]
        assert submitter.name == "dryrun"

    @pytest.mark.asyncio
    async def test_unique_ids(self):
        """Test every submission gets a new id."""
        submitter = DryRunSubmitter()
        tx = UnsignedTransaction(protocol=Protocol.HATHOR, payload={})

        first = await submitter.submit(tx)
        second = await submitter.submit(tx)

        assert first.tx_id != second.tx_id
