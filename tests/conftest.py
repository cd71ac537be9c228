"""Pytest configuration and fixtures."""

import asyncio
import os
from typing import Any, Optional, Sequence

import pytest

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["API_URL"] = "https://api.test.local"
os.environ["API_KEY"] = "test-api-key"
os.environ["DEBUG"] = "true"

from polychain.chains import Protocol
from polychain.config import Settings
from polychain.errors import ProbeUnavailable
from polychain.providers.base import ChainQueryClient, ContractReader
from polychain.providers.dryrun import DryRunSubmitter

# BIP39 test vector mnemonic
TEST_MNEMONIC = (
    "abandon abandon abandon abandon abandon abandon "
    "abandon abandon abandon abandon abandon about"
)

# Checksummed EVM addresses used across tests
SENDER = "0x9858EfFD232B4033E47d90003D41EC34EcaEda94"
RECIPIENT = "0x1111111111111111111111111111111111111111"
CONTRACT = "0x2222222222222222222222222222222222222222"


class FakeContractReader(ContractReader):
    """Answers supportsInterface from a fixed set of interface ids."""

    def __init__(self, supported: Sequence[str] = (), error: Optional[Exception] = None, delay: float = 0.0):
        self.supported = {interface_id.lower() for interface_id in supported}
        self.error = error
        self.delay = delay
        self.calls: list[tuple[Protocol, str, str]] = []

    async def call(
        self,
        protocol: Protocol,
        contract: str,
        signature: str,
        params: Sequence[Any],
        testnet: bool = False,
    ) -> bool:
        if self.delay:
            await asyncio.sleep(self.delay)
        interface_id = "0x" + params[0].hex()
        self.calls.append((protocol, contract, interface_id))
        if self.error is not None:
            raise self.error
        return interface_id in self.supported


class FakeQueryClient(ChainQueryClient):
    """Records queries and returns a canned response."""

    def __init__(self, response: Optional[dict] = None):
        self.response = response if response is not None else {"ok": True}
        self.queries: list[tuple[Protocol, str, dict]] = []

    async def query(self, protocol: Protocol, path: str, params: Optional[dict] = None) -> dict:
        self.queries.append((protocol, path, dict(params or {})))
        return self.response


@pytest.fixture
def settings() -> Settings:
    """Settings for tests (mainnet by default, short probe timeout)."""
    return Settings(
        environment="test",
        api_url="https://api.test.local",
        api_key="test-api-key",
        probe_timeout=0.5,
    )


@pytest.fixture
def submitter() -> DryRunSubmitter:
    return DryRunSubmitter()


@pytest.fixture
def query_client() -> FakeQueryClient:
    return FakeQueryClient()


@pytest.fixture
def unavailable_reader() -> FakeContractReader:
    return FakeContractReader(error=ProbeUnavailable("node down"))
