"""Tests for configuration, protocol metadata and the scheme registry."""

import logging

import pytest

from polychain.chains import EVM_PROTOCOLS, Protocol, get_evm_network, to_protocol
from polychain.config import Settings, configure_logging, get_settings
from polychain.errors import UnsupportedProtocol
from polychain.hdwallet import Curve, describe, get_supported_protocols
from polychain.hdwallet.registry import get_scheme_info
from polychain.tokens import get_token_protocols, get_token_strategy


class TestConfig:
    """Tests for configuration."""

    def test_get_settings(self):
        """Test settings loading from the environment."""
        get_settings.cache_clear()
        settings = get_settings()

        assert settings.environment == "test"
        assert settings.api_key == "test-api-key"
        assert settings.debug is True
        assert get_settings() is settings

    def test_settings_safe_dict(self):
        """Test that the safe dict redacts secrets."""
        settings = Settings(api_key="super-secret")
        safe = settings.get_safe_dict()

        assert safe["api_key"] == "***"
        assert "super-secret" not in str(safe)
        assert set(safe["rpc"]) == {protocol.value for protocol in EVM_PROTOCOLS}

    @pytest.mark.parametrize(
        "environment,expected",
        [("development", True), ("test", False), ("production", False)],
    )
    def test_default_testnet(self, environment, expected):
        """Test testnet is only the default in development."""
        assert Settings(environment=environment).default_testnet is expected

    def test_is_production(self):
        """Test production detection."""
        assert Settings(environment="Production").is_production is True
        assert Settings(environment="development").is_production is False

    def test_rpc_urls(self):
        """Test RPC URL selection per protocol and network."""
        settings = Settings(eth_rpc_url="https://main", eth_testnet_rpc_url="https://test")

        assert settings.get_rpc_url(Protocol.ETHEREUM) == "https://main"
        assert settings.get_rpc_url(Protocol.ETHEREUM, testnet=True) == "https://test"
        assert settings.get_rpc_url(Protocol.HATHOR) == ""

    def test_configure_logging(self, monkeypatch):
        """Test the log level follows the debug flag."""
        seen = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: seen.update(kwargs))

        configure_logging(Settings(debug=True))
        assert seen["level"] == logging.DEBUG

        configure_logging(Settings(debug=False))
        assert seen["level"] == logging.INFO


class TestProtocols:
    """Tests for protocol metadata."""

    def test_to_protocol(self):
        """Test protocol name coercion."""
        assert to_protocol("ethereum") == Protocol.ETHEREUM
        assert to_protocol(Protocol.SOLANA) == Protocol.SOLANA

    @pytest.mark.parametrize("value", ["DOGECOIN", "", None])
    def test_unknown_protocol(self, value):
        """Test unknown names are rejected."""
        with pytest.raises(UnsupportedProtocol):
            to_protocol(value)

    def test_evm_family(self):
        """Test EVM family membership."""
        assert Protocol.CELO.is_evm()
        assert not Protocol.HATHOR.is_evm()
        assert get_evm_network(Protocol.SOLANA) is None

    @pytest.mark.parametrize(
        "protocol,mainnet,testnet",
        [
            (Protocol.ETHEREUM, 1, 11155111),
            (Protocol.BSC, 56, 97),
            (Protocol.CELO, 42220, 44787),
            (Protocol.POLYGON, 137, 80002),
            (Protocol.AVAXCCHAIN, 43114, 43113),
        ],
    )
    def test_chain_ids(self, protocol, mainnet, testnet):
        """Test EVM chain IDs."""
        network = get_evm_network(protocol)
        assert network.get_chain_id(testnet=False) == mainnet
        assert network.get_chain_id(testnet=True) == testnet


class TestRegistry:
    """Tests for the scheme and strategy registries."""

    def test_every_protocol_has_a_scheme(self):
        """Test all protocols are registered for derivation."""
        assert set(get_supported_protocols()) == set(Protocol)

    @pytest.mark.parametrize(
        "protocol,curve",
        [
            (Protocol.BITCOIN, Curve.SECP256K1),
            (Protocol.HATHOR, Curve.SECP256K1),
            (Protocol.ETHEREUM, Curve.SECP256K1),
            (Protocol.RIPPLE, Curve.SECP256K1),
            (Protocol.STELLAR, Curve.ED25519),
            (Protocol.SOLANA, Curve.ED25519),
        ],
    )
    def test_curves(self, protocol, curve):
        """Test curve assignment."""
        assert describe(protocol).curve == curve

    def test_describe_unknown(self):
        """Test unknown protocols are rejected."""
        with pytest.raises(UnsupportedProtocol):
            describe("LITECOIN")

    def test_scheme_info(self):
        """Test scheme summaries."""
        info = get_scheme_info(Protocol.BITCOIN)

        assert info["purpose"] == 84
        assert info["coin_type"] == 0
        assert info["testnet_coin_type"] == 1
        assert info["supports_public_derivation"] is True
        assert get_scheme_info(Protocol.CELO)["coin_type"] == 52752
        assert get_scheme_info(Protocol.STELLAR)["supports_public_derivation"] is False

    def test_token_protocols(self):
        """Test token support covers Hathor, Solana and the EVM family."""
        assert set(get_token_protocols()) == {Protocol.HATHOR, Protocol.SOLANA} | EVM_PROTOCOLS

    @pytest.mark.parametrize("protocol", [Protocol.BITCOIN, Protocol.STELLAR, Protocol.RIPPLE])
    def test_no_token_strategy(self, protocol):
        """Test protocols without token support."""
        with pytest.raises(UnsupportedProtocol):
            get_token_strategy(protocol)
