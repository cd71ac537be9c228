"""Application configuration using pydantic-settings.

Settings are loaded from environment variables (or a .env file) and passed
explicitly into services; get_settings() only supplies the default instance.
"""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from polychain.chains import Protocol


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug logging")

    # ======================
    # Chain data API (read-only queries)
    # ======================
    api_url: str = Field(
        default="http://localhost:8080", description="Base URL of the chain data API"
    )
    api_key: str = Field(default="", description="API key passed as x-api-key header")
    request_timeout: float = Field(default=30.0, description="HTTP timeout in seconds")

    # ======================
    # Capability probing
    # ======================
    probe_timeout: float = Field(
        default=15.0, description="Seconds allowed for one supportsInterface probe"
    )

    # ======================
    # EVM RPC Endpoints
    # ======================
    eth_rpc_url: str = Field(default="https://eth.llamarpc.com", description="Ethereum RPC URL")
    eth_testnet_rpc_url: str = Field(default="https://rpc.sepolia.org", description="Sepolia RPC URL")
    bsc_rpc_url: str = Field(default="https://bsc-dataseed.binance.org", description="BSC RPC URL")
    bsc_testnet_rpc_url: str = Field(
        default="https://data-seed-prebsc-1-s1.binance.org:8545", description="BSC testnet RPC URL"
    )
    celo_rpc_url: str = Field(default="https://forno.celo.org", description="Celo RPC URL")
    celo_testnet_rpc_url: str = Field(
        default="https://alfajores-forno.celo-testnet.org", description="Alfajores RPC URL"
    )
    polygon_rpc_url: str = Field(default="https://polygon-rpc.com", description="Polygon RPC URL")
    polygon_testnet_rpc_url: str = Field(
        default="https://rpc-amoy.polygon.technology", description="Polygon Amoy RPC URL"
    )
    avax_rpc_url: str = Field(
        default="https://api.avax.network/ext/bc/C/rpc", description="Avalanche RPC URL"
    )
    avax_testnet_rpc_url: str = Field(
        default="https://api.avax-test.network/ext/bc/C/rpc", description="Avalanche Fuji RPC URL"
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def default_testnet(self) -> bool:
        """Testnet is the default network in development."""
        return self.environment.lower() == "development"

    def get_rpc_url(self, protocol: Protocol, testnet: bool = False) -> str:
        """Get RPC URL for an EVM protocol (empty string if none)."""
        rpc_map = {
            Protocol.ETHEREUM: (self.eth_rpc_url, self.eth_testnet_rpc_url),
            Protocol.BSC: (self.bsc_rpc_url, self.bsc_testnet_rpc_url),
            Protocol.CELO: (self.celo_rpc_url, self.celo_testnet_rpc_url),
            Protocol.POLYGON: (self.polygon_rpc_url, self.polygon_testnet_rpc_url),
            Protocol.AVAXCCHAIN: (self.avax_rpc_url, self.avax_testnet_rpc_url),
        }
        urls = rpc_map.get(protocol)
        if urls is None:
            return ""
        return urls[1] if testnet else urls[0]

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "default_testnet": self.default_testnet,
            "api_url": self.api_url,
            "api_key": "***" if self.api_key else "(not set)",
            "request_timeout": self.request_timeout,
            "probe_timeout": self.probe_timeout,
            "rpc": {
                protocol.value: {
                    "mainnet": self.get_rpc_url(protocol, testnet=False),
                    "testnet": self.get_rpc_url(protocol, testnet=True),
                }
                for protocol in (
                    Protocol.ETHEREUM,
                    Protocol.BSC,
                    Protocol.CELO,
                    Protocol.POLYGON,
                    Protocol.AVAXCCHAIN,
                )
            },
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Settings) -> None:
    """Configure root logging for scripts and embedding applications."""
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
