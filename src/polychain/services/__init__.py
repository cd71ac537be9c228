"""Application services."""

from polychain.services.wallet_service import WalletService

__all__ = ["WalletService"]
