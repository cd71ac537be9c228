"""External collaborator interfaces.

The core never signs, broadcasts or talks HTTP itself; it depends on these
three interfaces and receives concrete implementations from the caller.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from polychain.chains import Protocol
from polychain.tokens.base import TransactionReceipt, UnsignedTransaction


class TransactionSubmitter(ABC):
    """Signs and broadcasts unsigned transactions."""

    @abstractmethod
    async def submit(self, tx: UnsignedTransaction) -> TransactionReceipt:
        """Submit a transaction.

        Args:
            tx: Unsigned transaction produced by the encoder

        Returns:
            TransactionReceipt with the transaction id
        """
        raise NotImplementedError()

    @property
    @abstractmethod
    def name(self) -> str:
        """Submitter name."""
        raise NotImplementedError()


class ChainQueryClient(ABC):
    """Read-only chain data API."""

    @abstractmethod
    async def query(
        self,
        protocol: Protocol,
        path: str,
        params: Optional[dict[str, Any]] = None,
    ) -> dict:
        """Fetch a read-only resource.

        Raises:
            ChainQueryError: If the API could not answer
        """
        raise NotImplementedError()


class ContractReader(ABC):
    """Read-only contract calls (eth_call)."""

    @abstractmethod
    async def call(
        self,
        protocol: Protocol,
        contract: str,
        signature: str,
        params: Sequence[Any],
        testnet: bool = False,
    ) -> bool:
        """Call a view method returning bool.

        A reverted call answers False.

        Raises:
            ProbeUnavailable: If the node could not be reached
        """
        raise NotImplementedError()
