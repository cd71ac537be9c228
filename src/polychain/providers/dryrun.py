"""Dry-run submitter for testing (no signing, no broadcast)."""

import logging
import secrets

from polychain.providers.base import TransactionSubmitter
from polychain.tokens.base import TransactionReceipt, UnsignedTransaction

logger = logging.getLogger(__name__)


class DryRunSubmitter(TransactionSubmitter):
    """Simulated submitter that records transactions and returns fake ids."""

    def __init__(self):
        self.submitted: list[UnsignedTransaction] = []

    @property
    def name(self) -> str:
        return "dryrun"

    async def submit(self, tx: UnsignedTransaction) -> TransactionReceipt:
        """Record the transaction and return a simulated receipt."""
        self.submitted.append(tx)
        tx_id = f"sim_tx_{secrets.token_hex(16)}"
        logger.info(f"[DRY RUN] {tx.protocol.value} transaction {tx_id}: {tx.description}")
        return TransactionReceipt(protocol=tx.protocol, tx_id=tx_id, simulated=True)
