"""External collaborators: submission, read-only queries and contract reads."""

from polychain.providers.api import HttpChainQueryClient
from polychain.providers.base import ChainQueryClient, ContractReader, TransactionSubmitter
from polychain.providers.dryrun import DryRunSubmitter
from polychain.providers.rpc import JsonRpcContractReader

__all__ = [
    "ChainQueryClient",
    "ContractReader",
    "TransactionSubmitter",
    "DryRunSubmitter",
    "HttpChainQueryClient",
    "JsonRpcContractReader",
]
