"""
Blockchain Interaction Package
Handles artifacts, contract deployment, transaction building and confirmations
"""

from .artifacts import ContractArtifact, load_artifact, load_build_info
from .contract_factory import ContractFactory, DeployedContract
from .simple_storage import SimpleStorage
from .transaction_builder import TransactionBuilder
from .transaction_handle import TransactionHandle, TransactionRevertedError

__all__ = [
    'ContractArtifact',
    'load_artifact',
    'load_build_info',
    'ContractFactory',
    'DeployedContract',
    'SimpleStorage',
    'TransactionBuilder',
    'TransactionHandle',
    'TransactionRevertedError'
]
