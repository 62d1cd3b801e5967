"""
SimpleStorage contract bindings
"""

from .contract_factory import DeployedContract
from .transaction_handle import TransactionHandle

CONTRACT_NAME = "SimpleStorage"


class SimpleStorage:
    """Typed access to the retrieve/store pair of a deployed SimpleStorage"""

    def __init__(self, contract: DeployedContract):
        self.contract = contract

    @property
    def address(self) -> str:
        return self.contract.address

    def retrieve(self) -> int:
        return self.contract.call("retrieve")

    async def store(self, value: int) -> TransactionHandle:
        return await self.contract.transact("store", value)
