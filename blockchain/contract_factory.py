"""
Contract Factory
Creates contract instances from compiled artifacts
"""

from typing import Optional
from loguru import logger

from .artifacts import ContractArtifact
from .transaction_handle import TransactionHandle


class DeployedContract:
    """
    Contract instance created by ContractFactory.deploy()

    The address and callable interface only exist once deployed() resolves.
    """

    def __init__(self, factory: "ContractFactory", deployment_transaction: TransactionHandle):
        self.factory = factory
        self.deployment_transaction = deployment_transaction
        self.address: Optional[str] = None
        self._contract = None

    @property
    def is_deployed(self) -> bool:
        return self._contract is not None

    async def deployed(self) -> "DeployedContract":
        """Wait for the deployment transaction to be mined"""
        receipt = await self.deployment_transaction.wait(1)

        self.address = receipt['contractAddress']
        self._contract = self.factory.w3.eth.contract(
            address=self.address,
            abi=self.factory.artifact.abi
        )

        logger.debug(f"{self.factory.artifact.contract_name} mined at {self.address}")
        return self

    def call(self, function_name: str, *args):
        """Read-only call"""
        return self._function(function_name, *args).call()

    async def transact(self, function_name: str, *args) -> TransactionHandle:
        """State-mutating call, returns the pending transaction"""
        return await self.factory.tx_builder.send(self._function(function_name, *args))

    def _function(self, function_name: str, *args):
        if not self.is_deployed:
            raise RuntimeError(
                f"{self.factory.artifact.contract_name} is not deployed yet, await deployed() first"
            )
        return getattr(self._contract.functions, function_name)(*args)


class ContractFactory:
    """
    Constructor-like object bound to a contract's ABI and bytecode
    """

    def __init__(self, artifact: ContractArtifact, tx_builder):
        """
        Initialize Contract Factory

        Args:
            artifact: Compiled contract artifact
            tx_builder: TransactionBuilder used to send the deployment
        """
        self.artifact = artifact
        self.tx_builder = tx_builder
        self.w3 = tx_builder.w3

    async def deploy(self, *constructor_args) -> DeployedContract:
        """
        Submit the deployment transaction

        Args:
            constructor_args: Constructor arguments, if any

        Returns:
            DeployedContract (not yet mined)
        """
        contract = self.w3.eth.contract(abi=self.artifact.abi, bytecode=self.artifact.bytecode)

        deployment_transaction = await self.tx_builder.send(contract.constructor(*constructor_args))

        return DeployedContract(self, deployment_transaction)
