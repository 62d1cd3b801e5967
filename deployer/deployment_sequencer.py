"""
Deployment Sequencer
Deploys SimpleStorage, verifies it on Sepolia and exercises retrieve/store
"""

from loguru import logger

from blockchain.artifacts import load_artifact
from blockchain.contract_factory import ContractFactory
from blockchain.simple_storage import CONTRACT_NAME, SimpleStorage
from verification.etherscan import VerificationStatus

from .config import DeploymentConfig

SEPOLIA_CHAIN_ID = 11155111
VERIFICATION_CONFIRMATIONS = 6
STORE_CONFIRMATIONS = 1
STORED_VALUE = 12


class DeploymentSequencer:
    """
    Runs the deployment sequence once:
    deploy -> (verify) -> retrieve -> store -> retrieve

    Every error except the verification outcome propagates to the caller.
    """

    def __init__(self, config: DeploymentConfig, tx_builder, verifier):
        """
        Initialize Deployment Sequencer

        Args:
            config: Deployment configuration (chain id, explorer key, ...)
            tx_builder: TransactionBuilder bound to the deployer wallet
            verifier: Explorer verifier with an async verify()
        """
        self.config = config
        self.tx_builder = tx_builder
        self.verifier = verifier

    def get_contract_factory(self, contract_name: str) -> ContractFactory:
        """Factory for a compiled contract"""
        artifact = load_artifact(self.config.artifacts_dir, contract_name)
        return ContractFactory(artifact, self.tx_builder)

    def should_verify(self) -> bool:
        """Verification runs only on Sepolia with an explorer key configured"""
        return self.config.chain_id == SEPOLIA_CHAIN_ID and bool(self.config.explorer_api_key)

    async def run(self) -> SimpleStorage:
        """
        Execute the deployment sequence

        Returns:
            The deployed SimpleStorage
        """
        factory = self.get_contract_factory(CONTRACT_NAME)

        logger.info("Deploying contract...")
        contract = await factory.deploy()
        await contract.deployed()
        logger.success(f"Deployed contract to: {contract.address}")

        if self.should_verify():
            logger.info(f"Waiting for {VERIFICATION_CONFIRMATIONS} block confirmations...")
            await contract.deployment_transaction.wait(VERIFICATION_CONFIRMATIONS)
            await self.verify(contract.address, [], factory.artifact)

        simple_storage = SimpleStorage(contract)

        current_value = simple_storage.retrieve()
        logger.info(f"Current Value is: {current_value}")

        transaction = await simple_storage.store(STORED_VALUE)
        await transaction.wait(STORE_CONFIRMATIONS)

        updated_value = simple_storage.retrieve()
        logger.info(f"Updated Value is: {updated_value}")

        return simple_storage

    async def verify(self, address: str, constructor_args: list, artifact):
        """Submit source for verification, logging the outcome"""
        result = await self.verifier.verify(address, constructor_args, artifact)

        if not result.ok:
            logger.warning(f"Verification failed: {result.reason}")
        elif result.status == VerificationStatus.ALREADY_VERIFIED:
            logger.info("Already Verified!")
        else:
            logger.success(f"Contract {address} verified")

        return result
