"""
SimpleStorage Deployer - Main Entry Point
Deploys SimpleStorage to the network selected by DEPLOY_NETWORK
"""

import asyncio
import sys
from loguru import logger
from dotenv import load_dotenv

from blockchain.transaction_builder import TransactionBuilder
from deployer.config import get_network_name, load_deployment_config, load_network_config
from deployer.deployment_sequencer import DeploymentSequencer
from deployer.wallet_manager import WalletManager
from utils.gas_calculator import GasCalculator
from utils.rpc_manager import RPCManager
from verification.etherscan import EtherscanVerifier


def configure_logging():
    """Console progress on stderr plus a rotating debug log"""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level="INFO"
    )
    logger.add(
        "data/logs/deploy.log",
        rotation="1 day",
        retention="7 days",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
        level="DEBUG"
    )


class DeploymentRunner:
    """Wires the network, wallet and verifier together and runs the sequence"""

    async def run(self):
        load_dotenv()

        network = load_network_config(get_network_name())

        logger.info("=" * 70)
        logger.info(f"🚀 Deploying to {network.name}")
        logger.info("=" * 70)

        w3 = RPCManager(network).get_web3()

        chain_id = w3.eth.chain_id
        if chain_id != network.chain_id:
            raise ValueError(
                f"Connected node reports chain id {chain_id}, "
                f"but {network.key} is configured for {network.chain_id}"
            )

        config = load_deployment_config(network, chain_id)

        wallet_manager = WalletManager(w3, network)
        gas_calculator = GasCalculator(w3, config.gas_settings)
        tx_builder = TransactionBuilder(
            w3,
            wallet_manager,
            gas_calculator,
            chain_id,
            settings={
                **config.gas_settings,
                'poll_interval': config.poll_interval,
                'receipt_timeout': config.receipt_timeout
            }
        )
        verifier = EtherscanVerifier(
            api_key=config.explorer_api_key,
            chain_id=chain_id,
            api_url=config.explorer_api_url,
            browser_url=config.explorer_browser_url,
            poll_interval=config.verification_poll_interval,
            max_status_checks=config.verification_max_checks
        )

        sequencer = DeploymentSequencer(config, tx_builder, verifier)
        return await sequencer.run()


async def main() -> int:
    """
    Main entry point

    Returns:
        Process exit code (0 success, 1 failure)
    """
    try:
        await DeploymentRunner().run()
        return 0
    except Exception as e:
        logger.exception(f"Deployment failed: {e}")
        return 1


def run():
    """Console script entry point"""
    configure_logging()
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
