"""
System Check Script
Verifies configuration, connectivity and artifacts before deploying
"""

import os
import sys
import json
from loguru import logger
from dotenv import load_dotenv

from blockchain.artifacts import load_artifact
from blockchain.simple_storage import CONTRACT_NAME
from deployer.config import (
    DEPLOY_CONFIG_PATH,
    NETWORKS_CONFIG_PATH,
    NetworkConfig,
    get_network_name,
    load_network_config
)
from deployer.deployment_sequencer import SEPOLIA_CHAIN_ID
from deployer.wallet_manager import WalletManager
from utils.rpc_manager import RPCManager

load_dotenv()


def check_configuration_files():
    """Check if all configuration files exist and parse"""
    logger.info("Checking configuration files...")

    missing = []
    for file_path in [NETWORKS_CONFIG_PATH, DEPLOY_CONFIG_PATH]:
        if not os.path.exists(file_path):
            missing.append(file_path)
            continue

        try:
            with open(file_path, 'r') as f:
                json.load(f)
            logger.success(f"  ✓ {file_path}")
        except Exception as e:
            logger.error(f"  ✗ {file_path}: {e}")
            missing.append(file_path)

    if missing:
        logger.error(f"Missing/invalid config files: {', '.join(missing)}")
        return False

    logger.success("✓ All configuration files valid")
    return True


def check_environment_variables(network: NetworkConfig):
    """Check the secrets required for the selected network"""
    logger.info("Checking environment variables...")

    if not network.local and not os.getenv('DEPLOYER_PRIVATE_KEY'):
        logger.error(f"  DEPLOYER_PRIVATE_KEY is required for {network.name}")
        return False

    if network.chain_id == SEPOLIA_CHAIN_ID and not os.getenv('ETHERSCAN_API_KEY'):
        logger.warning("  ETHERSCAN_API_KEY not set - contract verification will be skipped")

    logger.success("✓ Environment variables set")
    return True


def check_rpc_connection(network: NetworkConfig):
    """
    Check that an RPC endpoint is reachable and on the right chain

    Returns:
        Connected Web3 instance, or None
    """
    logger.info("Checking RPC connection...")

    try:
        w3 = RPCManager(network).get_web3()
        chain_id = w3.eth.chain_id
    except Exception as e:
        logger.error(f"  ✗ {e}")
        return None

    if chain_id != network.chain_id:
        logger.error(f"  ✗ Chain id mismatch: node reports {chain_id}, expected {network.chain_id}")
        return None

    logger.success(f"✓ Connected to {network.name} (Block: {w3.eth.block_number})")
    return w3


def check_deployer_balance(w3, network: NetworkConfig, min_balance_eth: float):
    """Check the deployer can pay for two transactions"""
    logger.info("Checking deployer balance...")

    try:
        wallet_manager = WalletManager(w3, network)
        balance = wallet_manager.get_balance()
    except Exception as e:
        logger.error(f"  Error checking deployer balance: {e}")
        return False

    logger.info(f"  Deployer: {balance:.4f} ETH")

    if balance < min_balance_eth:
        logger.warning(f"  ⚠ Deployer balance low (need at least {min_balance_eth} ETH)")
        return False

    logger.success("✓ Deployer balance sufficient")
    return True


def check_contract_artifact(artifacts_dir: str):
    """Check the contract has been compiled"""
    logger.info("Checking contract artifact...")

    try:
        artifact = load_artifact(artifacts_dir, CONTRACT_NAME)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"  ✗ {e}")
        return False

    logger.success(f"✓ {artifact.fully_qualified_name} compiled")
    return True


def main():
    """Run all system checks"""
    logger.info("=" * 70)
    logger.info("SimpleStorage Deployer System Check")
    logger.info("=" * 70)

    if not check_configuration_files():
        return 1

    with open(DEPLOY_CONFIG_PATH, 'r') as f:
        settings = json.load(f)

    try:
        network = load_network_config(get_network_name())
    except ValueError as e:
        logger.error(str(e))
        return 1

    results = [("Environment Variables", check_environment_variables(network))]

    w3 = check_rpc_connection(network)
    results.append(("RPC Connection", w3 is not None))

    if w3 is not None:
        results.append((
            "Deployer Balance",
            check_deployer_balance(w3, network, settings.get('min_deployer_balance_eth', 0.01))
        ))

    results.append(("Contract Artifact", check_contract_artifact(settings.get('artifacts_dir', 'artifacts'))))

    # Summary
    logger.info("")
    logger.info("=" * 70)
    logger.info("Summary")
    logger.info("=" * 70)

    passed = sum(1 for _, result in results if result)
    total = len(results)

    for name, result in results:
        status = "✓ PASS" if result else "✗ FAIL"
        logger.info(f"  {status}: {name}")

    logger.info("")
    logger.info(f"Total: {passed}/{total} checks passed")

    if passed == total:
        logger.success("✅ Ready to deploy: python main.py")
        return 0

    logger.error("❌ Not ready - fix issues above")
    return 1


if __name__ == "__main__":
    sys.exit(main())
