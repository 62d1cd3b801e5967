"""
Deployer Package
Configuration, deployer wallet and the deployment sequence
"""

from .config import DeploymentConfig, NetworkConfig, load_deployment_config, load_network_config
from .deployment_sequencer import DeploymentSequencer
from .wallet_manager import WalletManager

__all__ = [
    'DeploymentConfig',
    'NetworkConfig',
    'load_deployment_config',
    'load_network_config',
    'DeploymentSequencer',
    'WalletManager'
]
