"""
Deployment Configuration
Network registry and the explicit configuration injected into the sequencer
"""

import os
import json
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from dotenv import load_dotenv

load_dotenv()

NETWORKS_CONFIG_PATH = "config/networks.json"
DEPLOY_CONFIG_PATH = "config/deploy_config.json"

DEFAULT_EXPLORER_API_URL = "https://api.etherscan.io/v2/api"


@dataclass
class NetworkConfig:
    """One entry of config/networks.json"""

    key: str
    name: str
    chain_id: int
    local: bool = False
    rpc_url_envs: List[str] = field(default_factory=list)
    rpc_urls: List[str] = field(default_factory=list)
    explorer_api_url: str = DEFAULT_EXPLORER_API_URL
    explorer_browser_url: Optional[str] = None


@dataclass
class DeploymentConfig:
    """
    Everything the deployment sequence reads about its environment

    chain_id and explorer_api_key gate explorer verification; the remaining
    fields tune polling and gas.
    """

    chain_id: int
    explorer_api_key: Optional[str] = None
    network: str = "localhost"
    explorer_api_url: str = DEFAULT_EXPLORER_API_URL
    explorer_browser_url: Optional[str] = None
    artifacts_dir: str = "artifacts"
    poll_interval: float = 2.0
    receipt_timeout: float = 300
    verification_poll_interval: float = 5.0
    verification_max_checks: int = 20
    gas_settings: Dict = field(default_factory=dict)


def get_network_name() -> str:
    """Active network key, from DEPLOY_NETWORK or the registry default"""
    name = os.getenv('DEPLOY_NETWORK')
    if name:
        return name

    with open(NETWORKS_CONFIG_PATH, 'r') as f:
        return json.load(f).get('default_network', 'localhost')


def load_network_config(network_name: str, config_path: str = NETWORKS_CONFIG_PATH) -> NetworkConfig:
    """
    Load a network entry from the registry

    Args:
        network_name: Key in the "networks" table
        config_path: Path to networks.json

    Returns:
        NetworkConfig
    """
    with open(config_path, 'r') as f:
        networks = json.load(f)['networks']

    if network_name not in networks:
        raise ValueError(
            f"Unknown network '{network_name}'. Available: {', '.join(sorted(networks))}"
        )

    entry = networks[network_name]
    explorer = entry.get('explorer', {})

    return NetworkConfig(
        key=network_name,
        name=entry.get('name', network_name),
        chain_id=int(entry['chain_id']),
        local=entry.get('local', False),
        rpc_url_envs=entry.get('rpc_url_envs', []),
        rpc_urls=entry.get('rpc_urls', []),
        explorer_api_url=explorer.get('api_url', DEFAULT_EXPLORER_API_URL),
        explorer_browser_url=explorer.get('browser_url')
    )


def load_deployment_config(
    network: NetworkConfig,
    chain_id: int,
    config_path: str = DEPLOY_CONFIG_PATH
) -> DeploymentConfig:
    """
    Build the deployment configuration for a connected network

    Args:
        network: Selected network entry
        chain_id: Chain id reported by the connected node
        config_path: Path to deploy_config.json

    Returns:
        DeploymentConfig
    """
    with open(config_path, 'r') as f:
        settings = json.load(f)

    timing = settings.get('timing', {})

    # Empty values in .env count as "not configured"
    explorer_api_key = os.getenv('ETHERSCAN_API_KEY') or None

    return DeploymentConfig(
        chain_id=chain_id,
        explorer_api_key=explorer_api_key,
        network=network.key,
        explorer_api_url=network.explorer_api_url,
        explorer_browser_url=network.explorer_browser_url,
        artifacts_dir=settings.get('artifacts_dir', 'artifacts'),
        poll_interval=timing.get('poll_interval', 2.0),
        receipt_timeout=timing.get('receipt_timeout', 300),
        verification_poll_interval=timing.get('verification_poll_interval', 5.0),
        verification_max_checks=timing.get('verification_max_checks', 20),
        gas_settings=settings.get('gas_settings', {})
    )
