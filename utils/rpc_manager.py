"""
RPC Manager
Connects to the selected network, falling back through its configured endpoints
"""

import os
from typing import List, Optional
from web3 import Web3
from loguru import logger
from dotenv import load_dotenv

from deployer.config import NetworkConfig

load_dotenv()


class RPCManager:
    """
    Endpoint fallback for a single network

    Endpoints from environment variables come first (in the order listed
    in networks.json), then literal URLs from the registry.
    """

    def __init__(self, network: NetworkConfig, request_timeout: int = 30):
        """
        Initialize RPC Manager

        Args:
            network: Selected network entry
            request_timeout: HTTP request timeout in seconds
        """
        self.network = network
        self.request_timeout = request_timeout

        self.endpoints = self._collect_endpoints()
        self.w3: Optional[Web3] = None
        self.active_url: Optional[str] = None

        logger.info(f"RPC Manager initialized for {network.name} with {len(self.endpoints)} endpoint(s)")

    def _collect_endpoints(self) -> List[str]:
        """Candidate HTTP endpoints in priority order"""
        endpoints = []

        for env_name in self.network.rpc_url_envs:
            url = os.getenv(env_name)
            if url and url not in endpoints:
                endpoints.append(url)

        for url in self.network.rpc_urls:
            if url not in endpoints:
                endpoints.append(url)

        return endpoints

    def get_web3(self) -> Web3:
        """
        Get a connected Web3 instance

        Returns:
            Web3 instance bound to the first reachable endpoint
        """
        if self.w3 is not None:
            return self.w3

        for url in self.endpoints:
            try:
                w3 = Web3(Web3.HTTPProvider(url, request_kwargs={'timeout': self.request_timeout}))

                if w3.is_connected():
                    self.w3 = w3
                    self.active_url = url
                    logger.success(f"Connected to {self.network.name} via {self._redact(url)}")
                    return w3

                logger.warning(f"Failed to connect to {self._redact(url)}")

            except Exception as e:
                logger.warning(f"Error connecting to {self._redact(url)}: {e}")

        raise ConnectionError(
            f"No RPC endpoint reachable for {self.network.name}. "
            f"Set one of: {', '.join(self.network.rpc_url_envs) or 'rpc_urls in config/networks.json'}"
        )

    @staticmethod
    def _redact(url: str) -> str:
        """Hide API keys embedded in provider URLs"""
        scheme, _, rest = url.partition('://')
        host = rest.split('/', 1)[0]
        return f"{scheme}://{host}" if rest else url
