"""
Wallet Manager
Holds the deployer account used to sign deployment and contract transactions
"""

import os
from typing import Dict
from decimal import Decimal
from web3 import Web3
from eth_account import Account
from loguru import logger
from dotenv import load_dotenv

from .config import NetworkConfig

load_dotenv()


class WalletManager:
    """
    Deployer wallet

    Signs locally with DEPLOYER_PRIVATE_KEY when it is set. On local
    development networks without a key, the node's first unlocked account
    is used and transactions go out through eth_sendTransaction.
    """

    def __init__(self, w3: Web3, network: NetworkConfig):
        """
        Initialize wallet manager

        Args:
            w3: Web3 instance
            network: Active network entry
        """
        self.w3 = w3

        private_key = os.getenv('DEPLOYER_PRIVATE_KEY')

        if private_key:
            self.account = Account.from_key(private_key)
            self.address = self.account.address
        elif network.local:
            accounts = w3.eth.accounts
            if not accounts:
                raise ValueError(
                    f"{network.name} node has no unlocked accounts - set DEPLOYER_PRIVATE_KEY in .env"
                )
            self.account = None
            self.address = accounts[0]
            logger.info("DEPLOYER_PRIVATE_KEY not set - using unlocked node account")
        else:
            raise ValueError(
                f"DEPLOYER_PRIVATE_KEY must be set in .env to deploy to {network.name}"
            )

        logger.info(f"Deployer wallet: {self.address}")

    @property
    def can_sign(self) -> bool:
        return self.account is not None

    def sign_transaction(self, transaction: Dict):
        """
        Sign a transaction with the deployer key

        Args:
            transaction: Transaction dict

        Returns:
            Signed transaction
        """
        if not self.can_sign:
            raise ValueError("No private key loaded - cannot sign locally")

        try:
            return self.account.sign_transaction(transaction)
        except Exception as e:
            logger.error(f"Error signing transaction: {e}")
            raise

    def get_balance(self) -> Decimal:
        """Deployer balance in ether"""
        balance_wei = self.w3.eth.get_balance(self.address)
        return Decimal(str(self.w3.from_wei(balance_wei, 'ether')))
