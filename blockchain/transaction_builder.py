"""
Transaction Builder
Builds, signs and broadcasts constructor and contract-function transactions
"""

from typing import Dict
from web3 import Web3
from loguru import logger

from .transaction_handle import TransactionHandle


class TransactionBuilder:
    """
    Builds transactions for the deployer wallet
    """

    def __init__(
        self,
        w3: Web3,
        wallet_manager,
        gas_calculator,
        chain_id: int,
        settings: Dict = None
    ):
        """
        Initialize Transaction Builder

        Args:
            w3: Web3 instance
            wallet_manager: Wallet manager holding the deployer account
            gas_calculator: Fee parameter source
            chain_id: Chain id of the connected network
            settings: Gas limit and polling settings
        """
        settings = settings or {}

        self.w3 = w3
        self.wallet_manager = wallet_manager
        self.gas_calculator = gas_calculator
        self.chain_id = chain_id

        self.gas_limit_buffer = settings.get('gas_limit_buffer', 1.2)
        self.default_gas_limit = settings.get('default_gas_limit', 3000000)
        self.poll_interval = settings.get('poll_interval', 2.0)
        self.receipt_timeout = settings.get('receipt_timeout', 300)

    async def build_transaction(self, tx_source) -> Dict:
        """
        Build a transaction dict

        Args:
            tx_source: web3 ContractConstructor or bound ContractFunction

        Returns:
            Transaction dict ready for signing
        """
        sender = self.wallet_manager.address

        # Estimate gas
        try:
            gas_estimate = tx_source.estimate_gas({'from': sender})
            gas_limit = int(gas_estimate * self.gas_limit_buffer)
        except Exception as e:
            logger.warning(f"Gas estimation failed: {e}, using default")
            gas_limit = self.default_gas_limit

        params = {
            'from': sender,
            'nonce': self.w3.eth.get_transaction_count(sender, 'pending'),
            'gas': gas_limit,
            'chainId': self.chain_id
        }
        params.update(await self.gas_calculator.get_fee_params())

        logger.debug(f"Gas limit: {gas_limit}, nonce: {params['nonce']}")

        return tx_source.build_transaction(params)

    async def send(self, tx_source) -> TransactionHandle:
        """
        Build, sign and broadcast a transaction

        Args:
            tx_source: web3 ContractConstructor or bound ContractFunction

        Returns:
            TransactionHandle for the broadcast transaction
        """
        transaction = await self.build_transaction(tx_source)

        if self.wallet_manager.can_sign:
            signed_tx = self.wallet_manager.sign_transaction(transaction)
            tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        else:
            # Unlocked node account (local development networks)
            tx_hash = self.w3.eth.send_transaction(transaction)

        handle = TransactionHandle(
            self.w3,
            tx_hash,
            poll_interval=self.poll_interval,
            receipt_timeout=self.receipt_timeout
        )

        logger.info(f"Transaction sent: {handle.hash}")
        return handle
