"""
Transaction Handle
Tracks a broadcast transaction until it reaches the requested confirmation depth
"""

import asyncio
import time
from web3 import Web3
from web3.exceptions import TransactionNotFound, TimeExhausted
from loguru import logger


class TransactionRevertedError(Exception):
    """Raised when a mined transaction has status 0"""

    def __init__(self, tx_hash: str, receipt=None):
        self.tx_hash = tx_hash
        self.receipt = receipt
        super().__init__(f"Transaction {tx_hash} reverted")


class TransactionHandle:
    """
    Handle to a submitted transaction
    """

    def __init__(
        self,
        w3: Web3,
        tx_hash,
        poll_interval: float = 2.0,
        receipt_timeout: float = 300
    ):
        """
        Initialize Transaction Handle

        Args:
            w3: Web3 instance
            tx_hash: Hash returned by the node
            poll_interval: Seconds between receipt/block polls
            receipt_timeout: Seconds to wait for the transaction to be mined
        """
        self.w3 = w3
        self.tx_hash = tx_hash
        self.poll_interval = poll_interval
        self.receipt_timeout = receipt_timeout

    @property
    def hash(self) -> str:
        if isinstance(self.tx_hash, (bytes, bytearray)):
            return Web3.to_hex(self.tx_hash)
        return str(self.tx_hash)

    async def wait(self, confirmations: int = 1):
        """
        Wait until the transaction is mined and buried under enough blocks

        Args:
            confirmations: Required depth, 1 means "mined"

        Returns:
            Transaction receipt
        """
        if confirmations < 1:
            raise ValueError(f"confirmations must be >= 1, got {confirmations}")

        receipt = await self._wait_for_receipt()

        if receipt['status'] != 1:
            raise TransactionRevertedError(self.hash, receipt)

        if confirmations > 1:
            await self._wait_for_depth(receipt, confirmations)

        return receipt

    async def _wait_for_receipt(self):
        """Poll for the receipt until mined or receipt_timeout elapses"""
        start_time = time.time()

        while True:
            try:
                return self.w3.eth.get_transaction_receipt(self.tx_hash)
            except TransactionNotFound:
                if time.time() - start_time >= self.receipt_timeout:
                    raise TimeExhausted(
                        f"Transaction {self.hash} is not in the chain after "
                        f"{self.receipt_timeout} seconds"
                    )
                await asyncio.sleep(self.poll_interval)

    async def _wait_for_depth(self, receipt, confirmations: int):
        """Poll the block number until the receipt has the required depth"""
        target_block = receipt['blockNumber'] + confirmations - 1

        logger.debug(f"Waiting for {confirmations} confirmations of {self.hash}")

        while self.w3.eth.block_number < target_block:
            await asyncio.sleep(self.poll_interval)
