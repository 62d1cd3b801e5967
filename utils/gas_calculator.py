"""
Gas Calculator
JIT (Just-In-Time) fee selection for deployment and contract transactions
"""

from typing import Dict
from web3 import Web3
from loguru import logger


class GasCalculator:
    """
    Picks EIP-1559 or legacy fee parameters for the connected network
    """

    def __init__(self, w3: Web3, gas_settings: Dict):
        """
        Initialize Gas Calculator

        Args:
            w3: Web3 instance
            gas_settings: "gas_settings" block of deploy_config.json
        """
        self.w3 = w3

        # Gas settings
        self.max_gas_price_gwei = gas_settings['max_gas_price_gwei']
        self.priority_fee_gwei = gas_settings['priority_fee_gwei']
        self.price_buffer = gas_settings.get('price_buffer', 1.05)

        logger.debug("Gas Calculator initialized")

    async def get_fee_params(self) -> Dict[str, int]:
        """
        Get fee fields for a transaction dict

        Returns:
            {'maxFeePerGas', 'maxPriorityFeePerGas'} on EIP-1559 chains,
            {'gasPrice'} otherwise
        """
        try:
            latest_block = self.w3.eth.get_block('latest')
            supports_eip1559 = latest_block.get('baseFeePerGas') is not None
        except Exception as e:
            logger.warning(f"Could not read latest block: {e}, using legacy gas price")
            supports_eip1559 = False

        if supports_eip1559:
            return await self.get_eip1559_gas_params()

        return {'gasPrice': await self.get_jit_gas_price()}

    async def get_jit_gas_price(self) -> int:
        """
        Get Just-In-Time gas price
        Fetches current network gas price at the moment of sending

        Returns:
            Gas price in wei
        """
        try:
            gas_price_gwei = float(self.w3.from_wei(self.w3.eth.gas_price, 'gwei'))

            # Apply buffer for faster inclusion
            buffered_price_gwei = gas_price_gwei * self.price_buffer

            # Cap at max
            final_price_gwei = min(buffered_price_gwei, self.max_gas_price_gwei)

            logger.debug(f"JIT gas price: {final_price_gwei:.2f} gwei")

            return int(self.w3.to_wei(final_price_gwei, 'gwei'))

        except Exception as e:
            logger.warning(f"Error getting JIT gas price: {e}")
            return int(self.w3.to_wei(self.max_gas_price_gwei, 'gwei'))

    async def get_eip1559_gas_params(self) -> Dict[str, int]:
        """
        Get EIP-1559 gas parameters (maxFeePerGas, maxPriorityFeePerGas)

        Returns:
            Dict with gas parameters in wei
        """
        priority_fee_wei = int(self.w3.to_wei(self.priority_fee_gwei, 'gwei'))
        max_allowed_wei = int(self.w3.to_wei(self.max_gas_price_gwei, 'gwei'))

        try:
            # Get base fee from latest block
            latest_block = self.w3.eth.get_block('latest')
            base_fee_wei = latest_block.get('baseFeePerGas', 0)

            # Max fee = base fee * 2 + priority fee (buffer for fluctuations)
            max_fee_wei = min((base_fee_wei * 2) + priority_fee_wei, max_allowed_wei)

            return {
                'maxFeePerGas': int(max_fee_wei),
                'maxPriorityFeePerGas': min(priority_fee_wei, int(max_fee_wei))
            }

        except Exception as e:
            logger.warning(f"Error getting EIP-1559 params: {e}")
            return {
                'maxFeePerGas': max_allowed_wei,
                'maxPriorityFeePerGas': priority_fee_wei
            }
