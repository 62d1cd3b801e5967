"""
Utilities Package
Gas pricing and RPC endpoint management
"""

from .gas_calculator import GasCalculator
from .rpc_manager import RPCManager

__all__ = [
    'GasCalculator',
    'RPCManager'
]
