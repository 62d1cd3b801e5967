"""
Verification Package
Block explorer source verification
"""

from .etherscan import (
    EtherscanVerifier,
    VerificationResult,
    VerificationStatus,
    classify_explorer_message,
    encode_constructor_arguments
)

__all__ = [
    'EtherscanVerifier',
    'VerificationResult',
    'VerificationStatus',
    'classify_explorer_message',
    'encode_constructor_arguments'
]
