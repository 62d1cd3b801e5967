"""
Shared test fixtures
"""

import json
import pytest
from loguru import logger


@pytest.fixture
def log_messages():
    """Capture loguru messages emitted during a test"""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record['message']), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def artifacts_dir(tmp_path):
    """Hardhat-style artifacts tree for SimpleStorage"""
    root = tmp_path / "artifacts"
    contract_dir = root / "contracts" / "SimpleStorage.sol"
    build_info_dir = root / "build-info"
    contract_dir.mkdir(parents=True)
    build_info_dir.mkdir(parents=True)

    artifact = {
        "_format": "hh-sol-artifact-1",
        "contractName": "SimpleStorage",
        "sourceName": "contracts/SimpleStorage.sol",
        "abi": [
            {
                "inputs": [],
                "name": "retrieve",
                "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
                "stateMutability": "view",
                "type": "function"
            },
            {
                "inputs": [{"internalType": "uint256", "name": "_favoriteNumber", "type": "uint256"}],
                "name": "store",
                "outputs": [],
                "stateMutability": "nonpayable",
                "type": "function"
            }
        ],
        "bytecode": "0x6080604052348015600f57600080fd5b50",
        "deployedBytecode": "0x6080604052",
        "linkReferences": {},
        "deployedLinkReferences": {}
    }
    (contract_dir / "SimpleStorage.json").write_text(json.dumps(artifact))
    (contract_dir / "SimpleStorage.dbg.json").write_text(json.dumps({
        "_format": "hh-sol-dbg-1",
        "buildInfo": "../../build-info/abc123.json"
    }))
    (build_info_dir / "abc123.json").write_text(json.dumps({
        "solcVersion": "0.8.8",
        "solcLongVersion": "0.8.8+commit.dddeac2f",
        "input": {
            "language": "Solidity",
            "sources": {"contracts/SimpleStorage.sol": {"content": "pragma solidity 0.8.8;"}},
            "settings": {"optimizer": {"enabled": False, "runs": 200}}
        }
    }))

    return str(root)
