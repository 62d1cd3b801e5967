"""
Contract Artifacts
Loads Hardhat compilation output (ABI, bytecode, build-info)
"""

import os
import json
import glob
from dataclasses import dataclass
from typing import Dict, List
from loguru import logger


@dataclass
class ContractArtifact:
    """Compiled contract as emitted by `npx hardhat compile`"""

    contract_name: str
    source_name: str
    abi: List[Dict]
    bytecode: str
    path: str

    @property
    def fully_qualified_name(self) -> str:
        return f"{self.source_name}:{self.contract_name}"


def load_artifact(artifacts_dir: str, contract_name: str) -> ContractArtifact:
    """
    Load a contract artifact by contract name

    Args:
        artifacts_dir: Hardhat artifacts directory (usually "artifacts")
        contract_name: Name of the contract, e.g. "SimpleStorage"

    Returns:
        ContractArtifact
    """
    pattern = os.path.join(artifacts_dir, "contracts", "**", f"{contract_name}.json")
    matches = sorted(glob.glob(pattern, recursive=True))

    if not matches:
        raise FileNotFoundError(
            f"Artifact for contract '{contract_name}' not found in {artifacts_dir}. "
            "Run 'npx hardhat compile' first"
        )

    if len(matches) > 1:
        raise ValueError(
            f"Multiple artifacts found for '{contract_name}': {', '.join(matches)}. "
            "Use a unique contract name"
        )

    path = matches[0]
    with open(path, 'r') as f:
        artifact_json = json.load(f)

    bytecode = artifact_json.get('bytecode', '0x')
    if bytecode in ('', '0x'):
        raise ValueError(
            f"Contract '{contract_name}' has no bytecode (abstract contract or interface)"
        )

    logger.debug(f"Loaded artifact {path}")

    return ContractArtifact(
        contract_name=artifact_json['contractName'],
        source_name=artifact_json['sourceName'],
        abi=artifact_json['abi'],
        bytecode=bytecode,
        path=path
    )


def load_build_info(artifact: ContractArtifact) -> Dict:
    """
    Load the Hardhat build-info referenced by an artifact's debug file

    The build-info holds the exact compiler version and the standard JSON
    input needed for explorer verification.

    Args:
        artifact: Loaded contract artifact

    Returns:
        Build-info dict (solcLongVersion, input, ...)
    """
    dbg_path = artifact.path[:-len('.json')] + '.dbg.json'

    with open(dbg_path, 'r') as f:
        dbg_json = json.load(f)

    build_info_path = os.path.normpath(
        os.path.join(os.path.dirname(dbg_path), dbg_json['buildInfo'])
    )

    with open(build_info_path, 'r') as f:
        return json.load(f)
