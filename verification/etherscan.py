"""
Etherscan Verifier
Publishes contract source to an Etherscan-family explorer (API v2)
"""

import json
import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional
import aiohttp
from eth_abi import encode
from loguru import logger

from blockchain.artifacts import ContractArtifact, load_build_info


class VerificationStatus(Enum):
    VERIFIED = "verified"
    ALREADY_VERIFIED = "already_verified"
    PENDING = "pending"
    FAILED = "failed"


@dataclass
class VerificationResult:
    """Outcome of a verification attempt"""

    status: VerificationStatus
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status in (VerificationStatus.VERIFIED, VerificationStatus.ALREADY_VERIFIED)


def classify_explorer_message(message: str) -> VerificationStatus:
    """
    Map an explorer response message to a verification status

    Args:
        message: "result" field of an Etherscan response

    Returns:
        VerificationStatus
    """
    text = (message or "").lower()

    if "already verified" in text:
        return VerificationStatus.ALREADY_VERIFIED
    if "pass - verified" in text:
        return VerificationStatus.VERIFIED
    if "pending in queue" in text:
        return VerificationStatus.PENDING

    return VerificationStatus.FAILED


def _abi_type(abi_input: Dict) -> str:
    """Canonical type string, expanding tuples"""
    abi_type = abi_input['type']

    if abi_type.startswith('tuple'):
        components = ','.join(_abi_type(c) for c in abi_input['components'])
        return f"({components}){abi_type[len('tuple'):]}"

    return abi_type


def encode_constructor_arguments(abi: List[Dict], args: List) -> str:
    """
    ABI-encode constructor arguments the way explorers expect them

    Args:
        abi: Contract ABI
        args: Constructor argument values

    Returns:
        Hex string without 0x prefix ("" when there are no arguments)
    """
    constructor = next((entry for entry in abi if entry.get('type') == 'constructor'), None)
    inputs = constructor.get('inputs', []) if constructor else []

    if len(inputs) != len(args):
        raise ValueError(
            f"Constructor expects {len(inputs)} argument(s), got {len(args)}"
        )

    if not inputs:
        return ""

    return encode([_abi_type(i) for i in inputs], list(args)).hex()


class EtherscanVerifier:
    """
    Explorer verification client

    All explorer and network errors are reported through VerificationResult;
    verify() does not raise.
    """

    def __init__(
        self,
        api_key: Optional[str],
        chain_id: int,
        api_url: str = "https://api.etherscan.io/v2/api",
        browser_url: Optional[str] = None,
        poll_interval: float = 5.0,
        max_status_checks: int = 20,
        max_submit_attempts: int = 5,
        request_timeout: int = 30
    ):
        """
        Initialize Etherscan Verifier

        Args:
            api_key: Explorer API key
            chain_id: Chain the contract lives on
            api_url: Etherscan v2 API endpoint
            browser_url: Explorer website, used for the success log line
            poll_interval: Seconds between status checks
            max_status_checks: Status checks before giving up
            max_submit_attempts: Submissions while the explorer has not indexed the bytecode yet
            request_timeout: HTTP timeout in seconds
        """
        self.api_key = api_key
        self.chain_id = chain_id
        self.api_url = api_url
        self.browser_url = browser_url
        self.poll_interval = poll_interval
        self.max_status_checks = max_status_checks
        self.max_submit_attempts = max_submit_attempts
        self.request_timeout = request_timeout

    async def verify(
        self,
        address: str,
        constructor_args: List,
        artifact: ContractArtifact
    ) -> VerificationResult:
        """
        Verify a deployed contract

        Args:
            address: Deployed contract address
            constructor_args: Arguments the contract was deployed with
            artifact: Artifact of the deployed contract

        Returns:
            VerificationResult
        """
        logger.info(f"Verifying contract {address}...")

        try:
            timeout = aiohttp.ClientTimeout(total=self.request_timeout)

            async with aiohttp.ClientSession(timeout=timeout) as session:
                if await self._is_verified(session, address):
                    return VerificationResult(
                        VerificationStatus.ALREADY_VERIFIED,
                        "Contract source code already verified"
                    )

                payload = self._build_payload(address, constructor_args, artifact)
                response = await self._submit(session, payload)
                message = str(response.get('result', ''))

                if response.get('status') != '1':
                    if classify_explorer_message(message) == VerificationStatus.ALREADY_VERIFIED:
                        return VerificationResult(VerificationStatus.ALREADY_VERIFIED, message)
                    return VerificationResult(VerificationStatus.FAILED, message)

                result = await self._poll_status(session, guid=message)

            if result.status == VerificationStatus.VERIFIED and self.browser_url:
                logger.info(f"Source published at {self.browser_url}/address/{address}#code")

            return result

        except Exception as e:
            logger.debug(f"Verification request failed: {e}")
            return VerificationResult(VerificationStatus.FAILED, str(e))

    def _build_payload(
        self,
        address: str,
        constructor_args: List,
        artifact: ContractArtifact
    ) -> Dict:
        """Form fields for action=verifysourcecode"""
        build_info = load_build_info(artifact)

        return {
            'module': 'contract',
            'action': 'verifysourcecode',
            'contractaddress': address,
            'sourceCode': json.dumps(build_info['input']),
            'codeformat': 'solidity-standard-json-input',
            'contractname': artifact.fully_qualified_name,
            'compilerversion': f"v{build_info['solcLongVersion']}",
            # Misspelling is part of the Etherscan API
            'constructorArguements': encode_constructor_arguments(artifact.abi, constructor_args)
        }

    async def _is_verified(self, session: aiohttp.ClientSession, address: str) -> bool:
        """Check whether the explorer already shows source for the address"""
        response = await self._request(
            session,
            'GET',
            params={'module': 'contract', 'action': 'getsourcecode', 'address': address}
        )

        result = response.get('result')
        if response.get('status') != '1' or not isinstance(result, list) or not result:
            return False

        return bool(result[0].get('SourceCode'))

    async def _submit(self, session: aiohttp.ClientSession, payload: Dict) -> Dict:
        """Submit source, retrying while the explorer has not indexed the bytecode"""
        response = {}

        for attempt in range(self.max_submit_attempts):
            response = await self._request(session, 'POST', data=payload)
            message = str(response.get('result', '')).lower()

            if response.get('status') == '1' or 'unable to locate contractcode' not in message:
                return response

            logger.debug(f"Explorer has not indexed the contract yet (attempt {attempt + 1})")
            await asyncio.sleep(self.poll_interval)

        return response

    async def _poll_status(self, session: aiohttp.ClientSession, guid: str) -> VerificationResult:
        """Poll checkverifystatus until the explorer reaches a verdict"""
        for _ in range(self.max_status_checks):
            await asyncio.sleep(self.poll_interval)

            response = await self._request(
                session,
                'GET',
                params={'module': 'contract', 'action': 'checkverifystatus', 'guid': guid}
            )
            message = str(response.get('result', ''))
            status = classify_explorer_message(message)

            if status != VerificationStatus.PENDING:
                return VerificationResult(status, message)

        return VerificationResult(
            VerificationStatus.FAILED,
            f"Verification still pending after {self.max_status_checks} checks (guid {guid})"
        )

    async def _request(
        self,
        session: aiohttp.ClientSession,
        method: str,
        params: Optional[Dict] = None,
        data: Optional[Dict] = None
    ) -> Dict:
        """Call the explorer API and decode the JSON envelope"""
        query = {'chainid': self.chain_id, 'apikey': self.api_key or ''}
        query.update(params or {})

        async with session.request(method, self.api_url, params=query, data=data) as response:
            response.raise_for_status()
            return await response.json(content_type=None)
