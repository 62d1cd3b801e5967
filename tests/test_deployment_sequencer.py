"""
Unit Tests for the Deployment Sequencer
"""

import pytest
from unittest.mock import Mock, AsyncMock, call, patch

from blockchain.transaction_handle import TransactionRevertedError
from deployer.config import DeploymentConfig
from deployer.deployment_sequencer import DeploymentSequencer, SEPOLIA_CHAIN_ID
from verification.etherscan import VerificationResult, VerificationStatus

ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
LOCAL_CHAIN_ID = 31337


@pytest.fixture
def contract():
    """Deployed contract double; retrieve() returns 0 then 12"""
    contract = Mock()
    contract.address = ADDRESS
    contract.deployed = AsyncMock(return_value=contract)
    contract.deployment_transaction = Mock()
    contract.deployment_transaction.wait = AsyncMock(return_value={'status': 1})
    contract.call = Mock(side_effect=[0, 12])

    store_tx = Mock()
    store_tx.wait = AsyncMock(return_value={'status': 1})
    contract.transact = AsyncMock(return_value=store_tx)
    contract.store_tx = store_tx

    return contract


@pytest.fixture
def factory(contract):
    factory = Mock()
    factory.artifact = Mock()
    factory.deploy = AsyncMock(return_value=contract)
    return factory


@pytest.fixture
def verifier():
    verifier = Mock()
    verifier.verify = AsyncMock(return_value=VerificationResult(VerificationStatus.VERIFIED))
    return verifier


@pytest.fixture
def recorder(factory, contract, verifier):
    """Single mock recording every remote interaction in order"""
    manager = Mock()
    manager.attach_mock(factory.deploy, 'deploy')
    manager.attach_mock(contract.deployed, 'deployed')
    manager.attach_mock(contract.deployment_transaction.wait, 'deploy_wait')
    manager.attach_mock(verifier.verify, 'verify')
    manager.attach_mock(contract.call, 'call')
    manager.attach_mock(contract.transact, 'transact')
    manager.attach_mock(contract.store_tx.wait, 'store_wait')
    return manager


def make_sequencer(factory, verifier, chain_id, api_key):
    config = DeploymentConfig(chain_id=chain_id, explorer_api_key=api_key)
    sequencer = DeploymentSequencer(config, tx_builder=Mock(), verifier=verifier)
    sequencer.get_contract_factory = Mock(return_value=factory)
    return sequencer


class TestDeploymentSequence:
    """End-to-end ordering of the sequence"""

    @pytest.mark.asyncio
    async def test_sepolia_with_api_key(self, factory, contract, verifier, recorder):
        """Verification after 6 confirmations, then retrieve/store/retrieve"""
        sequencer = make_sequencer(factory, verifier, SEPOLIA_CHAIN_ID, "API_KEY")

        await sequencer.run()

        sequencer.get_contract_factory.assert_called_once_with("SimpleStorage")
        assert recorder.mock_calls == [
            call.deploy(),
            call.deployed(),
            call.deploy_wait(6),
            call.verify(ADDRESS, [], factory.artifact),
            call.call("retrieve"),
            call.transact("store", 12),
            call.store_wait(1),
            call.call("retrieve")
        ]

    @pytest.mark.asyncio
    async def test_local_without_api_key(self, factory, contract, verifier, recorder):
        """No verification, interaction still runs in order"""
        sequencer = make_sequencer(factory, verifier, LOCAL_CHAIN_ID, None)

        await sequencer.run()

        verifier.verify.assert_not_called()
        contract.deployment_transaction.wait.assert_not_called()
        assert recorder.mock_calls == [
            call.deploy(),
            call.deployed(),
            call.call("retrieve"),
            call.transact("store", 12),
            call.store_wait(1),
            call.call("retrieve")
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("chain_id,api_key", [
        (SEPOLIA_CHAIN_ID, None),
        (SEPOLIA_CHAIN_ID, ""),
        (LOCAL_CHAIN_ID, "API_KEY"),
        (1, "API_KEY")
    ])
    async def test_verification_gates(self, factory, verifier, chain_id, api_key):
        """Verification needs both the Sepolia chain id and an API key"""
        sequencer = make_sequencer(factory, verifier, chain_id, api_key)

        await sequencer.run()

        verifier.verify.assert_not_called()

    @pytest.mark.asyncio
    async def test_returns_simple_storage(self, factory, verifier):
        sequencer = make_sequencer(factory, verifier, LOCAL_CHAIN_ID, None)

        simple_storage = await sequencer.run()

        assert simple_storage.address == ADDRESS

    @pytest.mark.asyncio
    async def test_logs_progress(self, factory, verifier, log_messages):
        sequencer = make_sequencer(factory, verifier, LOCAL_CHAIN_ID, None)

        await sequencer.run()

        assert "Deploying contract..." in log_messages
        assert f"Deployed contract to: {ADDRESS}" in log_messages
        assert "Current Value is: 0" in log_messages
        assert "Updated Value is: 12" in log_messages


class TestVerificationOutcomes:
    """Verification never aborts the sequence"""

    @pytest.mark.asyncio
    async def test_already_verified(self, factory, contract, verifier, log_messages):
        verifier.verify.return_value = VerificationResult(
            VerificationStatus.ALREADY_VERIFIED,
            "Contract source code ALREADY VERIFIED"
        )
        sequencer = make_sequencer(factory, verifier, SEPOLIA_CHAIN_ID, "API_KEY")

        await sequencer.run()

        verifier.verify.assert_awaited_once()
        assert "Already Verified!" in log_messages
        assert contract.transact.await_count == 1

    @pytest.mark.asyncio
    async def test_failed_verification_continues(self, factory, contract, verifier, log_messages):
        verifier.verify.return_value = VerificationResult(
            VerificationStatus.FAILED,
            "Fail - Unable to verify"
        )
        sequencer = make_sequencer(factory, verifier, SEPOLIA_CHAIN_ID, "API_KEY")

        await sequencer.run()

        assert "Verification failed: Fail - Unable to verify" in log_messages
        contract.transact.assert_awaited_once_with("store", 12)
        assert contract.call.call_count == 2


    @pytest.mark.asyncio
    async def test_pending_verification_is_reported_as_failure(self, factory, contract, verifier, log_messages):
        verifier.verify.return_value = VerificationResult(
            VerificationStatus.PENDING,
            "Pending in queue"
        )
        sequencer = make_sequencer(factory, verifier, SEPOLIA_CHAIN_ID, "API_KEY")

        await sequencer.run()

        assert "Verification failed: Pending in queue" in log_messages
        assert not any("verified" in message for message in log_messages)
        contract.transact.assert_awaited_once_with("store", 12)
    @pytest.mark.asyncio
    async def test_no_log_when_skipped(self, factory, verifier, log_messages):
        sequencer = make_sequencer(factory, verifier, LOCAL_CHAIN_ID, None)

        await sequencer.run()

        assert not any("erif" in message for message in log_messages)


class TestFatalErrors:
    """Errors outside verification propagate unchanged"""

    @pytest.mark.asyncio
    async def test_deploy_failure(self, factory, verifier):
        factory.deploy.side_effect = ValueError("insufficient funds for gas * price + value")
        sequencer = make_sequencer(factory, verifier, LOCAL_CHAIN_ID, None)

        with pytest.raises(ValueError, match="insufficient funds"):
            await sequencer.run()

    @pytest.mark.asyncio
    async def test_retrieve_failure(self, factory, contract, verifier):
        contract.call.side_effect = ConnectionError("node unreachable")
        sequencer = make_sequencer(factory, verifier, LOCAL_CHAIN_ID, None)

        with pytest.raises(ConnectionError):
            await sequencer.run()

        contract.transact.assert_not_called()

    @pytest.mark.asyncio
    async def test_store_revert(self, factory, contract, verifier):
        contract.store_tx.wait.side_effect = TransactionRevertedError("0xdead")
        sequencer = make_sequencer(factory, verifier, LOCAL_CHAIN_ID, None)

        with pytest.raises(TransactionRevertedError):
            await sequencer.run()

        assert contract.call.call_count == 1

    @pytest.mark.asyncio
    async def test_confirmation_wait_failure_is_fatal(self, factory, contract, verifier):
        contract.deployment_transaction.wait.side_effect = TimeoutError("no blocks")
        sequencer = make_sequencer(factory, verifier, SEPOLIA_CHAIN_ID, "API_KEY")

        with pytest.raises(TimeoutError):
            await sequencer.run()

        verifier.verify.assert_not_called()


class TestContractFactoryLookup:

    def test_get_contract_factory_loads_artifact(self, artifacts_dir):
        config = DeploymentConfig(chain_id=LOCAL_CHAIN_ID, artifacts_dir=artifacts_dir)
        tx_builder = Mock()
        sequencer = DeploymentSequencer(config, tx_builder, verifier=Mock())

        factory = sequencer.get_contract_factory("SimpleStorage")

        assert factory.artifact.contract_name == "SimpleStorage"
        assert factory.tx_builder is tx_builder

    def test_missing_artifact(self, tmp_path):
        config = DeploymentConfig(chain_id=LOCAL_CHAIN_ID, artifacts_dir=str(tmp_path))
        sequencer = DeploymentSequencer(config, Mock(), verifier=Mock())

        with pytest.raises(FileNotFoundError, match="npx hardhat compile"):
            sequencer.get_contract_factory("SimpleStorage")


class TestEntryPoint:
    """Process exit codes"""

    @pytest.mark.asyncio
    async def test_success_exit_code(self):
        import main as entry

        with patch.object(entry, 'DeploymentRunner') as runner_cls:
            runner_cls.return_value.run = AsyncMock()
            assert await entry.main() == 0

    @pytest.mark.asyncio
    async def test_failure_exit_code(self, log_messages):
        import main as entry

        with patch.object(entry, 'DeploymentRunner') as runner_cls:
            runner_cls.return_value.run = AsyncMock(side_effect=RuntimeError("boom"))
            assert await entry.main() == 1

        assert "Deployment failed: boom" in log_messages
