"""Tests for the probe procedure."""

from unittest.mock import MagicMock

import pytest

from service_probes.bindings import CredentialResolver
from service_probes.core import ProbeProcedure
from service_probes.domain import (
    Backend,
    CleanupError,
    ConnectionError,
    ProbeDefinition,
    ProbeErrorKind,
    ProbeState,
    WriteError,
)
from tests.conftest import ELASTICACHE_VCAP, RecordingClientFactory


def make_procedure(factory, service_name="test-elasticache", vcap=ELASTICACHE_VCAP):
    definition = ProbeDefinition(
        backend=Backend.ELASTICACHE,
        display_name="Elasticache",
        service_name=service_name,
        key="foo",
        value="bar",
    )
    return ProbeProcedure(definition, CredentialResolver.from_vcap(vcap), factory)


class TestProbeProcedure:
    """Test the probe state machine."""

    @pytest.mark.asyncio
    async def test_successful_round_trip(self):
        """Test write then read returns the value and the probe completes."""
        factory = RecordingClientFactory()
        result = await make_procedure(factory).run()

        assert result.success
        assert result.state == ProbeState.DONE
        assert result.error is None
        assert result.error_kind is None
        assert factory.last.calls == ["connect", "write", "read", "cleanup", "close"]

    @pytest.mark.asyncio
    async def test_credentials_passed_to_client(self):
        """Test the client connects with the resolved binding."""
        factory = RecordingClientFactory()
        await make_procedure(factory).run()

        credentials = factory.last.credentials
        assert credentials.address == "redis_host:6379"
        assert credentials.password.get_secret_value() == "redis_password"

    @pytest.mark.asyncio
    async def test_canary_removed_before_close(self):
        """Test the canary key does not outlive the probe."""
        store: dict[str, str] = {}
        factory = RecordingClientFactory(store=store)
        await make_procedure(factory).run()

        assert store == {}
        assert factory.last.close_count == 1

    @pytest.mark.asyncio
    async def test_unknown_binding_never_connects(self):
        """Test a missing binding fails before any client is created."""
        factory = MagicMock()
        result = await make_procedure(factory, service_name="missing").run()

        assert not result.success
        assert result.state == ProbeState.FAILED
        assert result.last_state == ProbeState.IDLE
        assert result.error_kind == ProbeErrorKind.CREDENTIAL_ERROR
        assert "no service with name missing" in result.error
        factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_unreadable_catalog(self):
        """Test an unset catalog is a credential error."""
        factory = MagicMock()
        result = await make_procedure(factory, vcap=None).run()

        assert result.error_kind == ProbeErrorKind.CREDENTIAL_ERROR
        assert result.error == "VCAP_SERVICES is not set"
        factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_connect_failure_skips_write_and_read(self):
        """Test a failed connect stops the probe and still closes safely."""
        factory = RecordingClientFactory(
            connect_error=ConnectionError("connection refused")
        )
        result = await make_procedure(factory).run()

        assert result.state == ProbeState.FAILED
        assert result.last_state == ProbeState.CREDENTIALS_RESOLVED
        assert result.error_kind == ProbeErrorKind.CONNECTION_ERROR
        assert result.error == "connection refused"
        assert factory.last.calls == ["connect", "close"]

    @pytest.mark.asyncio
    async def test_unexpected_connect_exception_is_wrapped(self):
        """Test driver exceptions map to the stage that raised them."""
        factory = RecordingClientFactory(connect_error=OSError("no route to host"))
        result = await make_procedure(factory).run()

        assert result.error_kind == ProbeErrorKind.CONNECTION_ERROR
        assert result.error == "no route to host"

    @pytest.mark.asyncio
    async def test_client_factory_failure(self):
        """Test a client that cannot be built is a connection error."""
        factory = MagicMock(side_effect=ValueError("bad options"))
        result = await make_procedure(factory).run()

        assert result.error_kind == ProbeErrorKind.CONNECTION_ERROR
        assert "bad options" in result.error

    @pytest.mark.asyncio
    async def test_write_failure_closes_connection(self):
        """Test a failed write still releases the connection."""
        factory = RecordingClientFactory(write_error=WriteError("read only replica"))
        result = await make_procedure(factory).run()

        assert result.error_kind == ProbeErrorKind.WRITE_ERROR
        assert result.last_state == ProbeState.CONNECTED
        assert factory.last.calls == ["connect", "write", "close"]
        assert factory.last.close_count == 1

    @pytest.mark.asyncio
    async def test_read_failure(self):
        """Test a failed read is a read error and the canary is still removed."""
        factory = RecordingClientFactory(read_error=RuntimeError("timeout"))
        result = await make_procedure(factory).run()

        assert result.error_kind == ProbeErrorKind.READ_ERROR
        assert result.last_state == ProbeState.WRITTEN
        assert factory.last.calls == ["connect", "write", "read", "cleanup", "close"]

    @pytest.mark.asyncio
    async def test_mismatch_is_verification_error(self):
        """Test a different value read back fails verification."""
        factory = RecordingClientFactory(read_override="baz")
        result = await make_procedure(factory).run()

        assert result.state == ProbeState.FAILED
        assert result.error_kind == ProbeErrorKind.VERIFICATION_ERROR
        assert result.error == (
            "value set but not retrieved: expected 'bar', got 'baz'"
        )
        assert "cleanup" in factory.last.calls
        assert factory.last.close_count == 1

    @pytest.mark.asyncio
    async def test_cleanup_failure_does_not_fail_probe(self):
        """Test cleanup errors are ignored."""
        factory = RecordingClientFactory(cleanup_error=CleanupError("DEL refused"))
        result = await make_procedure(factory).run()

        assert result.success
        assert factory.last.close_count == 1

    @pytest.mark.asyncio
    async def test_close_failure_does_not_fail_probe(self):
        """Test errors while releasing the connection are ignored."""
        factory = RecordingClientFactory(close_error=RuntimeError("already gone"))
        result = await make_procedure(factory).run()

        assert result.success

    @pytest.mark.asyncio
    async def test_each_run_uses_a_fresh_client(self):
        """Test invocations share no connection state."""
        factory = RecordingClientFactory()
        procedure = make_procedure(factory)

        await procedure.run()
        await procedure.run()

        assert len(factory.clients) == 2
        assert factory.clients[0] is not factory.clients[1]

    @pytest.mark.asyncio
    async def test_success_logs_result(self):
        """Test the completed run is logged with the serialized result."""
        procedure = make_procedure(RecordingClientFactory())
        procedure._logger = MagicMock()

        result = await procedure.run()

        procedure._logger.info.assert_called_once()
        (event,) = procedure._logger.info.call_args.args
        fields = procedure._logger.info.call_args.kwargs
        assert event == "Probe succeeded"
        assert fields["state"] == "done"
        assert fields["success"] is True
        assert fields["response_time_ms"] == result.response_time_ms

    @pytest.mark.asyncio
    async def test_failure_logs_result_and_details(self):
        """Test a failed run logs the result and the error details."""
        procedure = make_procedure(RecordingClientFactory(read_override="baz"))
        procedure._logger = MagicMock()

        await procedure.run()

        procedure._logger.warning.assert_called_once()
        fields = procedure._logger.warning.call_args.kwargs
        assert fields["state"] == "failed"
        assert fields["last_state"] == "written"
        assert fields["error_kind"] == "verification_error"
        assert fields["details"] == {"expected": "bar", "actual": "baz"}

    @pytest.mark.asyncio
    async def test_unknown_binding_logs_service_name(self):
        """Test a missing binding's name is carried in the logged details."""
        procedure = make_procedure(MagicMock(), service_name="missing")
        procedure._logger = MagicMock()

        await procedure.run()

        fields = procedure._logger.warning.call_args.kwargs
        assert fields["details"] == {"service_name": "missing"}
        assert fields["error_kind"] == "credential_error"

    @pytest.mark.asyncio
    async def test_result_to_dict(self):
        """Test result serialization."""
        factory = RecordingClientFactory(read_override="baz")
        result = await make_procedure(factory).run()

        result_dict = result.to_dict()
        assert result_dict["service"] == "Elasticache"
        assert result_dict["state"] == "failed"
        assert result_dict["last_state"] == "written"
        assert result_dict["success"] is False
        assert result_dict["error_kind"] == "verification_error"
        assert result_dict["response_time_ms"] >= 0
