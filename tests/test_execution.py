"""ExecutionPreparer — validation before side effects, id recovery, envelope, execution."""

from __future__ import annotations

import pytest

from cognigy_function_call.config import ConfigurationError, Credentials
from cognigy_function_call.execution import INPUT_KEY, ExecutionPreparer
from cognigy_function_call.resolvers import FlowResolver
from cognigy_function_call.selection import encode_selection

FLOW = encode_selection("flow-internal", "flow-ref")
NODE = encode_selection("node-internal", "node-ref")


class FakeApi:
    """Host primitives recording every call in one shared event list."""

    def __init__(self, fail: Exception | None = None):
        self.events: list[tuple] = []
        self._fail = fail

    def add_to_input(self, key, value):
        self.events.append(("add_to_input", key, value))

    def log(self, level, message):
        self.events.append(("log", level, message))

    async def execute_flow(self, config):
        self.events.append(("execute_flow", config))
        if self._fail is not None:
            raise self._fail

    def of(self, kind):
        return [e for e in self.events if e[0] == kind]


def _config(**overrides):
    config = {
        "flow": FLOW,
        "node": NODE,
        "functionName": "doThing",
        "payload": {"x": 1},
        "outputStorageType": "context",
        "outputStoragePath": "result",
    }
    config.update(overrides)
    return config


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------


class TestPrepare:
    """prepare publishes the envelope, executes once and traces once."""

    @pytest.mark.asyncio
    async def test_publishes_envelope_and_executes_once(self):
        """Envelope under functionCall and one execute call with reference ids."""
        api = FakeApi()
        await ExecutionPreparer().prepare(_config(), api)

        assert api.of("add_to_input") == [(
            "add_to_input",
            INPUT_KEY,
            {
                "functionName": "doThing",
                "payload": {"x": 1},
                "output": {"storageType": "context", "path": "result"},
            },
        )]
        assert api.of("execute_flow") == [("execute_flow", {"flowNode": {"flow": "flow-ref", "node": "node-ref"}})]

    @pytest.mark.asyncio
    async def test_envelope_published_before_execution(self):
        """add_to_input happens before execute_flow."""
        api = FakeApi()
        await ExecutionPreparer().prepare(_config(), api)
        kinds = [e[0] for e in api.events]
        assert kinds.index("add_to_input") < kinds.index("execute_flow")

    @pytest.mark.asyncio
    async def test_one_info_trace_naming_ids(self):
        """Exactly one info line naming function, flow and node."""
        api = FakeApi()
        await ExecutionPreparer().prepare(_config(), api)

        logs = api.of("log")
        assert len(logs) == 1
        _, level, message = logs[0]
        assert level == "info"
        assert "doThing" in message
        assert "flow-ref" in message
        assert "node-ref" in message

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [None, ""])
    async def test_payload_defaults_to_empty_mapping(self, payload):
        """None or empty payload becomes {}."""
        api = FakeApi()
        await ExecutionPreparer().prepare(_config(payload=payload), api)
        assert api.of("add_to_input")[0][2]["payload"] == {}

    @pytest.mark.asyncio
    async def test_payload_absent(self):
        """A missing payload key becomes {}."""
        config = _config()
        del config["payload"]
        call = await ExecutionPreparer().prepare(config, FakeApi())
        assert call.envelope.payload == {}

    @pytest.mark.asyncio
    async def test_storage_type_defaults_to_input(self):
        """Missing storage type routes output to input."""
        config = _config()
        del config["outputStorageType"]
        call = await ExecutionPreparer().prepare(config, FakeApi())
        assert call.envelope.to_dict()["output"]["storageType"] == "input"

    @pytest.mark.asyncio
    async def test_legacy_and_compound_selections_execute_identically(self):
        """Bare reference ids and compound values issue the same call."""
        compound, legacy = FakeApi(), FakeApi()
        await ExecutionPreparer().prepare(_config(), compound)
        await ExecutionPreparer().prepare(_config(flow="flow-ref", node="node-ref"), legacy)

        assert compound.of("execute_flow") == legacy.of("execute_flow")
        assert compound.of("add_to_input") == legacy.of("add_to_input")

    @pytest.mark.asyncio
    async def test_already_parsed_selection_mapping(self):
        """Selections already decoded to mappings are accepted."""
        api = FakeApi()
        await ExecutionPreparer().prepare(
            _config(flow={"id": "fi", "referenceId": "fr"}, node={"id": "ni", "referenceId": "nr"}), api
        )
        assert api.of("execute_flow")[0][1] == {"flowNode": {"flow": "fr", "node": "nr"}}


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidation:
    """Configuration errors are raised before any side effect."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "field, label",
        [
            ("flow", "Flow"),
            ("node", "Entry Node"),
            ("functionName", "Function Name"),
            ("outputStoragePath", "Output Storage Path"),
        ],
    )
    @pytest.mark.parametrize("missing", [None, "", "   ", "drop"])
    async def test_missing_required_field_aborts_without_side_effects(self, field, label, missing):
        """Each required field, absent or blank, aborts and names the field."""
        config = _config()
        if missing == "drop":
            del config[field]
        else:
            config[field] = missing
        api = FakeApi()

        with pytest.raises(ConfigurationError) as exc:
            await ExecutionPreparer().prepare(config, api)

        assert exc.value.field == field
        assert label in str(exc.value)
        assert api.events == []

    @pytest.mark.asyncio
    async def test_unknown_storage_type(self):
        """Storage types other than input and context are rejected."""
        api = FakeApi()
        with pytest.raises(ConfigurationError) as exc:
            await ExecutionPreparer().prepare(_config(outputStorageType="session"), api)
        assert exc.value.field == "outputStorageType"
        assert api.events == []

    @pytest.mark.asyncio
    async def test_wrongly_typed_field(self):
        """A wrongly typed field is a configuration error."""
        api = FakeApi()
        with pytest.raises(ConfigurationError) as exc:
            await ExecutionPreparer().prepare(_config(functionName=["a"]), api)
        assert exc.value.field == "functionName"
        assert api.events == []

    def test_configuration_error_is_value_error(self):
        """ConfigurationError is a ValueError."""
        assert issubclass(ConfigurationError, ValueError)


# ---------------------------------------------------------------------------
# Execution failures
# ---------------------------------------------------------------------------


class TestExecutionFailure:
    """Execution failures reach the caller untouched."""

    @pytest.mark.asyncio
    async def test_error_propagates_unmodified(self):
        """The same exception object propagates and no trace is logged."""
        boom = RuntimeError("callee flow failed")
        api = FakeApi(fail=boom)

        with pytest.raises(RuntimeError) as exc:
            await ExecutionPreparer().prepare(_config(), api)

        assert exc.value is boom
        assert len(api.of("execute_flow")) == 1
        assert api.of("log") == []


# ---------------------------------------------------------------------------
# Resolver → preparer round trip
# ---------------------------------------------------------------------------


class _FlowsClient:
    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None

    async def list_flows(self, project_id, limit, skip=0):
        return {"items": [{"_id": "volatile-1", "name": "Billing", "referenceId": "stable-ref"}], "nextCursor": None}


class TestRoundTrip:
    """Option values from the resolver drive execution."""

    @pytest.mark.asyncio
    async def test_flow_option_value_executes_with_api_reference_id(self):
        """The flow option value executes with the API's reference id."""
        creds = Credentials(api_base_url="https://api.example", api_key="k", project_id="p")
        options = await FlowResolver(client_factory=lambda s: _FlowsClient()).resolve(creds)

        api = FakeApi()
        await ExecutionPreparer().prepare(_config(flow=options[0]["value"]), api)

        assert api.of("execute_flow")[0][1]["flowNode"]["flow"] == "stable-ref"
