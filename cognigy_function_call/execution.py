"""Execution preparer — packages the function call and starts the callee flow.

Runs once per node invocation:

    1. validate the config (nothing is written before this passes)
    2. recover the flow and node reference ids from their selections
    3. publish the FunctionCallEnvelope on the input under ``functionCall``
    4. execute the callee flow at the selected entry node
    5. log one info line through the host

Failures of the execution call itself propagate unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Mapping, Protocol

from cognigy_function_call.config import STORAGE_TYPES, ConfigurationError, FunctionCallConfig
from cognigy_function_call.selection import decode_selection

INPUT_KEY = "functionCall"


class HostApi(Protocol):
    """The host primitives this node uses."""

    def add_to_input(self, key: str, value: Any) -> None: ...

    def log(self, level: str, message: str) -> None: ...

    def execute_flow(self, config: dict[str, Any]) -> Awaitable[Any]: ...


@dataclass(frozen=True)
class FunctionCallEnvelope:
    function_name: str
    output_storage_type: str
    output_storage_path: str
    payload: Any = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "functionName": self.function_name,
            "payload": self.payload,
            "output": {
                "storageType": self.output_storage_type,
                "path": self.output_storage_path,
            },
        }


@dataclass(frozen=True)
class PreparedCall:
    """A validated call: the envelope plus the reference ids to execute."""

    envelope: FunctionCallEnvelope
    flow_reference_id: str
    node_reference_id: str

    @property
    def execute_config(self) -> dict[str, Any]:
        return {"flowNode": {"flow": self.flow_reference_id, "node": self.node_reference_id}}


def _required_text(value: Any, field_key: str) -> str:
    text = "" if value is None else str(value).strip()
    if not text:
        raise ConfigurationError(field_key)
    return text


def _reference_id(raw: Any, field_key: str) -> str:
    selection = decode_selection(raw)
    if selection is None:
        raise ConfigurationError(field_key)
    return selection.reference_id


class ExecutionPreparer:
    """Validates a Function Call config and triggers the callee flow."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("cognigy_function_call.execution")

    def build(self, config: Mapping[str, Any] | FunctionCallConfig) -> PreparedCall:
        """Validate *config* and build the call. Raises ConfigurationError; no side effects."""
        cfg = FunctionCallConfig.parse(config)

        flow_reference_id = _reference_id(cfg.flow, "flow")
        node_reference_id = _reference_id(cfg.node, "node")
        function_name = _required_text(cfg.function_name, "functionName")
        output_path = _required_text(cfg.output_storage_path, "outputStoragePath")

        storage_type = (cfg.output_storage_type or "input").strip()
        if storage_type not in STORAGE_TYPES:
            raise ConfigurationError(
                "outputStorageType",
                f"Output Storage Type must be one of {', '.join(STORAGE_TYPES)}, got {storage_type!r}",
            )

        payload = cfg.payload
        if payload is None or payload == "":
            payload = {}

        envelope = FunctionCallEnvelope(
            function_name=function_name,
            output_storage_type=storage_type,
            output_storage_path=output_path,
            payload=payload,
        )
        return PreparedCall(envelope, flow_reference_id, node_reference_id)

    async def prepare(self, config: Mapping[str, Any] | FunctionCallConfig, api: HostApi) -> PreparedCall:
        call = self.build(config)
        self._logger.debug(
            "Executing flow %s at node %s for function %s",
            call.flow_reference_id,
            call.node_reference_id,
            call.envelope.function_name,
        )

        api.add_to_input(INPUT_KEY, call.envelope.to_dict())
        await api.execute_flow(call.execute_config)

        api.log(
            "info",
            f"Function call {call.envelope.function_name} executed flow "
            f"{call.flow_reference_id} at node {call.node_reference_id}",
        )
        return call
