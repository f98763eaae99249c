"""Function Call node: descriptor, connection schema and node function.

The descriptor dicts are what the host renders; ``FunctionCallNode`` is what it
calls. Option fields declare their resolver dependencies so the host knows
when to re-run ``FunctionCallNode.options``.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from cognigy_function_call.execution import ExecutionPreparer, HostApi, PreparedCall
from cognigy_function_call.resolvers import RESOLVERS, FlowResolver, NodeResolver, Option, resolve_options

CONNECTION_TYPE = "cognigy-api"

COGNIGY_API_CONNECTION: dict[str, Any] = {
    "type": CONNECTION_TYPE,
    "label": "Cognigy API",
    "fields": [
        {"fieldName": "apiUrl"},
        {"fieldName": "apiKey"},
        {"fieldName": "projectId"},
    ],
}

FIELDS: list[dict[str, Any]] = [
    {
        "key": "apiConnection",
        "label": "Cognigy API Connection",
        "type": "connection",
        "description": "Reusable connection holding the API URL, API key and project id",
        "params": {"connectionType": CONNECTION_TYPE, "required": False},
    },
    {
        "key": "apiBaseUrl",
        "label": "API Base URL",
        "type": "cognigyText",
        "description": "Used when no connection is selected (e.g. 'https://api-trial.cognigy.ai')",
        "params": {"required": False},
    },
    {
        "key": "apiKey",
        "label": "API Key",
        "type": "cognigyText",
        "description": "Used when no connection is selected",
        "params": {"required": False},
    },
    {
        "key": "projectId",
        "label": "Project ID",
        "type": "cognigyText",
        "description": "Used when no connection is selected",
        "params": {"required": False},
    },
    {
        "key": "flow",
        "label": "Flow",
        "type": "select",
        "description": "The flow to execute",
        "params": {"required": True},
        "optionsResolver": {"dependencies": list(FlowResolver.depends_on)},
    },
    {
        "key": "node",
        "label": "Entry Node",
        "type": "select",
        "description": "The entry point inside the flow where execution starts",
        "params": {"required": True},
        "optionsResolver": {"dependencies": list(NodeResolver.depends_on)},
    },
    {
        "key": "functionName",
        "label": "Function Name",
        "type": "cognigyText",
        "description": "The name/identifier of the function to execute",
        "params": {"required": True},
    },
    {
        "key": "payload",
        "label": "Payload",
        "type": "json",
        "description": "Input data to pass to the function",
        "params": {"required": False},
    },
    {
        "key": "outputStorageType",
        "label": "Output Storage Type",
        "type": "select",
        "defaultValue": "input",
        "description": "Where to store the function's result",
        "params": {
            "options": [
                {"label": "Input", "value": "input"},
                {"label": "Context", "value": "context"},
            ],
            "required": True,
        },
    },
    {
        "key": "outputStoragePath",
        "label": "Output Storage Path",
        "type": "cognigyText",
        "description": "The exact data path where output should be stored (e.g., 'data.myOutput' or 'myContextKey')",
        "params": {"required": True},
    },
]

SECTIONS: list[dict[str, Any]] = [
    {
        "key": "apiSettings",
        "label": "API Settings",
        "defaultCollapsed": True,
        "fields": ["apiConnection", "apiBaseUrl", "apiKey", "projectId"],
    },
    {
        "key": "targetSettings",
        "label": "Target Flow",
        "defaultCollapsed": False,
        "fields": ["flow", "node"],
    },
    {
        "key": "functionSettings",
        "label": "Function Settings",
        "defaultCollapsed": False,
        "fields": ["functionName", "payload"],
    },
    {
        "key": "outputSettings",
        "label": "Output Settings",
        "defaultCollapsed": False,
        "fields": ["outputStorageType", "outputStoragePath"],
    },
]

FUNCTION_CALL_NODE: dict[str, Any] = {
    "type": "functionCall",
    "defaultLabel": "Function Call",
    "summary": "Execute a function with input/output validation through flow calls",
    "fields": FIELDS,
    "sections": SECTIONS,
    "form": [{"type": "section", "key": section["key"]} for section in SECTIONS],
    "preview": {"type": "text", "key": "functionName"},
}

EXTENSION: dict[str, Any] = {
    "nodes": [FUNCTION_CALL_NODE],
    "connections": [COGNIGY_API_CONNECTION],
    "options": {"label": "Function Call"},
}


class FunctionCallNode:
    """Binds the descriptor to its resolvers and the execution preparer."""

    descriptor = FUNCTION_CALL_NODE

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger
        self._preparer = ExecutionPreparer(logger=logger)

    async def options(self, field_key: str, config: Mapping[str, Any]) -> list[Option]:
        return await resolve_options(field_key, config, logger=self._logger)

    async def run(self, config: Mapping[str, Any], api: HostApi) -> PreparedCall:
        return await self._preparer.prepare(config, api)

    @staticmethod
    def option_fields() -> list[str]:
        return list(RESOLVERS)
