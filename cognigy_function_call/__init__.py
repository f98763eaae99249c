"""Cognigy Function Call node — flow/entry-node discovery and function-call execution.

Public surface:
    FunctionCallNode   — node function + option resolution entry points.
    FlowResolver       — flows of a project as select options.
    NodeResolver       — entry-point nodes of a flow as select options.
    ExecutionPreparer  — validates config, publishes the envelope, executes the flow.
    decode_selection   — the single parser for stored flow/node selections.
"""

from cognigy_function_call.config import ConfigurationError, Credentials, FunctionCallConfig
from cognigy_function_call.execution import ExecutionPreparer, FunctionCallEnvelope, PreparedCall
from cognigy_function_call.node import EXTENSION, FunctionCallNode
from cognigy_function_call.resolvers import FlowResolver, NodeResolver, resolve_options
from cognigy_function_call.selection import (
    BareSelection,
    PairSelection,
    decode_selection,
    encode_selection,
)

__all__ = [
    "BareSelection",
    "ConfigurationError",
    "Credentials",
    "EXTENSION",
    "ExecutionPreparer",
    "FlowResolver",
    "FunctionCallConfig",
    "FunctionCallEnvelope",
    "FunctionCallNode",
    "NodeResolver",
    "PairSelection",
    "PreparedCall",
    "decode_selection",
    "encode_selection",
    "resolve_options",
]
