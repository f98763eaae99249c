"""Option resolvers for the flow and entry-node select fields.

Public surface:
    FlowResolver     — flows of the configured project.
    NodeResolver     — entry-point nodes of the selected flow.
    RESOLVERS        — option field key → resolver class.
    resolve_options  — host entry point: field key + current config → options.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from cognigy_function_call.resolvers.base import OptionResolver, Option
from cognigy_function_call.resolvers.flows import FlowDescriptor, FlowResolver
from cognigy_function_call.resolvers.nodes import NodeDescriptor, NodeResolver

RESOLVERS: dict[str, type[OptionResolver]] = {
    FlowResolver.field_key: FlowResolver,
    NodeResolver.field_key: NodeResolver,
}


async def resolve_options(
    field_key: str,
    config: Mapping[str, Any],
    logger: logging.Logger | None = None,
) -> list[Option]:
    """Compute the options of one select field from the current config values.

    Raises KeyError for a field that has no resolver.
    """
    if field_key not in RESOLVERS:
        raise KeyError(f"No option resolver for field {field_key!r}. Registered: {list(RESOLVERS)}")
    resolver = RESOLVERS[field_key](logger=logger)
    return await resolver.resolve_fields(config)


__all__ = [
    "FlowDescriptor",
    "FlowResolver",
    "NodeDescriptor",
    "NodeResolver",
    "Option",
    "OptionResolver",
    "RESOLVERS",
    "resolve_options",
]
