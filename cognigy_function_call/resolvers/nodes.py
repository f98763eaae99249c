"""Node resolver — lists the entry points of the selected flow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from cognigy_function_call.config import Credentials
from cognigy_function_call.resolvers.base import CREDENTIAL_FIELDS, OptionResolver, Option
from cognigy_function_call.resolvers.pagination import (
    PageShape,
    PaginationError,
    fetch_all,
    last_path_segment,
    self_link,
)
from cognigy_function_call.selection import decode_selection, encode_selection


@dataclass(frozen=True)
class NodeDescriptor:
    internal_id: str
    label: str
    node_type: str
    reference_id: str
    is_entry_point: bool

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> NodeDescriptor | None:
        internal_id = str(record.get("_id") or record.get("id") or "")
        if not internal_id:
            internal_id = last_path_segment(self_link(record))
        reference_id = str(record.get("referenceId") or "")
        if not internal_id or not reference_id:
            return None
        return cls(
            internal_id=internal_id,
            label=str(record.get("label") or ""),
            node_type=str(record.get("type") or ""),
            reference_id=reference_id,
            is_entry_point=record.get("isEntryPoint") is True,
        )

    def to_option(self) -> Option:
        name = self.label or self.node_type
        return {
            "label": f"{name} ({self.internal_id})",
            "value": encode_selection(self.internal_id, self.reference_id),
        }


class NodeResolver(OptionResolver):
    """Resolves the ``node`` field from the credentials and the flow selection."""

    field_key = "node"
    depends_on = CREDENTIAL_FIELDS + ("flow",)

    async def fetch_nodes(self, credentials: Credentials, flow_id: str) -> list[NodeDescriptor]:
        """Fetch every chart node of a flow. Raises PaginationError when a page fails or pages never end."""
        async with self._open_client(credentials) as client:

            async def fetch_page(skip: int) -> Any:
                return await client.list_flow_nodes(flow_id, limit=self._page_size, skip=skip)

            records, _ = await fetch_all(
                fetch_page, self._page_size, shapes=frozenset({PageShape.FLAT})
            )

        nodes: list[NodeDescriptor] = []
        for record in records:
            descriptor = NodeDescriptor.from_record(record)
            if descriptor is not None:
                nodes.append(descriptor)
        return nodes

    async def resolve(self, credentials: Credentials, flow_selection: Any) -> list[Option]:
        if not credentials.is_complete:
            return []
        selection = decode_selection(flow_selection)
        if selection is None:
            return []
        try:
            nodes = await self.fetch_nodes(credentials, selection.internal_id)
        except PaginationError as e:
            self._logger.warning("Could not list nodes of flow %s: %s", selection.internal_id, e)
            return []
        except Exception as e:
            self._logger.warning("Node resolution failed: %s", e)
            return []
        return [node.to_option() for node in nodes if node.is_entry_point]

    async def resolve_fields(self, config: Mapping[str, Any]) -> list[Option]:
        return await self.resolve(Credentials.from_config(config), config.get("flow"))
