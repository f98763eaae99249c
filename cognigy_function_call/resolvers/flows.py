"""Flow resolver — lists every flow in the configured project as selectable options."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from cognigy_function_call.config import Credentials
from cognigy_function_call.resolvers.base import OptionResolver, Option
from cognigy_function_call.resolvers.pagination import (
    PageShape,
    PaginationError,
    fetch_all,
    last_path_segment,
    self_link,
)
from cognigy_function_call.selection import encode_selection


@dataclass(frozen=True)
class FlowDescriptor:
    """One flow as reported by the API.

    ``internal_id`` addresses the flow in further discovery calls and may
    change between deployments; ``reference_id`` is stable and is what the
    execution call accepts.
    """

    internal_id: str
    display_name: str
    reference_id: str

    @classmethod
    def from_record(
        cls,
        record: dict[str, Any],
        shape: PageShape,
        logger: logging.Logger,
    ) -> FlowDescriptor | None:
        reference_id = str(record.get("referenceId") or "")
        internal_id = str(record.get("_id") or record.get("id") or "")
        if not internal_id:
            internal_id = last_path_segment(self_link(record))
        if not internal_id and shape is PageShape.HYPERLINKED and reference_id:
            # No id and no self link: the reference id is the only handle left,
            # and it is not guaranteed to work as a discovery path parameter.
            logger.warning(
                "Flow %r has no internal id or self link; using its reference id %s for discovery",
                record.get("name"),
                reference_id,
            )
            internal_id = reference_id
        if not internal_id or not reference_id:
            return None
        return cls(
            internal_id=internal_id,
            display_name=str(record.get("name") or reference_id),
            reference_id=reference_id,
        )

    def to_option(self) -> Option:
        return {
            "label": self.display_name,
            "value": encode_selection(self.internal_id, self.reference_id),
        }


class FlowResolver(OptionResolver):
    """Resolves the ``flow`` field from the credential fields."""

    field_key = "flow"

    async def fetch_flows(self, credentials: Credentials) -> list[FlowDescriptor]:
        """Fetch all flows of the project. Raises PaginationError when a page fails or pages never end."""
        async with self._open_client(credentials) as client:

            async def fetch_page(skip: int) -> Any:
                return await client.list_flows(credentials.project_id, limit=self._page_size, skip=skip)

            records, shape = await fetch_all(fetch_page, self._page_size, embedded_key="flow")

        flows: list[FlowDescriptor] = []
        for record in records:
            descriptor = FlowDescriptor.from_record(record, shape, self._logger)
            if descriptor is not None:
                flows.append(descriptor)
        return flows

    async def resolve(self, credentials: Credentials) -> list[Option]:
        if not credentials.is_complete:
            return []
        try:
            flows = await self.fetch_flows(credentials)
        except PaginationError as e:
            self._logger.warning("Could not list flows for project %s: %s", credentials.project_id, e)
            return []
        except Exception as e:
            self._logger.warning("Flow resolution failed: %s", e)
            return []
        return [flow.to_option() for flow in flows]

    async def resolve_fields(self, config: Mapping[str, Any]) -> list[Option]:
        return await self.resolve(Credentials.from_config(config))
