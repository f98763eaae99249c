"""Shared plumbing for option resolvers.

A resolver is a pure function from the current config field values to a list
of ``{"label", "value"}`` options. ``depends_on`` names the fields whose change
should make the host call it again; scheduling those calls is the host's job.

Resolution never raises: missing inputs, transport failures and unexpected
payloads all come back as an empty option list.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from cognigy_function_call.client import CognigyClient, Settings
from cognigy_function_call.client.config import DEFAULT_PAGE_SIZE
from cognigy_function_call.config import Credentials

Option = dict[str, str]
ClientFactory = Callable[[Settings], CognigyClient]

# Config keys that carry credentials, in either of the two supported forms.
CREDENTIAL_FIELDS: tuple[str, ...] = ("apiConnection", "apiBaseUrl", "apiKey", "projectId")


class OptionResolver:
    """Base class: holds the client factory, page size and injected logger."""

    field_key: str = ""
    depends_on: tuple[str, ...] = CREDENTIAL_FIELDS

    def __init__(
        self,
        client_factory: ClientFactory | None = None,
        logger: logging.Logger | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._client_factory = client_factory
        self._logger = logger or logging.getLogger(f"cognigy_function_call.resolvers.{self.field_key}")
        self._page_size = page_size

    def _default_client(self, settings: Settings) -> CognigyClient:
        return CognigyClient(settings, logger=self._logger)

    def _open_client(self, credentials: Credentials) -> CognigyClient:
        factory = self._client_factory or self._default_client
        return factory(credentials.to_settings(page_size=self._page_size))

    async def resolve_fields(self, config: Mapping[str, Any]) -> list[Option]:
        raise NotImplementedError
