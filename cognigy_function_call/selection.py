"""Persisted flow/node selections.

A selection stored in the node config must let the execution step recover the
stable reference id without another API call, while the node resolver still
needs the internal id for discovery. Both ids therefore travel together as a
compact JSON object:

    {"id": "<internalId>", "referenceId": "<referenceId>"}

Configs saved before this format existed hold a bare string. ``decode_selection``
is the only parser; every consumer goes through it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Union


@dataclass(frozen=True)
class BareSelection:
    """Legacy selection: a single identifier string of unknown kind."""

    value: str

    @property
    def internal_id(self) -> str:
        return self.value

    @property
    def reference_id(self) -> str:
        return self.value


@dataclass(frozen=True)
class PairSelection:
    """Selection carrying both the internal id and the reference id."""

    internal_id: str
    reference_id: str

    def encode(self) -> str:
        return json.dumps(
            {"id": self.internal_id, "referenceId": self.reference_id},
            separators=(",", ":"),
        )


Selection = Union[BareSelection, PairSelection]


def encode_selection(internal_id: str, reference_id: str) -> str:
    return PairSelection(internal_id, reference_id).encode()


def _pair_from_mapping(data: Mapping[str, Any]) -> PairSelection | None:
    internal_id = data.get("id")
    reference_id = data.get("referenceId")
    if isinstance(internal_id, str) and isinstance(reference_id, str) and internal_id and reference_id:
        return PairSelection(internal_id, reference_id)
    return None


def decode_selection(raw: Any) -> Selection | None:
    """Interpret a stored selection value.

    Returns None for an empty value. A JSON object (or an already-parsed
    mapping) with non-empty ``id`` and ``referenceId`` becomes a
    PairSelection; any other non-empty value is kept verbatim as a
    BareSelection.
    """
    if raw is None:
        return None
    if isinstance(raw, Mapping):
        return _pair_from_mapping(raw)
    text = str(raw).strip()
    if not text:
        return None
    if text.startswith("{"):
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            data = None
        if isinstance(data, dict):
            pair = _pair_from_mapping(data)
            if pair is not None:
                return pair
    return BareSelection(text)
