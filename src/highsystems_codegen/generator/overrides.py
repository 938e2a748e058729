"""Per-operation overrides: argument renames and schema patches.

Overrides are static configuration keyed by operationId, usually read
from a YAML file:

    users-getUser:
      request:
        args: {id: userId}
        body: {properties: {...}}
      response: {properties: {...}}
"""

import copy
from pathlib import Path

import yaml
from deepmerge import Merger
from pydantic import BaseModel


class RequestOverride(BaseModel):
    args: dict[str, str] = {}  # original name -> emitted name
    body: dict = {}  # patch merged onto the request body schema
    with_credentials: bool = False


class OverrideEntry(BaseModel):
    """All overrides registered for one operation."""

    request: RequestOverride = RequestOverride()
    response: dict = {}  # patch merged onto the 200 response schema
    array_merge: bool = False  # lists in patches replace instead of append
    false_unions: list[str] = []  # array-of-object fields typed `T[] | false`


_append_merger = Merger([(dict, ["merge"]), (list, ["append"])], ["override"], ["override"])
_replace_merger = Merger([(dict, ["merge"]), (list, ["override"])], ["override"], ["override"])


def deep_merge(base: dict, patch: dict, replace_lists: bool = False) -> dict:
    """Recursively merge `patch` onto `base`, returning a new dict.

    Nested dicts merge key by key; lists are concatenated unless
    `replace_lists` is set. Neither input is modified.
    """
    merger = _replace_merger if replace_lists else _append_merger
    return merger.merge(copy.deepcopy(base), copy.deepcopy(patch))


class OverrideResolver:
    """Looks up and applies overrides for an operation.

    With `one_shot` set, each rename is applied the first time it is
    looked up for an operation and ignored afterwards, until `reset()`
    starts a new run. Otherwise lookups are read-only and repeatable.
    """

    def __init__(self, overrides: dict[str, OverrideEntry] | None = None, one_shot: bool = False):
        self.overrides = overrides or {}
        self.one_shot = one_shot
        self._consumed: set[tuple[str, str]] = set()

    def reset(self) -> None:
        """Forget which one-shot renames were already applied."""
        self._consumed.clear()

    def entry(self, operation_id: str) -> OverrideEntry | None:
        return self.overrides.get(operation_id)

    def resolve_name(self, operation_id: str, name: str) -> str:
        """Return the emitted name for an argument or body property."""
        entry = self.entry(operation_id)
        if entry is None or name not in entry.request.args:
            return name
        if self.one_shot:
            if (operation_id, name) in self._consumed:
                return name
            self._consumed.add((operation_id, name))
        return entry.request.args[name]

    def body_schema(self, operation_id: str, schema: dict) -> dict:
        entry = self.entry(operation_id)
        if entry is None:
            return deep_merge(schema, {})
        return deep_merge(schema, entry.request.body, entry.array_merge)

    def response_schema(self, operation_id: str, schema: dict | None) -> dict:
        """Merge the response patch; the top description is always blanked."""
        entry = self.entry(operation_id)
        merged = deep_merge(schema or {}, entry.response if entry else {}, bool(entry and entry.array_merge))
        return deep_merge(merged, {"description": ""})

    def false_unions(self, operation_id: str) -> frozenset[str]:
        entry = self.entry(operation_id)
        return frozenset(entry.false_unions) if entry else frozenset()

    def with_credentials(self, operation_id: str) -> bool:
        entry = self.entry(operation_id)
        return bool(entry and entry.request.with_credentials)


def load_overrides(file_path: Path) -> dict[str, OverrideEntry]:
    """Load a YAML mapping of operationId -> override entry."""
    data = yaml.safe_load(file_path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Overrides file {file_path} must contain a mapping")
    return {operation_id: OverrideEntry(**(entry or {})) for operation_id, entry in data.items()}
