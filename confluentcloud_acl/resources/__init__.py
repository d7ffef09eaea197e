#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2024 John Mille <john@ews-network.net>

"""
Declarative resources schema and the per-instance attributes container handed
to the lifecycle handlers.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass

from confluentcloud_acl.errors import FieldSetError


@dataclass(frozen=True)
class FieldSchema:
    type: type = str
    required: bool = True
    force_new: bool = True
    description: str = ""


class ResourceData:
    """
    Attributes of a single resource instance, as known to the orchestrator.
    Values are checked against the resource schema when set.
    """

    def __init__(
        self,
        schema: dict[str, FieldSchema],
        resource_id: str = "",
        attributes: dict = None,
    ):
        self._schema = schema
        self._id: str = resource_id
        self._attributes: dict = {}
        if attributes:
            for key, value in attributes.items():
                self.set(key, value)

    def __repr__(self):
        return f"ResourceData({self._id!r})"

    @property
    def schema(self) -> dict[str, FieldSchema]:
        return self._schema

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, value: str) -> None:
        """An empty id marks the resource as gone"""
        self._id = value

    @property
    def attributes(self) -> dict:
        return deepcopy(self._attributes)

    def get(self, key: str):
        if key not in self._schema:
            raise KeyError(f"{key} is not defined in the resource schema")
        return self._attributes.get(key)

    def set(self, key: str, value) -> None:
        if key not in self._schema:
            raise FieldSetError(key, "not defined in the resource schema")
        if value is not None and not isinstance(value, self._schema[key].type):
            raise FieldSetError(
                key,
                f"expected {self._schema[key].type.__name__}, got {type(value).__name__}",
            )
        self._attributes[key] = value

    def to_state(self) -> dict:
        return {"id": self._id, "attributes": self.attributes}

    @classmethod
    def from_state(cls, schema: dict[str, FieldSchema], state: dict) -> ResourceData:
        return cls(schema, state.get("id", ""), state.get("attributes", {}))


def changed_attributes(
    schema: dict[str, FieldSchema], prior: dict, desired: dict
) -> list[str]:
    """Returns the schema fields whose value differs, in schema order"""
    return [key for key in schema if prior.get(key) != desired.get(key)]


def requires_replace(schema: dict[str, FieldSchema], changed: list[str]) -> list[str]:
    return [key for key in changed if schema[key].force_new]
