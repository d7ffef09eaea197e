#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2024 John Mille <john@ews-network.net>

"""
The confluentcloud_acl resource: schema and Create/Read/Delete/Import handlers.

ACLs carry no server-side identifier. The ACL name is used as resource id and
lookup key, although it is not unique across the full ACL tuple: when several
ACLs share a name, the first one returned by the cluster wins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from confluentcloud_acl.client import AclApiClient

from dataclasses import dataclass, fields
from urllib.parse import urlparse

from confluentcloud_acl.client import (
    Acl,
    AclCreateRequest,
    AclDeleteRequest,
    AclListRequest,
    DeleteEntryFilter,
    DeletePatternFilter,
    Entry,
    ListEntryFilter,
    ListPatternFilter,
    Pattern,
)
from confluentcloud_acl.config.logging import ACL_LOG
from confluentcloud_acl.errors import (
    AclNotFoundError,
    AclResourceError,
    ConfigValidationError,
    FieldSetError,
)
from confluentcloud_acl.resources import FieldSchema, ResourceData
from confluentcloud_acl.resources.diagnostics import Diagnostic, diagnostics_from_error

ACL_RESOURCE_TYPE: str = "confluentcloud_acl"

"""Identifier historically stored in state instead of the ACL name"""
LEGACY_ACL_ID: str = "#{name}"

ACL_SCHEMA: dict[str, FieldSchema] = {
    "cluster_id": FieldSchema(description="ID of the Kafka cluster"),
    "bootstrap_servers": FieldSchema(description="Kafka cluster endpoint"),
    "resource_type": FieldSchema(description="ACL resource type"),
    "pattern_type": FieldSchema(description="ACL pattern type"),
    "name": FieldSchema(description="ACL name"),
    "principal": FieldSchema(description="ACL principal, i.e. User:1522"),
    "operation": FieldSchema(description="ACL operation type, i.e. READ"),
    "host": FieldSchema(description="ACL host, * for any"),
    "permission_type": FieldSchema(description="ACL permission type, ALLOW or DENY"),
}

CONNECTION_FIELDS: tuple = ("cluster_id", "bootstrap_servers")
DESCRIPTIVE_FIELDS: tuple = (
    "resource_type",
    "pattern_type",
    "name",
    "principal",
    "operation",
    "host",
    "permission_type",
)

LIST_ALL_ACLS_REQUEST = AclListRequest(
    pattern_filter=ListPatternFilter(resource_type="ANY", pattern_type="LITERAL"),
    entry_filter=ListEntryFilter(operation="ANY", host="*", permission_type="ANY"),
)


def endpoint_error(value: str) -> str | None:
    """Returns why the endpoint is unusable, None if it is fine."""
    if "://" in value:
        parsed = urlparse(value)
        if not parsed.scheme or not parsed.hostname:
            return f"{value} is not a valid URL"
        try:
            parsed.port
        except ValueError as error:
            return f"{value} is not a valid URL: {error}"
        return None
    if any(not server.strip() for server in value.split(",")):
        return f"{value} contains an empty server"
    return None


def decode_attributes(data: ResourceData, field_names: tuple) -> dict[str, str]:
    """
    Reads the given fields from the resource data. All the malformed fields are
    reported in a single ConfigValidationError.
    """
    values: dict[str, str] = {}
    errors: dict[str, str] = {}
    for field_name in field_names:
        value = data.get(field_name)
        if value is None:
            errors[field_name] = "required attribute is not set"
        elif not isinstance(value, str):
            errors[field_name] = f"expected string, got {type(value).__name__}"
        elif not value.strip():
            errors[field_name] = "must not be empty"
        else:
            values[field_name] = value
    if "bootstrap_servers" in values:
        reason = endpoint_error(values["bootstrap_servers"])
        if reason:
            errors["bootstrap_servers"] = reason
    if errors:
        raise ConfigValidationError(errors)
    return values


@dataclass(frozen=True)
class AclConfig:
    cluster_id: str
    bootstrap_servers: str
    resource_type: str
    pattern_type: str
    name: str
    principal: str
    operation: str
    host: str
    permission_type: str

    @classmethod
    def from_resource_data(cls, data: ResourceData) -> AclConfig:
        return cls(**decode_attributes(data, tuple(_f.name for _f in fields(cls))))

    @property
    def pattern(self) -> Pattern:
        return Pattern(self.resource_type, self.pattern_type, self.name)

    @property
    def entry(self) -> Entry:
        return Entry(self.principal, self.operation, self.host, self.permission_type)

    def create_request(self) -> AclCreateRequest:
        return AclCreateRequest(pattern=self.pattern, entry=self.entry)

    def delete_request(self) -> AclDeleteRequest:
        return AclDeleteRequest(
            pattern_filter=DeletePatternFilter(
                self.resource_type, self.pattern_type, self.name
            ),
            entry_filter=DeleteEntryFilter(
                self.principal, self.operation, self.host, self.permission_type
            ),
        )


def acl_attributes(acl: Acl) -> dict[str, str]:
    """The descriptive attributes of an ACL, in the order they are written to state"""
    return {
        "resource_type": acl.pattern.resource_type,
        "pattern_type": acl.pattern.pattern_type,
        "name": acl.pattern.name,
        "principal": acl.entry.principal,
        "operation": acl.entry.operation,
        "host": acl.entry.host,
        "permission_type": acl.entry.permission_type,
    }


def find_acl_by_name(acls: list[Acl], name: str) -> Acl | None:
    """Linear scan, first match wins"""
    for acl in acls:
        if acl.pattern.name == name:
            return acl
    return None


def get_acl(client: AclApiClient, name: str, endpoint: str, cluster_id: str) -> Acl:
    """
    Lists all the ACLs of the cluster and returns the first one named `name`.
    Costs a full listing of the cluster ACLs for every lookup.
    """
    acls = client.list_acls(endpoint, cluster_id, LIST_ALL_ACLS_REQUEST)
    acl = find_acl_by_name(acls, name)
    if acl is None:
        raise AclNotFoundError(name, cluster_id)
    return acl


def acl_log_reference(resource_id: str) -> int | str:
    try:
        return int(resource_id)
    except ValueError:
        ACL_LOG.debug(f"ACL ID {resource_id} is not numeric")
        return resource_id


class AclResource:
    """
    Lifecycle handlers for confluentcloud_acl. Each handler receives the remote
    client explicitly and reports failures as diagnostics.
    There is no update handler: every attribute forces a replacement.
    """

    type_name: str = ACL_RESOURCE_TYPE
    schema: dict[str, FieldSchema] = ACL_SCHEMA

    def __init__(self, legacy_id_format: bool = False):
        self.legacy_id_format = legacy_id_format

    def new_resource_data(
        self, resource_id: str = "", attributes: dict = None
    ) -> ResourceData:
        return ResourceData(self.schema, resource_id, attributes)

    def resource_id(self, config: AclConfig) -> str:
        if self.legacy_id_format:
            return LEGACY_ACL_ID
        return config.name

    @staticmethod
    def lookup_name(data: ResourceData) -> str:
        if data.id == LEGACY_ACL_ID and data.get("name"):
            return data.get("name")
        return data.id

    def create(self, data: ResourceData, client: AclApiClient) -> list[Diagnostic]:
        try:
            config = AclConfig.from_resource_data(data)
            client.create_acls(
                config.bootstrap_servers, config.cluster_id, [config.create_request()]
            )
        except AclResourceError as error:
            ACL_LOG.error(f"Could not create ACL: {error}")
            return diagnostics_from_error(error)
        data.set_id(self.resource_id(config))
        ACL_LOG.info(f"{config.cluster_id} - ACL {config.name} created")
        return []

    def read(self, data: ResourceData, client: AclApiClient) -> list[Diagnostic]:
        try:
            context = decode_attributes(data, CONNECTION_FIELDS)
            acl = get_acl(
                client,
                self.lookup_name(data),
                context["bootstrap_servers"],
                context["cluster_id"],
            )
        except AclNotFoundError as error:
            ACL_LOG.warning(f"{error}. Removing from state")
            data.set_id("")
            return []
        except AclResourceError as error:
            ACL_LOG.error(f"Could not read ACL {data.id}: {error}")
            return diagnostics_from_error(error)

        try:
            for field_name, value in acl_attributes(acl).items():
                data.set(field_name, value)
        except FieldSetError as error:
            return diagnostics_from_error(error)
        return []

    def delete(self, data: ResourceData, client: AclApiClient) -> list[Diagnostic]:
        acl_ref = acl_log_reference(data.id)
        try:
            config = AclConfig.from_resource_data(data)
            client.delete_acls(
                config.bootstrap_servers, config.cluster_id, [config.delete_request()]
            )
        except AclResourceError as error:
            ACL_LOG.error(f"ACL can not be deleted: {acl_ref}")
            return diagnostics_from_error(error)
        ACL_LOG.info(f"ACL deleted: {acl_ref}")
        return []

    def import_state(self, resource_id: str) -> list[ResourceData]:
        """Passthrough import, only the id is known until the next read"""
        return [self.new_resource_data(resource_id)]
