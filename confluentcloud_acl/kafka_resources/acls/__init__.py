#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2024 John Mille <john@ews-network.net>

"""Package to manage the ACLs of Kafka clusters with the librdkafka AdminClient."""

from __future__ import annotations

import threading
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from confluentcloud_acl.specs.config import ClusterSettings

from confluent_kafka.admin import (
    AclBinding,
    AclBindingFilter,
    AclOperation,
    AclPermissionType,
    AdminClient,
    ResourcePatternType,
    ResourceType,
)
from confluent_kafka.error import KafkaException

from confluentcloud_acl.client import (
    Acl,
    AclCreateRequest,
    AclDeleteRequest,
    AclListRequest,
    Entry,
    ListPatternFilter,
    Pattern,
)
from confluentcloud_acl.config.logging import ACL_LOG
from confluentcloud_acl.errors import AclApiError
from confluentcloud_acl.kafka_resources import (
    ClientSecrets,
    set_admin_client,
    wait_for_result,
)

"""Kafka calls the cluster resource type CLUSTER, librdkafka calls it BROKER"""
CLUSTER_RESOURCE_TYPE: str = "CLUSTER"


def to_resource_type(resource_type: str, cluster_id: str) -> ResourceType:
    if resource_type.upper() == CLUSTER_RESOURCE_TYPE:
        return ResourceType.BROKER
    return to_enum(ResourceType, resource_type, "resource_type", cluster_id)


def from_resource_type(resource_type: ResourceType) -> str:
    if resource_type == ResourceType.BROKER:
        return CLUSTER_RESOURCE_TYPE
    return resource_type.name


def list_pattern_type(pattern_filter: ListPatternFilter) -> str:
    """
    A listing of every resource type, without a name, is meant to return every ACL
    of the cluster, so it matches all the pattern types.
    """
    if pattern_filter.name is None and pattern_filter.resource_type.upper() == "ANY":
        return "ANY"
    return pattern_filter.pattern_type


def to_enum(enum_class: type[Enum], value: str, field_name: str, cluster_id: str):
    try:
        return enum_class[value.upper()]
    except KeyError:
        raise AclApiError(
            f"Invalid {field_name} {value}. Must be one of "
            f"{', '.join(_member.name for _member in enum_class)}",
            cluster_id,
        )


def binding_args(
    cluster_id: str,
    resource_type: str,
    name: str | None,
    pattern_type: str,
    principal: str | None,
    host: str | None,
    operation: str,
    permission_type: str,
) -> tuple:
    """Positional arguments of AclBinding and AclBindingFilter"""
    return (
        to_resource_type(resource_type, cluster_id),
        name,
        to_enum(ResourcePatternType, pattern_type, "pattern_type", cluster_id),
        principal,
        host,
        to_enum(AclOperation, operation, "operation", cluster_id),
        to_enum(AclPermissionType, permission_type, "permission_type", cluster_id),
    )


def binding_to_acl(binding: AclBinding) -> Acl:
    return Acl(
        pattern=Pattern(
            resource_type=from_resource_type(binding.restype),
            pattern_type=binding.resource_pattern_type.name,
            name=binding.name,
        ),
        entry=Entry(
            principal=binding.principal,
            operation=binding.operation.name,
            host=binding.host,
            permission_type=binding.permission_type.name,
        ),
    )


class KafkaAclClient:
    """
    ACL API client using the Kafka AdminClient.
    One AdminClient is kept per cluster endpoint for the lifetime of the object.
    Bindings the AdminClient refuses, i.e. with ANY in a CreateAcls request, raise AclApiError.
    """

    def __init__(
        self,
        clusters_settings: dict[str, ClusterSettings] = None,
        runtime_key: bytes = None,
    ):
        self._clusters_settings = clusters_settings or {}
        self._runtime_key = runtime_key
        self._admin_clients: dict[tuple[str, str], AdminClient] = {}
        self._lock = threading.Lock()

    def get_admin_client(self, endpoint: str, cluster_id: str) -> AdminClient:
        with self._lock:
            if (endpoint, cluster_id) not in self._admin_clients:
                self._admin_clients[(endpoint, cluster_id)] = set_admin_client(
                    self.client_settings(cluster_id), cluster_id, endpoint
                )
            return self._admin_clients[(endpoint, cluster_id)]

    def client_settings(self, cluster_id: str) -> dict:
        cluster_settings = self._clusters_settings.get(cluster_id)
        if not cluster_settings:
            ACL_LOG.debug(f"{cluster_id} - No client settings defined. Using defaults")
            return {}
        settings: dict = dict(cluster_settings.kafka)
        secrets: ClientSecrets | None = cluster_settings.secrets
        if secrets:
            settings.update(secrets.get_client_secrets(self._runtime_key))
        return settings

    def create_acls(
        self, endpoint: str, cluster_id: str, requests: list[AclCreateRequest]
    ) -> None:
        try:
            bindings = [
                AclBinding(
                    *binding_args(
                        cluster_id,
                        _req.pattern.resource_type,
                        _req.pattern.name,
                        _req.pattern.pattern_type,
                        _req.entry.principal,
                        _req.entry.host,
                        _req.entry.operation,
                        _req.entry.permission_type,
                    )
                )
                for _req in requests
            ]
            wait_for_result(
                self.get_admin_client(endpoint, cluster_id).create_acls(bindings)
            )
        except (KafkaException, ValueError, TypeError) as error:
            raise AclApiError(f"CreateAcls failed: {error}", cluster_id, error)

    def list_acls(
        self, endpoint: str, cluster_id: str, request: AclListRequest
    ) -> list[Acl]:
        """A * host filter matches any host. The full listing matches any pattern type"""
        try:
            acl_filter = AclBindingFilter(
                *binding_args(
                    cluster_id,
                    request.pattern_filter.resource_type,
                    request.pattern_filter.name,
                    list_pattern_type(request.pattern_filter),
                    request.entry_filter.principal,
                    None if request.entry_filter.host == "*" else request.entry_filter.host,
                    request.entry_filter.operation,
                    request.entry_filter.permission_type,
                )
            )
            bindings = (
                self.get_admin_client(endpoint, cluster_id)
                .describe_acls(acl_filter)
                .result()
            )
        except (KafkaException, ValueError, TypeError) as error:
            raise AclApiError(f"DescribeAcls failed: {error}", cluster_id, error)
        return [binding_to_acl(binding) for binding in bindings]

    def delete_acls(
        self, endpoint: str, cluster_id: str, requests: list[AclDeleteRequest]
    ) -> None:
        try:
            acl_filters = [
                AclBindingFilter(
                    *binding_args(
                        cluster_id,
                        _req.pattern_filter.resource_type,
                        _req.pattern_filter.name,
                        _req.pattern_filter.pattern_type,
                        _req.entry_filter.principal,
                        _req.entry_filter.host,
                        _req.entry_filter.operation,
                        _req.entry_filter.permission_type,
                    )
                )
                for _req in requests
            ]
            results = wait_for_result(
                self.get_admin_client(endpoint, cluster_id).delete_acls(acl_filters)
            )
        except (KafkaException, ValueError, TypeError) as error:
            raise AclApiError(f"DeleteAcls failed: {error}", cluster_id, error)
        for acl_filter, _future in results.items():
            ACL_LOG.debug(
                f"{cluster_id} - {acl_filter.name}: {len(_future.result())} ACL(s) deleted"
            )
