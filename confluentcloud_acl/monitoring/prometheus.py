#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2024 John Mille <john@ews-network.net>

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from confluentcloud_acl.client import (
        Acl,
        AclApiClient,
        AclCreateRequest,
        AclDeleteRequest,
        AclListRequest,
    )

from prometheus_client import CollectorRegistry, Counter, Gauge, Summary

from confluentcloud_acl.errors import AclApiError


def set_acl_prometheus_registry_collectors(
    prometheus_registry: CollectorRegistry,
) -> dict[str, Counter | Gauge | Summary]:
    collectors: dict = {
        "acl_operation_latency": Summary(
            "acl_operation_latency",
            "Time to complete an ACL API call",
            ["cluster", "operation"],
            registry=prometheus_registry,
        ),
        "acl_operation_failures": Counter(
            "acl_operation_failures",
            "ACL API calls which failed",
            ["cluster", "operation"],
            registry=prometheus_registry,
        ),
        "cluster_acls_count": Gauge(
            "cluster_acls_count",
            "ACLs returned by the last listing of the cluster",
            ["cluster"],
            registry=prometheus_registry,
        ),
    }
    return collectors


class InstrumentedAclClient:
    """Wraps an ACL API client to record the calls latency and failures"""

    def __init__(self, client: AclApiClient, collectors: dict):
        self._client = client
        self._latency: Summary = collectors["acl_operation_latency"]
        self._failures: Counter = collectors["acl_operation_failures"]
        self._acls_count: Gauge = collectors["cluster_acls_count"]

    def _call(self, operation: str, cluster_id: str, method, *args):
        try:
            with self._latency.labels(cluster=cluster_id, operation=operation).time():
                return method(*args)
        except AclApiError:
            self._failures.labels(cluster=cluster_id, operation=operation).inc()
            raise

    def create_acls(
        self, endpoint: str, cluster_id: str, requests: list[AclCreateRequest]
    ) -> None:
        self._call(
            "create", cluster_id, self._client.create_acls, endpoint, cluster_id, requests
        )

    def list_acls(
        self, endpoint: str, cluster_id: str, request: AclListRequest
    ) -> list[Acl]:
        acls = self._call(
            "list", cluster_id, self._client.list_acls, endpoint, cluster_id, request
        )
        self._acls_count.labels(cluster=cluster_id).set(len(acls))
        return acls

    def delete_acls(
        self, endpoint: str, cluster_id: str, requests: list[AclDeleteRequest]
    ) -> None:
        self._call(
            "delete", cluster_id, self._client.delete_acls, endpoint, cluster_id, requests
        )
