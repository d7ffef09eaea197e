#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2024 John Mille <john@ews-network.net>

"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

import pytest

from confluentcloud_acl.client import (
    Acl,
    AclCreateRequest,
    AclDeleteRequest,
    AclListRequest,
    Entry,
    Pattern,
)
from confluentcloud_acl.errors import AclApiError
from confluentcloud_acl.resources.acl import AclResource


class FakeAclClient:
    """In-memory ACL API. Deleting an ACL which does not exist fails, like the REST API."""

    def __init__(self):
        self.acls: dict[str, list[Acl]] = {}
        self.calls: list[tuple] = []
        self.failures: dict[str, Exception] = {}

    def _record(self, operation: str, cluster_id: str, payload):
        self.calls.append((operation, cluster_id, payload))
        if operation in self.failures:
            raise self.failures[operation]

    def add(self, cluster_id: str, acl: Acl):
        self.acls.setdefault(cluster_id, []).append(acl)

    def create_acls(
        self, endpoint: str, cluster_id: str, requests: list[AclCreateRequest]
    ) -> None:
        self._record("create", cluster_id, requests)
        for _req in requests:
            self.add(cluster_id, Acl(_req.pattern, _req.entry))

    def list_acls(
        self, endpoint: str, cluster_id: str, request: AclListRequest
    ) -> list[Acl]:
        self._record("list", cluster_id, request)
        return list(self.acls.get(cluster_id, []))

    def delete_acls(
        self, endpoint: str, cluster_id: str, requests: list[AclDeleteRequest]
    ) -> None:
        self._record("delete", cluster_id, requests)
        for _req in requests:
            target = Acl(
                Pattern(
                    _req.pattern_filter.resource_type,
                    _req.pattern_filter.pattern_type,
                    _req.pattern_filter.name,
                ),
                Entry(
                    _req.entry_filter.principal,
                    _req.entry_filter.operation,
                    _req.entry_filter.host,
                    _req.entry_filter.permission_type,
                ),
            )
            cluster_acls = self.acls.get(cluster_id, [])
            if target not in cluster_acls:
                raise AclApiError("ACL not found", cluster_id)
            cluster_acls.remove(target)

    def operations(self) -> list[str]:
        return [_call[0] for _call in self.calls]


@pytest.fixture
def fake_client() -> FakeAclClient:
    return FakeAclClient()


@pytest.fixture
def acl_resource() -> AclResource:
    return AclResource()


@pytest.fixture
def acl_attributes() -> dict:
    return {
        "cluster_id": "lkc-v9ky0",
        "bootstrap_servers": "https://pkac-57298.eu-west-1.aws.confluent.cloud",
        "resource_type": "GROUP",
        "pattern_type": "LITERAL",
        "name": "acl-test-group",
        "principal": "User:1522",
        "operation": "READ",
        "host": "*",
        "permission_type": "ALLOW",
    }
