#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2024 John Mille <john@ews-network.net>

"""
Request and response structures exchanged with the remote ACL API, and the
capability set any client must offer to the ACL resource.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class Pattern:
    resource_type: str
    pattern_type: str
    name: str


@dataclass(frozen=True)
class Entry:
    principal: str
    operation: str
    host: str
    permission_type: str


@dataclass(frozen=True)
class Acl:
    pattern: Pattern
    entry: Entry


@dataclass(frozen=True)
class AclCreateRequest:
    pattern: Pattern
    entry: Entry


@dataclass(frozen=True)
class ListPatternFilter:
    resource_type: str
    pattern_type: str
    name: str | None = None


@dataclass(frozen=True)
class ListEntryFilter:
    operation: str
    host: str
    permission_type: str
    principal: str | None = None


@dataclass(frozen=True)
class AclListRequest:
    pattern_filter: ListPatternFilter
    entry_filter: ListEntryFilter


@dataclass(frozen=True)
class DeletePatternFilter:
    resource_type: str
    pattern_type: str
    name: str


@dataclass(frozen=True)
class DeleteEntryFilter:
    principal: str
    operation: str
    host: str
    permission_type: str


@dataclass(frozen=True)
class AclDeleteRequest:
    pattern_filter: DeletePatternFilter
    entry_filter: DeleteEntryFilter


@runtime_checkable
class AclApiClient(Protocol):
    """
    Remote ACL management. Implementations raise AclApiError on failure.
    Pagination, retries and consistency are the implementation's concern.
    """

    def create_acls(
        self, endpoint: str, cluster_id: str, requests: list[AclCreateRequest]
    ) -> None: ...

    def list_acls(
        self, endpoint: str, cluster_id: str, request: AclListRequest
    ) -> list[Acl]: ...

    def delete_acls(
        self, endpoint: str, cluster_id: str, requests: list[AclDeleteRequest]
    ) -> None: ...
