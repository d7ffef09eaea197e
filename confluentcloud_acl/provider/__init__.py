#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2024 John Mille <john@ews-network.net>

"""
Plans and applies the confluentcloud_acl resources: compares the desired
configuration with the refreshed state, then runs the lifecycle handlers.

Changes to a resource attributes always plan a replacement (delete then create).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from confluentcloud_acl.client import AclApiClient
    from confluentcloud_acl.provider.state import StateFile
    from confluentcloud_acl.resources.acl import AclResource

import concurrent.futures
from dataclasses import dataclass, field
from enum import Enum

from confluentcloud_acl.common import waiting_on_futures
from confluentcloud_acl.config.logging import ACL_LOG
from confluentcloud_acl.resources import (
    ResourceData,
    changed_attributes,
    requires_replace,
)
from confluentcloud_acl.resources.acl import CONNECTION_FIELDS
from confluentcloud_acl.resources.diagnostics import (
    Diagnostic,
    Severity,
    has_errors,
)


class Action(Enum):
    CREATE = "create"
    DELETE = "delete"
    REPLACE = "replace"
    NOOP = "no-op"


@dataclass
class PlannedChange:
    address: str
    action: Action
    prior: ResourceData | None = None
    desired: dict | None = None
    requires_replace: list[str] = field(default_factory=list)

    def __str__(self):
        if self.requires_replace:
            return f"{self.action.value} {self.address} (forced by {', '.join(self.requires_replace)})"
        return f"{self.action.value} {self.address}"


class AclProvider:
    def __init__(
        self,
        resource: AclResource,
        client: AclApiClient,
        state: StateFile,
        desired: dict[str, dict],
        parallelism: int = 1,
    ):
        self.resource = resource
        self.client = client
        self.state = state
        self.desired = desired
        self.parallelism = parallelism

    def resource_data(self, address: str) -> ResourceData | None:
        prior = self.state.get(address)
        if prior is None:
            return None
        return ResourceData.from_state(self.resource.schema, prior)

    def refresh(self) -> dict[str, list[Diagnostic]]:
        """
        Reads every resource in state. Resources gone remotely are dropped from state,
        with a warning.
        """
        diagnostics: dict[str, list[Diagnostic]] = {}
        for address in self.state.addresses:
            data = self.resource_data(address)
            _diags = self.resource.read(data, self.client)
            if has_errors(_diags):
                diagnostics[address] = _diags
            elif not data.id:
                diagnostics[address] = [
                    Diagnostic(Severity.WARNING, "No longer exists. Removed from state")
                ]
                self.state.remove(address)
            else:
                self.state.set(address, data)
        return diagnostics

    def plan(self) -> list[PlannedChange]:
        """Compares the state to the desired configuration. Does not refresh."""
        changes: list[PlannedChange] = []
        for address, desired_attributes in self.desired.items():
            prior = self.resource_data(address)
            if prior is None:
                changes.append(
                    PlannedChange(address, Action.CREATE, desired=desired_attributes)
                )
                continue
            changed = changed_attributes(
                self.resource.schema, prior.attributes, desired_attributes
            )
            if changed:
                changes.append(
                    PlannedChange(
                        address,
                        Action.REPLACE,
                        prior=prior,
                        desired=desired_attributes,
                        requires_replace=requires_replace(
                            self.resource.schema, changed
                        ),
                    )
                )
            else:
                changes.append(PlannedChange(address, Action.NOOP, prior=prior))
        for address in self.state.addresses:
            if address not in self.desired:
                changes.append(
                    PlannedChange(
                        address, Action.DELETE, prior=self.resource_data(address)
                    )
                )
        return changes

    def apply_change(self, change: PlannedChange) -> list[Diagnostic]:
        if change.action in (Action.DELETE, Action.REPLACE):
            _diags = self.resource.delete(change.prior, self.client)
            if has_errors(_diags):
                return _diags
            self.state.remove(change.address)
        if change.action in (Action.CREATE, Action.REPLACE):
            data = self.resource.new_resource_data(attributes=change.desired)
            _diags = self.resource.create(data, self.client)
            if has_errors(_diags):
                return _diags
            self.state.set(change.address, data)
        return []

    def apply(self, changes: list[PlannedChange]) -> dict[str, list[Diagnostic]]:
        """
        Applies the changes concurrently, up to `parallelism` at a time, and saves the state,
        even when a change raised. Changes cancelled before they started are reported as errors.
        """
        diagnostics: dict[str, list[Diagnostic]] = {}
        to_apply = [_change for _change in changes if _change.action is not Action.NOOP]
        if not to_apply:
            ACL_LOG.info("No changes. Infrastructure is up-to-date.")
            return diagnostics
        with concurrent.futures.ThreadPoolExecutor(
            max_workers=self.parallelism
        ) as executor:
            futures_to_data: dict[concurrent.futures.Future, PlannedChange] = {
                executor.submit(self.apply_change, _change): _change
                for _change in to_apply
            }
            waiting_on_futures(
                executor, futures_to_data, self.resource.type_name, "Changes"
            )
        try:
            for _future, _change in futures_to_data.items():
                if _future.cancelled():
                    diagnostics[_change.address] = [
                        Diagnostic(Severity.ERROR, f"{_change} was interrupted")
                    ]
                    continue
                _diags = _future.result()
                if _diags:
                    diagnostics[_change.address] = _diags
                else:
                    ACL_LOG.info(f"{_change} complete")
        finally:
            self.state.save()
        return diagnostics

    def destroy(self) -> dict[str, list[Diagnostic]]:
        return self.apply(
            [
                PlannedChange(address, Action.DELETE, prior=self.resource_data(address))
                for address in self.state.addresses
            ]
        )

    def import_resource(self, address: str, resource_id: str) -> list[Diagnostic]:
        """
        Passthrough import, then read. The connection context comes from the address
        configuration as the ACL cannot be found without it.
        """
        if address in self.state:
            return [
                Diagnostic(Severity.ERROR, f"{address} is already managed in state")
            ]
        if address not in self.desired:
            return [
                Diagnostic(
                    Severity.ERROR,
                    f"No configuration for {address}",
                    "Add the resource to the configuration file before importing it",
                )
            ]
        data = self.resource.import_state(resource_id)[0]
        for field_name in CONNECTION_FIELDS:
            data.set(field_name, self.desired[address][field_name])
        _diags = self.resource.read(data, self.client)
        if has_errors(_diags):
            return _diags
        if not data.id:
            return [
                Diagnostic(
                    Severity.ERROR,
                    f"Cannot import non-existent remote object {resource_id}",
                )
            ]
        self.state.set(address, data)
        self.state.save()
        ACL_LOG.info(f"{address} imported with ID {resource_id}")
        return []
