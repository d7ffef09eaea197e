#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2024 John Mille <john@ews-network.net>

"""JSON file keeping the id and attributes of the managed resources."""

from __future__ import annotations

import json
import os
import threading
from os import path
from tempfile import NamedTemporaryFile

from confluentcloud_acl.config.logging import ACL_LOG
from confluentcloud_acl.resources import ResourceData

STATE_VERSION: int = 1


class StateFile:
    def __init__(self, file_path: str):
        self.file_path = file_path
        self._resources: dict[str, dict] = {}
        self._lock = threading.Lock()

    def __repr__(self):
        return self.file_path

    def __contains__(self, address: str) -> bool:
        return address in self._resources

    @property
    def addresses(self) -> list[str]:
        return list(self._resources.keys())

    def load(self) -> StateFile:
        if not path.exists(self.file_path):
            ACL_LOG.debug(f"No state file at {self.file_path}. Starting empty")
            return self
        with open(self.file_path) as fd:
            content = json.load(fd)
        if content.get("version") != STATE_VERSION:
            raise ValueError(
                f"Unsupported state version {content.get('version')} in {self.file_path}"
            )
        self._resources = content.get("resources", {})
        return self

    def save(self) -> None:
        """Writes to a temporary file first, then replaces the state file"""
        with self._lock:
            content = {"version": STATE_VERSION, "resources": self._resources}
            with NamedTemporaryFile(
                "w",
                dir=path.dirname(path.abspath(self.file_path)),
                prefix=".state-",
                delete=False,
            ) as fd:
                json.dump(content, fd, indent=2, sort_keys=True)
            os.replace(fd.name, self.file_path)

    def get(self, address: str) -> dict | None:
        return self._resources.get(address)

    def set(self, address: str, data: ResourceData) -> None:
        with self._lock:
            self._resources[address] = data.to_state()

    def remove(self, address: str) -> None:
        with self._lock:
            self._resources.pop(address, None)
