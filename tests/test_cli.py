#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2024 John Mille <john@ews-network.net>

"""
Tests for the command line, with the remote client replaced by the in-memory one.
"""

import json

import pytest

from confluentcloud_acl.cli import main
from confluentcloud_acl.client import Acl, Entry, Pattern
from confluentcloud_acl.config.config import AclProviderConfig
from confluentcloud_acl.errors import AclApiError

CONFIG = """
resources:
  test:
    cluster_id: lkc-v9ky0
    bootstrap_servers: https://pkac-57298.eu-west-1.aws.confluent.cloud
    resource_type: GROUP
    pattern_type: LITERAL
    name: acl-test-group
    principal: "User:1522"
    operation: READ
    host: "*"
    permission_type: ALLOW
"""


@pytest.fixture
def workdir(tmp_path, monkeypatch, fake_client):
    monkeypatch.setattr(
        AclProviderConfig, "get_acl_client", lambda self: fake_client
    )
    (tmp_path / "config.yaml").write_text(CONFIG)
    return tmp_path


def run(workdir, *args) -> int:
    return main(
        [
            "-c",
            str(workdir / "config.yaml"),
            "--state",
            str(workdir / "state.json"),
            *args,
        ]
    )


def test_plan_does_not_change_anything(workdir, fake_client):
    assert run(workdir, "plan") == 0
    assert fake_client.operations() == []
    assert not (workdir / "state.json").exists()


def test_apply_then_destroy(workdir, fake_client):
    assert run(workdir, "apply") == 0
    state = json.loads((workdir / "state.json").read_text())
    assert state["resources"]["test"]["id"] == "acl-test-group"

    assert run(workdir, "destroy") == 0
    state = json.loads((workdir / "state.json").read_text())
    assert state["resources"] == {}
    assert fake_client.acls["lkc-v9ky0"] == []


def test_import(workdir, fake_client):
    assert run(workdir, "import", "test", "acl-test-group") == 1

    fake_client.add(
        "lkc-v9ky0",
        Acl(
            Pattern("GROUP", "LITERAL", "acl-test-group"),
            Entry("User:1522", "READ", "*", "ALLOW"),
        ),
    )
    assert run(workdir, "import", "test", "acl-test-group") == 0
    state = json.loads((workdir / "state.json").read_text())
    assert state["resources"]["test"]["attributes"]["principal"] == "User:1522"

    assert run(workdir, "import", "test", "acl-test-group") == 1
    assert run(workdir, "apply") == 0
    assert fake_client.operations().count("create") == 0


def test_failed_create_exits_with_error(workdir, fake_client):
    fake_client.failures["create"] = AclApiError("denied", "lkc-v9ky0")
    assert run(workdir, "apply") == 1


def test_invalid_config_file(tmp_path):
    (tmp_path / "config.yaml").write_text("resources:\n  test:\n    name: only\n")
    assert main(["-c", str(tmp_path / "config.yaml"), "plan"]) == 1


def test_metrics_file(workdir):
    assert (
        run(workdir, "--metrics-file", str(workdir / "metrics.prom"), "apply") == 0
    )
    assert (workdir / "metrics.prom").exists()


def test_malformed_yaml_config_file(tmp_path):
    (tmp_path / "config.yaml").write_text("resources:\n  test: [unclosed\n")
    assert main(["-c", str(tmp_path / "config.yaml"), "plan"]) == 1


def test_refresh_of_deleted_acl_is_not_a_failure(workdir, fake_client):
    assert run(workdir, "apply") == 0
    fake_client.acls["lkc-v9ky0"].clear()

    assert run(workdir, "refresh") == 0
    state = json.loads((workdir / "state.json").read_text())
    assert state["resources"] == {}

    assert run(workdir, "apply") == 0
    assert fake_client.operations().count("create") == 2
