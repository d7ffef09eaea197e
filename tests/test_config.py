#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2024 John Mille <john@ews-network.net>

"""
Tests for the configuration file loading and the provider settings.
"""

import pytest
import yaml
from jsonschema.exceptions import ValidationError

from confluentcloud_acl.config import load_config, load_config_file
from confluentcloud_acl.config.config import AclProviderConfig
from confluentcloud_acl.monitoring.prometheus import InstrumentedAclClient
from confluentcloud_acl.specs.config import AclResourceConfig, AssumeRole

CONFIG = """
provider:
  legacy_id_format: true
  parallelism: 3
  state_file: acls.json
  clusters:
    lkc-v9ky0:
      kafka:
        security.protocol: SASL_SSL
        sasl.mechanism: PLAIN
        sasl.username: api-key
        sasl.password: api-secret
      iam_override:
        RoleArn: arn:aws:iam::000000000000:role/acls
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
def config_file(tmp_path) -> str:
    file_path = tmp_path / "config.yaml"
    file_path.write_text(CONFIG)
    return str(file_path)


def test_load_config_file(config_file):
    config = load_config_file(config_file)
    assert config.provider.legacy_id_format is True
    assert config.provider.parallelism == 3
    assert isinstance(config.provider.clusters["lkc-v9ky0"].iam_override, AssumeRole)
    assert isinstance(config.resources["test"], AclResourceConfig)
    assert config.resources["test"].principal == "User:1522"


def test_iam_override_profile_name():
    config = yaml.safe_load(CONFIG)
    config["provider"]["clusters"]["lkc-v9ky0"]["iam_override"] = "production"
    assert load_config(config).provider.clusters["lkc-v9ky0"].iam_override == "production"


def test_defaults():
    config = load_config({})
    assert config.provider.legacy_id_format is False
    assert config.provider.state_file == "confluentcloud_acl.tfstate.json"
    assert config.resources == {}


def test_missing_attribute_is_rejected():
    config = yaml.safe_load(CONFIG)
    del config["resources"]["test"]["permission_type"]
    with pytest.raises(ValidationError):
        load_config(config)


def test_unknown_attribute_is_rejected():
    config = yaml.safe_load(CONFIG)
    config["resources"]["test"]["id"] = "123"
    with pytest.raises(ValidationError):
        load_config(config)


def test_provider_config_hides_credentials(config_file):
    provider_config = AclProviderConfig(load_config_file(config_file))
    cluster_settings = provider_config.input_config.provider.clusters["lkc-v9ky0"]
    assert cluster_settings.kafka == {
        "security.protocol": "SASL_SSL",
        "sasl.mechanism": "PLAIN",
    }
    assert cluster_settings.secrets.get_client_secrets(provider_config.runtime_key) == {
        "sasl.username": "api-key",
        "sasl.password": "api-secret",
    }
    assert provider_config.parallelism == 3
    assert provider_config.legacy_id_format is True
    assert isinstance(provider_config.get_acl_client(), InstrumentedAclClient)
