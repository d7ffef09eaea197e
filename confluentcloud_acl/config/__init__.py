# SPDX-License-Identifier: MPL-2.0
# Copyright 2024 John Mille <john@ews-network.net>

from __future__ import annotations

import yaml

try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader

from dacite import from_dict
from importlib_resources import files as pkg_files
from jsonschema import validate

from confluentcloud_acl.specs.config import ConfluentCloudAclInputConfiguration


def load_config(config: dict) -> ConfluentCloudAclInputConfiguration:
    schema_source = pkg_files("confluentcloud_acl").joinpath("specs/config.json")
    validate(
        config,
        yaml.load(schema_source.read_text(), Loader=Loader),
    )
    return from_dict(
        data_class=ConfluentCloudAclInputConfiguration,
        data=config,
    )


def load_config_file(file_path: str) -> ConfluentCloudAclInputConfiguration:
    with open(file_path) as fd:
        config = yaml.load(fd, Loader=Loader)
    return load_config(config or {})
