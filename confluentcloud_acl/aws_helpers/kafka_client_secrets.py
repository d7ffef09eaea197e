#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2024 John Mille <john@ews-network.net>

"""
Interpolates the clusters client settings with the values from {{resolve:}}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from confluentcloud_acl.specs.config import ClusterSettings

from copy import deepcopy

from aws_cfn_custom_resource_resolve_parser import (
    parse_secret_resolve_string,
    retrieve_secret,
)

from confluentcloud_acl.aws_helpers import get_session_from_iam_override
from confluentcloud_acl.config.logging import ACL_LOG

RESOLVE_PREFIX: str = "{{resolve:"


def needs_resolving(cluster_settings: ClusterSettings) -> bool:
    return any(
        isinstance(value, str) and value.startswith(RESOLVE_PREFIX)
        for value in cluster_settings.kafka.values()
    )


def eval_kafka_client_config(cluster_id: str, cluster_settings: ClusterSettings) -> dict:
    """
    If a configuration value is a string starting with {{resolve:}} the value is interpolated
    using AWS SecretsManager or AWS SSM.
    We create a new dict in order to preserve the original
    """
    client_config: dict = deepcopy(cluster_settings.kafka)
    if not needs_resolving(cluster_settings):
        return client_config
    session = get_session_from_iam_override(cluster_settings.iam_override)
    for config_key, config_value in client_config.items():
        if isinstance(config_value, str) and config_value.startswith(RESOLVE_PREFIX):
            try:
                secret_name, key, version = parse_secret_resolve_string(config_value)
                client_config[config_key] = retrieve_secret(
                    secret_name, key, version, session=session
                )
            except Exception as error:
                ACL_LOG.exception(error)
                ACL_LOG.error(
                    f"{cluster_id} - Error while resolving {config_key}: {error}. Using value as-is."
                )
    return client_config
