#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2024 John Mille <john@ews-network.net>

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from confluentcloud_acl.client import AclApiClient
    from confluentcloud_acl.specs.config import ConfluentCloudAclInputConfiguration

from cryptography.fernet import Fernet
from prometheus_client import CollectorRegistry

from confluentcloud_acl.aws_helpers.kafka_client_secrets import eval_kafka_client_config
from confluentcloud_acl.config.threads_settings import NUM_THREADS
from confluentcloud_acl.kafka_resources import SECRET_SETTINGS, ClientSecrets
from confluentcloud_acl.kafka_resources.acls import KafkaAclClient
from confluentcloud_acl.monitoring.prometheus import (
    InstrumentedAclClient,
    set_acl_prometheus_registry_collectors,
)


class AclProviderConfig:
    """
    Class to store in-memory the provider settings and the clusters client settings,
    derived from the input configuration classes.
    Cluster SASL credentials are only kept encrypted with the runtime key.
    """

    def __init__(self, config: ConfluentCloudAclInputConfiguration):
        self._config = config
        self.prometheus_registry: CollectorRegistry = CollectorRegistry(
            auto_describe=True,
        )
        self.prometheus_collectors = set_acl_prometheus_registry_collectors(
            self.prometheus_registry
        )
        self.runtime_key = Fernet.generate_key()
        self.init_clusters_settings()

    @property
    def input_config(self) -> ConfluentCloudAclInputConfiguration:
        return self._config

    @property
    def legacy_id_format(self) -> bool:
        return self._config.provider.legacy_id_format

    @property
    def parallelism(self) -> int:
        return self._config.provider.parallelism or NUM_THREADS

    @property
    def state_file(self) -> str:
        return self._config.provider.state_file

    def init_clusters_settings(self):
        """Resolves the clusters client settings and moves the SASL credentials aside"""
        for cluster_id, cluster_settings in self._config.provider.clusters.items():
            client_config = eval_kafka_client_config(cluster_id, cluster_settings)
            cluster_settings.secrets = ClientSecrets(client_config, self.runtime_key)
            cluster_settings.kafka = {
                key: value
                for key, value in client_config.items()
                if key not in SECRET_SETTINGS
            }

    def get_acl_client(self) -> AclApiClient:
        return InstrumentedAclClient(
            KafkaAclClient(self._config.provider.clusters, self.runtime_key),
            self.prometheus_collectors,
        )
