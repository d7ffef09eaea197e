# SPDX-License-Identifier: MPL-2.0
# Copyright 2024 John Mille <john@ews-network.net>

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from concurrent.futures import Future

from copy import deepcopy
from os import environ
from urllib.parse import urlparse

from confluent_kafka.admin import AdminClient
from cryptography.fernet import Fernet

DEFAULT_KAFKA_PORT: int = 9092
SECRET_SETTINGS: tuple = ("sasl.username", "sasl.password")


def wait_for_result(result_container: dict[object, Future]) -> dict:
    """Blocks until all the futures are resolved. Raises the first future exception"""
    for _future in result_container.values():
        _future.result()
    return result_container


def bootstrap_servers_from_endpoint(endpoint: str) -> str:
    """
    Turns the cluster endpoint into librdkafka bootstrap.servers.
    https://pkc-xxx.confluent.cloud -> pkc-xxx.confluent.cloud:9092
    host:port lists are returned as-is.
    """
    if "://" not in endpoint:
        return endpoint
    parsed = urlparse(endpoint)
    return f"{parsed.hostname}:{parsed.port or DEFAULT_KAFKA_PORT}"


class ClientSecrets:
    """Keeps the SASL credentials of a cluster encrypted in memory."""

    def __init__(self, settings: dict, runtime_key: bytes):
        cipher_suite = Fernet(runtime_key)
        self.__secrets: dict[str, bytes] = {
            key: cipher_suite.encrypt(str(settings[key]).encode())
            for key in SECRET_SETTINGS
            if key in settings
        }

    def __bool__(self):
        return bool(self.__secrets)

    def get_client_secrets(self, runtime_key: bytes) -> dict:
        cipher_suite = Fernet(runtime_key)
        return {
            key: cipher_suite.decrypt(value).decode()
            for key, value in self.__secrets.items()
        }


def set_admin_client(settings: dict, cluster_id: str, endpoint: str) -> AdminClient:
    """
    Creates a new librdkafka Admin client
    Removes `group.id` if set
    Request timeout from env var only taken into account if >> 60000 ms
    """
    env_prefix: str = cluster_id.upper().replace("-", "_")
    client_id: str = environ.get(
        f"{env_prefix}_CLIENT_ID", f"admin-confluentcloud-acl_{cluster_id}"
    )
    timeout_ms_env = int(environ.get(f"{env_prefix}_REQUEST_TIMEOUT_MS", 60000))
    cluster_config = deepcopy(settings)
    if "client.id" not in cluster_config:
        cluster_config.update({"client.id": client_id})
    if "group.id" in cluster_config:
        del cluster_config["group.id"]
    cluster_config["bootstrap.servers"] = bootstrap_servers_from_endpoint(endpoint)
    cluster_config.update(
        {"request.timeout.ms": timeout_ms_env if timeout_ms_env >= 60000 else 60000}
    )
    return AdminClient(cluster_config)
