#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2024 John Mille <john@ews-network.net>

"""Manages Kafka ACLs as declarative confluentcloud_acl resources."""

__version__ = "0.1.0"
