#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2024 John Mille <john@ews-network.net>

"""Exceptions raised by the ACL resource and its clients."""

from __future__ import annotations


class AclResourceError(Exception):
    """Base exception for all the confluentcloud_acl errors"""

    def __init__(self, message: str, *args):
        self.message = message
        super().__init__(message, *args)


class AclApiError(AclResourceError):
    """The remote ACL API call failed"""

    def __init__(
        self, message: str, cluster_id: str = None, cause: Exception = None, *args
    ):
        self.cluster_id = cluster_id
        self.cause = cause
        if cluster_id:
            message = f"{message} (cluster={cluster_id})"
        super().__init__(message, *args)


class AclNotFoundError(AclResourceError):
    """No ACL in the cluster matched the lookup name"""

    def __init__(self, name: str, cluster_id: str = None, *args):
        self.name = name
        self.cluster_id = cluster_id
        message = f"unable to find ACL {name}"
        if cluster_id:
            message = f"{message} (cluster={cluster_id})"
        super().__init__(message, *args)


class ConfigValidationError(AclResourceError):
    """One or more attributes could not be decoded. Lists them all."""

    def __init__(self, errors: dict[str, str], *args):
        self.errors = errors
        details = "; ".join(f"{field}: {reason}" for field, reason in errors.items())
        super().__init__(f"Invalid ACL configuration: {details}", *args)


class FieldSetError(AclResourceError):
    """Writing an attribute into the resource data failed"""

    def __init__(self, field: str, reason: str, *args):
        self.field = field
        super().__init__(f"Failed to set {field}: {reason}", *args)
