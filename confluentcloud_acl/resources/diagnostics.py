#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2024 John Mille <john@ews-network.net>

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from confluentcloud_acl.errors import ConfigValidationError, FieldSetError


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    summary: str
    detail: str = ""
    attribute: str | None = None


def diagnostics_from_error(error: Exception | None) -> list[Diagnostic]:
    """
    Converts an exception into diagnostics. A validation error yields one
    diagnostic per malformed attribute.
    """
    if error is None:
        return []
    if isinstance(error, ConfigValidationError):
        return [
            Diagnostic(Severity.ERROR, reason, str(error), attribute=field)
            for field, reason in error.errors.items()
        ]
    if isinstance(error, FieldSetError):
        return [Diagnostic(Severity.ERROR, str(error), attribute=error.field)]
    return [Diagnostic(Severity.ERROR, str(error), detail=type(error).__name__)]


def has_errors(diagnostics: list[Diagnostic]) -> bool:
    return any(_diag.severity is Severity.ERROR for _diag in diagnostics)
