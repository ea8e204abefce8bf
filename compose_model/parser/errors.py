#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Errors reported by the parsers, as data.
"""

from __future__ import annotations

FATAL_ERROR = "FatalError"
NEGLIGIBLE_ERROR = "NegligibleError"
SEVERITIES = [FATAL_ERROR, NEGLIGIBLE_ERROR]


class ParseError:
    """
    :ivar str severity: one of SEVERITIES
    :ivar str message:
    """

    def __init__(self, severity: str, message: str):
        if severity not in SEVERITIES:
            raise ValueError(f"Severity {severity} is not valid. Must be one of", SEVERITIES)
        self.severity = severity
        self.message = message

    def __str__(self):
        return f"{self.severity}: {self.message}"

    def __repr__(self):
        return f"ParseError({self})"

    @property
    def is_fatal(self) -> bool:
        return self.severity == FATAL_ERROR

    def to_dict(self) -> dict:
        return {"severity": self.severity, "message": self.message}


def errorf(severity: str, message: str, *args) -> ParseError:
    """Builds a ParseError, formatting the message with args when given"""
    if args:
        message = message % args
    return ParseError(severity, message)


class ParseErrorList(list):
    """Ordered, append-only list of ParseError"""

    def is_fatal(self) -> bool:
        return any(error.is_fatal for error in self)

    def __str__(self):
        return "; ".join(str(error) for error in self)
