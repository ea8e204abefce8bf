# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Most commonly used functions shared across all modules.
"""

from __future__ import annotations

import re

from .logging import LOG

NUMBERS_ONLY = re.compile(r"^\d+$")


def as_bool(value) -> bool:
    """
    Interprets strings such as ``"true"``, ``"0"``, ``"no"`` as booleans.

    :raises ValueError: if the string can't be interpreted
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return bool(value)
    if isinstance(value, str):
        if value.lower() in ["true", "yes", "y", "1", "on"]:
            return True
        elif value.lower() in ["false", "no", "n", "0", "off", ""]:
            return False
    raise ValueError(f"Unable to interpret {value} as a boolean")
