#  -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2021 John Mille <john@compose-x.io>

"""
Docker compose resources related functions.
"""

import re

from compose_x_common.compose_x_common import keyisset

from compose_model.common import LOG
from compose_model.exceptions import ManifestDecodeError

NUMBERS_REG = r"[^0-9.]"
ONE_MB = pow(pow(2, 10), 2)


def set_memory_to_mb(value) -> int:
    """
    Returns the value in MB. Integers are bytes, as for docker compose.

    :param value: the string or int value
    :rtype: int
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return int(value / ONE_MB)
    value = str(value).strip()
    b_pat = re.compile(r"(^[0-9.]+(b|B)?$)")
    kb_pat = re.compile(r"(^[0-9.]+(k|kb|kB|Kb|K|KB)$)")
    mb_pat = re.compile(r"(^[0-9.]+(m|mb|mB|Mb|M|MB)$)")
    gb_pat = re.compile(r"(^[0-9.]+(g|gb|gB|Gb|G|GB)$)")
    if not re.sub(NUMBERS_REG, "", value) or not re.match(r"^[0-9.]", value):
        raise ManifestDecodeError(f"Could not parse {value} to units")
    try:
        amount = float(re.sub(NUMBERS_REG, "", value))
    except ValueError:
        raise ManifestDecodeError(f"Could not parse {value} to units")
    unit = "MBytes"
    if b_pat.findall(value):
        unit = "Bytes"
        final_amount = amount / ONE_MB
    elif kb_pat.findall(value):
        unit = "KBytes"
        final_amount = amount / pow(2, 10)
    elif mb_pat.findall(value):
        final_amount = amount
    elif gb_pat.findall(value):
        unit = "GBytes"
        final_amount = amount * pow(2, 10)
    else:
        raise ManifestDecodeError(f"Could not parse {value} to units")
    LOG.debug(f"Computed unit for {value}: {unit}. Results into {int(final_amount)}MB")
    return int(final_amount)


def import_memory_limit(definition: dict) -> int:
    """
    Memory limit of the service in MB. ``mem_limit`` takes precedence over ``deploy.resources.limits``

    :param dict definition: the service definition
    :rtype: int
    """
    if keyisset("mem_limit", definition):
        return set_memory_to_mb(definition["mem_limit"])
    if (
        keyisset("deploy", definition)
        and keyisset("resources", definition["deploy"])
        and keyisset("limits", definition["deploy"]["resources"])
        and keyisset("memory", definition["deploy"]["resources"]["limits"])
    ):
        return set_memory_to_mb(definition["deploy"]["resources"]["limits"]["memory"])
    return 0
