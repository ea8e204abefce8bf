#  -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2021 John Mille <john@compose-x.io>

"""
Functions to import the volumes defined on compose services.
Only the container mount path matters to the services model.
"""

import re

from compose_x_common.compose_x_common import keyisset

from compose_model.common import LOG
from compose_model.exceptions import ManifestDecodeError

PATH_FINDER = re.compile(r"(^/[^:]+$)|(^[^:]+)(?::(/[^:]+))(?::([a-zA-Z,]+))?$")


def handle_volume_str_config(config: str) -> str:
    """
    Function to return the mount path of a volume short syntax definition

    :param str config:
    :rtype: str
    :raises ManifestDecodeError: if the syntax is not valid
    """
    path_match = PATH_FINDER.match(config)
    if not path_match:
        raise ManifestDecodeError(
            f"Volume syntax {config} is invalid. Must follow the pattern {PATH_FINDER.pattern}"
        )
    if path_match.groups()[0]:
        LOG.debug(f"Anonymous volume for path {path_match.groups()[0]}")
        return path_match.groups()[0]
    return path_match.groups()[2]


def handle_volume_dict_config(config: dict) -> str:
    """
    Function to return the mount path of a volume long syntax definition

    :param dict config:
    :rtype: str
    """
    if not keyisset("target", config):
        raise ManifestDecodeError(
            f"Volume configuration requires at least target. Got {list(config.keys())}"
        )
    return config["target"]


def import_service_volumes(volumes: list) -> list[str]:
    """
    :param list volumes: the service volumes definition
    :return: the mount paths, in declaration order
    """
    mount_paths = []
    for volume in volumes or []:
        if isinstance(volume, str):
            mount_paths.append(handle_volume_str_config(volume))
        elif isinstance(volume, dict):
            mount_paths.append(handle_volume_dict_config(volume))
        else:
            raise ManifestDecodeError(
                f"Volume {volume} must be one of {(str, dict)}. Got {type(volume)}"
            )
    return mount_paths
