# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

from __future__ import annotations

import shlex

from compose_x_common.compose_x_common import keypresent

from compose_model.common.logging import LOG
from compose_model.exceptions import ManifestDecodeError


def env_value_to_str(value) -> str:
    """Renders an environment value the way docker compose does"""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def set_environment_list_from_list(environment: list) -> list[tuple[str, str]]:
    """Transforms a list of string with a ``key=value`` into a list of (key, value)"""
    env_vars = []
    for key in environment:
        if not isinstance(key, str):
            raise ManifestDecodeError(
                f"Environment variable {key} must be a string in the Key=Value format"
            )
        name, _, value = key.partition(r"=")
        env_vars.append((name, value))
    return env_vars


def import_env_variables(environment) -> list[tuple[str, str]]:
    """
    Function to import Docker compose env variables, in declaration order.
    Duplicated names are kept, the last one is meant to win.

    :param environment: Environment variables as defined on the service definition
    :type environment: list or dict
    :rtype: list[tuple[str, str]]
    """
    if not environment:
        return []
    if isinstance(environment, list):
        env_vars = set_environment_list_from_list(environment)
    elif isinstance(environment, dict):
        env_vars = [
            (str(key), env_value_to_str(value)) for key, value in environment.items()
        ]
    else:
        raise ManifestDecodeError(
            "Environment must be a list of string or a dict of key/value"
        )
    names = [env_var[0] for env_var in env_vars]
    for name in set(names):
        if names.count(name) > 1:
            LOG.warning(f"{name} was defined more than once. Using the last value")
    return env_vars


def import_links(links: list) -> list[str]:
    """Returns the linked services names, without their alias"""
    if not links:
        return []
    return [str(link).split(r":")[0] for link in links]


def import_depends_on(definition: dict):
    """
    Returns the services the service depends on, or None if depends_on is not set.
    An empty depends_on is returned as an empty list.

    :param dict definition: the service definition
    :rtype: list[str] or None
    """
    if not keypresent("depends_on", definition) or definition["depends_on"] is None:
        return None
    depends_on = definition["depends_on"]
    if isinstance(depends_on, dict):
        return list(depends_on.keys())
    elif isinstance(depends_on, list):
        return [str(service_name) for service_name in depends_on]
    raise ManifestDecodeError(
        f"depends_on must be one of {(list, dict)}. Got {type(depends_on)}"
    )


def import_command(command) -> list[str]:
    """Returns the command of the service as a list of arguments"""
    if not command:
        return []
    if isinstance(command, str):
        try:
            return shlex.split(command)
        except ValueError as error:
            raise ManifestDecodeError(f"Invalid command {command}: {error}")
    if isinstance(command, list):
        return [str(arg) for arg in command]
    raise ManifestDecodeError(f"command must be one of {(str, list)}. Got {type(command)}")
