# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module for the ComposeModelSettings class
"""

from __future__ import annotations

import sys
from copy import deepcopy
from os import environ, path

from compose_x_common.compose_x_common import keyisset, keypresent

from compose_model.common import as_bool
from compose_model.common.logging import LOG


class ComposeModelSettings:
    """
    Class to handle the settings to use for a compose parsing execution.
    Values are taken from the keyword arguments first, then from environment variables, then defaults.
    """

    command_arg = "command"
    input_file_arg = "ComposeFile"
    retries_arg = "PullRetries"
    docker_host_arg = "DockerHost"
    docker_timeout_arg = "DockerTimeout"
    format_arg = "OutputFormat"
    interpolate_arg = "Interpolate"

    retries_env = "COMPOSE_MODEL_PULL_RETRIES"
    docker_host_env = "DOCKER_HOST"
    docker_timeout_env = "COMPOSE_MODEL_DOCKER_TIMEOUT"

    default_retries = 5
    default_docker_timeout = 60
    default_format = "json"
    allowed_formats = ["json", "yaml"]

    active_commands = [
        {
            "name": "parse",
            "help": "Parses the compose file, inspects the images and prints the services model",
        },
    ]
    neutral_commands = [
        {"name": "version", "help": "Compose Model version"},
    ]
    all_commands = active_commands + neutral_commands

    def __init__(self, **kwargs):
        self.__args = deepcopy(kwargs)
        self.compose_file = kwargs.get(self.input_file_arg)
        self.pull_retries = self.set_positive_int(
            self.retries_arg, self.retries_env, self.default_retries
        )
        self.docker_timeout = self.set_positive_int(
            self.docker_timeout_arg, self.docker_timeout_env, self.default_docker_timeout
        )
        self.docker_host = (
            kwargs[self.docker_host_arg]
            if keyisset(self.docker_host_arg, kwargs)
            else environ.get(self.docker_host_env)
        )
        self.output_format = (
            kwargs[self.format_arg]
            if keyisset(self.format_arg, kwargs)
            else self.default_format
        )
        if self.output_format not in self.allowed_formats:
            raise ValueError(
                f"Format {self.output_format} is not valid. Must be one of",
                self.allowed_formats,
            )
        self.interpolate = (
            as_bool(kwargs[self.interpolate_arg])
            if keypresent(self.interpolate_arg, kwargs)
            and kwargs[self.interpolate_arg] is not None
            else True
        )
        LOG.debug(f"Settings: {self}")

    def __repr__(self):
        return (
            f"file={self.compose_file}, retries={self.pull_retries}, "
            f"docker_host={self.docker_host}, timeout={self.docker_timeout}, "
            f"format={self.output_format}"
        )

    def set_positive_int(self, arg_name: str, env_name: str, default: int) -> int:
        """
        Gets a strictly positive integer from the arguments or the environment.

        :raises ValueError: if the value is not a valid positive int
        """
        if keypresent(arg_name, self.__args) and self.__args[arg_name] is not None:
            value = self.__args[arg_name]
        elif environ.get(env_name):
            value = environ[env_name]
        else:
            return default
        try:
            int_value = int(value)
        except (TypeError, ValueError):
            raise ValueError(f"{arg_name} must be an integer. Got {value}")
        if int_value < 1:
            raise ValueError(f"{arg_name} must be greater than 0. Got {int_value}")
        return int_value

    def read_compose_content(self) -> str:
        """
        Reads the compose file content. ``-`` reads from stdin.

        :raises FileNotFoundError: if the file does not exist
        """
        if not self.compose_file:
            raise ValueError("No compose file was provided")
        if self.compose_file == "-":
            return sys.stdin.read()
        if not path.exists(self.compose_file):
            raise FileNotFoundError(f"File {self.compose_file} does not exist")
        with open(self.compose_file, "r", encoding="utf-8") as compose_fd:
            return compose_fd.read()
