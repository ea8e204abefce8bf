#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module to decode the compose file content and import the services declared settings
"""

from __future__ import annotations

from copy import deepcopy
from json import loads

import jsonschema
import yaml
from compose_x_common.compose_x_common import set_else_none
from importlib_resources import files as pkg_files

from compose_model.common.envsubst import interpolate_content
from compose_model.common.logging import LOG
from compose_model.exceptions import ManifestDecodeError

from .docker_tools import import_memory_limit
from .helpers import import_command, import_depends_on, import_env_variables, import_links
from .ports import PortDeclaration, import_service_ports
from .volumes import import_service_volumes


class ServiceConfig:
    """
    Class to represent the settings of a docker-compose service, as declared.

    :ivar str name:
    :ivar list[PortDeclaration] ports:
    :ivar list[str] volumes: container mount paths
    :ivar list[tuple[str, str]] environment:
    :ivar int memory_limit: in MB
    :ivar str image:
    :ivar list[str] args:
    :ivar list[str] links:
    :ivar list[str] depends_on: None when not declared
    """

    def __init__(self, name: str, definition: dict):
        if definition is None:
            definition = {}
        self.name = name
        self.image = set_else_none("image", definition, "")
        self.ports: list[PortDeclaration] = import_service_ports(
            set_else_none("ports", definition, []),
            set_else_none("expose", definition, []),
        )
        self.volumes: list[str] = import_service_volumes(
            set_else_none("volumes", definition, [])
        )
        self.environment = import_env_variables(
            set_else_none("environment", definition, None)
        )
        self.memory_limit = import_memory_limit(definition)
        self.args = import_command(set_else_none("command", definition, None))
        self.links = import_links(set_else_none("links", definition, []))
        self.depends_on = import_depends_on(definition)

    def __repr__(self):
        return self.name


class ComposeDefinition:
    """
    Decodes the compose content and validates it against the services schema.

    :ivar dict definition: the compose content, interpolated
    :ivar dict[str, ServiceConfig] services:
    """

    main_key = "services"
    schema_path = "specs/compose-services.json"

    def __init__(self, content: str, interpolate: bool = True, environment: dict = None):
        try:
            raw_definition = yaml.safe_load(content)
        except yaml.YAMLError as error:
            raise ManifestDecodeError(f"Failed to load compose content: {error}")
        if not isinstance(raw_definition, dict):
            raise ManifestDecodeError(
                f"The compose content must be a mapping. Got {type(raw_definition).__name__}"
            )
        self.definition = (
            interpolate_content(raw_definition, environment)
            if interpolate
            else deepcopy(raw_definition)
        )
        self.validate_keys()
        self.validate()
        self.services = {}
        for name, service_definition in self.definition[self.main_key].items():
            LOG.debug(f"Importing service {name}")
            self.services[name] = ServiceConfig(name, service_definition)

    @classmethod
    def schema(cls) -> dict:
        source = pkg_files("compose_model").joinpath(cls.schema_path)
        return loads(source.read_text())

    def validate_keys(self) -> None:
        """
        Top level and services names must be strings, which YAML does not enforce.

        :raises ManifestDecodeError: if a key is not a string
        """
        keys = list(self.definition.keys())
        if isinstance(self.definition.get(self.main_key), dict):
            keys += list(self.definition[self.main_key].keys())
        for key in keys:
            if not isinstance(key, str):
                raise ManifestDecodeError(
                    f"Invalid compose content: key {key} must be a string. Got {type(key).__name__}"
                )

    def validate(self) -> None:
        """
        :raises ManifestDecodeError: if the content is not valid against the schema
        """
        LOG.debug(f"Validating against input schema {self.schema_path}")
        try:
            jsonschema.validate(self.definition, self.schema())
        except jsonschema.exceptions.ValidationError as error:
            path = ".".join(str(part) for part in error.absolute_path)
            raise ManifestDecodeError(
                f"Invalid compose content at {path or 'root'}: {error.message}"
            )

    @property
    def service_names(self) -> list[str]:
        return list(self.services.keys())
