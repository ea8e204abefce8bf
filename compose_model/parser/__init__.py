#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module to parse a docker-compose content into the services model, reconciled with the services images metadata.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from logging import Logger
    from compose_model.images.docker_inspect import DockerImageInspector

from compose_model.common.logging import LOG
from compose_model.compose import ComposeDefinition
from compose_model.exceptions import ImageInspectionError, ManifestDecodeError
from compose_model.images import Image

from .errors import FATAL_ERROR, ParseError, ParseErrorList, errorf
from .models import ServiceInfo
from .service_draft import ServiceDraft


class DockerComposeParser:
    """
    Parses the docker-compose content once, then reconciles each service with what its image declares.

    :ivar dict[str, ServiceDraft] services:
    :ivar ParseErrorList errors:
    """

    def __init__(
        self,
        source: str,
        inspector: DockerImageInspector,
        logger: Logger = None,
        interpolate: bool = True,
    ):
        self.source = source
        self.inspector = inspector
        self.logger = logger or LOG
        self.interpolate = interpolate
        self.services: dict[str, ServiceDraft] = {}
        self.errors = ParseErrorList()
        self._parsed = False

    def errappend(self, error: ParseError) -> None:
        self.errors.append(error)
        if error.is_fatal:
            self.logger.error(error.message)
        else:
            self.logger.warning(error.message)

    def parse(self) -> ParseErrorList:
        """
        Builds the services from the compose content, then merges the images metadata in.
        Stops at the first error.

        :return: the errors, empty when successful
        :rtype: ParseErrorList
        """
        if self._parsed:
            self.logger.debug("Content already parsed")
            return self.errors
        self._parsed = True
        if not self.source:
            self.errappend(errorf(FATAL_ERROR, "source can not be empty"))
            return self.errors
        try:
            compose = ComposeDefinition(self.source, interpolate=self.interpolate)
        except ManifestDecodeError as error:
            self.errappend(errorf(FATAL_ERROR, error.message))
            return self.errors
        for name, service_config in compose.services.items():
            self.services[name] = ServiceDraft.from_service_config(
                service_config, self.logger
            )
            self.logger.debug(f"{name} - Drafted from compose definition")
        self.logger.info(f"Drafted services {list(self.services.keys())}")
        for name, service in self.services.items():
            self.logger.info(f"{name} - Inspecting image {service.image}")
            try:
                metadata = self.inspector.inspect(str(service.image))
            except ImageInspectionError as error:
                self.errappend(errorf(FATAL_ERROR, error.message))
                return self.errors
            if metadata is not None:
                service.merge_image_metadata(metadata)
        return self.errors

    def get_service_info(self) -> list[ServiceInfo]:
        """
        Services model once parsed. Empty when the parsing reported any error.

        :rtype: list[ServiceInfo]
        """
        if self.errors:
            return []
        return [service.to_service_info() for service in self.services.values()]

    def get_image(self) -> Image:
        """A compose content has no single image"""
        return Image()
