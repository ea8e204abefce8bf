#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Retrieves the services images metadata from the docker engine.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from compose_model.common.settings import ComposeModelSettings

import docker
import requests
import urllib3
from compose_x_common.compose_x_common import keyisset, set_else_none

from compose_model.common.logging import LOG
from compose_model.exceptions import ImageInspectionError

from . import parse_image_name


class ImageMetadata:
    """
    What the image declares in its configuration.

    :ivar list[tuple[int, str]] exposed_ports: port number and protocol
    :ivar list[str] volumes: mount paths
    :ivar list[tuple[str, str]] env: name and value
    """

    def __init__(self, exposed_ports: list = None, volumes: list = None, env: list = None):
        self.exposed_ports = exposed_ports or []
        self.volumes = volumes or []
        self.env = env or []

    def __repr__(self):
        return f"ports={self.exposed_ports}, volumes={self.volumes}, env={[_env[0] for _env in self.env]}"

    @classmethod
    def from_inspect(cls, image_details: dict) -> ImageMetadata:
        """
        Builds the metadata from the docker image inspect output.
        Uses ``Config``, or ``ContainerConfig`` for engines that only return the latter.
        """
        config = set_else_none("Config", image_details, None)
        if not config:
            config = set_else_none("ContainerConfig", image_details, {})
        exposed_ports = []
        for port_def in set_else_none("ExposedPorts", config, {}):
            port, _, protocol = port_def.partition(r"/")
            try:
                exposed_ports.append((int(port), protocol or "tcp"))
            except ValueError:
                LOG.warning(f"Ignoring invalid exposed port {port_def}")
        env = []
        for env_def in set_else_none("Env", config, []):
            if r"=" not in env_def:
                continue
            name, _, value = env_def.partition(r"=")
            env.append((name, value))
        return cls(
            exposed_ports=exposed_ports,
            volumes=list(set_else_none("Volumes", config, {}).keys()),
            env=env,
        )


class DockerImageInspector:
    """
    Gets the image from the docker engine, pulling it when not present locally, and returns its metadata.

    :ivar int retries: how many times to try pulling the image
    """

    def __init__(
        self,
        client: docker.DockerClient = None,
        retries: int = 5,
        retry_delay: float = 2.0,
        settings: ComposeModelSettings = None,
    ):
        if settings:
            retries = settings.pull_retries
        self._client = client
        self._settings = settings
        self.retries = retries
        self.retry_delay = retry_delay

    @property
    def client(self) -> docker.DockerClient:
        if self._client is None:
            try:
                if self._settings and self._settings.docker_host:
                    self._client = docker.DockerClient(
                        base_url=self._settings.docker_host,
                        timeout=self._settings.docker_timeout,
                    )
                elif self._settings:
                    self._client = docker.from_env(
                        timeout=self._settings.docker_timeout
                    )
                else:
                    self._client = docker.from_env()
            except docker.errors.DockerException as error:
                raise ImageInspectionError(
                    f"Failed to connect to any docker engine: {error}"
                )
        return self._client

    def pull(self, image_reference: str):
        """
        Pulls the image, trying up to ``retries`` times.

        :raises ImageInspectionError: when all attempts failed
        """
        image = parse_image_name(image_reference)
        last_error = None
        for attempt in range(1, self.retries + 1):
            LOG.info(f"Pulling {image_reference} ({attempt}/{self.retries})")
            try:
                return self.client.images.pull(
                    image.repository, tag=image.digest or image.tag
                )
            except docker.errors.ImageNotFound as error:
                raise ImageInspectionError(
                    f"Image {image_reference} not found: {error}", image_reference
                )
            except docker.errors.APIError as error:
                last_error = error
                LOG.warning(f"Failed to pull {image_reference}: {error}")
            if attempt < self.retries and self.retry_delay:
                time.sleep(self.retry_delay)
        raise ImageInspectionError(
            f"Failed to pull {image_reference} after {self.retries} attempts: {last_error}",
            image_reference,
        )

    def inspect(self, image_reference: str) -> ImageMetadata:
        """
        :param str image_reference: the image reference, i.e. nginx:latest
        :rtype: ImageMetadata
        :raises ImageInspectionError:
        """
        if not image_reference:
            raise ImageInspectionError("No image defined to inspect", image_reference)
        try:
            try:
                image = self.client.images.get(image_reference)
                LOG.debug(f"Found {image_reference} locally")
            except docker.errors.ImageNotFound:
                image = self.pull(image_reference)
            if not keyisset("Config", image.attrs) and not keyisset(
                "ContainerConfig", image.attrs
            ):
                LOG.warning(f"No configuration found for image {image_reference}")
            return ImageMetadata.from_inspect(image.attrs)
        except docker.errors.DockerException as error:
            raise ImageInspectionError(
                f"Failed to inspect {image_reference}: {error}", image_reference
            )
        except (
            FileNotFoundError,
            urllib3.exceptions.HTTPError,
            requests.exceptions.RequestException,
        ) as error:
            raise ImageInspectionError(
                f"Failed to connect to any docker engine: {error}", image_reference
            )
