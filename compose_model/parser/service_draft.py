#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Per service accumulator of the parsed settings, from the compose declaration and then the image metadata.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from logging import Logger
    from compose_model.compose import ServiceConfig
    from compose_model.images.docker_inspect import ImageMetadata

from compose_model.common.logging import LOG
from compose_model.compose.ports import APPLICATION_PROTOCOLS, UDP, resolve_protocol
from compose_model.images import Image, parse_image_name

from .models import SHARE_FILE_VOLUME_TYPE, Env, Port, ServiceInfo, Volume


def image_port_protocol(port: int, protocol: str) -> str:
    """
    Protocol to use for a port exposed by the image.
    udp and application protocols are kept, transport protocols are inferred from the port.
    """
    if protocol == UDP or protocol in APPLICATION_PROTOCOLS:
        return protocol
    return resolve_protocol(port, protocol)


class ServiceDraft:
    """
    Mutable settings of a service while parsing. Ports, volumes and env vars are keyed so that the last
    declaration of a given key replaces the previous one.

    :ivar dict[int, Port] ports:
    :ivar dict[str, Volume] volumes:
    :ivar dict[str, Env] envs:
    :ivar int memory_limit:
    :ivar Image image:
    :ivar list[str] args:
    :ivar list[str] dependencies:
    """

    def __init__(self, name: str, image: Image = None, logger: Logger = None):
        self.name = name
        self.ports: dict[int, Port] = {}
        self.volumes: dict[str, Volume] = {}
        self.envs: dict[str, Env] = {}
        self.memory_limit = 0
        self.image = image if image is not None else Image()
        self.args: list[str] = []
        self.dependencies: list[str] = []
        self.logger = logger or LOG

    def __repr__(self):
        return self.name

    @classmethod
    def from_service_config(cls, config: ServiceConfig, logger: Logger = None) -> ServiceDraft:
        """
        Builds the draft from the declared settings only.
        depends_on, when set, replaces the links entirely.
        """
        draft = cls(config.name, parse_image_name(config.image), logger)
        for port in config.ports:
            draft.ports[port.container_port] = Port(
                port.container_port, resolve_protocol(port.container_port, port.protocol)
            )
        for mount_path in config.volumes:
            draft.volumes[mount_path] = Volume(mount_path, SHARE_FILE_VOLUME_TYPE)
        for name, value in config.environment:
            draft.envs[name] = Env(name, value)
        draft.memory_limit = config.memory_limit
        draft.args = list(config.args)
        draft.dependencies = list(config.links)
        if config.depends_on is not None:
            draft.dependencies = list(config.depends_on)
        return draft

    def merge_image_metadata(self, metadata: ImageMetadata) -> None:
        """
        Merges what the image declares into the draft.

        * env vars and volumes are only added when not already declared.
        * exposed ports already declared get the image protocol, others are added.
        """
        for name, value in metadata.env:
            if name not in self.envs:
                self.logger.debug(f"{self.name} - Adding env var {name} from image")
                self.envs[name] = Env(name, value)
        for mount_path in metadata.volumes:
            if mount_path not in self.volumes:
                self.logger.debug(f"{self.name} - Adding volume {mount_path} from image")
                self.volumes[mount_path] = Volume(mount_path, SHARE_FILE_VOLUME_TYPE)
        for port, protocol in metadata.exposed_ports:
            protocol = image_port_protocol(port, protocol)
            if port in self.ports:
                self.ports[port].protocol = protocol
            else:
                self.logger.debug(f"{self.name} - Adding port {port}/{protocol} from image")
                self.ports[port] = Port(port, protocol)

    def to_service_info(self) -> ServiceInfo:
        return ServiceInfo(
            name=self.name,
            ports=[
                Port(port.container_port, port.protocol) for port in self.ports.values()
            ],
            envs=[Env(env.name, env.value) for env in self.envs.values()],
            volumes=[
                Volume(volume.mount_path, volume.volume_type)
                for volume in self.volumes.values()
            ],
            image=Image(self.image.repository, self.image.tag, self.image.digest),
            args=list(self.args),
            dependencies=list(self.dependencies),
            memory_limit=self.memory_limit,
        )
