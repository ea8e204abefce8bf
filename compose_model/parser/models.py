#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Services model exported by the parsers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from compose_model.images import Image

SHARE_FILE_VOLUME_TYPE = "share-file"


class Port:
    def __init__(self, container_port: int, protocol: str):
        self.container_port = container_port
        self.protocol = protocol

    def __repr__(self):
        return f"Port({self.container_port}/{self.protocol})"

    def __eq__(self, other):
        if not isinstance(other, Port):
            return NotImplemented
        return (self.container_port, self.protocol) == (
            other.container_port,
            other.protocol,
        )

    def to_dict(self) -> dict:
        return {"container_port": self.container_port, "protocol": self.protocol}


class Volume:
    def __init__(self, mount_path: str, volume_type: str = SHARE_FILE_VOLUME_TYPE):
        self.mount_path = mount_path
        self.volume_type = volume_type

    def __repr__(self):
        return f"Volume({self.mount_path}, {self.volume_type})"

    def __eq__(self, other):
        if not isinstance(other, Volume):
            return NotImplemented
        return (self.mount_path, self.volume_type) == (
            other.mount_path,
            other.volume_type,
        )

    def to_dict(self) -> dict:
        return {"mount_path": self.mount_path, "volume_type": self.volume_type}


class Env:
    def __init__(self, name: str, value: str):
        self.name = name
        self.value = value

    def __repr__(self):
        return f"Env({self.name}={self.value})"

    def __eq__(self, other):
        if not isinstance(other, Env):
            return NotImplemented
        return (self.name, self.value) == (other.name, other.value)

    def to_dict(self) -> dict:
        return {"name": self.name, "value": self.value}


class ServiceInfo:
    """
    Snapshot of a service settings once parsed. Lists have no meaningful order.

    :ivar str name: the service name in the compose file
    :ivar list[Port] ports:
    :ivar list[Env] envs:
    :ivar list[Volume] volumes:
    :ivar Image image:
    :ivar list[str] args:
    :ivar list[str] dependencies: names of the services this one depends on
    :ivar int memory_limit: in MB
    """

    def __init__(
        self,
        name: str,
        ports: list,
        envs: list,
        volumes: list,
        image: Image,
        args: list,
        dependencies: list,
        memory_limit: int,
    ):
        self.name = name
        self.ports = ports
        self.envs = envs
        self.volumes = volumes
        self.image = image
        self.args = args
        self.dependencies = dependencies
        self.memory_limit = memory_limit

    def __repr__(self):
        return f"ServiceInfo({self.name}, {self.image})"

    def to_dict(self) -> dict:
        """Serializable projection, with ports, envs and volumes sorted"""
        return {
            "name": self.name,
            "image": str(self.image),
            "ports": [
                port.to_dict()
                for port in sorted(self.ports, key=lambda p: p.container_port)
            ],
            "envs": [env.to_dict() for env in sorted(self.envs, key=lambda e: e.name)],
            "volumes": [
                volume.to_dict()
                for volume in sorted(self.volumes, key=lambda v: v.mount_path)
            ],
            "args": list(self.args),
            "dependencies": list(self.dependencies),
            "memory_limit": self.memory_limit,
        }
