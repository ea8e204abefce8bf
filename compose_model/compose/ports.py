#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Functions to import the ports and expose definitions of the compose services, and infer their protocol.
"""

from __future__ import annotations

import re

from compose_x_common.compose_x_common import keyisset, set_else_none

from compose_model.common import NUMBERS_ONLY
from compose_model.exceptions import ManifestDecodeError

UDP = "udp"
TCP = "tcp"
TRANSPORT_PROTOCOLS = [TCP, UDP, "sctp"]

WELL_KNOWN_PORTS = {
    80: "http",
    443: "https",
    3306: "mysql",
    3307: "mysql",
    13306: "mysql",
}
APPLICATION_PROTOCOLS = sorted(set(WELL_KNOWN_PORTS.values()))

PORT_RANGE_RE = re.compile(r"^(?P<start>\d+)(?:-(?P<end>\d+))?$")


def get_port_protocol(port: int) -> str:
    """
    Infers the protocol of a container port from well known ports. Never returns udp.

    :param int port:
    :return: the protocol label
    :rtype: str
    """
    return WELL_KNOWN_PORTS.get(int(port), TCP)


def resolve_protocol(port: int, protocol: str = None) -> str:
    """
    Keeps udp as-is, infers the protocol for everything else.
    """
    if protocol == UDP:
        return UDP
    return get_port_protocol(port)


class PortDeclaration:
    """
    A container port as declared in the compose file

    :ivar int container_port:
    :ivar str protocol: transport protocol declared, tcp when not set
    """

    def __init__(self, container_port: int, protocol: str = TCP):
        self.container_port = int(container_port)
        self.protocol = protocol

    def __repr__(self):
        return f"{self.container_port}/{self.protocol}"


def validate_port_number(port) -> int:
    if isinstance(port, bool) or not (
        isinstance(port, int) or NUMBERS_ONLY.match(str(port))
    ):
        raise ManifestDecodeError(f"Port {port} is not a valid number")
    if not (1 <= int(port) < (2**16)):
        raise ManifestDecodeError(f"Port {port} is not between 1 and 65535")
    return int(port)


def expand_port_range(ports: str) -> list[int]:
    """
    Expands ``3000-3002`` into ``[3000, 3001, 3002]``

    :raises ManifestDecodeError: if the range is invalid
    """
    parts = PORT_RANGE_RE.match(ports.strip())
    if not parts:
        raise ManifestDecodeError(f"Port definition {ports} is not valid")
    start = validate_port_number(parts.group("start"))
    if not parts.group("end"):
        return [start]
    end = validate_port_number(parts.group("end"))
    if end < start:
        raise ManifestDecodeError(f"Port range {ports} end is lower than its start")
    return list(range(start, end + 1))


def set_port_from_str(port: str) -> list[PortDeclaration]:
    """
    Function to filter out port string and define the container ports and protocol.
    Supports ``8080``, ``8081:80``, ``127.0.0.1:8081:80``, ``22/udp`` and ranges

    :param str port:
    :return: the container ports declared
    :rtype: list[PortDeclaration]
    """
    if r"/" in port:
        protocol = port.split(r"/")[-1].lower()
        if protocol not in TRANSPORT_PROTOCOLS:
            raise ManifestDecodeError(
                f"Protocol {protocol} is not valid. Must be one of {TRANSPORT_PROTOCOLS}"
            )
        port = port.split(r"/")[0]
    else:
        protocol = TCP
    target = port.split(r":")[-1]
    return [PortDeclaration(_port, protocol) for _port in expand_port_range(target)]


def set_port_from_dict(port: dict) -> PortDeclaration:
    """
    Long syntax ports definition. ``target`` is the container port.
    """
    if not keyisset("target", port):
        raise ManifestDecodeError("The ports must always at least define the target.")
    protocol = str(set_else_none("protocol", port, TCP)).lower()
    if protocol not in TRANSPORT_PROTOCOLS:
        raise ManifestDecodeError(
            f"Protocol {protocol} is not valid. Must be one of {TRANSPORT_PROTOCOLS}"
        )
    return PortDeclaration(validate_port_number(port["target"]), protocol)


def import_service_ports(ports: list, expose: list = None) -> list[PortDeclaration]:
    """
    Imports the ports and expose definitions of a service, in declaration order.

    :param list ports: the service ports
    :param list expose: the service expose
    :rtype: list[PortDeclaration]
    """
    declared = []
    for port in (ports or []) + (expose or []):
        if isinstance(port, dict):
            declared.append(set_port_from_dict(port))
        elif isinstance(port, int) and not isinstance(port, bool):
            declared.append(PortDeclaration(validate_port_number(port)))
        elif isinstance(port, str):
            declared += set_port_from_str(port)
        else:
            raise ManifestDecodeError(
                f"Port {port} must be one of {(str, int, dict)}. Got {type(port)}"
            )
    return declared
