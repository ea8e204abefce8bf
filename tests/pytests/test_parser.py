#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Tests the compose parser, from the declared settings to the reconciliation with the images metadata.
"""

from pytest import mark

from compose_model.images.docker_inspect import ImageMetadata
from compose_model.parser import DockerComposeParser
from compose_model.parser.errors import FATAL_ERROR
from compose_model.parser.models import SHARE_FILE_VOLUME_TYPE, Env, Port, Volume


def get_service(parser, name):
    for service in parser.get_service_info():
        if service.name == name:
            return service
    raise KeyError(name)


def test_empty_source(inspector):
    parser = DockerComposeParser("", inspector)
    errors = parser.parse()
    assert len(errors) == 1
    assert errors[0].severity == FATAL_ERROR
    assert errors[0].message == "source can not be empty"
    assert parser.services == {}
    assert parser.get_service_info() == []
    assert inspector.calls == []


def test_invalid_source(inspector):
    parser = DockerComposeParser("services: [", inspector)
    errors = parser.parse()
    assert len(errors) == 1
    assert errors.is_fatal()
    assert parser.services == {}
    assert inspector.calls == []


@mark.parametrize(
    "content",
    [
        "services:\n  a:\n    image: a\n    mem_limit: 1.2.3m\n",
        "services:\n  a:\n    image: a\n    mem_limit: ..m\n",
        "services:\n  1:\n    image: a\n",
        "services:\n  a:\n    image: a\n1: x\n",
        "services:\n  a:\n    image: a\n    ports: [\"80/icmp\"]\n",
        "services:\n  a:\n    image: a\n    ports: [\"99999\"]\n",
        "services:\n  a:\n    image: a\n    volumes: [{source: data}]\n",
        "services:\n  a:\n    image: a\n    volumes: [relative]\n",
        "services:\n  a:\n    image: a\n    depends_on: b\n",
        "services:\n  a:\n    image: a\n    command: \"echo \\\"unclosed\"\n",
    ],
)
def test_invalid_service_definitions(content, inspector):
    parser = DockerComposeParser(content, inspector)
    errors = parser.parse()
    assert len(errors) == 1
    assert errors[0].severity == FATAL_ERROR
    assert parser.services == {}
    assert parser.get_service_info() == []
    assert inspector.calls == []


def test_services_count(inspector):
    content = """
services:
  front:
    image: nginx
  api:
    image: org/api:1.0
  db:
    image: mysql:8
"""
    parser = DockerComposeParser(content, inspector)
    assert parser.parse() == []
    services = parser.get_service_info()
    assert len(services) == 3
    assert sorted(service.name for service in services) == ["api", "db", "front"]
    assert sorted(inspector.calls) == ["mysql:8", "nginx:latest", "org/api:1.0"]


def test_declared_settings(web_compose, inspector):
    parser = DockerComposeParser(web_compose, inspector)
    assert not parser.parse()
    web = get_service(parser, "web")
    assert str(web.image) == "nginx:1.25"
    assert web.args == ["nginx", "-g", "daemon off;"]
    assert web.memory_limit == 512
    assert web.dependencies == ["a", "b"]
    assert sorted(web.ports, key=lambda p: p.container_port) == [
        Port(53, "udp"),
        Port(8080, "tcp"),
    ]
    assert sorted(web.volumes, key=lambda v: v.mount_path) == [
        Volume("/data", SHARE_FILE_VOLUME_TYPE),
        Volume("/etc/nginx/conf.d", SHARE_FILE_VOLUME_TYPE),
    ]


def test_links_when_no_depends_on(inspector):
    content = """
services:
  app:
    image: app
    links: [c, "d:alias"]
"""
    parser = DockerComposeParser(content, inspector)
    parser.parse()
    assert get_service(parser, "app").dependencies == ["c", "d"]


def test_empty_depends_on_replaces_links(inspector):
    content = """
services:
  app:
    image: app
    links: [c, d]
    depends_on: []
"""
    parser = DockerComposeParser(content, inspector)
    parser.parse()
    assert get_service(parser, "app").dependencies == []


def test_duplicated_declarations_last_wins(inspector):
    content = """
services:
  app:
    image: app
    ports:
      - "53:53/udp"
      - "53"
      - "80"
    environment:
      - A=1
      - A=2
    volumes:
      - /data
      - data:/data
"""
    parser = DockerComposeParser(content, inspector)
    parser.parse()
    app = get_service(parser, "app")
    assert sorted(app.ports, key=lambda p: p.container_port) == [
        Port(53, "tcp"),
        Port(80, "http"),
    ]
    assert app.envs == [Env("A", "2")]
    assert app.volumes == [Volume("/data")]


def test_declared_env_wins_over_image(web_compose, inspector_factory):
    inspector = inspector_factory(
        {"nginx:1.25": ImageMetadata(env=[("X", "2"), ("PATH", "/usr/bin")])}
    )
    parser = DockerComposeParser(web_compose, inspector)
    parser.parse()
    envs = {env.name: env.value for env in get_service(parser, "web").envs}
    assert envs == {"X": "1", "DEBUG": "true", "PATH": "/usr/bin"}


def test_volumes_not_duplicated(web_compose, inspector_factory):
    inspector = inspector_factory(
        {"nginx:1.25": ImageMetadata(volumes=["/data", "/var/cache/nginx"])}
    )
    parser = DockerComposeParser(web_compose, inspector)
    parser.parse()
    volumes = get_service(parser, "web").volumes
    assert sorted(volume.mount_path for volume in volumes) == [
        "/data",
        "/etc/nginx/conf.d",
        "/var/cache/nginx",
    ]
    assert all(volume.volume_type == SHARE_FILE_VOLUME_TYPE for volume in volumes)


def test_image_wins_on_ports_protocol(web_compose, inspector_factory):
    inspector = inspector_factory(
        {
            "nginx:1.25": ImageMetadata(
                exposed_ports=[(8080, "http"), (9090, "tcp"), (80, "tcp"), (514, "udp")]
            )
        }
    )
    parser = DockerComposeParser(web_compose, inspector)
    parser.parse()
    ports = {port.container_port: port.protocol for port in get_service(parser, "web").ports}
    assert ports == {8080: "http", 53: "udp", 9090: "tcp", 80: "http", 514: "udp"}


def test_declared_udp_preserved(web_compose, inspector_factory):
    inspector = inspector_factory({"nginx:1.25": ImageMetadata(exposed_ports=[(53, "udp")])})
    parser = DockerComposeParser(web_compose, inspector)
    parser.parse()
    ports = {port.container_port: port.protocol for port in get_service(parser, "web").ports}
    assert ports[53] == "udp"


def test_image_transport_protocol_is_inferred(inspector_factory):
    content = "services:\n  app:\n    image: app\n    ports: ['8080']\n"
    inspector = inspector_factory(
        {"app:latest": ImageMetadata(exposed_ports=[(8080, "tcp"), (443, "tcp")])}
    )
    parser = DockerComposeParser(content, inspector)
    parser.parse()
    ports = {port.container_port: port.protocol for port in get_service(parser, "app").ports}
    assert ports == {8080: "tcp", 443: "https"}


def test_inspection_failure_is_fatal(inspector_factory):
    content = """
services:
  a:
    image: a
  b:
    image: b
  c:
    image: c
"""
    inspector = inspector_factory(failing=["b:latest"])
    parser = DockerComposeParser(content, inspector)
    errors = parser.parse()
    assert len(errors) == 1
    assert errors[0].severity == FATAL_ERROR
    assert "b:latest" in errors[0].message
    assert inspector.calls[-1] == "b:latest"
    assert parser.get_service_info() == []


def test_parse_runs_once(inspector):
    parser = DockerComposeParser("services:\n  a:\n    image: a\n", inspector)
    parser.parse()
    parser.parse()
    assert inspector.calls == ["a:latest"]


def test_get_image(inspector):
    parser = DockerComposeParser("services:\n  a:\n    image: a\n", inspector)
    assert str(parser.get_image()) == ""


def test_service_info_is_a_snapshot(inspector):
    parser = DockerComposeParser(
        "services:\n  a:\n    image: a:1\n    ports: ['80']\n", inspector
    )
    parser.parse()
    service = parser.get_service_info()[0]
    draft = parser.services["a"]
    draft.image.tag = "2"
    draft.ports[80].protocol = "udp"
    draft.dependencies.append("b")
    assert str(service.image) == "a:1"
    assert service.ports == [Port(80, "http")]
    assert service.dependencies == []
