#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from os import path

from pytest import fixture, raises

from compose_model.common.settings import ComposeModelSettings


@fixture(autouse=True)
def env_setup(monkeypatch):
    for env_name in [
        ComposeModelSettings.retries_env,
        ComposeModelSettings.docker_timeout_env,
        ComposeModelSettings.docker_host_env,
    ]:
        monkeypatch.delenv(env_name, raising=False)


def test_defaults():
    settings = ComposeModelSettings()
    assert settings.pull_retries == 5
    assert settings.docker_timeout == 60
    assert settings.docker_host is None
    assert settings.output_format == "json"
    assert settings.interpolate is True


def test_arguments_over_environment(monkeypatch):
    monkeypatch.setenv(ComposeModelSettings.retries_env, "3")
    monkeypatch.setenv(ComposeModelSettings.docker_host_env, "unix:///tmp/docker.sock")
    assert ComposeModelSettings().pull_retries == 3
    settings = ComposeModelSettings(PullRetries=7, DockerHost="tcp://docker:2375")
    assert settings.pull_retries == 7
    assert settings.docker_host == "tcp://docker:2375"
    assert ComposeModelSettings().docker_host == "unix:///tmp/docker.sock"


def test_invalid_settings(monkeypatch):
    with raises(ValueError):
        ComposeModelSettings(PullRetries=0)
    with raises(ValueError):
        ComposeModelSettings(OutputFormat="xml")
    with raises(ValueError):
        ComposeModelSettings(Interpolate="maybe")
    monkeypatch.setenv(ComposeModelSettings.docker_timeout_env, "soon")
    with raises(ValueError):
        ComposeModelSettings()


def test_interpolate_setting():
    assert ComposeModelSettings(Interpolate=False).interpolate is False
    assert ComposeModelSettings(Interpolate="no").interpolate is False
    assert ComposeModelSettings(Interpolate=None).interpolate is True


def test_read_compose_content(tmp_path):
    compose_file = path.join(tmp_path, "docker-compose.yaml")
    with open(compose_file, "w") as compose_fd:
        compose_fd.write("services: {}\n")
    assert ComposeModelSettings(ComposeFile=compose_file).read_compose_content() == (
        "services: {}\n"
    )
    with raises(FileNotFoundError):
        ComposeModelSettings(
            ComposeFile=path.join(tmp_path, "missing.yaml")
        ).read_compose_content()
    with raises(ValueError):
        ComposeModelSettings().read_compose_content()
