#  -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2021 John Mille<john@compose-x.io>

from pytest import fixture

from compose_model.common.envsubst import expandvars, interpolate_content


@fixture
def mock_env_vars(monkeypatch):
    monkeypatch.setenv("TOTO", "toto")
    monkeypatch.setenv("TATA", "tata")
    monkeypatch.setenv("EMPTY", "")
    monkeypatch.delenv("ABCD", raising=False)


def test_envsubst(mock_env_vars):
    """
    Function to test envsubst.

    [(ENV string, expected result)]
    """
    tests = [
        ("${TOTO}", "toto"),
        ("${TOTO}$TATA$TOTO", "tototatatoto"),
        ("$TOTO $TATA", "toto tata"),
        ("$TOTO -- $TATA", "toto -- tata"),
        ("${ABCD:-Cake}", "Cake"),
        ("${TOTO:-Cake}", "toto"),
        ("${EMPTY:-Cake}", "Cake"),
        ("${EMPTY-Cake}", ""),
        ("${ABCD-Cake}", "Cake"),
        ("$TOTO -- ${TATA:+SUCCESS}", "toto -- SUCCESS"),
        ("${EMPTY:+SUCCESS}", ""),
        ("${EMPTY+SUCCESS}", "SUCCESS"),
        ("${ABCD}", ""),
        ("$$TOTO", "$TOTO"),
    ]
    for test in tests:
        assert expandvars(test[0]) == test[1]


def test_envsubst_explicit_environment():
    assert expandvars("${A}-${B:-b}", {"A": "a"}) == "a-b"


def test_interpolate_content():
    content = {
        "services": {
            "app": {"image": "app:${TAG:-latest}", "ports": [80, "${PORT}"]}
        }
    }
    result = interpolate_content(content, {"PORT": "8080"})
    assert result["services"]["app"]["image"] == "app:latest"
    assert result["services"]["app"]["ports"] == [80, "8080"]
    assert content["services"]["app"]["image"] == "app:${TAG:-latest}"
