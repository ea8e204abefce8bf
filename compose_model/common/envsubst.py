#  -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2021 John Mille <john@compose-x.io>

"""
Module to handle the compose variables interpolation.
"""

from __future__ import annotations

import os
import re

ENV_VAR_REGEXP = re.compile(
    r"\$(?:(?P<escaped>\$)|(?P<named>[A-Za-z_]\w*)|\{(?P<braced>[A-Za-z_]\w*)(?:(?P<operator>:?[-+])(?P<operand>[^}]*))?\})"
)


def expandvars(value: str, environment: dict = None) -> str:
    """
    Expand environment variables of form $var and ${var}, as docker compose does.

    * ``${VAR:-default}`` uses default if VAR is unset or empty
    * ``${VAR-default}`` uses default if VAR is unset
    * ``${VAR:+alt}`` uses alt if VAR is set and not empty
    * ``${VAR+alt}`` uses alt if VAR is set
    * ``$$`` is a literal ``$``

    Unknown variables are replaced with an empty string.

    :param str value: the string to interpolate
    :param dict environment: variables to use. Defaults to os.environ
    """
    if environment is None:
        environment = os.environ

    def replace_var(match):
        if match.group("escaped"):
            return "$"
        name = match.group("named") or match.group("braced")
        operator = match.group("operator")
        is_set = name in environment
        var_value = environment.get(name, "")
        if not operator:
            return var_value
        operand = expandvars(match.group("operand"), environment)
        if operator == ":-":
            return var_value if var_value else operand
        elif operator == "-":
            return var_value if is_set else operand
        elif operator == ":+":
            return operand if var_value else ""
        return operand if is_set else ""

    return ENV_VAR_REGEXP.sub(replace_var, value)


def interpolate_content(content, environment: dict = None):
    """
    Recursively interpolates all the string values of the compose content.
    Keys are left untouched.
    """
    if isinstance(content, str):
        return expandvars(content, environment)
    elif isinstance(content, dict):
        return {
            key: interpolate_content(value, environment)
            for key, value in content.items()
        }
    elif isinstance(content, list):
        return [interpolate_content(item, environment) for item in content]
    return content
